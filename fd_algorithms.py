"""
Алгоритмы для работы с функциональными зависимостями
"""
from itertools import combinations
from typing import Iterable, List, Sequence

from models import AttributeSet, FDSet, FunctionalDependency

# Начиная с этого числа атрибутов перебор подмножеств становится заметно медленным
POWER_SET_WARNING_THRESHOLD = 20


class FDAlgorithms:
    """Класс с алгоритмами для работы с функциональными зависимостями"""

    @staticmethod
    def closure(attributes: Iterable[str], fds: Iterable[FunctionalDependency]) -> AttributeSet:
        """
        Вычисление замыкания множества атрибутов

        Args:
            attributes: Множество атрибутов
            fds: Функциональные зависимости

        Returns:
            Замыкание множества атрибутов
        """
        closure = set(attributes)
        fds = list(fds)
        changed = True

        while changed:
            changed = False
            for fd in fds:
                # Если детерминант ФЗ содержится в замыкании
                if fd.determinant.issubset(closure):
                    # Добавляем зависимые атрибуты
                    new_attrs = fd.dependent - closure
                    if new_attrs:
                        closure.update(new_attrs)
                        changed = True

        return frozenset(closure)

    @staticmethod
    def power_set(attributes: Iterable[str]) -> List[AttributeSet]:
        """
        Все подмножества множества атрибутов, включая пустое и само множество

        Подмножества упорядочены по размеру, внутри размера - по именам.
        Размер результата 2^n: это основная статья расходов всех алгоритмов
        поиска ключей, рассчитано на схемы примерно до 20 атрибутов.
        """
        ordered = sorted(set(attributes))
        if len(ordered) > POWER_SET_WARNING_THRESHOLD:
            print(f"[WARNING] Перебор 2^{len(ordered)} подмножеств атрибутов, это может занять много времени")

        subsets = []
        for r in range(len(ordered) + 1):
            for combo in combinations(ordered, r):
                subsets.append(frozenset(combo))
        return subsets

    @staticmethod
    def fd_set_closure(fds: Iterable[FunctionalDependency]) -> FDSet:
        """
        Замыкание множества ФЗ (F+) над атрибутами, упомянутыми в F

        Для каждого непустого X получаем X+ и добавляем X → Y для каждого
        непустого Y ⊆ X+. Это тот же результат, что и вывод по аксиомам
        Армстронга, но без перебора правил вывода.

        Для n атрибутов результат содержит до (2^n - 1)^2 ≈ 2^(2n) ФЗ
        (при n = 10 - около миллиона), поэтому это самая дорогая операция
        декомпозиции.
        """
        fds = FDSet.of(fds)
        result = FDSet()

        for determinant in FDAlgorithms.power_set(fds.attributes()):
            if not determinant:
                continue
            determined = FDAlgorithms.closure(determinant, fds)
            for dependent in FDAlgorithms.power_set(determined):
                if dependent:
                    result.add(FunctionalDependency(determinant, dependent))

        return result

    @staticmethod
    def project(fds: Iterable[FunctionalDependency], attributes: Iterable[str]) -> FDSet:
        """
        Проекция ФЗ на подмножество атрибутов: остаются только ФЗ,
        целиком лежащие в этом подмножестве
        """
        return FDSet.of(fds).restricted_to(attributes)

    @staticmethod
    def minimal_cover(fds: Iterable[FunctionalDependency]) -> List[FunctionalDependency]:
        """Минимальное покрытие: одиночные правые части, без лишних атрибутов и ФЗ"""
        # Шаг 1: Разделить правые части
        split_fds = []
        for fd in fds:
            for attr in sorted(fd.dependent):
                split_fd = FunctionalDependency(fd.determinant, {attr})
                if not split_fd.is_trivial() and split_fd not in split_fds:
                    split_fds.append(split_fd)

        # Шаг 2: Удалить избыточные атрибуты из левых частей
        reduced_fds = []
        for fd in split_fds:
            minimal_det = set(fd.determinant)
            for attr in sorted(fd.determinant):
                test_det = minimal_det - {attr}
                if test_det and fd.dependent.issubset(FDAlgorithms.closure(test_det, split_fds)):
                    minimal_det = test_det

            reduced = FunctionalDependency(minimal_det, fd.dependent)
            if reduced not in reduced_fds:
                reduced_fds.append(reduced)

        # Шаг 3: Удалить избыточные ФЗ
        minimal_fds = list(reduced_fds)
        for fd in reduced_fds:
            other_fds = [other for other in minimal_fds if other != fd]
            if fd.dependent.issubset(FDAlgorithms.closure(fd.determinant, other_fds)):
                minimal_fds = other_fds

        return minimal_fds

    @staticmethod
    def is_lossless_join(attributes: Iterable[str],
                         schemas: Sequence[Iterable[str]],
                         fds: Iterable[FunctionalDependency]) -> bool:
        """
        Проверка соединения без потерь (chase-тест)

        Строим таблицу: строка на каждую схему, "a" в столбцах схемы и
        уникальное "b" в остальных. Применяем ФЗ, пока таблица меняется.
        Декомпозиция без потерь, если появилась строка из одних "a".
        """
        columns = sorted(set(attributes))
        schemas = [frozenset(schema) for schema in schemas]
        fds = list(fds)

        # Отличительный символ столбца - ("a", столбец), остальные - ("b", строка, столбец)
        tableau = []
        for row_index, schema in enumerate(schemas):
            tableau.append({
                col: ("a", col) if col in schema else ("b", row_index, col)
                for col in columns
            })

        changed = True
        while changed:
            changed = False
            for fd in fds:
                groups = {}
                for row in tableau:
                    key = tuple(row[col] for col in sorted(fd.determinant))
                    groups.setdefault(key, []).append(row)

                for rows in groups.values():
                    if len(rows) < 2:
                        continue
                    for col in fd.dependent:
                        # Отличительный символ ("a", ...) меньше любого ("b", ...)
                        target = min(row[col] for row in rows)
                        for row in rows:
                            if row[col] != target:
                                old = row[col]
                                # Заменяем символ во всей таблице, а не только в группе
                                for other in tableau:
                                    if other[col] == old:
                                        other[col] = target
                                changed = True

        return any(all(row[col][0] == "a" for col in columns) for row in tableau)
