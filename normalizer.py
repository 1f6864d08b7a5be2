"""
Проверка нормальных форм и декомпозиция отношения в НФБК

Отношение передается как множество атрибутов (приводится через
attribute_set, поэтому одна строка "ssn" - это один атрибут), ФЗ - как
FDSet (подойдет и любая последовательность ФЗ). Все функции чистые:
входные данные не меняются.
"""
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from models import (
    AttributeSet, FDSet, FunctionalDependency, InvalidSchemaError, NormalForm,
    attribute_set, format_attributes
)
from fd_algorithms import FDAlgorithms

# Шаг декомпозиции: (отношение, нарушающая ФЗ, R1, R2)
SplitRecord = Tuple[AttributeSet, FunctionalDependency, AttributeSet, AttributeSet]


class Normalizer:
    """Замыкание, ключи, проверка 2НФ/3НФ/НФБК и декомпозиция в НФБК"""

    @staticmethod
    def closure(attributes: Iterable[str], fds: Iterable[FunctionalDependency]) -> AttributeSet:
        """Замыкание множества атрибутов относительно ФЗ"""
        return FDAlgorithms.closure(attributes, fds)

    @staticmethod
    def validate(relation: Iterable[str], fds: Iterable[FunctionalDependency]):
        """Все атрибуты ФЗ должны входить в отношение, иначе InvalidSchemaError"""
        relation = attribute_set(relation)
        unknown = FDSet.of(fds).attributes() - relation
        if unknown:
            raise InvalidSchemaError(
                f"ФЗ ссылаются на атрибуты вне отношения {format_attributes(relation)}: "
                f"{format_attributes(unknown)}",
                unknown
            )

    @staticmethod
    def find_superkeys(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> Set[AttributeSet]:
        """
        Найти все суперключи отношения

        Перебираются все 2^n подмножеств атрибутов отношения; суперключ -
        подмножество, замыкание которого совпадает со всем отношением.

        Raises:
            InvalidSchemaError: ФЗ упоминают атрибуты, которых нет в отношении
        """
        relation = attribute_set(relation)
        fds = FDSet.of(fds)
        Normalizer.validate(relation, fds)

        return {
            subset for subset in FDAlgorithms.power_set(relation)
            if FDAlgorithms.closure(subset, fds) == relation
        }

    @staticmethod
    def candidate_keys(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> Set[AttributeSet]:
        """Потенциальные ключи - минимальные по включению суперключи"""
        superkeys = Normalizer.find_superkeys(relation, fds)
        return {
            key for key in superkeys
            if not any(other < key for other in superkeys)
        }

    @staticmethod
    def prime_attributes(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> AttributeSet:
        """Простые атрибуты (входящие хотя бы в один потенциальный ключ)"""
        return Normalizer.keys_union(Normalizer.candidate_keys(relation, fds))

    @staticmethod
    def keys_union(keys: Iterable[AttributeSet]) -> AttributeSet:
        """Объединение ключей"""
        return frozenset().union(*keys)

    @staticmethod
    def bcnf_violations(relation: Iterable[str],
                        fds: Iterable[FunctionalDependency]) -> Iterator[FunctionalDependency]:
        """
        ФЗ, нарушающие НФБК, в порядке обхода множества ФЗ

        Учитываются только нетривиальные ФЗ, целиком лежащие в отношении,
        детерминант которых не является суперключом.
        """
        relation = attribute_set(relation)
        fds = FDSet.of(fds)
        superkeys = Normalizer.find_superkeys(relation, fds)

        for fd in fds.restricted_to(relation):
            if not fd.is_trivial() and fd.determinant not in superkeys:
                yield fd

    @staticmethod
    def is_bcnf(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> bool:
        """Проверка нормальной формы Бойса-Кодда"""
        return next(Normalizer.bcnf_violations(relation, fds), None) is None

    @staticmethod
    def partial_dependencies(relation: Iterable[str],
                             fds: Iterable[FunctionalDependency]) -> Iterator[Tuple[FunctionalDependency, AttributeSet]]:
        """
        Частичные зависимости: (ФЗ, ключ), где детерминант - собственное
        подмножество потенциального ключа, а справа есть атрибут не из
        этого ключа
        """
        relation = attribute_set(relation)
        fds = FDSet.of(fds)
        keys = sorted(Normalizer.candidate_keys(relation, fds), key=sorted)

        for fd in fds.restricted_to(relation):
            if fd.is_trivial():
                continue
            for key in keys:
                if fd.determinant < key and fd.dependent - fd.determinant - key:
                    yield fd, key
                    break

    @staticmethod
    def is_2nf(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> bool:
        """Проверка второй нормальной формы"""
        return next(Normalizer.partial_dependencies(relation, fds), None) is None

    @staticmethod
    def third_nf_violations(relation: Iterable[str],
                            fds: Iterable[FunctionalDependency]) -> Iterator[FunctionalDependency]:
        """
        ФЗ X → Y нарушает 3НФ, если X не суперключ и Y - X содержит
        непростые атрибуты
        """
        relation = attribute_set(relation)
        fds = FDSet.of(fds)
        superkeys = Normalizer.find_superkeys(relation, fds)
        prime_attrs = Normalizer.keys_union(
            key for key in superkeys if not any(other < key for other in superkeys)
        )

        for fd in fds.restricted_to(relation):
            if fd.is_trivial() or fd.determinant in superkeys:
                continue
            if fd.dependent - fd.determinant - prime_attrs:
                yield fd

    @staticmethod
    def is_3nf(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> bool:
        """Проверка третьей нормальной формы"""
        return next(Normalizer.third_nf_violations(relation, fds), None) is None

    @staticmethod
    def normal_form(relation: Iterable[str], fds: Iterable[FunctionalDependency]) -> NormalForm:
        """
        Наивысшая нормальная форма, которой удовлетворяет отношение

        Формы проверяются по порядку: 3НФ без 2НФ дает 1НФ (например,
        AB → C, C → B: C - часть ключа AC, B не входит в AC).
        """
        relation = attribute_set(relation)
        fds = FDSet.of(fds)

        if not Normalizer.is_2nf(relation, fds):
            return NormalForm.FIRST_NF
        if not Normalizer.is_3nf(relation, fds):
            return NormalForm.SECOND_NF
        if not Normalizer.is_bcnf(relation, fds):
            return NormalForm.THIRD_NF
        return NormalForm.BCNF

    @staticmethod
    def decompose(relation: Iterable[str],
                  fds: Iterable[FunctionalDependency],
                  steps: Optional[List[SplitRecord]] = None) -> Set[AttributeSet]:
        """
        Декомпозиция отношения в НФБК

        Если отношение не в НФБК, берется первая нарушающая ФЗ X → Y в
        порядке обхода FDSet, отношение делится на R1 = X ∪ Y и
        R2 = (R - Y) ∪ X, на каждую часть проецируется замыкание F+, и
        части декомпозируются рекурсивно. Другой порядок ФЗ может дать
        другую, тоже корректную, декомпозицию.

        Каждое разбиение строит F+ заново: до 2^(2n) ФЗ для n атрибутов,
        плюс 2^n замыканий на поиск суперключей каждой части. Рассчитано
        на небольшие схемы (около 10 атрибутов).

        Args:
            relation: Множество атрибутов отношения
            fds: Функциональные зависимости
            steps: Если передан список, в него дописываются шаги разбиения

        Returns:
            Множество схем (множеств атрибутов) в НФБК

        Raises:
            InvalidSchemaError: ФЗ упоминают атрибуты, которых нет в отношении
        """
        relation = attribute_set(relation)
        fds = FDSet.of(fds)

        violating_fd = next(Normalizer.bcnf_violations(relation, fds), None)
        if violating_fd is None:
            return {relation}

        # R1: детерминант + зависимые атрибуты, R2: детерминант + остальные атрибуты
        r1 = violating_fd.determinant | violating_fd.dependent
        r2 = (relation - violating_fd.dependent) | violating_fd.determinant
        if steps is not None:
            steps.append((relation, violating_fd, r1, r2))

        fd_closure = FDAlgorithms.fd_set_closure(fds)
        r1_fds = FDAlgorithms.project(fd_closure, r1)
        r2_fds = FDAlgorithms.project(fd_closure, r2)

        result = Normalizer.decompose(r1, r1_fds, steps)
        result |= Normalizer.decompose(r2, r2_fds, steps)
        return result
