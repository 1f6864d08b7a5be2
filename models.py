"""
Модуль с классами для представления данных реляционной модели
"""
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

# Атрибут - просто имя столбца, множество атрибутов - неизменяемое множество имен
AttributeSet = FrozenSet[str]


class InvalidSchemaError(ValueError):
    """Множество ФЗ не согласовано с отношением (или ФЗ задана некорректно)"""

    def __init__(self, message: str, unknown_attributes: Iterable[str] = ()):
        super().__init__(message)
        self.unknown_attributes = frozenset(unknown_attributes)


def attribute_set(*names: Union[str, Iterable[str]]) -> AttributeSet:
    """
    Построить множество атрибутов

    attribute_set("A", "B") и attribute_set(["A", "B"]) дают одно и то же.
    Одна строка - один атрибут: attribute_set("ssn") == {"ssn"}
    """
    if len(names) == 1 and not isinstance(names[0], str):
        return frozenset(names[0])
    return frozenset(names)


def format_attributes(attributes: Iterable[str]) -> str:
    """Строковое представление множества атрибутов: {A, B}"""
    return "{" + ", ".join(sorted(attributes)) + "}"


class NormalForm(Enum):
    """Перечисление нормальных форм"""
    FIRST_NF = "1НФ"
    SECOND_NF = "2НФ"
    THIRD_NF = "3НФ"
    BCNF = "НФБК"

    @property
    def rank(self) -> int:
        return list(NormalForm).index(self)


@dataclass(frozen=True)
class FunctionalDependency:
    """Класс для представления функциональной зависимости"""
    determinant: AttributeSet
    dependent: AttributeSet

    def __post_init__(self):
        object.__setattr__(self, "determinant", frozenset(self.determinant))
        object.__setattr__(self, "dependent", frozenset(self.dependent))
        if not self.determinant or not self.dependent:
            raise InvalidSchemaError(
                f"Обе части ФЗ должны быть непустыми: {self}"
            )

    def __repr__(self):
        return f"{format_attributes(self.determinant)} → {format_attributes(self.dependent)}"

    @classmethod
    def parse(cls, text: str) -> "FunctionalDependency":
        """
        Разобрать ФЗ из строки вида "A, E -> D" (допускается и стрелка "→")
        """
        normalized = text.replace("→", "->")
        if normalized.count("->") != 1:
            raise InvalidSchemaError(f"Не удалось разобрать ФЗ: {text!r}")

        left, right = normalized.split("->")
        determinant = [name.strip() for name in left.split(",") if name.strip()]
        dependent = [name.strip() for name in right.split(",") if name.strip()]
        return cls(frozenset(determinant), frozenset(dependent))

    def is_trivial(self) -> bool:
        """Проверка, является ли ФЗ тривиальной"""
        return self.dependent.issubset(self.determinant)

    def attributes(self) -> AttributeSet:
        """Все атрибуты, упомянутые в ФЗ"""
        return self.determinant | self.dependent

    def canonical_key(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Канонический ключ для дедупликации: отсортированные левая и правая части"""
        return tuple(sorted(self.determinant)), tuple(sorted(self.dependent))


class FDSet:
    """
    Множество функциональных зависимостей

    Дедупликация по каноническому ключу ФЗ. Порядок обхода совпадает с
    порядком добавления, поэтому выбор нарушающей ФЗ при декомпозиции
    воспроизводим.
    """

    def __init__(self, *fds: FunctionalDependency):
        self._keys = set()
        self._values: Dict[Tuple[Tuple[str, ...], Tuple[str, ...]], FunctionalDependency] = {}
        self.update(fds)

    @classmethod
    def of(cls, fds: Iterable[FunctionalDependency]) -> "FDSet":
        if isinstance(fds, FDSet):
            return fds
        return cls(*fds)

    def add(self, fd: FunctionalDependency) -> bool:
        """Добавить ФЗ. Возвращает False, если такая ФЗ уже есть"""
        key = fd.canonical_key()
        if key in self._keys:
            return False
        self._keys.add(key)
        self._values[key] = fd
        return True

    def update(self, fds: Iterable[FunctionalDependency]):
        for fd in fds:
            self.add(fd)

    def attributes(self) -> AttributeSet:
        """Все атрибуты, упомянутые хотя бы в одной ФЗ"""
        attrs = set()
        for fd in self:
            attrs.update(fd.attributes())
        return frozenset(attrs)

    def restricted_to(self, attributes: Iterable[str]) -> "FDSet":
        """ФЗ, обе части которых содержатся в заданном множестве атрибутов"""
        attrs = frozenset(attributes)
        return FDSet(*(fd for fd in self if fd.attributes() <= attrs))

    def __iter__(self) -> Iterator[FunctionalDependency]:
        return iter(list(self._values.values()))

    def __len__(self):
        return len(self._keys)

    def __contains__(self, fd):
        return isinstance(fd, FunctionalDependency) and fd.canonical_key() in self._keys

    def __eq__(self, other):
        if isinstance(other, FDSet):
            return self._keys == other._keys
        return NotImplemented

    def __repr__(self):
        return "FDSet(" + ", ".join(repr(fd) for fd in self) + ")"


@dataclass
class Relation:
    """Класс для представления отношения"""
    name: str
    attributes: AttributeSet
    functional_dependencies: FDSet = field(default_factory=FDSet)

    def __post_init__(self):
        self.attributes = attribute_set(self.attributes)
        self.functional_dependencies = FDSet.of(self.functional_dependencies)

    def __repr__(self):
        attrs_str = ", ".join(sorted(self.attributes))
        return f"{self.name}({attrs_str})"


@dataclass
class DecompositionStep:
    """Класс для представления шага декомпозиции"""
    original_relation: Relation
    resulting_relations: List[Relation]
    reason: str
    violated_dependency: Optional[FunctionalDependency] = None

    def __repr__(self):
        result_str = ", ".join([repr(rel) for rel in self.resulting_relations])
        return f"Декомпозиция {self.original_relation} → [{result_str}]: {self.reason}"


@dataclass
class NormalizationResult:
    """Класс для представления результата нормализации"""
    original_form: NormalForm
    target_form: NormalForm
    original_relation: Relation
    decomposed_relations: List[Relation]
    steps: List[DecompositionStep]
    preserved_dependencies: List[FunctionalDependency]
    lost_dependencies: List[FunctionalDependency]
    lossless: bool = True

    def is_lossless(self) -> bool:
        """Проверка декомпозиции без потерь (по результату chase-теста)"""
        return self.lossless

    def is_dependency_preserving(self) -> bool:
        return len(self.lost_dependencies) == 0

    def schemas(self) -> set:
        """Результат декомпозиции как множество множеств атрибутов"""
        return {rel.attributes for rel in self.decomposed_relations}

    def get_summary(self) -> str:
        """Получить краткое описание результата"""
        summary = f"Нормализация из {self.original_form.value} в {self.target_form.value}\n"
        summary += f"Исходное отношение: {self.original_relation}\n"
        summary += f"Результирующие отношения: {len(self.decomposed_relations)}\n"
        for rel in self.decomposed_relations:
            summary += f"  - {rel}\n"
        for step in self.steps:
            summary += f"  * {step}\n"
        summary += f"Соединение без потерь: {'да' if self.lossless else 'нет'}\n"
        if self.lost_dependencies:
            summary += f"Потерянные зависимости: {len(self.lost_dependencies)}\n"
            for fd in self.lost_dependencies:
                summary += f"  - {fd}\n"
        return summary
