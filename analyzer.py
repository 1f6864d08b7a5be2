"""
Модуль для анализа нормальных форм отношений
"""
from typing import List, Tuple

from models import AttributeSet, NormalForm, Relation, format_attributes
from normalizer import Normalizer


class NormalFormAnalyzer:
    """Класс для анализа нормальных форм"""

    def __init__(self, relation: Relation):
        self.relation = relation
        self.candidate_keys = Normalizer.candidate_keys(relation.attributes, relation.functional_dependencies)
        self.prime_attributes = Normalizer.keys_union(self.candidate_keys)
        self.non_prime_attributes = self.relation.attributes - self.prime_attributes

    def _sorted_keys(self) -> List[AttributeSet]:
        return sorted(self.candidate_keys, key=lambda key: (len(key), sorted(key)))

    def check_2nf(self) -> Tuple[bool, List[str]]:
        """
        Проверка второй нормальной формы

        Returns:
            (соответствует_2НФ, список_нарушений)
        """
        violations = []

        for fd, key in Normalizer.partial_dependencies(self.relation.attributes,
                                                       self.relation.functional_dependencies):
            outside_key = fd.dependent - fd.determinant - key
            violations.append(
                f"Частичная зависимость: {format_attributes(fd.determinant)} → "
                f"{format_attributes(outside_key)} "
                f"(детерминант - часть ключа {format_attributes(key)})"
            )

        return len(violations) == 0, violations

    def check_3nf(self) -> Tuple[bool, List[str]]:
        """
        Проверка третьей нормальной формы

        Returns:
            (соответствует_3НФ, список_нарушений)
        """
        violations = []

        for fd in Normalizer.third_nf_violations(self.relation.attributes,
                                                 self.relation.functional_dependencies):
            non_prime_in_dependent = (fd.dependent - fd.determinant) & self.non_prime_attributes
            violations.append(
                f"Нарушение 3НФ: {format_attributes(fd.determinant)} → "
                f"{format_attributes(non_prime_in_dependent)} "
                f"(детерминант не является суперключом, зависимые непростые атрибуты)"
            )

        return len(violations) == 0, violations

    def check_bcnf(self) -> Tuple[bool, List[str]]:
        """
        Проверка нормальной формы Бойса-Кодда

        Returns:
            (соответствует_НФБК, список_нарушений)
        """
        violations = []

        for fd in Normalizer.bcnf_violations(self.relation.attributes,
                                             self.relation.functional_dependencies):
            violations.append(
                f"Нарушение НФБК: {fd} (детерминант не является суперключом)"
            )

        return len(violations) == 0, violations

    def determine_normal_form(self) -> Tuple[NormalForm, List[str]]:
        """
        Определить текущую нормальную форму отношения

        Returns:
            (нормальная_форма, нарушения_следующей_формы)
        """
        is_2nf, violations_2nf = self.check_2nf()
        if not is_2nf:
            return NormalForm.FIRST_NF, violations_2nf

        is_3nf, violations_3nf = self.check_3nf()
        if not is_3nf:
            return NormalForm.SECOND_NF, violations_3nf

        is_bcnf, violations_bcnf = self.check_bcnf()
        if not is_bcnf:
            return NormalForm.THIRD_NF, violations_bcnf

        return NormalForm.BCNF, []

    def get_analysis_report(self) -> str:
        """Получить подробный отчет об анализе"""
        report = f"Анализ отношения: {self.relation.name}\n"
        report += "=" * 50 + "\n\n"

        report += f"Атрибуты: {format_attributes(self.relation.attributes)}\n"

        # Функциональные зависимости
        report += f"\nФункциональные зависимости ({len(self.relation.functional_dependencies)}):\n"
        for fd in self.relation.functional_dependencies:
            report += f"  - {fd}\n"

        # Ключи
        report += f"\nКандидатные ключи ({len(self.candidate_keys)}):\n"
        for key in self._sorted_keys():
            report += f"  - {format_attributes(key)}\n"

        # Простые и непростые атрибуты
        report += f"\nПростые атрибуты: {format_attributes(self.prime_attributes)}\n"
        report += f"Непростые атрибуты: {format_attributes(self.non_prime_attributes)}\n"

        # Определение нормальной формы
        nf, violations = self.determine_normal_form()
        report += f"\nТекущая нормальная форма: {nf.value}\n"

        if violations:
            report += "\nНарушения:\n"
            for v in violations:
                report += f"  - {v}\n"

        return report
