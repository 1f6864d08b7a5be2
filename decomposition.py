"""
Модуль с алгоритмом декомпозиции отношения в НФБК
"""
from typing import List, Tuple

from models import (
    AttributeSet, DecompositionStep, FDSet, FunctionalDependency,
    NormalForm, NormalizationResult, Relation
)
from fd_algorithms import FDAlgorithms
from analyzer import NormalFormAnalyzer
from normalizer import Normalizer


class Decomposer:
    """Класс для выполнения декомпозиции отношений"""

    @staticmethod
    def decompose_to_bcnf(relation: Relation) -> NormalizationResult:
        """
        Декомпозиция отношения в нормальную форму Бойса-Кодда

        Имена результирующих отношений строятся от имени родителя:
        R → R_1, R_2; R_2 → R_2_1, R_2_2 и т.д.
        """
        analyzer = NormalFormAnalyzer(relation)
        original_form, _ = analyzer.determine_normal_form()

        if original_form == NormalForm.BCNF:
            return NormalizationResult(
                original_form=original_form,
                target_form=NormalForm.BCNF,
                original_relation=relation,
                decomposed_relations=[relation],
                steps=[],
                preserved_dependencies=list(relation.functional_dependencies),
                lost_dependencies=[]
            )

        splits = []
        schemas = Normalizer.decompose(relation.attributes, relation.functional_dependencies, splits)
        fd_closure = FDAlgorithms.fd_set_closure(relation.functional_dependencies)

        names = {relation.attributes: relation.name}
        relations = {relation.attributes: relation}

        def named(attrs: AttributeSet, name: str) -> Relation:
            # Одна и та же схема может появиться в разных ветках - берем первое имя
            if attrs not in relations:
                names[attrs] = name
                relations[attrs] = Relation(name, attrs, Decomposer._project_fds(attrs, fd_closure))
            return relations[attrs]

        steps = []
        for original_attrs, violating_fd, r1_attrs, r2_attrs in splits:
            parent = relations[original_attrs]
            r1 = named(r1_attrs, f"{names[original_attrs]}_1")
            r2 = named(r2_attrs, f"{names[original_attrs]}_2")
            steps.append(DecompositionStep(
                original_relation=parent,
                resulting_relations=[r1, r2],
                reason=f"Устранение нарушения НФБК: {violating_fd}",
                violated_dependency=violating_fd
            ))

        final_relations = sorted((relations[attrs] for attrs in schemas), key=lambda rel: rel.name)

        # Проверяем сохранение зависимостей
        preserved, lost = Decomposer._check_dependency_preservation(
            relation.functional_dependencies,
            final_relations
        )
        lossless = FDAlgorithms.is_lossless_join(
            relation.attributes,
            [rel.attributes for rel in final_relations],
            relation.functional_dependencies
        )

        return NormalizationResult(
            original_form=original_form,
            target_form=NormalForm.BCNF,
            original_relation=relation,
            decomposed_relations=final_relations,
            steps=steps,
            preserved_dependencies=preserved,
            lost_dependencies=lost,
            lossless=lossless
        )

    @staticmethod
    def _project_fds(attributes: AttributeSet, fd_closure: FDSet) -> FDSet:
        """
        Проецировать замыкание ФЗ на подмножество атрибутов и сжать
        проекцию до минимального покрытия
        """
        projected = FDAlgorithms.project(fd_closure, attributes)
        return FDSet(*FDAlgorithms.minimal_cover(projected))

    @staticmethod
    def _check_dependency_preservation(
            original_fds: FDSet,
            decomposed_relations: List[Relation]
    ) -> Tuple[List[FunctionalDependency], List[FunctionalDependency]]:
        """
        Проверить сохранение функциональных зависимостей после декомпозиции
        """
        preserved = []
        lost = []

        # Собираем все ФЗ из декомпозированных отношений
        all_decomposed_fds = FDSet()
        for rel in decomposed_relations:
            all_decomposed_fds.update(rel.functional_dependencies)

        # Проверяем каждую исходную ФЗ
        for fd in original_fds:
            # Проверяем, можно ли вывести эту ФЗ из декомпозированных
            closure = FDAlgorithms.closure(fd.determinant, all_decomposed_fds)

            if fd.dependent.issubset(closure):
                preserved.append(fd)
            else:
                lost.append(fd)

        return preserved, lost
