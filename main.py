"""
Примеры: поиск суперключей, проверка НФБК и декомпозиция
"""
from models import FDSet, FunctionalDependency, InvalidSchemaError, Relation, attribute_set, format_attributes
from normalizer import Normalizer
from analyzer import NormalFormAnalyzer
from decomposition import Decomposer


def fd(text: str) -> FunctionalDependency:
    return FunctionalDependency.parse(text)


def format_schemas(schemas) -> str:
    return "{" + ", ".join(sorted(format_attributes(schema) for schema in schemas)) + "}"


def main():
    """Главная функция"""
    test = attribute_set("A", "D", "E")
    superkeys = Normalizer.find_superkeys(test, FDSet(fd("A, E -> D")))
    print(f"[INFO] Суперключи {format_attributes(test)}: {format_schemas(superkeys)}")

    # S(A, B, C, D)
    s_fds = FDSet(fd("A -> B"), fd("B -> C"))
    print(f"[INFO] Схемы в НФБК: {format_schemas(Normalizer.decompose(frozenset('ABCD'), s_fds))}")

    # U(A, B, C, D, E)
    u_fds = FDSet(fd("A, E -> D"), fd("A, B -> C"), fd("D -> B"))
    print(f"[INFO] Схемы в НФБК: {format_schemas(Normalizer.decompose(frozenset('ABCDE'), u_fds))}")

    # R(A, B, C)
    r_fds = FDSet(fd("A -> B, C"), fd("B -> C"), fd("A -> B"), fd("A, B -> C"))
    print(f"[INFO] Схемы в НФБК: {format_schemas(Normalizer.decompose(frozenset('ABC'), r_fds))}")

    employee = Relation(
        "Сотрудник",
        attribute_set("ssn", "name", "cartID", "title", "wage"),
        FDSet(fd("ssn -> name"), fd("ssn, cartID -> title, wage"))
    )
    print(NormalFormAnalyzer(employee).get_analysis_report())
    print(Decomposer.decompose_to_bcnf(employee).get_summary())

    people = attribute_set("ssn", "name")
    try:
        Normalizer.find_superkeys(people, FDSet(fd("ssn -> name"), fd("ssn -> eyecolor")))
    except InvalidSchemaError as e:
        print(f"[ERROR] {e}")


if __name__ == "__main__":
    main()
