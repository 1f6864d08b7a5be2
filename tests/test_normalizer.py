import pytest

from fd_algorithms import FDAlgorithms
from models import FDSet, FunctionalDependency, InvalidSchemaError, NormalForm, attribute_set
from normalizer import Normalizer


def fd(text):
    return FunctionalDependency.parse(text)


def schemas(*names):
    return {attribute_set(name.split(",")) for name in names}


EXAMPLES = [
    (frozenset("ABCD"), FDSet(fd("A -> B"), fd("B -> C"))),
    (frozenset("ABCDE"), FDSet(fd("A, E -> D"), fd("A, B -> C"), fd("D -> B"))),
    (frozenset("ABC"), FDSet(fd("A -> B, C"), fd("B -> C"), fd("A -> B"), fd("A, B -> C"))),
    (frozenset("ABC"), FDSet(fd("A, B -> C"), fd("C -> B"))),
    (attribute_set("ssn", "name", "cartID", "title", "wage"),
     FDSet(fd("ssn -> name"), fd("ssn, cartID -> title, wage"))),
    (frozenset("ABCDEF"), FDSet(fd("A -> B"), fd("C, D -> E"), fd("E -> F"), fd("F -> A"))),
]


def test_find_superkeys_example():
    superkeys = Normalizer.find_superkeys(attribute_set("A", "D", "E"), FDSet(fd("A, E -> D")))
    assert superkeys == schemas("A,E", "A,D,E")


def test_find_superkeys_with_single_attribute_key():
    people = attribute_set("ssn", "name", "eyecolor")
    superkeys = Normalizer.find_superkeys(people, FDSet(fd("ssn -> name"), fd("ssn -> eyecolor")))
    assert superkeys == schemas("ssn", "ssn,eyecolor", "ssn,name", "ssn,name,eyecolor")


def test_find_superkeys_without_fds_is_whole_relation():
    assert Normalizer.find_superkeys(frozenset("ABC"), FDSet()) == {frozenset("ABC")}


def test_string_relation_is_a_single_attribute():
    assert Normalizer.find_superkeys("ssn", FDSet()) == {frozenset({"ssn"})}
    assert Normalizer.decompose("ssn", FDSet()) == {frozenset({"ssn"})}


def test_find_superkeys_rejects_foreign_attributes():
    people = attribute_set("ssn", "name")
    fds = FDSet(fd("ssn -> name"), fd("ssn -> eyecolor"))

    with pytest.raises(InvalidSchemaError) as excinfo:
        Normalizer.find_superkeys(people, fds)
    assert excinfo.value.unknown_attributes == frozenset({"eyecolor"})
    assert "eyecolor" in str(excinfo.value)


def test_validation_propagates_from_every_entry_point():
    people = attribute_set("ssn", "name")
    fds = FDSet(fd("ssn -> eyecolor"))

    for check in (Normalizer.is_bcnf, Normalizer.is_2nf, Normalizer.is_3nf,
                  Normalizer.candidate_keys, Normalizer.decompose):
        with pytest.raises(InvalidSchemaError):
            check(people, fds)


@pytest.mark.parametrize("relation, fds", EXAMPLES)
def test_superkeys_are_sound(relation, fds):
    for superkey in Normalizer.find_superkeys(relation, fds):
        assert Normalizer.closure(superkey, fds) == relation


@pytest.mark.parametrize("relation, fds", EXAMPLES)
def test_candidate_keys_are_minimal(relation, fds):
    superkeys = Normalizer.find_superkeys(relation, fds)
    keys = Normalizer.candidate_keys(relation, fds)

    assert keys
    assert keys <= superkeys
    for key in keys:
        assert not any(other < key for other in superkeys)
    for superkey in superkeys:
        assert any(key <= superkey for key in keys)


def test_candidate_keys_keeps_all_minimal_keys():
    fds = FDSet(fd("A, B -> C"), fd("C -> B"))
    assert Normalizer.candidate_keys(frozenset("ABC"), fds) == schemas("A,B", "A,C")
    assert Normalizer.prime_attributes(frozenset("ABC"), fds) == frozenset("ABC")


def test_keys_union():
    assert Normalizer.keys_union([]) == frozenset()
    assert Normalizer.keys_union(schemas("A,B", "B,C")) == frozenset("ABC")


def test_is_bcnf():
    people = attribute_set("ssn", "name", "eyecolor")
    fds = FDSet(fd("ssn -> name"), fd("ssn, name -> eyecolor"))
    assert Normalizer.is_bcnf(people, fds)

    fds.add(fd("name -> eyecolor"))
    assert not Normalizer.is_bcnf(people, fds)


def test_is_bcnf_ignores_fds_outside_relation():
    # Проекция на подсхему: ФЗ B → C не относится к {A, B}
    fds = FDSet(fd("A -> B"), fd("B -> C"))
    assert Normalizer.is_bcnf(frozenset("AB"), fds.restricted_to("AB"))
    assert Normalizer.is_bcnf(frozenset("AB"), FDSet(fd("A -> B")))


def test_is_bcnf_with_no_fds():
    assert Normalizer.is_bcnf(frozenset("ABC"), FDSet())


def test_is_2nf_detects_partial_dependency():
    employee = attribute_set("ssn", "name", "cartID", "title", "wage")
    fds = FDSet(fd("ssn -> name"), fd("ssn, cartID -> title, wage"))

    assert not Normalizer.is_2nf(employee, fds)
    assert list(Normalizer.partial_dependencies(employee, fds)) == [
        (fd("ssn -> name"), attribute_set("ssn", "cartID"))
    ]


def test_is_2nf_counts_attributes_outside_the_key():
    # C - часть ключа {A, C}, B в этот ключ не входит (хотя B - простой атрибут)
    fds = FDSet(fd("A, B -> C"), fd("C -> B"))
    assert not Normalizer.is_2nf(frozenset("ABC"), fds)
    assert list(Normalizer.partial_dependencies(frozenset("ABC"), fds)) == [
        (fd("C -> B"), frozenset("AC"))
    ]
    assert Normalizer.is_3nf(frozenset("ABC"), fds)
    assert not Normalizer.is_bcnf(frozenset("ABC"), fds)


def test_is_2nf_ignores_trivial_fds():
    fds = FDSet(fd("A, B -> C"), fd("A -> A"))
    assert Normalizer.is_2nf(frozenset("ABC"), fds)
    assert list(Normalizer.partial_dependencies(frozenset("ABC"), fds)) == []


def test_only_bcnf_violated():
    fds = FDSet(fd("A, B -> C, D"), fd("B, C -> A, D"), fd("C, D -> A"))
    assert Normalizer.candidate_keys(frozenset("ABCD"), fds) == schemas("A,B", "B,C")
    assert Normalizer.is_2nf(frozenset("ABCD"), fds)
    assert Normalizer.is_3nf(frozenset("ABCD"), fds)
    assert list(Normalizer.bcnf_violations(frozenset("ABCD"), fds)) == [fd("C, D -> A")]


def test_transitive_dependency_breaks_3nf_only():
    fds = FDSet(fd("A -> B"), fd("B -> C"))
    assert Normalizer.is_2nf(frozenset("ABC"), fds)
    assert not Normalizer.is_3nf(frozenset("ABC"), fds)
    assert list(Normalizer.third_nf_violations(frozenset("ABC"), fds)) == [fd("B -> C")]


def test_normal_form():
    assert Normalizer.normal_form(frozenset("ABC"), FDSet(fd("A -> B, C"))) == NormalForm.BCNF
    third_nf_fds = FDSet(fd("A, B -> C, D"), fd("B, C -> A, D"), fd("C, D -> A"))
    assert Normalizer.normal_form(frozenset("ABCD"), third_nf_fds) == NormalForm.THIRD_NF
    assert Normalizer.normal_form(frozenset("ABC"), FDSet(fd("A -> B"), fd("B -> C"))) == NormalForm.SECOND_NF
    # 3НФ выполняется, 2НФ - нет
    assert Normalizer.normal_form(frozenset("ABC"), FDSet(fd("A, B -> C"), fd("C -> B"))) == NormalForm.FIRST_NF
    employee = attribute_set("ssn", "name", "cartID", "title", "wage")
    fds = FDSet(fd("ssn -> name"), fd("ssn, cartID -> title, wage"))
    assert Normalizer.normal_form(employee, fds) == NormalForm.FIRST_NF


def test_decompose_example():
    fds = FDSet(fd("A -> B"), fd("B -> C"))
    assert Normalizer.decompose(frozenset("ABCD"), fds) == schemas("A,B", "A,C", "A,D")


def test_decompose_records_splits():
    steps = []
    Normalizer.decompose(frozenset("ABCD"), FDSet(fd("A -> B"), fd("B -> C")), steps)

    assert steps == [
        (frozenset("ABCD"), fd("A -> B"), frozenset("AB"), frozenset("ACD")),
        (frozenset("ACD"), fd("A -> C"), frozenset("AC"), frozenset("AD")),
    ]


def test_decompose_already_bcnf_is_unchanged():
    people = attribute_set("ssn", "name", "eyecolor")
    fds = FDSet(fd("ssn -> name"), fd("ssn, name -> eyecolor"))
    assert Normalizer.decompose(people, fds) == {people}


def test_decompose_without_fds():
    assert Normalizer.decompose(frozenset("ABC"), FDSet()) == {frozenset("ABC")}


def test_decompose_employee():
    employee = attribute_set("ssn", "name", "cartID", "title", "wage")
    fds = FDSet(fd("ssn -> name"), fd("ssn, cartID -> title, wage"))
    assert Normalizer.decompose(employee, fds) == schemas("name,ssn", "cartID,title,ssn,wage")


def test_decompose_depends_on_violator_order():
    relation = frozenset("ABCDE")
    in_given_order = FDSet(fd("A, E -> D"), fd("A, B -> C"), fd("D -> B"))
    d_first = FDSet(fd("D -> B"), fd("A, E -> D"), fd("A, B -> C"))

    assert Normalizer.decompose(relation, in_given_order) == schemas("A,B,C", "B,D", "A,D,E")
    assert Normalizer.decompose(relation, d_first) == schemas("B,D", "A,C,D", "A,D,E")


def test_decompose_does_not_mutate_inputs():
    relation = {"A", "B", "C", "D"}
    fds = FDSet(fd("A -> B"), fd("B -> C"))
    Normalizer.decompose(relation, fds)

    assert relation == {"A", "B", "C", "D"}
    assert list(fds) == [fd("A -> B"), fd("B -> C")]


@pytest.mark.parametrize("relation, fds", EXAMPLES)
def test_decomposition_is_bcnf_and_covers_relation(relation, fds):
    result = Normalizer.decompose(relation, fds)
    fd_closure = FDAlgorithms.fd_set_closure(fds)

    assert frozenset().union(*result) == relation
    for schema in result:
        assert schema <= relation
        assert Normalizer.is_bcnf(schema, FDAlgorithms.project(fd_closure, schema))
