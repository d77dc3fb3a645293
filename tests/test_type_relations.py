"""Tests for per-declaration relation facts and project-wide reconciliation."""

from __future__ import annotations

from typeweave.analyzers.structural import type_info
from typeweave.analyzers.type_relations import local_relations, reconcile
from typeweave.java.resolver import ProjectResolver
from typeweave.java.tree import TypeDeclaration, find_all
from typeweave.model import RelationKind, TypeInfo, TypeRelationInfo

UNI = RelationKind.UNIDIRECTIONAL_ASSOCIATION
MULTI = RelationKind.MULTIPLICITY_UNIDIRECTIONAL_ASSOCIATION
BI = RelationKind.BIDIRECTIONAL_ASSOCIATION


def _relations(unit, name):
    resolver = ProjectResolver([unit])
    decl = [d for d in find_all(unit, TypeDeclaration) if d.name == name][0]
    return local_relations(type_info(decl), resolver)


def test_class_facts_in_declaration_order(parse):
    unit = parse(
        """
        package zoo;

        import java.util.List;

        interface Feeder {}
        class Animal {}
        class Keeper {}
        class Cage extends Animal implements Feeder {
            private Keeper keeper;
            private List<Animal> animals;
            private int size;
        }
        """
    )
    assert _relations(unit, "Cage") == [
        TypeRelationInfo("Cage", "zoo", "Animal", "zoo", RelationKind.INHERITANCE),
        TypeRelationInfo("Cage", "zoo", "Feeder", "zoo", RelationKind.IMPLEMENTATION),
        TypeRelationInfo("Cage", "zoo", "Keeper", "zoo", UNI),
        TypeRelationInfo("Cage", "zoo", "List", "java.util", UNI),
        TypeRelationInfo("Cage", "zoo", "Animal", "zoo", MULTI),
    ]


def test_generic_supertype_adds_raw_edge(parse):
    unit = parse(
        """
        package zoo;

        class Base<T> {}
        class Sub extends Base<String> {}
        """
    )
    assert _relations(unit, "Sub") == [
        TypeRelationInfo("Sub", "zoo", "Base<String>", "zoo", RelationKind.INHERITANCE),
        TypeRelationInfo("Base<String>", "zoo", "Base", "zoo", RelationKind.INHERITANCE),
    ]


def test_unresolved_supertype_has_empty_scope(parse):
    unit = parse("class Sub extends Mystery {}")
    assert _relations(unit, "Sub") == [
        TypeRelationInfo("Sub", "", "Mystery", "", RelationKind.INHERITANCE)
    ]


def test_interface_extends_every_parent(parse):
    unit = parse(
        """
        interface A {}
        interface B {}
        interface C extends A, B {}
        """
    )
    assert [(r.to_type, r.kind) for r in _relations(unit, "C")] == [
        ("A", RelationKind.INHERITANCE),
        ("B", RelationKind.INHERITANCE),
    ]


def test_record_components_are_associations(parse):
    unit = parse(
        """
        class Money {}
        record Price(Money amount, Money[] history) implements Comparable<Price> {}
        """
    )
    kinds = [(r.to_type, r.kind) for r in _relations(unit, "Price")]
    assert kinds == [
        ("Comparable<Price>", RelationKind.IMPLEMENTATION),
        ("Comparable", RelationKind.IMPLEMENTATION),
        ("Money", UNI),
        ("Money", MULTI),
    ]


def test_nesting_kinds(parse):
    unit = parse(
        """
        package n;

        class Outer {
            class Member {}
            static class Nested {}
            interface Callback {}
            enum Mode { ON }
            record Pair(int a) {}
            void run() {
                class Local {}
            }
        }
        interface Api {
            class Default {}
        }
        """
    )
    expected = {
        "Member": (RelationKind.COMPOSITION, "Outer", "n", False),
        "Nested": (RelationKind.AGGREGATION, "Outer", "n", False),
        "Callback": (RelationKind.AGGREGATION, "Outer", "n", False),
        "Mode": (RelationKind.AGGREGATION, "Outer", "n", False),
        "Pair": (RelationKind.AGGREGATION, "Outer", "n", False),
        "Local": (RelationKind.CONTAINMENT, "Outer", "n", True),
        "Default": (RelationKind.AGGREGATION, "Api", "n", False),
    }
    for name, (kind, outer, scope, local) in expected.items():
        nesting = [r for r in _relations(unit, name) if r.to_type == outer]
        assert len(nesting) == 1, name
        edge = nesting[0]
        assert (edge.kind, edge.to_scope, edge.is_local) == (kind, scope, local), name


def test_local_type_edge_uses_its_routine_scope(parse):
    unit = parse(
        """
        class Outer {
            void run(int times) {
                class Local {}
            }
        }
        """
    )
    assert _relations(unit, "Local") == [
        TypeRelationInfo(
            "Local", "Outer.run(int)", "Outer", "", RelationKind.CONTAINMENT, True
        )
    ]


def test_anonymous_body_types_have_no_nesting_edge(parse):
    unit = parse(
        """
        class Host {
            Object task = new Object() {
                class Helper {}
            };
        }
        """
    )
    assert _relations(unit, "Helper") == []


# -- reconciliation -------------------------------------------------------


def test_scope_completion_prefers_same_scope():
    catalogue = [
        TypeInfo("other", "Base"),
        TypeInfo("app", "Base"),
        TypeInfo("app", "Sub"),
    ]
    edge = TypeRelationInfo("Sub", "app", "Base", "", RelationKind.INHERITANCE)
    assert reconcile(catalogue, [edge]) == [edge.with_target_scope("app")]


def test_scope_completion_falls_back_to_first_candidate():
    catalogue = [TypeInfo("one", "Api"), TypeInfo("two", "Api")]
    edge = TypeRelationInfo("Impl", "three", "Api", "", RelationKind.IMPLEMENTATION)
    assert reconcile(catalogue, [edge]) == [edge.with_target_scope("one")]


def test_scope_completion_ignores_associations():
    catalogue = [TypeInfo("app", "Base")]
    edge = TypeRelationInfo("Sub", "app", "Base", "", UNI)
    assert reconcile(catalogue, [edge]) == [edge]


def test_multiplicity_absorbs_single_association():
    single = TypeRelationInfo("Cart", "s", "Item", "s", UNI)
    multi = single.with_kind(MULTI)
    assert reconcile([], [single, multi]) == [multi]


def test_absorption_requires_matching_locality():
    single = TypeRelationInfo("Cart", "s", "Item", "s", UNI, False)
    multi = TypeRelationInfo("Cart", "s", "Item", "s", MULTI, True)
    assert reconcile([], [single, multi]) == [single, multi]


def test_mirrored_associations_merge():
    forward = TypeRelationInfo("Order", "s", "Customer", "s", UNI)
    assert reconcile([], [forward, forward.mirrored()]) == [forward.with_kind(BI)]


def test_self_loop_never_merges():
    loop = TypeRelationInfo("Node", "s", "Node", "s", UNI)
    assert reconcile([], [loop]) == [loop]


def test_merge_pairs_each_edge_once():
    ab = TypeRelationInfo("A", "s", "B", "s", UNI)
    ac = TypeRelationInfo("A", "s", "C", "s", UNI)
    result = reconcile([], [ab, ac, ab.mirrored(), ac.mirrored()])
    assert result == [ab.with_kind(BI), ac.with_kind(BI)]
