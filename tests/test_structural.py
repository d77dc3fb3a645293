"""End-to-end tests for the structural analysis of a source tree."""

from __future__ import annotations

import pytest

from typeweave.analyzers import type_relations
from typeweave.analyzers.base import AbstractAnalyzer
from typeweave.analyzers.structural import StructuralAnalyzer
from typeweave.config import AnalyzerConfig
from typeweave.diagnostics import DiagnosticKind
from typeweave.model import RelationKind, TypeInfo

UNI = RelationKind.UNIDIRECTIONAL_ASSOCIATION
MULTI = RelationKind.MULTIPLICITY_UNIDIRECTIONAL_ASSOCIATION
BI = RelationKind.BIDIRECTIONAL_ASSOCIATION


def _edges(result):
    return {(r.from_type, r.to_type, r.kind) for r in result.type_relations}


def _infos(result):
    return {(i.scope, i.name): i for i in result.type_infos}


def test_mutual_fields_become_one_bidirectional_association(java_project):
    root = java_project(
        {
            "shop/Order.java": """
                package shop;

                public class Order {
                    private Customer customer;
                }
            """,
            "shop/Customer.java": """
                package shop;

                public class Customer {
                    private Order lastOrder;
                }
            """,
        }
    )
    result = StructuralAnalyzer().analyze(root)

    assert not result.has_error
    assert result.type_infos == {TypeInfo("shop", "Order"), TypeInfo("shop", "Customer")}
    assert _edges(result) == {("Customer", "Order", BI)}


def test_collection_field_absorbs_single_association(java_project):
    root = java_project(
        {
            "Cart.java": """
                import java.util.List;

                class Item {}
                class Cart {
                    Item featured;
                    List<Item> items;
                }
            """
        }
    )
    result = StructuralAnalyzer().analyze(root)

    assert ("Cart", "Item", MULTI) in _edges(result)
    assert ("Cart", "Item", UNI) not in _edges(result)
    assert ("Cart", "List", UNI) in _edges(result)
    backfilled = _infos(result)[("java.util", "List")]
    assert backfilled.declaration is None
    assert not backfilled.is_interface


def test_self_reference_stays_unidirectional(java_project):
    root = java_project({"Node.java": "class Node { Node next; }"})
    result = StructuralAnalyzer().analyze(root)
    assert _edges(result) == {("Node", "Node", UNI)}


def test_backfilled_supertypes(java_project):
    root = java_project(
        {
            "Impl.java": """
                class Impl extends Unknown implements Runnable, Mystery {}
                interface Remote extends Faraway {}
            """
        }
    )
    infos = _infos(StructuralAnalyzer().analyze(root))

    assert infos[("java.lang", "Runnable")].is_interface
    assert infos[("", "Mystery")].is_interface
    assert infos[("", "Faraway")].is_interface
    assert not infos[("", "Unknown")].is_interface
    assert infos[("", "Impl")].declaration is not None


def test_generic_supertype_edges(java_project):
    root = java_project(
        {
            "Base.java": "class Base<T> {}",
            "Sub.java": "class Sub extends Base<String> {}",
        }
    )
    result = StructuralAnalyzer().analyze(root)
    assert _edges(result) == {
        ("Sub", "Base<String>", RelationKind.INHERITANCE),
        ("Base<String>", "Base", RelationKind.INHERITANCE),
    }
    assert ("", "Base<String>") in _infos(result)


def test_unresolved_supertype_scope_is_completed(java_project):
    root = java_project(
        {
            "a/Sub.java": "package a;\nclass Sub extends Base {}\n",
            "b/Base.java": "package b;\npublic class Base {}\n",
        }
    )
    result = StructuralAnalyzer().analyze(root)
    (edge,) = [r for r in result.type_relations if r.kind is RelationKind.INHERITANCE]
    assert (edge.from_scope, edge.to_type, edge.to_scope) == ("a", "Base", "b")


def test_nested_and_local_types(java_project):
    root = java_project(
        {
            "app/Outer.java": """
                package app;

                public class Outer {
                    class Member {}
                    static class Nested {}
                    void run() {
                        class Local {}
                    }
                }
            """
        }
    )
    result = StructuralAnalyzer().analyze(root)
    infos = _infos(result)

    assert infos[("app.Outer", "Member")].declaration is not None
    local = infos[("app.Outer.run()", "Local")]
    assert local.is_local
    assert _edges(result) == {
        ("Member", "Outer", RelationKind.COMPOSITION),
        ("Nested", "Outer", RelationKind.AGGREGATION),
        ("Local", "Outer", RelationKind.CONTAINMENT),
    }
    (containment,) = [
        r for r in result.type_relations if r.kind is RelationKind.CONTAINMENT
    ]
    assert containment.is_local
    assert containment.to_scope == "app"


def test_syntax_error_flags_result_but_keeps_other_files(java_project):
    root = java_project(
        {
            "Bad.java": "class Bad { void run( { }",
            "Good.java": "class Good { Good twin; }",
        }
    )
    result = StructuralAnalyzer().analyze(root)

    assert result.has_error
    (diagnostic,) = result.diagnostics
    assert diagnostic.kind is DiagnosticKind.PARSE_FAILURE
    assert diagnostic.path.name == "Bad.java"
    assert set(_infos(result)) == {("", "Good")}


def test_failing_unit_keeps_facts_merged_before_the_failure(java_project, monkeypatch):
    root = java_project(
        {
            "A.java": "class A { B b; }",
            "B.java": "class B {}",
        }
    )
    real = type_relations.local_relations

    def failing(info, resolver):
        if info.name == "A":
            raise RuntimeError("boom")
        return real(info, resolver)

    monkeypatch.setattr(type_relations, "local_relations", failing)
    result = StructuralAnalyzer().analyze(root)

    assert result.has_error
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.UNIT_FAILURE]
    assert set(_infos(result)) == {("", "A"), ("", "B")}
    assert not result.type_relations


def test_missing_source_root_is_reported(tmp_path):
    result = StructuralAnalyzer().analyze(tmp_path / "absent")
    assert result.has_error
    assert result.diagnostics[0].kind is DiagnosticKind.IO_FAILURE
    assert not result.type_infos
    assert not result.type_relations


def test_empty_project_gives_empty_result(tmp_path):
    result = StructuralAnalyzer().analyze(tmp_path)
    assert not result.has_error
    assert not result.type_infos


def test_excluded_and_descriptor_files_are_skipped(java_project):
    root = java_project(
        {
            "app/Kept.java": "package app;\nclass Kept {}\n",
            "app/package-info.java": "package app;\n",
            "generated/Skipped.java": "package generated;\nclass Skipped {}\n",
        }
    )
    config = AnalyzerConfig(exclude=["generated/*"])
    result = StructuralAnalyzer(config).analyze(root)
    assert set(_infos(result)) == {("app", "Kept")}


def test_analyzer_instance_is_reusable(java_project):
    root = java_project({"Solo.java": "class Solo {}"})
    analyzer = StructuralAnalyzer()
    assert analyzer.analyze(root) == analyzer.analyze(root)


def test_analyzer_missing_a_hook_cannot_be_instantiated():
    class Incomplete(AbstractAnalyzer):
        def initialize(self):
            return []

    with pytest.raises(TypeError):
        Incomplete()
