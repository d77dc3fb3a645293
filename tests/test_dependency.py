"""Tests for per-routine callee and field-access extraction."""

from __future__ import annotations

import pytest

from typeweave.analyzers.dependency import DependencyAnalyzer, access_kind
from typeweave.analyzers.structural import StructuralAnalyzer
from typeweave.diagnostics import DiagnosticKind
from typeweave.java.tree import Assign, Enclosed, Literal, MethodCall, Name, Unary
from typeweave.model import (
    AccessedFieldInfo,
    AccessKind,
    CalleeMethodInfo,
    CallerMethodInfo,
)


def _analyze(java_project, files):
    return DependencyAnalyzer().analyze(java_project(files))


def _routine(result, type_name, name):
    callers = result.dependencies[type_name]
    (caller,) = [c for c in callers if c.name == name]
    return callers[caller]


def test_repeated_call_is_counted(java_project):
    result = _analyze(
        java_project,
        {
            "app/Greeter.java": """
                package app;

                class Greeter {
                    void greet(String name) {}
                    void run() {
                        greet("a");
                        greet("b");
                        greet("c");
                    }
                }
            """
        },
    )
    info = _routine(result, "app.Greeter", "run")
    callee = CalleeMethodInfo(
        "app.Greeter", "greet", (("name", "java.lang.String"),), "void"
    )
    assert info.callees == {callee: 3}
    assert not result.has_error


def test_caller_keys(java_project):
    result = _analyze(
        java_project,
        {
            "Tool.java": """
                import java.util.List;

                class Tool {
                    Tool(int size) {}
                    List<String> names(Map<String, Integer> index, String... extra) { return null; }
                    void noop() {}
                }
            """
        },
    )
    assert set(result.dependencies["Tool"]) == {
        CallerMethodInfo("Tool", (("size", "int"),), None),
        CallerMethodInfo(
            "names",
            (("index", "Map<String, Integer>"), ("extra", "String...")),
            "List<String>",
        ),
        CallerMethodInfo("noop", (), "void"),
    }


def test_field_reads_and_writes(java_project):
    result = _analyze(
        java_project,
        {
            "Counter.java": """
                class Counter {
                    private int count;
                    void bump(int step) {
                        count = count + step;
                        count++;
                    }
                }
            """
        },
    )
    info = _routine(result, "Counter", "bump")
    assert info.fields == {
        AccessedFieldInfo("Counter", "count", AccessKind.WRITE): 2,
        AccessedFieldInfo("Counter", "count", AccessKind.READ): 1,
    }


def test_explicit_field_access_receivers(java_project):
    result = _analyze(
        java_project,
        {
            "app/Inner.java": """
                package app;

                class Inner { void method() {} }
            """,
            "app/Holder.java": """
                package app;

                class Holder { Inner b; }
            """,
            "app/Client.java": """
                package app;

                class Client {
                    Holder a;
                    int total;
                    void run() {
                        a.b.method();
                        this.total = 0;
                    }
                }
            """,
        },
    )
    info = _routine(result, "app.Client", "run")
    assert info.fields == {
        AccessedFieldInfo("app.Holder", "b", AccessKind.OTHER): 1,
        AccessedFieldInfo("this", "total", AccessKind.WRITE): 1,
        AccessedFieldInfo("app.Client", "a", AccessKind.READ): 1,
    }
    assert info.callees == {CalleeMethodInfo("app.Inner", "method", (), "void"): 1}


def test_call_on_library_collection(java_project):
    result = _analyze(
        java_project,
        {
            "shop/Item.java": "package shop;\npublic class Item {}\n",
            "shop/Cart.java": """
                package shop;

                import java.util.List;

                public class Cart {
                    private List<Item> items;
                    void add(Item item) {
                        items.add(item);
                        items.add(item);
                    }
                }
            """,
        },
    )
    info = _routine(result, "shop.Cart", "add")
    callee = CalleeMethodInfo(
        "java.util.List", "add", (("arg0", "shop.Item"),), "UnknownReturnType"
    )
    assert info.callees == {callee: 2}
    assert info.fields == {AccessedFieldInfo("shop.Cart", "items", AccessKind.OTHER): 2}
    assert not result.has_error


def test_unresolved_call_uses_textual_fallback(java_project):
    result = _analyze(
        java_project,
        {
            "Client.java": """
                class Client {
                    void run() {
                        foo.bar(x -> x, String::valueOf, baz.qux, 42);
                        helper();
                    }
                }
            """
        },
    )
    info = _routine(result, "Client", "run")
    assert info.callees == {
        CalleeMethodInfo(
            "foo",
            "bar",
            (
                ("arg0", "Lambda"),
                ("arg1", "MethodReference"),
                ("arg2", "qux"),
                ("arg3", "int"),
            ),
            "UnknownReturnType",
        ): 1,
        CalleeMethodInfo("UnknownType", "helper", (), "UnknownReturnType"): 1,
    }
    assert result.has_error
    kinds = {d.kind for d in result.diagnostics}
    assert kinds == {DiagnosticKind.UNRESOLVED_CALL}


def test_unresolved_construction(java_project):
    result = _analyze(
        java_project,
        {"Maker.java": "class Maker { void make() { new Gadget(1); } }"},
    )
    info = _routine(result, "Maker", "make")
    assert info.callees == {CalleeMethodInfo("Gadget", "Gadget", (("arg0", "int"),), None): 1}
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.UNRESOLVED_CONSTRUCTION]


def test_constructions_resolve_to_project_and_jdk_types(java_project):
    result = _analyze(
        java_project,
        {
            "app/Point.java": """
                package app;

                import java.util.ArrayList;

                class Point {
                    Point(int x, int y) {}
                    static Object origin() {
                        new ArrayList<>();
                        return new Point(0, 0);
                    }
                }
            """
        },
    )
    info = _routine(result, "app.Point", "origin")
    assert info.callees == {
        CalleeMethodInfo("java.util.ArrayList", "ArrayList<>", (), None): 1,
        CalleeMethodInfo("app.Point", "Point", (("x", "int"), ("y", "int")), None): 1,
    }
    assert not result.has_error


def test_record_compact_constructor(java_project):
    result = _analyze(
        java_project,
        {
            "geo/Range.java": """
                package geo;

                record Range(int low, int high) {
                    Range {
                        if (low > high) {
                            throw new IllegalArgumentException("inverted");
                        }
                    }
                }
            """
        },
    )
    callers = result.dependencies["geo.Range"]
    compact = CallerMethodInfo("Range", (("low", "int"), ("high", "int")), None)
    assert list(callers) == [compact]
    info = callers[compact]
    assert info.callees == {
        CalleeMethodInfo(
            "java.lang.IllegalArgumentException",
            "IllegalArgumentException",
            (("arg0", "java.lang.String"),),
            None,
        ): 1
    }
    # record components are parameters here, not fields
    assert not info.fields


def test_this_and_super_invocations(java_project):
    result = _analyze(
        java_project,
        {
            "zoo/Animals.java": """
                package zoo;

                class Animal {
                    Animal(String name) {}
                }
                class Dog extends Animal {
                    Dog() { this("rex"); }
                    Dog(String name) { super(name); }
                }
            """
        },
    )
    dog = result.dependencies["zoo.Dog"]
    default = dog[CallerMethodInfo("Dog", (), None)]
    named = dog[CallerMethodInfo("Dog", (("name", "String"),), None)]
    assert default.callees == {
        CalleeMethodInfo("zoo.Dog", "this", (("name", "java.lang.String"),), None): 1
    }
    assert named.callees == {
        CalleeMethodInfo("zoo.Dog", "super", (("name", "java.lang.String"),), None): 1
    }


def test_unresolved_super_invocation(java_project):
    result = _analyze(
        java_project,
        {"Sub.java": "class Sub extends Missing { Sub() { super(1); } }"},
    )
    info = _routine(result, "Sub", "Sub")
    assert info.callees == {CalleeMethodInfo("Sub", "super", (("arg0", "int"),), None): 1}
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.UNRESOLVED_INVOCATION]


def test_every_type_declaration_is_keyed(java_project):
    result = _analyze(
        java_project,
        {
            "app/Outer.java": """
                package app;

                class Outer {
                    enum Mode { ON }
                    void run() {
                        class Local { void go() {} }
                    }
                }
            """
        },
    )
    assert set(result.dependencies) == {
        "app.Outer",
        "app.Outer.Mode",
        "app.Outer.run().Local",
    }
    assert result.dependencies["app.Outer.Mode"] == {}


def test_enum_constants_are_not_fields(java_project):
    result = _analyze(
        java_project,
        {
            "Light.java": """
                enum Light {
                    RED, GREEN;
                    Light next() { return RED; }
                }
            """
        },
    )
    assert not _routine(result, "Light", "next").fields


# -- access classification on hand-built trees --------------------------------


def test_parenthesized_assignment_target_is_write():
    target = Name(identifier="x")
    Assign(target=Enclosed(inner=target), value=Literal(kind="int"))
    assert access_kind(target) is AccessKind.WRITE


def test_assigned_value_is_read():
    value = Name(identifier="y")
    Assign(target=Name(identifier="x"), value=Enclosed(inner=Enclosed(inner=value)))
    assert access_kind(value) is AccessKind.READ


@pytest.mark.parametrize(
    "operator, expected",
    [("++", AccessKind.WRITE), ("--", AccessKind.WRITE), ("-", AccessKind.READ)],
)
def test_unary_operators(operator, expected):
    operand = Name(identifier="x")
    Unary(operator=operator, operand=operand)
    assert access_kind(operand) is expected


def test_call_receiver_is_other_and_argument_is_read():
    receiver = Name(identifier="list")
    argument = Name(identifier="item")
    MethodCall(scope=Enclosed(inner=receiver), name="add", arguments=[argument])
    assert access_kind(receiver) is AccessKind.OTHER
    assert access_kind(argument) is AccessKind.READ


def test_detached_expression_is_other():
    assert access_kind(Name(identifier="x")) is AccessKind.OTHER


def test_fluent_jdk_chain_resolves(java_project):
    result = _analyze(
        java_project,
        {
            "Label.java": """
                class Label {
                    String render(String name) {
                        StringBuilder sb = new StringBuilder();
                        return sb.append("<").append(name).toString().trim();
                    }
                }
            """
        },
    )
    info = _routine(result, "Label", "render")
    builder = "java.lang.StringBuilder"
    assert info.callees == {
        CalleeMethodInfo(builder, "StringBuilder", (), None): 1,
        CalleeMethodInfo(builder, "append", (("arg0", "java.lang.String"),), builder): 2,
        CalleeMethodInfo(builder, "toString", (), "java.lang.String"): 1,
        CalleeMethodInfo("java.lang.String", "trim", (), "java.lang.String"): 1,
    }
    assert not result.has_error


def test_first_declaration_of_duplicate_type_wins(java_project):
    root = java_project(
        {
            "a/Dup.java": "package app;\nclass Dup { void first() {} }\n",
            "b/Dup.java": "package app;\nclass Dup { void second() {} }\n",
        }
    )
    dependencies = DependencyAnalyzer().analyze(root).dependencies
    assert [c.name for c in dependencies["app.Dup"]] == ["first"]

    (info,) = StructuralAnalyzer().analyze(root).type_infos
    assert [m.name for m in info.declaration.methods] == ["first"]
