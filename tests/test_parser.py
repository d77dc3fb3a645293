"""Tests for the tree-sitter front end and the scope helpers."""

from __future__ import annotations

import pytest

from typeweave.diagnostics import JavaSyntaxError
from typeweave.java.parser import JavaSourceParser
from typeweave.java.tree import (
    Assign,
    ClassType,
    DeclarationKind,
    ExplicitConstructorInvocation,
    FieldAccess,
    LocalClassDeclaration,
    MethodCall,
    Name,
    ObjectCreation,
    TypeDeclaration,
    Unary,
    canonical_name,
    find_all,
    fully_qualified_scope,
    is_local_type,
)


def test_package_and_imports(parse):
    unit = parse(
        """
        package com.shop;

        import java.util.List;
        import java.util.*;
        import static java.lang.Math.max;

        class Cart {}
        """
    )
    assert unit.package == "com.shop"
    assert [(i.name, i.is_static, i.is_asterisk) for i in unit.imports] == [
        ("java.util.List", False, False),
        ("java.util", False, True),
        ("java.lang.Math.max", True, False),
    ]
    assert [t.name for t in unit.types] == ["Cart"]


def test_declaration_kinds(parse):
    unit = parse(
        """
        class A {}
        interface B {}
        enum C { X, Y }
        record D(int x) {}
        @interface E {}
        """
    )
    assert [t.kind for t in unit.types] == [
        DeclarationKind.CLASS,
        DeclarationKind.INTERFACE,
        DeclarationKind.ENUM,
        DeclarationKind.RECORD,
        DeclarationKind.ANNOTATION,
    ]
    enum = unit.types[2]
    assert [c.name for c in enum.enum_constants] == ["X", "Y"]
    record = unit.types[3]
    assert [(p.name, str(p.type)) for p in record.record_components] == [("x", "int")]


def test_supertypes_and_generic_rendering(parse):
    unit = parse(
        """
        import java.util.*;

        class Repo extends Base<String> implements Store, java.io.Serializable {
            private Map<String, List<Integer>> index;
            private int[] counts, grid[];
        }
        """
    )
    repo = unit.types[0]
    assert [str(t) for t in repo.extended_types] == ["Base<String>"]
    assert [str(t) for t in repo.implemented_types] == ["Store", "java.io.Serializable"]
    assert repo.implemented_types[1].path == ["java", "io", "Serializable"]

    index, counts = repo.fields
    assert str(index.variables[0].type) == "Map<String, List<Integer>>"
    assert [str(v.type) for v in counts.variables] == ["int[]", "int[][]"]


def test_method_signature_and_varargs(parse):
    unit = parse(
        """
        class Log {
            static <T> List<T> collect(String format, Object... values) { return null; }
        }
        """
    )
    method = unit.types[0].methods[0]
    assert method.name == "collect"
    assert method.type_parameters == ["T"]
    assert "static" in method.modifiers
    assert str(method.return_type) == "List<T>"
    assert [p.declared_type for p in method.parameters] == ["String", "Object..."]
    assert method.parameters[1].is_varargs


def test_constructor_and_explicit_invocation(parse):
    unit = parse(
        """
        class Child extends Base {
            Child() { this(1); }
            Child(int v) { super(v); }
        }
        """
    )
    _, second = unit.types[0].constructors
    assert [p.name for p in second.parameters] == ["v"]
    invocations = find_all(unit, ExplicitConstructorInvocation)
    assert [i.is_this for i in invocations] == [True, False]
    assert [len(i.arguments) for i in invocations] == [1, 1]


def test_expressions(parse):
    unit = parse(
        """
        class Counter {
            int count;
            void bump(Counter other) {
                count = count + 1;
                this.count++;
                other.reset();
                new Counter();
            }
        }
        """
    )
    assign = find_all(unit, Assign)[0]
    assert isinstance(assign.target, Name)
    assert assign.target.identifier == "count"

    increment = find_all(unit, Unary)[0]
    assert increment.is_increment and not increment.prefix
    assert isinstance(increment.operand, FieldAccess)

    call = find_all(unit, MethodCall)[0]
    assert call.name == "reset"
    assert isinstance(call.scope, Name)

    creation = find_all(unit, ObjectCreation)[0]
    assert creation.type == ClassType("Counter")
    assert creation.body is None


def test_parents_are_linked(parse):
    unit = parse(
        """
        class A {
            void run() { helper(); }
        }
        """
    )
    call = find_all(unit, MethodCall)[0]
    assert call.parent is not None
    assert list(call.ancestors())[-1] is unit


def test_fully_qualified_scope_of_nested_and_local_types(parse):
    unit = parse(
        """
        package app;

        class Outer {
            static {
                class InStatic {}
            }
            class Inner {
                void run(int times, String... names) {
                    class Local {}
                }
            }
        }
        """
    )
    decls = {d.name: d for d in find_all(unit, TypeDeclaration)}
    assert fully_qualified_scope(decls["Outer"]) == "app"
    assert canonical_name(decls["Inner"]) == "app.Outer.Inner"
    assert fully_qualified_scope(decls["Local"]) == "app.Outer.Inner.run(int,String)"
    assert fully_qualified_scope(decls["InStatic"]) == "app.Outer.StaticInitBlock-L5"
    assert is_local_type(decls["Local"])
    assert isinstance(decls["Local"].parent, LocalClassDeclaration)
    assert not is_local_type(decls["Inner"])


def test_compact_constructor_scope(parse):
    unit = parse(
        """
        record Point(int x, int y) {
            Point {
                class Check {}
            }
        }
        """
    )
    record = unit.types[0]
    assert len(record.compact_constructors) == 1
    check = find_all(unit, TypeDeclaration)[1]
    assert fully_qualified_scope(check) == "Point.CompactConstructor"


def test_anonymous_class_body_contributes_no_scope(parse):
    unit = parse(
        """
        class Host {
            Runnable task = new Runnable() {
                class Helper {}
                public void run() {}
            };
        }
        """
    )
    helper = [d for d in find_all(unit, TypeDeclaration) if d.name == "Helper"][0]
    assert fully_qualified_scope(helper) == "Host"
    assert not is_local_type(helper)


def test_syntax_error_is_raised(parse):
    with pytest.raises(JavaSyntaxError) as excinfo:
        parse(
            """
            class Broken {
                void run( {
            }
            """
        )
    assert excinfo.value.line is not None


def test_tolerant_parser_keeps_valid_declarations():
    parser = JavaSourceParser(tolerate_syntax_errors=True)
    unit = parser.parse_source("class Fine {}\n}\n")
    assert "Fine" in [t.name for t in unit.types]


def test_parse_file_uses_encoding(tmp_path):
    path = tmp_path / "Cafe.java"
    path.write_text("class Café {}\n", encoding="latin-1")
    unit = JavaSourceParser(encoding="latin-1").parse_file(path)
    assert unit.types[0].name == "Café"
