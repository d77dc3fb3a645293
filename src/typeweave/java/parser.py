"""Parse Java source via tree-sitter into the :mod:`typeweave.java.tree` model."""

from __future__ import annotations

import logging
from pathlib import Path

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

from typeweave.diagnostics import JavaSyntaxError
from typeweave.java import tree as t

logger = logging.getLogger(__name__)

# tree-sitter node types that represent Java type declarations.
_TYPE_DECL_KINDS = {
    "class_declaration": t.DeclarationKind.CLASS,
    "interface_declaration": t.DeclarationKind.INTERFACE,
    "enum_declaration": t.DeclarationKind.ENUM,
    "record_declaration": t.DeclarationKind.RECORD,
    "annotation_type_declaration": t.DeclarationKind.ANNOTATION,
}

_PRIMITIVE_TYPES = {"integral_type", "floating_point_type", "boolean_type"}

_TYPE_NODES = _PRIMITIVE_TYPES | {
    "void_type",
    "type_identifier",
    "scoped_type_identifier",
    "generic_type",
    "array_type",
    "annotated_type",
}

_IGNORED = {
    "line_comment",
    "block_comment",
    "modifiers",
    "annotation",
    "marker_annotation",
    "type_arguments",
    "type_parameters",
    "dimensions",
}

_INTEGER_LITERALS = {
    "decimal_integer_literal",
    "hex_integer_literal",
    "octal_integer_literal",
    "binary_integer_literal",
}

_FLOAT_LITERALS = {"decimal_floating_point_literal", "hex_floating_point_literal"}

# Generic nodes that are expressions rather than statements.
_EXPRESSION_KINDS = {
    "switch_expression",
    "array_initializer",
    "element_value_array_initializer",
    "template_expression",
}

# Statements whose identifier children are labels, not names.
_LABELLED = {"labeled_statement", "break_statement", "continue_statement"}


class JavaSourceParser:
    """Turn Java source text into :class:`~typeweave.java.tree.CompilationUnit`."""

    def __init__(self, *, encoding: str = "utf-8", tolerate_syntax_errors: bool = False):
        self.encoding = encoding
        self.tolerate_syntax_errors = tolerate_syntax_errors
        self._parser = Parser(Language(tsjava.language()))

    def parse_file(self, path: Path) -> t.CompilationUnit:
        source = path.read_text(encoding=self.encoding)
        return self.parse_source(source, path=path)

    def parse_source(self, source: str, path: Path | None = None) -> t.CompilationUnit:
        data = source.encode("utf-8")
        syntax_tree = self._parser.parse(data)
        root = syntax_tree.root_node
        if not root.has_error:
            return _Converter().compilation_unit(root)

        error = _first_error(root)
        line = error.start_point[0] + 1 if error is not None else None
        if not self.tolerate_syntax_errors:
            raise JavaSyntaxError(f"syntax error at line {line}", path, line)
        logger.debug("%s: dropping unparsable code at line %s", path, line)
        try:
            return _Converter().compilation_unit(root)
        except (AttributeError, IndexError, StopIteration) as e:
            # recovery left a declaration without a mandatory part
            raise JavaSyntaxError(f"unrecoverable syntax error at line {line}", path, line) from e


def _first_error(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _text(node) -> str:
    return node.text.decode("utf-8")


def _position(node) -> tuple[int, int]:
    return (node.start_point[0], node.start_point[1])


def _named(node) -> list:
    """Named children, minus comments and error recovery nodes."""
    return [
        c
        for c in node.named_children
        if c.type not in ("line_comment", "block_comment", "ERROR") and not c.is_missing
    ]


def _has_token(node, token: str) -> bool:
    return any(not c.is_named and c.type == token for c in node.children)


def _dimension_count(node) -> int:
    if node is None:
        return 0
    return sum(1 for c in node.children if c.type == "[")


class _Converter:
    """One-shot conversion of a tree-sitter tree."""

    # -- types ------------------------------------------------------------

    def type_ref(self, node) -> t.TypeRef:
        kind = node.type
        if kind in _PRIMITIVE_TYPES:
            return t.PrimitiveType(_text(node))
        if kind == "void_type":
            return t.VoidType()
        if kind == "type_identifier":
            name = _text(node)
            return t.VarType() if name == "var" else t.ClassType(name)
        if kind == "scoped_type_identifier":
            parts = [c for c in _named(node) if c.type not in _IGNORED]
            scope = self.type_ref(parts[0])
            return t.ClassType(
                _text(parts[-1]),
                scope if isinstance(scope, t.ClassType) else None,
            )
        if kind == "generic_type":
            parts = [c for c in _named(node) if c.type != "type_arguments"]
            base = self.type_ref(parts[0])
            args_node = next(
                (c for c in node.named_children if c.type == "type_arguments"), None
            )
            arguments = tuple(
                self.type_ref(c)
                for c in (_named(args_node) if args_node is not None else [])
                if c.type not in _IGNORED
            )
            if not isinstance(base, t.ClassType):
                return base
            return t.ClassType(base.name, base.scope, arguments)
        if kind == "array_type":
            element = self.type_ref(node.child_by_field_name("element"))
            return t.array_of(
                element, _dimension_count(node.child_by_field_name("dimensions"))
            )
        if kind == "wildcard":
            bounds = [c for c in _named(node) if c.type not in _IGNORED and c.type != "super"]
            if not bounds:
                return t.WildcardType()
            return t.WildcardType(self.type_ref(bounds[-1]), _has_super(node))
        if kind == "annotated_type":
            return self.type_ref([c for c in _named(node) if c.type not in _IGNORED][-1])
        return t.ClassType(_text(node))

    def _first_type(self, node):
        for child in _named(node):
            if child.type in _TYPE_NODES:
                return child
        return None

    def _type_list(self, node) -> list[t.ClassType]:
        if node is None:
            return []
        type_list = next((c for c in _named(node) if c.type == "type_list"), node)
        result = []
        for child in _named(type_list):
            if child.type in _IGNORED:
                continue
            ref = self.type_ref(child)
            if isinstance(ref, t.ClassType):
                result.append(ref)
        return result

    def _type_parameters(self, node) -> list[str]:
        params = node.child_by_field_name("type_parameters")
        if params is None:
            return []
        names = []
        for param in _named(params):
            ident = next(
                (c for c in param.named_children if c.type in ("type_identifier", "identifier")),
                None,
            )
            if ident is not None:
                names.append(_text(ident))
        return names

    # -- declarations -----------------------------------------------------

    def compilation_unit(self, root) -> t.CompilationUnit:
        package = ""
        imports: list[t.ImportDeclaration] = []
        types: list[t.TypeDeclaration] = []
        for child in _named(root):
            if child.type == "package_declaration":
                name = next(
                    (c for c in child.named_children if c.type in ("identifier", "scoped_identifier")),
                    None,
                )
                if name is not None:
                    package = _text(name)
            elif child.type == "import_declaration":
                imports.append(self._import(child))
            elif child.type in _TYPE_DECL_KINDS:
                types.append(self.type_declaration(child))
        return t.CompilationUnit(
            package=package, imports=imports, types=types, position=_position(root)
        )

    def _import(self, node) -> t.ImportDeclaration:
        name = next(
            c for c in node.named_children if c.type in ("identifier", "scoped_identifier")
        )
        return t.ImportDeclaration(
            name=_text(name),
            is_static=_has_token(node, "static"),
            is_asterisk=any(c.type == "asterisk" for c in node.children),
            position=_position(node),
        )

    def _modifiers(self, node) -> frozenset[str]:
        mods = next((c for c in node.children if c.type == "modifiers"), None)
        if mods is None:
            return frozenset()
        return frozenset(c.type for c in mods.children if not c.is_named)

    def type_declaration(self, node) -> t.TypeDeclaration:
        kind = _TYPE_DECL_KINDS[node.type]
        extended: list[t.ClassType] = []
        implemented: list[t.ClassType] = []
        components: list[t.Parameter] = []
        constants: list[t.EnumConstant] = []
        members: list[t.Node] = []

        if kind is t.DeclarationKind.INTERFACE:
            extends = next((c for c in node.named_children if c.type == "extends_interfaces"), None)
            extended = self._type_list(extends)
        else:
            superclass = node.child_by_field_name("superclass")
            if superclass is not None:
                extended = self._type_list(superclass)
            implemented = self._type_list(node.child_by_field_name("interfaces"))

        if kind is t.DeclarationKind.RECORD:
            components = self._parameters(node.child_by_field_name("parameters"))

        body = node.child_by_field_name("body")
        if body is not None:
            for child in _named(body):
                if child.type == "enum_constant":
                    constants.append(self._enum_constant(child))
                elif child.type == "enum_body_declarations":
                    members.extend(self.members(child))
                else:
                    members.extend(self._member(child))

        return t.TypeDeclaration(
            kind=kind,
            name=_text(node.child_by_field_name("name")),
            modifiers=self._modifiers(node),
            type_parameters=self._type_parameters(node),
            extended_types=extended,
            implemented_types=implemented,
            record_components=components,
            enum_constants=constants,
            members=members,
            position=_position(node),
        )

    def members(self, body) -> list[t.Node]:
        result: list[t.Node] = []
        for child in _named(body):
            result.extend(self._member(child))
        return result

    def _member(self, node) -> list[t.Node]:
        kind = node.type
        if kind in _TYPE_DECL_KINDS:
            return [self.type_declaration(node)]
        if kind in ("field_declaration", "constant_declaration"):
            return [self._field(node)]
        if kind == "method_declaration":
            return [self._method(node)]
        if kind == "constructor_declaration":
            return [
                t.ConstructorDeclaration(
                    name=_text(node.child_by_field_name("name")),
                    modifiers=self._modifiers(node),
                    type_parameters=self._type_parameters(node),
                    parameters=self._parameters(node.child_by_field_name("parameters")),
                    body=self._block(node.child_by_field_name("body")),
                    position=_position(node),
                )
            ]
        if kind == "compact_constructor_declaration":
            return [
                t.CompactConstructorDeclaration(
                    name=_text(node.child_by_field_name("name")),
                    modifiers=self._modifiers(node),
                    body=self._block(node.child_by_field_name("body")),
                    position=_position(node),
                )
            ]
        if kind == "block":
            return [t.InitializerDeclaration(body=self._block(node), position=_position(node))]
        if kind == "static_initializer":
            block = next(c for c in node.named_children if c.type == "block")
            return [
                t.InitializerDeclaration(
                    is_static=True, body=self._block(block), position=_position(node)
                )
            ]
        # annotation elements and stray tokens carry nothing we analyze
        return []

    def _field(self, node) -> t.FieldDeclaration:
        base = self.type_ref(node.child_by_field_name("type"))
        return t.FieldDeclaration(
            modifiers=self._modifiers(node),
            type=base,
            variables=self._declarators(node, base),
            position=_position(node),
        )

    def _declarators(self, node, base: t.TypeRef) -> list[t.VariableDeclarator]:
        result = []
        for declarator in node.children_by_field_name("declarator"):
            if declarator.type != "variable_declarator":
                continue
            value = declarator.child_by_field_name("value")
            result.append(
                t.VariableDeclarator(
                    name=_text(declarator.child_by_field_name("name")),
                    type=t.array_of(
                        base, _dimension_count(declarator.child_by_field_name("dimensions"))
                    ),
                    initializer=self.expression(value) if value is not None else None,
                    position=_position(declarator),
                    text=_text(declarator),
                )
            )
        return result

    def _method(self, node) -> t.MethodDeclaration:
        return_type = t.array_of(
            self.type_ref(node.child_by_field_name("type")),
            _dimension_count(node.child_by_field_name("dimensions")),
        )
        body = node.child_by_field_name("body")
        return t.MethodDeclaration(
            name=_text(node.child_by_field_name("name")),
            modifiers=self._modifiers(node),
            type_parameters=self._type_parameters(node),
            parameters=self._parameters(node.child_by_field_name("parameters")),
            return_type=return_type,
            body=self._block(body) if body is not None else None,
            position=_position(node),
        )

    def _parameters(self, node) -> list[t.Parameter]:
        if node is None:
            return []
        result = []
        for child in _named(node):
            if child.type == "formal_parameter":
                result.append(self._formal_parameter(child))
            elif child.type == "spread_parameter":
                declarator = next(c for c in child.named_children if c.type == "variable_declarator")
                result.append(
                    t.Parameter(
                        name=_text(declarator.child_by_field_name("name")),
                        type=self.type_ref(self._first_type(child)),
                        is_varargs=True,
                        modifiers=self._modifiers(child),
                        position=_position(child),
                        text=_text(child),
                    )
                )
        return result

    def _formal_parameter(self, node) -> t.Parameter:
        return t.Parameter(
            name=_text(node.child_by_field_name("name")),
            type=t.array_of(
                self.type_ref(node.child_by_field_name("type")),
                _dimension_count(node.child_by_field_name("dimensions")),
            ),
            modifiers=self._modifiers(node),
            position=_position(node),
            text=_text(node),
        )

    def _enum_constant(self, node) -> t.EnumConstant:
        arguments = node.child_by_field_name("arguments")
        body = node.child_by_field_name("body")
        return t.EnumConstant(
            name=_text(node.child_by_field_name("name")),
            arguments=self._arguments(arguments),
            body=self.members(body) if body is not None else None,
            position=_position(node),
        )

    # -- statements -------------------------------------------------------

    def _block(self, node) -> t.Block | None:
        if node is None:
            return None
        return t.Block(body=self._children(node), position=_position(node), text=_text(node))

    def _children(self, node) -> list[t.Node]:
        result: list[t.Node] = []
        for child in _named(node):
            converted = self.node(child)
            if isinstance(converted, list):
                result.extend(converted)
            elif converted is not None:
                result.append(converted)
        return result

    def node(self, node) -> t.Node | list[t.Node] | None:
        """Convert any node found inside a routine body."""
        kind = node.type
        if kind in _IGNORED or kind in _TYPE_NODES:
            return None
        if kind in _TYPE_DECL_KINDS:
            return t.LocalClassDeclaration(
                declaration=self.type_declaration(node), position=_position(node)
            )
        if kind in ("block", "constructor_body"):
            return self._block(node)
        if kind == "local_variable_declaration":
            return self._local_variable(node)
        if kind == "explicit_constructor_invocation":
            return self._explicit_invocation(node)
        if kind in ("resource", "type_pattern"):
            return self._binding_declaration(node)
        if kind == "resource_specification":
            return self._children(node)
        if kind == "catch_formal_parameter":
            return self._catch_parameter(node)
        if kind == "enhanced_for_statement":
            return self._enhanced_for(node)
        if kind in _LABELLED:
            body = [c for c in self._children(node) if not isinstance(c, t.Name)]
            return t.Statement(kind=kind, body=body, position=_position(node), text=_text(node))
        if kind.endswith("_statement") or kind in (
            "switch_block",
            "switch_block_statement_group",
            "switch_rule",
            "switch_label",
            "catch_clause",
            "finally_clause",
        ):
            return t.Statement(
                kind=kind, body=self._children(node), position=_position(node), text=_text(node)
            )
        return self.expression(node)

    def _local_variable(self, node) -> t.LocalVariableDeclaration:
        base = self.type_ref(node.child_by_field_name("type"))
        return t.LocalVariableDeclaration(
            modifiers=self._modifiers(node),
            type=base,
            variables=self._declarators(node, base),
            position=_position(node),
            text=_text(node),
        )

    def _binding_declaration(self, node) -> t.Node | None:
        """A try resource or a type pattern, as a local variable declaration."""
        type_node = node.child_by_field_name("type") or self._first_type(node)
        name_node = node.child_by_field_name("name") or next(
            (c for c in node.named_children if c.type == "identifier"), None
        )
        value = node.child_by_field_name("value")
        if type_node is None or name_node is None:
            # `try (existing)` names an effectively final variable
            return self._children(node) or None
        ref = self.type_ref(type_node)
        return t.LocalVariableDeclaration(
            type=ref,
            variables=[
                t.VariableDeclarator(
                    name=_text(name_node),
                    type=ref,
                    initializer=self.expression(value) if value is not None else None,
                    position=_position(name_node),
                    text=_text(name_node),
                )
            ],
            position=_position(node),
            text=_text(node),
        )

    def _catch_parameter(self, node) -> t.LocalVariableDeclaration:
        catch_type = next(c for c in node.named_children if c.type == "catch_type")
        # `catch (A | B e)` types the variable with the first alternative
        ref = self.type_ref(self._first_type(catch_type))
        name = node.child_by_field_name("name")
        return t.LocalVariableDeclaration(
            type=ref,
            variables=[
                t.VariableDeclarator(
                    name=_text(name), type=ref, position=_position(name), text=_text(name)
                )
            ],
            position=_position(node),
            text=_text(node),
        )

    def _enhanced_for(self, node) -> t.Statement:
        ref = t.array_of(
            self.type_ref(node.child_by_field_name("type")),
            _dimension_count(node.child_by_field_name("dimensions")),
        )
        name = node.child_by_field_name("name")
        variable = t.LocalVariableDeclaration(
            type=ref,
            variables=[
                t.VariableDeclarator(
                    name=_text(name), type=ref, position=_position(name), text=_text(name)
                )
            ],
            position=_position(name),
            text=_text(name),
        )
        body = node.child_by_field_name("body")
        parts: list[t.Node] = [self.expression(node.child_by_field_name("value")), variable]
        converted = self.node(body)
        if isinstance(converted, t.Node):
            parts.append(converted)
        return t.Statement(
            kind="enhanced_for_statement", body=parts, position=_position(node), text=_text(node)
        )

    def _explicit_invocation(self, node) -> t.ExplicitConstructorInvocation:
        constructor = node.child_by_field_name("constructor")
        scope = node.child_by_field_name("object")
        return t.ExplicitConstructorInvocation(
            is_this=constructor.type == "this",
            scope=self.expression(scope) if scope is not None else None,
            arguments=self._arguments(node.child_by_field_name("arguments")),
            position=_position(node),
            text=_text(node),
        )

    # -- expressions ------------------------------------------------------

    def _arguments(self, node) -> list[t.Expression]:
        if node is None:
            return []
        return [self.expression(c) for c in _named(node)]

    def expression(self, node) -> t.Expression:
        kind = node.type
        common = {"position": _position(node), "text": _text(node)}

        if kind == "identifier":
            return t.Name(identifier=_text(node), **common)
        if kind == "this":
            return t.ThisExpr(**common)
        if kind == "super":
            return t.SuperExpr(**common)
        if kind == "parenthesized_expression":
            return t.Enclosed(inner=self.expression(_named(node)[0]), **common)
        if kind == "field_access":
            return self._field_access(node, common)
        if kind == "method_invocation":
            scope = node.child_by_field_name("object")
            return t.MethodCall(
                scope=self.expression(scope) if scope is not None else None,
                name=_text(node.child_by_field_name("name")),
                arguments=self._arguments(node.child_by_field_name("arguments")),
                **common,
            )
        if kind == "object_creation_expression":
            return self._object_creation(node, common)
        if kind == "assignment_expression":
            return t.Assign(
                target=self.expression(node.child_by_field_name("left")),
                operator=_text(node.child_by_field_name("operator")),
                value=self.expression(node.child_by_field_name("right")),
                **common,
            )
        if kind == "binary_expression":
            return t.Binary(
                left=self.expression(node.child_by_field_name("left")),
                operator=_text(node.child_by_field_name("operator")),
                right=self.expression(node.child_by_field_name("right")),
                **common,
            )
        if kind == "unary_expression":
            return t.Unary(
                operator=_text(node.child_by_field_name("operator")),
                operand=self.expression(node.child_by_field_name("operand")),
                **common,
            )
        if kind == "update_expression":
            operand = _named(node)[0]
            prefix = not node.children[0].is_named
            operator = node.children[0] if prefix else node.children[-1]
            return t.Unary(
                operator=operator.type,
                operand=self.expression(operand),
                prefix=prefix,
                **common,
            )
        if kind == "ternary_expression":
            return t.Conditional(
                condition=self.expression(node.child_by_field_name("condition")),
                then=self.expression(node.child_by_field_name("consequence")),
                otherwise=self.expression(node.child_by_field_name("alternative")),
                **common,
            )
        if kind == "cast_expression":
            return t.Cast(
                type=self.type_ref(node.child_by_field_name("type")),
                expression=self.expression(node.child_by_field_name("value")),
                **common,
            )
        if kind == "instanceof_expression":
            return self._instanceof(node, common)
        if kind == "lambda_expression":
            return self._lambda(node, common)
        if kind == "method_reference":
            parts = _named(node)
            target = parts[0]
            identifier = "new" if _has_token(node, "new") else _text(parts[-1])
            scope = None if target.type in _TYPE_NODES else self.expression(target)
            return t.MethodReference(scope=scope, identifier=identifier, **common)
        if kind == "array_access":
            return t.ArrayAccess(
                array=self.expression(node.child_by_field_name("array")),
                index=self.expression(node.child_by_field_name("index")),
                **common,
            )
        if kind == "array_creation_expression":
            return self._array_creation(node, common)
        if kind == "class_literal":
            return t.ClassLiteral(type=self.type_ref(_named(node)[0]), **common)
        literal = _literal_kind(node)
        if literal is not None:
            return t.Literal(kind=literal, **common)
        return t.Expression(kind=kind, operands=self._children(node), **common)

    def _field_access(self, node, common) -> t.Expression:
        scope = node.child_by_field_name("object")
        field = node.child_by_field_name("field")
        if field.type in ("this", "super"):
            cls = t.ThisExpr if field.type == "this" else t.SuperExpr
            return cls(qualifier=_class_type(_text(scope)), **common)
        return t.FieldAccess(scope=self.expression(scope), name=_text(field), **common)

    def _object_creation(self, node, common) -> t.ObjectCreation:
        scope = None
        for child in node.children:
            if child.type == "new":
                break
            if child.is_named and child.type not in _IGNORED:
                scope = self.expression(child)
        body_node = next((c for c in node.named_children if c.type == "class_body"), None)
        created = self.type_ref(node.child_by_field_name("type"))
        if not isinstance(created, t.ClassType):
            created = t.ClassType(str(created))
        return t.ObjectCreation(
            scope=scope,
            type=created,
            arguments=self._arguments(node.child_by_field_name("arguments")),
            body=self.members(body_node) if body_node is not None else None,
            **common,
        )

    def _instanceof(self, node, common) -> t.InstanceOf:
        expr = self.expression(node.child_by_field_name("left"))
        right = node.child_by_field_name("right")
        name = node.child_by_field_name("name")
        pattern = node.child_by_field_name("pattern")
        type_ref = None
        binding = _text(name) if name is not None else None
        if right is not None:
            type_ref = self.type_ref(right)
        elif pattern is not None:
            type_node = self._first_type(pattern)
            type_ref = self.type_ref(type_node) if type_node is not None else None
            ident = next((c for c in pattern.named_children if c.type == "identifier"), None)
            if ident is not None:
                binding = _text(ident)
        return t.InstanceOf(expression=expr, type=type_ref, binding=binding, **common)

    def _lambda(self, node, common) -> t.Lambda:
        params_node = node.child_by_field_name("parameters")
        params: list[t.Parameter] = []
        if params_node.type == "identifier":
            params = [t.Parameter(name=_text(params_node), position=_position(params_node))]
        elif params_node.type == "inferred_parameters":
            params = [
                t.Parameter(name=_text(c), position=_position(c))
                for c in _named(params_node)
                if c.type == "identifier"
            ]
        else:
            params = self._parameters(params_node)
        body = node.child_by_field_name("body")
        converted = self.node(body)
        return t.Lambda(
            parameters=params,
            body=converted if isinstance(converted, t.Node) else None,
            **common,
        )

    def _array_creation(self, node, common) -> t.ArrayCreation:
        dims = [c for c in _named(node) if c.type == "dimensions_expr"]
        extra = sum(_dimension_count(c) for c in node.named_children if c.type == "dimensions")
        value = node.child_by_field_name("value")
        return t.ArrayCreation(
            type=t.array_of(self.type_ref(node.child_by_field_name("type")), len(dims) + extra),
            dimensions=[self.expression(_named(d)[-1]) for d in dims],
            initializer=self.expression(value) if value is not None else None,
            **common,
        )


def _class_type(dotted: str) -> t.ClassType:
    scope = None
    for segment in dotted.split("."):
        scope = t.ClassType(segment.strip(), scope)
    return scope


def _has_super(node) -> bool:
    return any(c.type == "super" for c in node.children)


def _literal_kind(node) -> str | None:
    kind = node.type
    if kind in _INTEGER_LITERALS:
        return "long" if _text(node)[-1] in "lL" else "int"
    if kind in _FLOAT_LITERALS:
        return "float" if _text(node)[-1] in "fF" else "double"
    if kind in ("true", "false"):
        return "boolean"
    if kind == "character_literal":
        return "char"
    if kind in ("string_literal", "text_block"):
        return "string"
    if kind == "null_literal":
        return "null"
    return None
