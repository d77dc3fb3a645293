"""Language model for parsed Java compilation units.

Type references are frozen values so they can be compared and used as
dictionary keys.  Syntax nodes are compared by identity: two occurrences of
``x`` in a method body are different nodes.  Every node knows its parent,
which is what the access classification and the scope computation walk.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import TypeVar, Union

# ---------------------------------------------------------------------------
# Type references
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrimitiveType:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class VoidType:
    def __str__(self) -> str:
        return "void"


@dataclass(frozen=True)
class VarType:
    """The ``var`` placeholder of an inferred local variable."""

    def __str__(self) -> str:
        return "var"


@dataclass(frozen=True)
class ClassType:
    """A class or interface reference, e.g. ``java.util.Map.Entry<K, V>``.

    ``arguments`` is ``None`` for a raw reference and a (possibly empty)
    tuple when the reference carries type arguments; ``()`` is the diamond.
    """

    name: str
    scope: ClassType | None = None
    arguments: tuple[TypeRef, ...] | None = None

    def __str__(self) -> str:
        text = f"{self.scope}.{self.name}" if self.scope is not None else self.name
        if self.arguments is not None:
            text += "<" + ", ".join(str(a) for a in self.arguments) + ">"
        return text

    @property
    def is_generic(self) -> bool:
        return self.arguments is not None

    @property
    def path(self) -> list[str]:
        """Written name segments, outermost first, without type arguments."""
        prefix = self.scope.path if self.scope is not None else []
        return [*prefix, self.name]

    def raw(self) -> ClassType:
        """The outer generic type: same simple name, no qualifier, no arguments."""
        return ClassType(self.name)

    def unqualified(self) -> ClassType:
        return ClassType(self.name, None, self.arguments)


@dataclass(frozen=True)
class ArrayType:
    component: TypeRef

    def __str__(self) -> str:
        return f"{self.component}[]"

    @property
    def innermost(self) -> TypeRef:
        t: TypeRef = self
        while isinstance(t, ArrayType):
            t = t.component
        return t


@dataclass(frozen=True)
class WildcardType:
    bound: TypeRef | None = None
    is_super: bool = False

    def __str__(self) -> str:
        if self.bound is None:
            return "?"
        return f"? {'super' if self.is_super else 'extends'} {self.bound}"


TypeRef = Union[PrimitiveType, VoidType, VarType, ClassType, ArrayType, WildcardType]


def array_of(component: TypeRef, dimensions: int) -> TypeRef:
    for _ in range(dimensions):
        component = ArrayType(component)
    return component


# ---------------------------------------------------------------------------
# Syntax nodes
# ---------------------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class Node:
    position: tuple[int, int] = (0, 0)
    text: str = field(default="", repr=False)
    parent: Node | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        for child in self.children():
            child.parent = self

    def children(self) -> Iterator[Node]:
        for f in fields(self):
            if f.name == "parent":
                continue
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, Node):
                        yield item

    def ancestors(self) -> Iterator[Node]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def line(self) -> int:
        """1-based source line."""
        return self.position[0] + 1


N = TypeVar("N", bound=Node)


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of *node* and all of its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.children())))


def find_all(node: Node, cls: type[N] | tuple[type[N], ...]) -> list[N]:
    return [n for n in walk(node) if isinstance(n, cls)]


def enclosing(node: Node, cls: type[N] | tuple[type[N], ...]) -> N | None:
    for ancestor in node.ancestors():
        if isinstance(ancestor, cls):
            return ancestor
    return None


# -- expressions -------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class Expression(Node):
    """Base class, and the generic node for expressions without a model."""

    kind: str = ""
    operands: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class Name(Expression):
    identifier: str


@dataclass(eq=False, kw_only=True)
class FieldAccess(Expression):
    scope: Expression
    name: str


@dataclass(eq=False, kw_only=True)
class MethodCall(Expression):
    scope: Expression | None = None
    name: str
    arguments: list[Expression] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class ObjectCreation(Expression):
    scope: Expression | None = None
    type: ClassType
    arguments: list[Expression] = field(default_factory=list)
    body: list[Node] | None = None


@dataclass(eq=False, kw_only=True)
class Assign(Expression):
    target: Expression
    operator: str = "="
    value: Expression


INCREMENT_OPERATORS = frozenset({"++", "--"})


@dataclass(eq=False, kw_only=True)
class Unary(Expression):
    operator: str
    operand: Expression
    prefix: bool = True

    @property
    def is_increment(self) -> bool:
        return self.operator in INCREMENT_OPERATORS


@dataclass(eq=False, kw_only=True)
class Binary(Expression):
    left: Expression
    operator: str
    right: Expression


@dataclass(eq=False, kw_only=True)
class Conditional(Expression):
    condition: Expression
    then: Expression
    otherwise: Expression


@dataclass(eq=False, kw_only=True)
class Enclosed(Expression):
    inner: Expression


@dataclass(eq=False, kw_only=True)
class Lambda(Expression):
    parameters: list[Parameter] = field(default_factory=list)
    body: Node | None = None


@dataclass(eq=False, kw_only=True)
class MethodReference(Expression):
    scope: Expression | None = None
    identifier: str


@dataclass(eq=False, kw_only=True)
class Literal(Expression):
    """``kind`` is one of int, long, float, double, boolean, char, string, null."""


@dataclass(eq=False, kw_only=True)
class ThisExpr(Expression):
    qualifier: ClassType | None = None


@dataclass(eq=False, kw_only=True)
class SuperExpr(Expression):
    qualifier: ClassType | None = None


@dataclass(eq=False, kw_only=True)
class Cast(Expression):
    type: TypeRef
    expression: Expression


@dataclass(eq=False, kw_only=True)
class InstanceOf(Expression):
    expression: Expression
    type: TypeRef | None = None
    binding: str | None = None


@dataclass(eq=False, kw_only=True)
class ArrayAccess(Expression):
    array: Expression
    index: Expression


@dataclass(eq=False, kw_only=True)
class ArrayCreation(Expression):
    type: TypeRef
    dimensions: list[Expression] = field(default_factory=list)
    initializer: Expression | None = None


@dataclass(eq=False, kw_only=True)
class ClassLiteral(Expression):
    type: TypeRef


def unwrap(expr: Expression) -> Expression:
    """Strip any number of redundant parentheses."""
    while isinstance(expr, Enclosed):
        expr = expr.inner
    return expr


# -- statements ----------------------------------------------------------------


@dataclass(eq=False, kw_only=True)
class Statement(Node):
    """Generic statement; ``kind`` is the grammar name (``if_statement``...)."""

    kind: str = ""
    body: list[Node] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class Block(Statement):
    kind: str = "block"


@dataclass(eq=False, kw_only=True)
class LocalVariableDeclaration(Statement):
    kind: str = "local_variable_declaration"
    modifiers: frozenset[str] = frozenset()
    type: TypeRef
    variables: list[VariableDeclarator] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class LocalClassDeclaration(Statement):
    kind: str = "local_class_declaration"
    declaration: TypeDeclaration


@dataclass(eq=False, kw_only=True)
class ExplicitConstructorInvocation(Statement):
    kind: str = "explicit_constructor_invocation"
    is_this: bool
    scope: Expression | None = None
    arguments: list[Expression] = field(default_factory=list)


# -- declarations ----------------------------------------------------------------


class DeclarationKind(enum.Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION = "annotation"


@dataclass(eq=False, kw_only=True)
class Parameter(Node):
    name: str
    type: TypeRef | None = None
    is_varargs: bool = False
    modifiers: frozenset[str] = frozenset()

    @property
    def declared_type(self) -> str:
        """Type as written, with ``...`` for varargs."""
        text = str(self.type) if self.type is not None else ""
        return text + "..." if self.is_varargs else text


@dataclass(eq=False, kw_only=True)
class VariableDeclarator(Node):
    name: str
    type: TypeRef
    initializer: Expression | None = None


@dataclass(eq=False, kw_only=True)
class FieldDeclaration(Node):
    modifiers: frozenset[str] = frozenset()
    type: TypeRef
    variables: list[VariableDeclarator] = field(default_factory=list)


@dataclass(eq=False, kw_only=True)
class MethodDeclaration(Node):
    name: str
    modifiers: frozenset[str] = frozenset()
    type_parameters: list[str] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    return_type: TypeRef
    body: Block | None = None


@dataclass(eq=False, kw_only=True)
class ConstructorDeclaration(Node):
    name: str
    modifiers: frozenset[str] = frozenset()
    type_parameters: list[str] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    body: Block | None = None


@dataclass(eq=False, kw_only=True)
class CompactConstructorDeclaration(Node):
    name: str
    modifiers: frozenset[str] = frozenset()
    body: Block | None = None


@dataclass(eq=False, kw_only=True)
class InitializerDeclaration(Node):
    is_static: bool = False
    body: Block | None = None


@dataclass(eq=False, kw_only=True)
class EnumConstant(Node):
    name: str
    arguments: list[Expression] = field(default_factory=list)
    body: list[Node] | None = None


@dataclass(eq=False, kw_only=True)
class TypeDeclaration(Node):
    kind: DeclarationKind
    name: str
    modifiers: frozenset[str] = frozenset()
    type_parameters: list[str] = field(default_factory=list)
    extended_types: list[ClassType] = field(default_factory=list)
    implemented_types: list[ClassType] = field(default_factory=list)
    record_components: list[Parameter] = field(default_factory=list)
    enum_constants: list[EnumConstant] = field(default_factory=list)
    members: list[Node] = field(default_factory=list)

    @property
    def is_interface(self) -> bool:
        return self.kind is DeclarationKind.INTERFACE

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def fields(self) -> list[FieldDeclaration]:
        return [m for m in self.members if isinstance(m, FieldDeclaration)]

    @property
    def methods(self) -> list[MethodDeclaration]:
        return [m for m in self.members if isinstance(m, MethodDeclaration)]

    @property
    def constructors(self) -> list[ConstructorDeclaration]:
        return [m for m in self.members if isinstance(m, ConstructorDeclaration)]

    @property
    def compact_constructors(self) -> list[CompactConstructorDeclaration]:
        return [
            m for m in self.members if isinstance(m, CompactConstructorDeclaration)
        ]

    @property
    def member_types(self) -> list[TypeDeclaration]:
        return [m for m in self.members if isinstance(m, TypeDeclaration)]


@dataclass(eq=False, kw_only=True)
class ImportDeclaration(Node):
    name: str
    is_static: bool = False
    is_asterisk: bool = False


@dataclass(eq=False, kw_only=True)
class CompilationUnit(Node):
    package: str = ""
    imports: list[ImportDeclaration] = field(default_factory=list)
    types: list[TypeDeclaration] = field(default_factory=list)


CallableDeclaration = Union[
    MethodDeclaration, ConstructorDeclaration, CompactConstructorDeclaration
]


# ---------------------------------------------------------------------------
# Scope helpers
# ---------------------------------------------------------------------------


def _signature(callable_decl: MethodDeclaration | ConstructorDeclaration) -> str:
    return (
        callable_decl.name
        + "("
        + ",".join(str(p.type) for p in callable_decl.parameters)
        + ")"
    )


def fully_qualified_scope(node: Node) -> str:
    """Dot-joined chain of enclosing package, type and routine names."""
    parts: list[str] = []
    for ancestor in node.ancestors():
        if isinstance(ancestor, TypeDeclaration):
            parts.append(ancestor.name)
        elif isinstance(ancestor, (MethodDeclaration, ConstructorDeclaration)):
            parts.append(_signature(ancestor))
        elif isinstance(ancestor, CompactConstructorDeclaration):
            parts.append("CompactConstructor")
        elif isinstance(ancestor, InitializerDeclaration):
            prefix = "StaticInitBlock" if ancestor.is_static else "InitBlock"
            parts.append(f"{prefix}-L{ancestor.line}")
        elif isinstance(ancestor, CompilationUnit) and ancestor.package:
            parts.append(ancestor.package)
    return ".".join(reversed(parts))


def join_name(scope: str, name: str) -> str:
    return f"{scope}.{name}" if scope else name


def canonical_name(decl: TypeDeclaration) -> str:
    return join_name(fully_qualified_scope(decl), decl.name)


def is_local_type(decl: TypeDeclaration) -> bool:
    """True for a type declared as a statement inside a block."""
    return isinstance(decl.parent, Statement)


def enclosing_type(node: Node) -> TypeDeclaration | None:
    return enclosing(node, TypeDeclaration)


def compilation_unit(node: Node) -> CompilationUnit | None:
    if isinstance(node, CompilationUnit):
        return node
    return enclosing(node, CompilationUnit)
