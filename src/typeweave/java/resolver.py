"""Best-effort symbol resolution over a parsed Java project.

The resolver knows every declaration of the project's compilation units and
the names (only the names) of library and common JDK types.  A call on an
external type resolves to that type without parameter metadata or return
type; its members are never looked up.  Every public operation
returns a :class:`Resolution`; an expected "could not resolve" outcome is a
failed resolution carrying a reason, never an exception.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Generic, TypeVar, Union

from typeweave.java import jdk
from typeweave.java import tree as t
from typeweave.java.library import LibraryIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Resolution(Generic[T]):
    value: T | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: T) -> Resolution[T]:
        return cls(value)

    @classmethod
    def failure(cls, reason: str) -> Resolution[T]:
        return cls(None, reason)


# ---------------------------------------------------------------------------
# Resolved types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectType:
    declaration: t.TypeDeclaration
    arguments: tuple[ResolvedType, ...] | None = None


@dataclass(frozen=True)
class ExternalType:
    qualified_name: str
    arguments: tuple[ResolvedType, ...] | None = None


@dataclass(frozen=True)
class BuiltinType:
    """A primitive type or ``void``."""

    name: str


@dataclass(frozen=True)
class ArrayOf:
    component: ResolvedType


@dataclass(frozen=True)
class TypeVariable:
    name: str


@dataclass(frozen=True)
class NullType:
    pass


ResolvedType = Union[ProjectType, ExternalType, BuiltinType, ArrayOf, TypeVariable, NullType]

STRING = ExternalType("java.lang.String")
BOOLEAN = BuiltinType("boolean")
INT = BuiltinType("int")

_NUMERIC_RANK = {"byte": 0, "short": 1, "char": 1, "int": 2, "long": 3, "float": 4, "double": 5}

_BOXES = {
    "java.lang.Byte": "byte",
    "java.lang.Short": "short",
    "java.lang.Character": "char",
    "java.lang.Integer": "int",
    "java.lang.Long": "long",
    "java.lang.Float": "float",
    "java.lang.Double": "double",
    "java.lang.Boolean": "boolean",
}

_COMPARISONS = {"==", "!=", "<", ">", "<=", ">=", "&&", "||"}
_SHIFTS = {"<<", ">>", ">>>"}


def describe(resolved: ResolvedType) -> str:
    """Render a resolved type with fully qualified names."""
    if isinstance(resolved, ProjectType):
        return t.canonical_name(resolved.declaration) + _describe_arguments(resolved.arguments)
    if isinstance(resolved, ExternalType):
        return resolved.qualified_name + _describe_arguments(resolved.arguments)
    if isinstance(resolved, ArrayOf):
        return describe(resolved.component) + "[]"
    if isinstance(resolved, (BuiltinType, TypeVariable)):
        return resolved.name
    return "null"


def _describe_arguments(arguments: tuple[ResolvedType, ...] | None) -> str:
    if not arguments:
        return ""
    return "<" + ", ".join(describe(a) for a in arguments) + ">"


def _unboxed(resolved: ResolvedType | None) -> str | None:
    if isinstance(resolved, BuiltinType):
        return resolved.name
    if isinstance(resolved, ExternalType):
        return _BOXES.get(resolved.qualified_name)
    return None


# ---------------------------------------------------------------------------
# Values and routines
# ---------------------------------------------------------------------------


class BindingKind(enum.Enum):
    FIELD = "field"
    ENUM_CONSTANT = "enum_constant"
    PARAMETER = "parameter"
    LOCAL = "local"


@dataclass(frozen=True)
class ValueBinding:
    """What a simple name refers to."""

    kind: BindingKind
    name: str
    type: t.TypeRef | None
    context: t.Node
    owner: t.TypeDeclaration | None = None
    initializer: t.Expression | None = None

    @property
    def is_field(self) -> bool:
        return self.kind is BindingKind.FIELD


@dataclass(frozen=True)
class ResolvedParameter:
    name: str | None
    type: ResolvedType | None
    is_varargs: bool = False


@dataclass(frozen=True)
class ResolvedRoutine:
    declaring_type: str
    name: str
    parameters: tuple[ResolvedParameter, ...] = ()
    return_type: ResolvedType | None = None
    is_constructor: bool = False


@dataclass(frozen=True)
class _Candidate:
    owner: t.TypeDeclaration
    name: str
    parameters: tuple[t.Parameter, ...]
    return_type: t.TypeRef | None
    context: t.Node

    @property
    def is_varargs(self) -> bool:
        return bool(self.parameters) and self.parameters[-1].is_varargs

    def accepts(self, count: int) -> bool:
        if self.is_varargs:
            return count >= len(self.parameters) - 1
        return count == len(self.parameters)

    @property
    def signature(self) -> tuple[str, ...]:
        return tuple(p.declared_type for p in self.parameters)


def _parameter_type(param: t.Parameter) -> t.TypeRef | None:
    if param.type is not None and param.is_varargs:
        return t.ArrayType(param.type)
    return param.type


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class ProjectResolver:
    """Symbol table over a set of compilation units."""

    def __init__(
        self,
        units: Iterable[t.CompilationUnit] = (),
        library: LibraryIndex | None = None,
    ):
        self.library = library if library is not None else LibraryIndex()
        self._by_qualified: dict[str, t.TypeDeclaration] = {}
        self._supertypes: dict[t.TypeDeclaration, list[t.TypeDeclaration]] = {}
        for unit in units:
            self.add_unit(unit)

    def add_unit(self, unit: t.CompilationUnit) -> None:
        for decl in unit.types:
            self._index(decl, unit.package)

    def _index(self, decl: t.TypeDeclaration, prefix: str) -> None:
        qualified = t.join_name(prefix, decl.name)
        self._by_qualified.setdefault(qualified, decl)
        for member in decl.member_types:
            self._index(member, qualified)

    def __len__(self) -> int:
        return len(self._by_qualified)

    # -- types ------------------------------------------------------------

    def resolve_type(
        self, type_ref: t.TypeRef, context: t.Node
    ) -> Resolution[ResolvedType]:
        if isinstance(type_ref, t.PrimitiveType):
            return Resolution.success(BuiltinType(type_ref.name))
        if isinstance(type_ref, t.VoidType):
            return Resolution.success(BuiltinType("void"))
        if isinstance(type_ref, t.VarType):
            return Resolution.failure("'var' has no declared type")
        if isinstance(type_ref, t.ArrayType):
            component = self.resolve_type(type_ref.component, context)
            if not component.ok:
                return component
            return Resolution.success(ArrayOf(component.value))
        if isinstance(type_ref, t.WildcardType):
            if type_ref.bound is None or type_ref.is_super:
                return Resolution.success(ExternalType("java.lang.Object"))
            return self.resolve_type(type_ref.bound, context)

        base = self._lookup_class(type_ref, context)
        if not base.ok or type_ref.arguments is None:
            return base
        arguments = []
        for argument in type_ref.arguments:
            resolved = self.resolve_type(argument, context)
            if not resolved.ok:
                return resolved
            arguments.append(resolved.value)
        if isinstance(base.value, (ProjectType, ExternalType)):
            return Resolution.success(replace(base.value, arguments=tuple(arguments)))
        return base

    def type_scope(self, type_ref: t.TypeRef, context: t.Node) -> Resolution[str]:
        """Scope of the declaration a class type refers to.

        For a project type this is its fully-qualified scope; for an external
        type the qualified name minus the simple name.
        """
        if not isinstance(type_ref, t.ClassType):
            return Resolution.failure(f"{type_ref} is not a class type")
        resolved = self._lookup_class(type_ref, context)
        if not resolved.ok:
            return Resolution.failure(resolved.reason)
        value = resolved.value
        if isinstance(value, ProjectType):
            return Resolution.success(t.fully_qualified_scope(value.declaration))
        if isinstance(value, ExternalType):
            return Resolution.success(value.qualified_name.rpartition(".")[0])
        return Resolution.failure(f"{type_ref} is a type variable")

    def describe_type(self, type_ref: t.TypeRef, context: t.Node) -> Resolution[str]:
        resolved = self.resolve_type(type_ref, context)
        if not resolved.ok:
            return Resolution.failure(resolved.reason)
        return Resolution.success(describe(resolved.value))

    def _lookup_class(self, ref: t.ClassType, context: t.Node) -> Resolution[ResolvedType]:
        if ref.scope is None:
            found = self._lookup_simple(ref.name, context)
            if found is None:
                return Resolution.failure(f"cannot resolve type {ref.name}")
            return Resolution.success(found)

        outer = self._lookup_class(ref.scope, context)
        if outer.ok:
            if isinstance(outer.value, ProjectType):
                member = self._member_type(outer.value.declaration, ref.name)
                if member is not None:
                    return Resolution.success(ProjectType(member))
            elif isinstance(outer.value, ExternalType):
                nested = f"{outer.value.qualified_name}.{ref.name}"
                # without the class file, trust the naming convention for nested types
                if self._qualified(nested) is not None or ref.name[:1].isupper():
                    return Resolution.success(ExternalType(nested))
        qualified = ".".join(ref.path)
        found = self._qualified(qualified)
        if found is None:
            return Resolution.failure(f"cannot resolve type {qualified}")
        return Resolution.success(found)

    def _qualified(self, name: str) -> ResolvedType | None:
        decl = self._by_qualified.get(name)
        if decl is not None:
            return ProjectType(decl)
        if name in self.library or jdk.is_known(name):
            return ExternalType(name)
        return None

    def _lookup_simple(self, name: str, context: t.Node) -> ResolvedType | None:
        child: t.Node | None = None
        for node in [context, *context.ancestors()]:
            if isinstance(node, t.TypeDeclaration):
                if node.name == name:
                    return ProjectType(node)
                if name in node.type_parameters:
                    return TypeVariable(name)
                if child is not None:
                    member = self._member_type(node, name)
                    if member is not None:
                        return ProjectType(member)
            elif isinstance(node, (t.MethodDeclaration, t.ConstructorDeclaration)):
                if name in node.type_parameters:
                    return TypeVariable(name)
            elif isinstance(node, t.ObjectCreation) and node.body and child in node.body:
                for member in node.body:
                    if isinstance(member, t.TypeDeclaration) and member.name == name:
                        return ProjectType(member)
            elif isinstance(node, t.Statement) and child is not None:
                for sibling in _preceding(node, child):
                    if (
                        isinstance(sibling, t.LocalClassDeclaration)
                        and sibling.declaration.name == name
                    ):
                        return ProjectType(sibling.declaration)
            elif isinstance(node, t.CompilationUnit):
                return self._lookup_in_unit(name, node)
            child = node
        qualified = jdk.java_lang(name)
        return ExternalType(qualified) if qualified else None

    def _lookup_in_unit(self, name: str, unit: t.CompilationUnit) -> ResolvedType | None:
        for decl in unit.types:
            if decl.name == name:
                return ProjectType(decl)

        for imp in unit.imports:
            if imp.is_asterisk or imp.name.rpartition(".")[2] != name:
                continue
            found = self._qualified(imp.name)
            if found is not None:
                return found
            if not imp.is_static:
                # a single-type import names a type even if we cannot see it
                return ExternalType(imp.name)

        found = self._qualified(t.join_name(unit.package, name))
        if found is not None:
            return found

        for imp in unit.imports:
            if not imp.is_asterisk:
                continue
            found = self._qualified(f"{imp.name}.{name}")
            if found is not None:
                return found
            container = self._by_qualified.get(imp.name)
            if container is not None:
                member = self._member_type(container, name)
                if member is not None:
                    return ProjectType(member)

        qualified = jdk.java_lang(name)
        return ExternalType(qualified) if qualified else None

    def _member_type(
        self,
        decl: t.TypeDeclaration,
        name: str,
        seen: set[t.TypeDeclaration] | None = None,
    ) -> t.TypeDeclaration | None:
        seen = seen if seen is not None else set()
        if decl in seen:
            return None
        seen.add(decl)
        for member in decl.member_types:
            if member.name == name:
                return member
        for parent in self.supertypes(decl):
            found = self._member_type(parent, name, seen)
            if found is not None:
                return found
        return None

    def supertypes(self, decl: t.TypeDeclaration) -> list[t.TypeDeclaration]:
        """Direct supertypes of *decl* declared in the project."""
        cached = self._supertypes.get(decl)
        if cached is not None:
            return cached
        # placeholder breaks cycles in malformed hierarchies
        self._supertypes[decl] = []
        result = []
        for ref in [*decl.extended_types, *decl.implemented_types]:
            resolved = self._lookup_class(ref, decl)
            if resolved.ok and isinstance(resolved.value, ProjectType):
                result.append(resolved.value.declaration)
        self._supertypes[decl] = result
        return result

    def _superclass(self, decl: t.TypeDeclaration) -> Resolution[ResolvedType]:
        if decl.kind is t.DeclarationKind.CLASS and decl.extended_types:
            return self.resolve_type(decl.extended_types[0], decl)
        if decl.kind is t.DeclarationKind.ENUM:
            return Resolution.success(ExternalType("java.lang.Enum"))
        if decl.kind is t.DeclarationKind.RECORD:
            return Resolution.success(ExternalType("java.lang.Record"))
        return Resolution.success(ExternalType("java.lang.Object"))

    # -- names ------------------------------------------------------------

    def resolve_name(self, name: t.Name) -> Resolution[ValueBinding]:
        binding = self._lookup_value(name.identifier, name)
        if binding is None:
            return Resolution.failure(f"cannot resolve symbol {name.identifier}")
        return Resolution.success(binding)

    def _lookup_value(self, identifier: str, context: t.Node) -> ValueBinding | None:
        child = context
        for node in context.ancestors():
            binding = self._value_in(node, child, identifier)
            if binding is not None:
                return binding
            child = node
        return None

    def _value_in(
        self, node: t.Node, child: t.Node, identifier: str
    ) -> ValueBinding | None:
        if isinstance(node, t.TypeDeclaration):
            return self._field(node, identifier)
        if isinstance(node, (t.MethodDeclaration, t.ConstructorDeclaration, t.Lambda)):
            for param in node.parameters:
                if param.name == identifier:
                    return ValueBinding(
                        BindingKind.PARAMETER, identifier, _parameter_type(param), param
                    )
            return None
        if isinstance(node, t.CompactConstructorDeclaration):
            record = t.enclosing_type(node)
            for component in record.record_components if record else ():
                if component.name == identifier:
                    return ValueBinding(
                        BindingKind.PARAMETER, identifier, _parameter_type(component), component
                    )
            return None
        if isinstance(node, t.ObjectCreation) and node.body and child in node.body:
            for member in node.body:
                if isinstance(member, t.FieldDeclaration):
                    for var in member.variables:
                        if var.name == identifier:
                            return ValueBinding(
                                BindingKind.FIELD, identifier, var.type, var, t.enclosing_type(node)
                            )
            created = self._lookup_class(node.type, node)
            if created.ok and isinstance(created.value, ProjectType):
                return self._field(created.value.declaration, identifier)
            return None
        if isinstance(node, t.CompilationUnit):
            return self._static_import_value(node, identifier)
        if isinstance(node, t.LocalVariableDeclaration):
            for var in node.variables:
                if var is child:
                    break
                if var.name == identifier:
                    return _local(var)
            return None

        for sibling in _preceding(node, child):
            if isinstance(sibling, t.LocalVariableDeclaration):
                for var in sibling.variables:
                    if var.name == identifier:
                        return _local(var)
            elif isinstance(sibling, t.Expression):
                for pattern in t.find_all(sibling, t.InstanceOf):
                    if pattern.binding == identifier:
                        return ValueBinding(BindingKind.LOCAL, identifier, pattern.type, pattern)
        return None

    def _field(
        self,
        decl: t.TypeDeclaration,
        identifier: str,
        seen: set[t.TypeDeclaration] | None = None,
    ) -> ValueBinding | None:
        seen = seen if seen is not None else set()
        if decl in seen:
            return None
        seen.add(decl)
        for field_decl in decl.fields:
            for var in field_decl.variables:
                if var.name == identifier:
                    return ValueBinding(BindingKind.FIELD, identifier, var.type, var, decl)
        if decl.kind is t.DeclarationKind.RECORD:
            for component in decl.record_components:
                if component.name == identifier:
                    return ValueBinding(
                        BindingKind.FIELD, identifier, _parameter_type(component), component, decl
                    )
        for constant in decl.enum_constants:
            if constant.name == identifier:
                return ValueBinding(
                    BindingKind.ENUM_CONSTANT, identifier, t.ClassType(decl.name), decl, decl
                )
        for parent in self.supertypes(decl):
            found = self._field(parent, identifier, seen)
            if found is not None:
                return found
        return None

    def _static_import_value(
        self, unit: t.CompilationUnit, identifier: str
    ) -> ValueBinding | None:
        for imp in unit.imports:
            if not imp.is_static:
                continue
            if imp.is_asterisk:
                container = self._by_qualified.get(imp.name)
            elif imp.name.rpartition(".")[2] == identifier:
                container = self._by_qualified.get(imp.name.rpartition(".")[0])
            else:
                continue
            if container is not None:
                found = self._field(container, identifier)
                if found is not None:
                    return found
        return None

    # -- expressions --------------------------------------------------------

    def expression_type(self, expr: t.Expression) -> Resolution[ResolvedType]:
        expr = t.unwrap(expr)
        if isinstance(expr, t.Literal):
            if expr.kind == "string":
                return Resolution.success(STRING)
            if expr.kind == "null":
                return Resolution.success(NullType())
            return Resolution.success(BuiltinType(expr.kind))
        if isinstance(expr, t.Name):
            return self._name_type(expr)
        if isinstance(expr, t.ThisExpr):
            return self._this_type(expr)
        if isinstance(expr, t.SuperExpr):
            current = self._this_type(expr)
            if not current.ok or not isinstance(current.value, ProjectType):
                return Resolution.failure("super outside a project type")
            return self._superclass(current.value.declaration)
        if isinstance(expr, t.FieldAccess):
            return self._field_access_type(expr)
        if isinstance(expr, t.MethodCall):
            routine = self.resolve_method_call(expr)
            if not routine.ok:
                return Resolution.failure(routine.reason)
            if routine.value.return_type is None:
                return Resolution.failure(f"cannot resolve return type of {expr.name}")
            return Resolution.success(routine.value.return_type)
        if isinstance(expr, (t.ObjectCreation, t.Cast, t.ArrayCreation)):
            return self.resolve_type(expr.type, expr)
        if isinstance(expr, t.Assign):
            return self.expression_type(expr.target)
        if isinstance(expr, t.Conditional):
            then = self.expression_type(expr.then)
            if then.ok and not isinstance(then.value, NullType):
                return then
            return self.expression_type(expr.otherwise)
        if isinstance(expr, t.InstanceOf):
            return Resolution.success(BOOLEAN)
        if isinstance(expr, t.Binary):
            return self._binary_type(expr)
        if isinstance(expr, t.Unary):
            return self._unary_type(expr)
        if isinstance(expr, t.ArrayAccess):
            array = self.expression_type(expr.array)
            if array.ok and isinstance(array.value, ArrayOf):
                return Resolution.success(array.value.component)
            return Resolution.failure(f"{expr.array.text} is not an array")
        if isinstance(expr, t.ClassLiteral):
            target = self.resolve_type(expr.type, expr)
            arguments = (target.value,) if target.ok else None
            return Resolution.success(ExternalType("java.lang.Class", arguments))
        return Resolution.failure(f"cannot compute the type of {expr.text or expr.kind}")

    def _name_type(self, name: t.Name) -> Resolution[ResolvedType]:
        binding = self.resolve_name(name)
        if not binding.ok:
            return Resolution.failure(binding.reason)
        return self.binding_type(binding.value)

    def binding_type(self, binding: ValueBinding) -> Resolution[ResolvedType]:
        if binding.kind is BindingKind.ENUM_CONSTANT and binding.owner is not None:
            return Resolution.success(ProjectType(binding.owner))
        if binding.type is None or isinstance(binding.type, t.VarType):
            if binding.initializer is not None:
                return self.expression_type(binding.initializer)
            return Resolution.failure(f"{binding.name} has an inferred type")
        return self.resolve_type(binding.type, binding.context)

    def _this_type(self, expr: t.ThisExpr | t.SuperExpr) -> Resolution[ResolvedType]:
        if expr.qualifier is not None:
            return self._lookup_class(expr.qualifier, expr)
        child: t.Node = expr
        for node in expr.ancestors():
            if isinstance(node, t.TypeDeclaration):
                return Resolution.success(ProjectType(node))
            if isinstance(node, t.ObjectCreation) and node.body and child in node.body:
                return self.resolve_type(node.type, node)
            child = node
        return Resolution.failure("'this' outside a type")

    def _receiver_type(self, scope: t.Expression) -> Resolution[ResolvedType]:
        """Type of a call or field-access receiver, which may be a type name."""
        scope = t.unwrap(scope)
        value = self.expression_type(scope)
        if value.ok:
            return value
        if isinstance(scope, (t.Name, t.FieldAccess)):
            as_type = self._lookup_class(_dotted_type(scope), scope)
            if as_type.ok:
                return as_type
        return value

    def _field_access_type(self, expr: t.FieldAccess) -> Resolution[ResolvedType]:
        receiver = self._receiver_type(expr.scope)
        if not receiver.ok:
            return receiver
        value = receiver.value
        if isinstance(value, ArrayOf) and expr.name == "length":
            return Resolution.success(INT)
        if not isinstance(value, ProjectType):
            return Resolution.failure(f"{describe(value)} is outside the project")
        binding = self._field(value.declaration, expr.name)
        if binding is None:
            return Resolution.failure(f"no field {expr.name} in {describe(value)}")
        return self.binding_type(binding)

    def _binary_type(self, expr: t.Binary) -> Resolution[ResolvedType]:
        if expr.operator in _COMPARISONS:
            return Resolution.success(BOOLEAN)
        left = self.expression_type(expr.left)
        right = self.expression_type(expr.right)
        if expr.operator == "+" and STRING in (left.value, right.value):
            return Resolution.success(STRING)
        if not left.ok:
            return left
        if expr.operator in _SHIFTS:
            return _promoted(left.value)
        if not right.ok:
            return right
        left_name, right_name = _unboxed(left.value), _unboxed(right.value)
        if left_name == right_name == "boolean":
            return Resolution.success(BOOLEAN)
        if left_name in _NUMERIC_RANK and right_name in _NUMERIC_RANK:
            widest = max(left_name, right_name, key=_NUMERIC_RANK.__getitem__)
            return Resolution.success(BuiltinType(widest if _NUMERIC_RANK[widest] > 2 else "int"))
        return Resolution.failure(f"cannot compute the type of {expr.text}")

    def _unary_type(self, expr: t.Unary) -> Resolution[ResolvedType]:
        if expr.operator == "!":
            return Resolution.success(BOOLEAN)
        operand = self.expression_type(expr.operand)
        if not operand.ok or expr.is_increment:
            return operand
        return _promoted(operand.value)

    # -- routines -----------------------------------------------------------

    def resolve_method_call(self, call: t.MethodCall) -> Resolution[ResolvedRoutine]:
        arguments: tuple[ResolvedType, ...] | None = None
        if call.scope is None:
            candidates = self._unqualified_methods(call)
        else:
            receiver = self._receiver_type(call.scope)
            if not receiver.ok:
                return Resolution.failure(receiver.reason)
            value = receiver.value
            if isinstance(value, ExternalType):
                return Resolution.success(
                    _external_routine(
                        value.qualified_name,
                        call.name,
                        call.arguments,
                        return_type=_jdk_return(value, call.name),
                    )
                )
            if not isinstance(value, ProjectType):
                return Resolution.failure(f"cannot call {call.name} on {describe(value)}")
            candidates = self._methods(value.declaration, call.name)
            arguments = value.arguments
        chosen = self._select(candidates, call.arguments, f"method {call.name}")
        if not chosen.ok:
            return Resolution.failure(chosen.reason)
        return Resolution.success(self._routine(chosen.value, arguments))

    def resolve_object_creation(
        self, expr: t.ObjectCreation
    ) -> Resolution[ResolvedRoutine]:
        created = self._lookup_class(expr.type, expr)
        if not created.ok and expr.scope is not None:
            outer = self.expression_type(expr.scope)
            if outer.ok and isinstance(outer.value, ProjectType):
                member = self._member_type(outer.value.declaration, expr.type.name)
                if member is not None:
                    created = Resolution.success(ProjectType(member))
        if not created.ok:
            return Resolution.failure(created.reason)
        if isinstance(created.value, ExternalType):
            qualified = created.value.qualified_name
            return Resolution.success(
                _external_routine(qualified, expr.type.name, expr.arguments, constructor=True)
            )
        if not isinstance(created.value, ProjectType):
            return Resolution.failure(f"cannot instantiate {describe(created.value)}")
        decl = created.value.declaration
        chosen = self._select(
            self._constructors(decl), expr.arguments, f"constructor {decl.name}"
        )
        if not chosen.ok:
            return Resolution.failure(chosen.reason)
        return Resolution.success(self._routine(chosen.value, None, constructor=True))

    def resolve_explicit_invocation(
        self, stmt: t.ExplicitConstructorInvocation
    ) -> Resolution[ResolvedRoutine]:
        owner = t.enclosing_type(stmt)
        if owner is None:
            return Resolution.failure("constructor invocation outside a type")
        if stmt.is_this:
            target = owner
        else:
            parent = self._superclass(owner)
            if not parent.ok:
                return Resolution.failure(parent.reason)
            if isinstance(parent.value, ExternalType):
                qualified = parent.value.qualified_name
                return Resolution.success(
                    _external_routine(
                        qualified, qualified.rpartition(".")[2], stmt.arguments, constructor=True
                    )
                )
            if not isinstance(parent.value, ProjectType):
                return Resolution.failure(f"cannot extend {describe(parent.value)}")
            target = parent.value.declaration
        keyword = "this" if stmt.is_this else "super"
        chosen = self._select(self._constructors(target), stmt.arguments, f"{keyword}(...)")
        if not chosen.ok:
            return Resolution.failure(chosen.reason)
        return Resolution.success(self._routine(chosen.value, None, constructor=True))

    def _unqualified_methods(self, call: t.MethodCall) -> list[_Candidate]:
        child: t.Node = call
        for node in call.ancestors():
            candidates: list[_Candidate] = []
            if isinstance(node, t.TypeDeclaration):
                candidates = self._methods(node, call.name)
            elif isinstance(node, t.ObjectCreation) and node.body and child in node.body:
                owner = t.enclosing_type(node)
                for member in node.body:
                    if isinstance(member, t.MethodDeclaration) and member.name == call.name and owner:
                        candidates.append(_method_candidate(owner, member))
                created = self._lookup_class(node.type, node)
                if created.ok and isinstance(created.value, ProjectType):
                    candidates.extend(self._methods(created.value.declaration, call.name))
            elif isinstance(node, t.CompilationUnit):
                candidates = self._static_import_methods(node, call.name)
            if candidates:
                return candidates
            child = node
        return []

    def _static_import_methods(self, unit: t.CompilationUnit, name: str) -> list[_Candidate]:
        result: list[_Candidate] = []
        for imp in unit.imports:
            if not imp.is_static:
                continue
            if imp.is_asterisk:
                container = self._by_qualified.get(imp.name)
            elif imp.name.rpartition(".")[2] == name:
                container = self._by_qualified.get(imp.name.rpartition(".")[0])
            else:
                continue
            if container is not None:
                result.extend(self._methods(container, name))
        return result

    def _methods(
        self,
        decl: t.TypeDeclaration,
        name: str,
        seen: set[t.TypeDeclaration] | None = None,
    ) -> list[_Candidate]:
        """Methods named *name* visible in *decl*, most derived first."""
        seen = seen if seen is not None else set()
        if decl in seen:
            return []
        seen.add(decl)
        result = [_method_candidate(decl, m) for m in decl.methods if m.name == name]
        result.extend(self._implicit_methods(decl, name, result))
        for parent in self.supertypes(decl):
            signatures = {c.signature for c in result}
            result.extend(
                c for c in self._methods(parent, name, seen) if c.signature not in signatures
            )
        return result

    def _implicit_methods(
        self, decl: t.TypeDeclaration, name: str, explicit: list[_Candidate]
    ) -> list[_Candidate]:
        signatures = {c.signature for c in explicit}
        result = []
        if decl.kind is t.DeclarationKind.RECORD and () not in signatures:
            for component in decl.record_components:
                if component.name == name:
                    result.append(
                        _Candidate(decl, name, (), _parameter_type(component), component)
                    )
        if decl.kind is t.DeclarationKind.ENUM:
            self_type = t.ClassType(decl.name)
            if name == "values" and () not in signatures:
                result.append(_Candidate(decl, name, (), t.ArrayType(self_type), decl))
            elif name == "valueOf" and ("String",) not in signatures:
                param = t.Parameter(name="name", type=t.ClassType("String"))
                result.append(_Candidate(decl, name, (param,), self_type, decl))
        return result

    def _constructors(self, decl: t.TypeDeclaration) -> list[_Candidate]:
        result = [
            _Candidate(decl, decl.name, tuple(c.parameters), None, c)
            for c in decl.constructors
        ]
        if decl.kind is t.DeclarationKind.RECORD:
            canonical = _Candidate(
                decl, decl.name, tuple(decl.record_components), None, decl
            )
            if canonical.signature not in {c.signature for c in result}:
                result.append(canonical)
        elif not result:
            result.append(_Candidate(decl, decl.name, (), None, decl))
        return result

    def _select(
        self, candidates: list[_Candidate], arguments: list[t.Expression], what: str
    ) -> Resolution[_Candidate]:
        applicable = [c for c in candidates if c.accepts(len(arguments))]
        if not applicable:
            return Resolution.failure(f"no applicable {what} for {len(arguments)} argument(s)")
        if len(applicable) == 1:
            return Resolution.success(applicable[0])

        argument_types = [self.expression_type(a) for a in arguments]
        best: _Candidate | None = None
        best_score = -1
        for candidate in applicable:
            score = self._score(candidate, argument_types)
            if score > best_score:
                best, best_score = candidate, score
        if best is None:
            return Resolution.failure(f"no {what} matches the argument types")
        return Resolution.success(best)

    def _score(self, candidate: _Candidate, argument_types: list[Resolution]) -> int:
        score = 0
        params = candidate.parameters
        for index, argument in enumerate(argument_types):
            param = params[min(index, len(params) - 1)]
            if param.type is None or not argument.ok:
                continue
            expected = self.resolve_type(param.type, candidate.context)
            if not expected.ok:
                continue
            match = _compatibility(argument.value, expected.value, self)
            if match < 0 and param.is_varargs:
                match = _compatibility(argument.value, ArrayOf(expected.value), self)
            if match < 0:
                return -1
            score += match
        return score

    def _routine(
        self,
        candidate: _Candidate,
        arguments: tuple[ResolvedType, ...] | None,
        constructor: bool = False,
    ) -> ResolvedRoutine:
        bindings = {}
        if arguments and len(arguments) == len(candidate.owner.type_parameters):
            bindings = dict(zip(candidate.owner.type_parameters, arguments))

        def resolve(ref: t.TypeRef | None) -> ResolvedType | None:
            if ref is None:
                return None
            resolved = self.resolve_type(ref, candidate.context)
            if not resolved.ok:
                return None
            value = resolved.value
            if isinstance(value, TypeVariable) and value.name in bindings:
                return bindings[value.name]
            return value

        parameters = tuple(
            ResolvedParameter(p.name, resolve(p.type), p.is_varargs)
            for p in candidate.parameters
        )
        return ResolvedRoutine(
            declaring_type=t.canonical_name(candidate.owner),
            name=candidate.name,
            parameters=parameters,
            return_type=None if constructor else resolve(candidate.return_type),
            is_constructor=constructor,
        )

    def is_subtype(self, decl: t.TypeDeclaration, target: t.TypeDeclaration) -> bool:
        pending = [decl]
        seen: set[t.TypeDeclaration] = set()
        while pending:
            current = pending.pop()
            if current is target:
                return True
            if current in seen:
                continue
            seen.add(current)
            pending.extend(self.supertypes(current))
        return False


def _external_routine(
    qualified_name: str,
    name: str,
    arguments: list[t.Expression],
    constructor: bool = False,
    return_type: ResolvedType | None = None,
) -> ResolvedRoutine:
    """A routine of a type we only know by name: one unknown parameter per argument."""
    return ResolvedRoutine(
        declaring_type=qualified_name,
        name=name,
        parameters=tuple(ResolvedParameter(None, None) for _ in arguments),
        return_type=return_type,
        is_constructor=constructor,
    )


def _jdk_return(receiver: ExternalType, method: str) -> ResolvedType | None:
    name = jdk.return_type(receiver.qualified_name, method)
    if name is None:
        return None
    if name == jdk.SELF:
        return receiver
    return _named_type(name)


def _named_type(name: str) -> ResolvedType:
    if name.endswith("[]"):
        return ArrayOf(_named_type(name[:-2]))
    if "." in name:
        return ExternalType(name)
    return BuiltinType(name)


def _method_candidate(owner: t.TypeDeclaration, method: t.MethodDeclaration) -> _Candidate:
    return _Candidate(owner, method.name, tuple(method.parameters), method.return_type, method)


def _local(var: t.VariableDeclarator) -> ValueBinding:
    return ValueBinding(BindingKind.LOCAL, var.name, var.type, var, initializer=var.initializer)


def _preceding(node: t.Node, child: t.Node | None) -> Iterator[t.Node]:
    for sibling in node.children():
        if sibling is child:
            return
        yield sibling


def _dotted_type(expr: t.Expression) -> t.ClassType:
    """Read ``a.b.C`` written as an expression as a class type."""
    if isinstance(expr, t.FieldAccess):
        return t.ClassType(expr.name, _dotted_type(t.unwrap(expr.scope)))
    if isinstance(expr, t.Name):
        return t.ClassType(expr.identifier)
    return t.ClassType(expr.text)


def _promoted(resolved: ResolvedType) -> Resolution[ResolvedType]:
    name = _unboxed(resolved)
    if name not in _NUMERIC_RANK:
        return Resolution.failure(f"{describe(resolved)} is not numeric")
    return Resolution.success(BuiltinType(name if _NUMERIC_RANK[name] > 2 else "int"))


def _compatibility(argument: ResolvedType, expected: ResolvedType, resolver: ProjectResolver) -> int:
    """2 for an exact match, 1 when assignable or unknown, -1 when not."""
    if describe(argument) == describe(expected):
        return 2
    if isinstance(expected, TypeVariable):
        return 1
    if isinstance(argument, NullType):
        return -1 if isinstance(expected, BuiltinType) else 1
    if isinstance(expected, BuiltinType):
        name = _unboxed(argument)
        if name == expected.name:
            return 1
        if name in _NUMERIC_RANK and expected.name in _NUMERIC_RANK:
            return 1 if _NUMERIC_RANK[name] <= _NUMERIC_RANK[expected.name] else -1
        return -1
    if isinstance(argument, BuiltinType):
        return 1 if isinstance(expected, ExternalType) else -1
    if isinstance(argument, ProjectType) and isinstance(expected, ProjectType):
        return 1 if resolver.is_subtype(argument.declaration, expected.declaration) else -1
    if isinstance(expected, ArrayOf) != isinstance(argument, ArrayOf):
        return 1 if isinstance(expected, ExternalType) else -1
    if isinstance(argument, ExternalType) and isinstance(expected, ProjectType):
        return -1
    return 1
