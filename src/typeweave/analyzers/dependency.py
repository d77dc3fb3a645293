"""Per-routine dependencies: the methods a routine calls and the fields it touches.

Every call keeps its place in the result, resolved or not.  An unresolved
call is described from its source text alone (receiver text, ``argN``
parameters typed from the arguments, ``UnknownReturnType``) and reported
to the run's diagnostics.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from typeweave.analyzers.base import AbstractAnalyzer
from typeweave.diagnostics import DiagnosticKind, Diagnostics
from typeweave.java.resolver import ProjectResolver, ResolvedRoutine, describe
from typeweave.java.tree import (
    Assign,
    CallableDeclaration,
    CompactConstructorDeclaration,
    CompilationUnit,
    ConstructorDeclaration,
    Enclosed,
    ExplicitConstructorInvocation,
    Expression,
    FieldAccess,
    Lambda,
    MethodCall,
    MethodDeclaration,
    MethodReference,
    Name,
    Node,
    ObjectCreation,
    SuperExpr,
    ThisExpr,
    TypeDeclaration,
    Unary,
    canonical_name,
    enclosing_type,
    find_all,
    unwrap,
)
from typeweave.model import (
    AccessedFieldInfo,
    AccessKind,
    CalleeMethodInfo,
    CallerMethodInfo,
    DependencyAnalysisResult,
    DependencyInfo,
)

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "UnknownType"
UNKNOWN_RETURN_TYPE = "UnknownReturnType"

Dependencies = dict[str, dict[CallerMethodInfo, DependencyInfo]]


@dataclass
class _Routines:
    dependencies: Dependencies = field(default_factory=dict)
    # declaration that owns each canonical name; the first one met wins
    owners: dict[str, TypeDeclaration] = field(default_factory=dict)


@dataclass(frozen=True)
class _TypeVisited:
    declaring_type: str
    declaration: TypeDeclaration


@dataclass(frozen=True)
class _RoutineVisited:
    declaring_type: str
    declaration: TypeDeclaration
    caller: CallerMethodInfo
    info: DependencyInfo


class DependencyAnalyzer(AbstractAnalyzer[_Routines, DependencyAnalysisResult]):
    """Maps each type to its routines and each routine to what it depends on."""

    def initialize(self) -> _Routines:
        return _Routines()

    def analyze_unit(
        self,
        unit: CompilationUnit,
        resolver: ProjectResolver,
        diagnostics: Diagnostics,
    ) -> Iterator[_TypeVisited | _RoutineVisited]:
        extractor = _Extractor(resolver, diagnostics)
        for decl in find_all(unit, TypeDeclaration):
            name = canonical_name(decl)
            yield _TypeVisited(name, decl)
            routines: list[CallableDeclaration] = [
                *decl.compact_constructors,
                *decl.constructors,
                *decl.methods,
            ]
            for routine in routines:
                yield _RoutineVisited(
                    name, decl, caller_info(routine, decl), extractor.dependencies(routine)
                )

    def merge(self, state: _Routines, fact: _TypeVisited | _RoutineVisited) -> None:
        owner = state.owners.setdefault(fact.declaring_type, fact.declaration)
        if owner is not fact.declaration:
            logger.debug("Skipping duplicate declaration of %s", fact.declaring_type)
            return
        callers = state.dependencies.setdefault(fact.declaring_type, {})
        if isinstance(fact, _RoutineVisited):
            callers[fact.caller] = fact.info

    def build_result(
        self, state: _Routines, diagnostics: Diagnostics
    ) -> DependencyAnalysisResult:
        dependencies = state.dependencies
        logger.info(
            "Dependencies: %d types, %d routines",
            len(dependencies),
            sum(len(callers) for callers in dependencies.values()),
        )
        return DependencyAnalysisResult(
            dependencies=dependencies,
            has_error=diagnostics.has_error,
            diagnostics=diagnostics.entries,
        )


def caller_info(routine: CallableDeclaration, owner: TypeDeclaration) -> CallerMethodInfo:
    if isinstance(routine, CompactConstructorDeclaration):
        parameters = owner.record_components
    else:
        parameters = routine.parameters
    signature = tuple((p.name, p.declared_type) for p in parameters)
    return_type = (
        str(routine.return_type) if isinstance(routine, MethodDeclaration) else None
    )
    return CallerMethodInfo(routine.name, signature, return_type)


def access_kind(expr: Expression) -> AccessKind:
    """How the value of *expr* is used by the expression around it."""
    parent = expr.parent
    while isinstance(parent, Enclosed):
        parent = parent.parent
    if parent is None:
        return AccessKind.OTHER
    if isinstance(parent, Assign):
        return AccessKind.WRITE if unwrap(parent.target) is expr else AccessKind.READ
    if isinstance(parent, (MethodCall, ObjectCreation)):
        if parent.scope is not None and unwrap(parent.scope) is expr:
            return AccessKind.OTHER
        return AccessKind.READ
    if isinstance(parent, Unary):
        return AccessKind.WRITE if parent.is_increment else AccessKind.READ
    return AccessKind.READ


def _source(expr: Node) -> str:
    return " ".join(expr.text.split())


class _Extractor:
    """Walks one routine body at a time."""

    def __init__(self, resolver: ProjectResolver, diagnostics: Diagnostics):
        self.resolver = resolver
        self.diagnostics = diagnostics

    def dependencies(self, routine: CallableDeclaration) -> DependencyInfo:
        info = DependencyInfo()
        for call in find_all(routine, MethodCall):
            info.add_callee(self._method_call(call))
        for creation in find_all(routine, ObjectCreation):
            info.add_callee(self._object_creation(creation))
        if isinstance(routine, (ConstructorDeclaration, CompactConstructorDeclaration)):
            for stmt in find_all(routine, ExplicitConstructorInvocation):
                info.add_callee(self._explicit_invocation(stmt))

        for access in find_all(routine, FieldAccess):
            info.add_field(
                AccessedFieldInfo(
                    self._receiver_name(access.scope), access.name, access_kind(access)
                )
            )
        for name in find_all(routine, Name):
            accessed = self._field_name(name)
            if accessed is not None:
                info.add_field(accessed)
        return info

    # -- callees ------------------------------------------------------------

    def _method_call(self, call: MethodCall) -> CalleeMethodInfo:
        resolved = self.resolver.resolve_method_call(call)
        if resolved.ok:
            return self._callee(resolved.value, call.name, call.arguments)

        self.diagnostics.report(
            DiagnosticKind.UNRESOLVED_CALL,
            f"Cannot resolve {_source(call)}: {resolved.reason}",
            line=call.line,
        )
        receiver = _source(call.scope) if call.scope is not None else UNKNOWN_TYPE
        return CalleeMethodInfo(
            receiver,
            call.name,
            self._argument_parameters(call.arguments),
            UNKNOWN_RETURN_TYPE,
        )

    def _object_creation(self, creation: ObjectCreation) -> CalleeMethodInfo:
        written = str(creation.type)
        resolved = self.resolver.resolve_object_creation(creation)
        if resolved.ok:
            return self._callee(resolved.value, written, creation.arguments)

        self.diagnostics.report(
            DiagnosticKind.UNRESOLVED_CONSTRUCTION,
            f"Cannot resolve new {written}: {resolved.reason}",
            line=creation.line,
        )
        return CalleeMethodInfo(
            written, written, self._argument_parameters(creation.arguments), None
        )

    def _explicit_invocation(self, stmt: ExplicitConstructorInvocation) -> CalleeMethodInfo:
        keyword = "this" if stmt.is_this else "super"
        owner = enclosing_type(stmt)
        declaring = canonical_name(owner) if owner is not None else UNKNOWN_TYPE
        resolved = self.resolver.resolve_explicit_invocation(stmt)
        if resolved.ok:
            callee = self._callee(resolved.value, keyword, stmt.arguments)
            return CalleeMethodInfo(declaring, keyword, callee.parameters, None)

        self.diagnostics.report(
            DiagnosticKind.UNRESOLVED_INVOCATION,
            f"Cannot resolve {keyword}(...) in {declaring}: {resolved.reason}",
            line=stmt.line,
        )
        return CalleeMethodInfo(
            declaring, keyword, self._argument_parameters(stmt.arguments), None
        )

    def _callee(
        self, routine: ResolvedRoutine, name: str, arguments: list[Expression]
    ) -> CalleeMethodInfo:
        parameters = []
        for index, param in enumerate(routine.parameters):
            if param.type is not None:
                param_type = describe(param.type) + ("..." if param.is_varargs else "")
            elif index < len(arguments):
                param_type = self._argument_type(arguments[index])
            else:
                param_type = UNKNOWN_TYPE
            parameters.append((param.name or f"arg{index}", param_type))

        if routine.is_constructor:
            return_type = None
        elif routine.return_type is not None:
            return_type = describe(routine.return_type)
        else:
            return_type = UNKNOWN_RETURN_TYPE
        return CalleeMethodInfo(routine.declaring_type, name, tuple(parameters), return_type)

    def _argument_parameters(self, arguments: list[Expression]) -> tuple[tuple[str, str], ...]:
        return tuple(
            (f"arg{index}", self._argument_type(argument))
            for index, argument in enumerate(arguments)
        )

    def _argument_type(self, argument: Expression) -> str:
        argument = unwrap(argument)
        if isinstance(argument, Lambda):
            return "Lambda"
        if isinstance(argument, MethodReference):
            return "MethodReference"
        resolved = self.resolver.expression_type(argument)
        if resolved.ok:
            return describe(resolved.value)
        return _source(argument).rpartition(".")[2]

    # -- fields -------------------------------------------------------------

    def _receiver_name(self, scope: Expression) -> str:
        scope = unwrap(scope)
        if isinstance(scope, ThisExpr):
            return "this"
        if isinstance(scope, SuperExpr):
            return "super"
        if isinstance(scope, Name):
            binding = self.resolver.resolve_name(scope)
            if binding.ok:
                resolved = self.resolver.binding_type(binding.value)
                if resolved.ok:
                    return describe(resolved.value)
        elif isinstance(scope, (ObjectCreation, MethodCall)):
            resolved = self.resolver.expression_type(scope)
            if resolved.ok:
                return describe(resolved.value)
        return _source(scope)

    def _field_name(self, name: Name) -> AccessedFieldInfo | None:
        binding = self.resolver.resolve_name(name)
        if not binding.ok or not binding.value.is_field or binding.value.owner is None:
            return None
        return AccessedFieldInfo(
            canonical_name(binding.value.owner), name.identifier, access_kind(name)
        )
