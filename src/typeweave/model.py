"""Result data model shared by the structural and dependency analyses."""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field

from typeweave.diagnostics import Diagnostic
from typeweave.java.tree import TypeDeclaration


class RelationKind(enum.Enum):
    INHERITANCE = "inheritance"
    IMPLEMENTATION = "implementation"
    UNIDIRECTIONAL_ASSOCIATION = "unidirectional_association"
    BIDIRECTIONAL_ASSOCIATION = "bidirectional_association"
    MULTIPLICITY_UNIDIRECTIONAL_ASSOCIATION = "multiplicity_unidirectional_association"
    AGGREGATION = "aggregation"
    COMPOSITION = "composition"
    CONTAINMENT = "containment"


class AccessKind(enum.Enum):
    READ = "read"
    WRITE = "write"
    OTHER = "other"


@dataclass(frozen=True)
class TypeInfo:
    """A declared type, or an external type that is only referenced.

    Identity is ``(scope, name)``: the same type reached through two paths is
    one entry in a set.
    """

    scope: str
    name: str
    declaration: TypeDeclaration | None = field(default=None, compare=False)
    is_interface: bool = field(default=False, compare=False)
    is_local: bool = field(default=False, compare=False)

    @property
    def qualified_name(self) -> str:
        return f"{self.scope}.{self.name}" if self.scope else self.name


@dataclass(frozen=True)
class TypeRelationInfo:
    """A directed edge ``from_type -> to_type``."""

    from_type: str
    from_scope: str
    to_type: str
    to_scope: str
    kind: RelationKind
    is_local: bool = False

    def mirrored(self) -> TypeRelationInfo:
        return TypeRelationInfo(
            self.to_type,
            self.to_scope,
            self.from_type,
            self.from_scope,
            self.kind,
            self.is_local,
        )

    def with_kind(self, kind: RelationKind) -> TypeRelationInfo:
        return TypeRelationInfo(
            self.from_type,
            self.from_scope,
            self.to_type,
            self.to_scope,
            kind,
            self.is_local,
        )

    def with_target_scope(self, scope: str) -> TypeRelationInfo:
        return TypeRelationInfo(
            self.from_type, self.from_scope, self.to_type, scope, self.kind, self.is_local
        )


Parameters = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class CallerMethodInfo:
    """An analyzed routine; ``return_type`` is None for constructors."""

    name: str
    parameters: Parameters = ()
    return_type: str | None = None


@dataclass(frozen=True)
class CalleeMethodInfo:
    declaring_type: str
    name: str
    parameters: Parameters = ()
    return_type: str | None = None


@dataclass(frozen=True)
class AccessedFieldInfo:
    declaring_type: str
    field_name: str
    access: AccessKind


@dataclass
class DependencyInfo:
    """Counted callees and field accesses of one routine."""

    callees: Counter[CalleeMethodInfo] = field(default_factory=Counter)
    fields: Counter[AccessedFieldInfo] = field(default_factory=Counter)

    def add_callee(self, callee: CalleeMethodInfo) -> None:
        self.callees[callee] += 1

    def add_field(self, accessed: AccessedFieldInfo) -> None:
        self.fields[accessed] += 1


@dataclass(frozen=True)
class StructuralAnalysisResult:
    type_infos: frozenset[TypeInfo] = frozenset()
    type_relations: frozenset[TypeRelationInfo] = frozenset()
    has_error: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True)
class DependencyAnalysisResult:
    dependencies: dict[str, dict[CallerMethodInfo, DependencyInfo]] = field(
        default_factory=dict
    )
    has_error: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()
