"""Type catalogue and type-to-type relations of a whole project."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from typeweave.analyzers import type_relations
from typeweave.analyzers.base import AbstractAnalyzer
from typeweave.diagnostics import Diagnostics
from typeweave.java.resolver import ProjectResolver
from typeweave.java.tree import (
    CompilationUnit,
    DeclarationKind,
    TypeDeclaration,
    find_all,
    fully_qualified_scope,
    is_local_type,
)
from typeweave.model import (
    RelationKind,
    StructuralAnalysisResult,
    TypeInfo,
    TypeRelationInfo,
)

logger = logging.getLogger(__name__)


@dataclass
class _Catalogue:
    type_infos: dict[TypeInfo, None] = field(default_factory=dict)
    relations: dict[TypeRelationInfo, None] = field(default_factory=dict)


class StructuralAnalyzer(AbstractAnalyzer[_Catalogue, StructuralAnalysisResult]):
    """Collects every declared type and the relations between types."""

    def initialize(self) -> _Catalogue:
        return _Catalogue()

    def analyze_unit(
        self,
        unit: CompilationUnit,
        resolver: ProjectResolver,
        diagnostics: Diagnostics,
    ) -> Iterator[TypeInfo | TypeRelationInfo]:
        for decl in find_all(unit, TypeDeclaration):
            info = type_info(decl)
            yield info
            yield from type_relations.local_relations(info, resolver)

    def merge(self, state: _Catalogue, fact: TypeInfo | TypeRelationInfo) -> None:
        if isinstance(fact, TypeInfo):
            # first declaration of a (scope, name) wins
            state.type_infos.setdefault(fact, None)
        else:
            state.relations[fact] = None

    def build_result(
        self, state: _Catalogue, diagnostics: Diagnostics
    ) -> StructuralAnalysisResult:
        relations = type_relations.reconcile(state.type_infos, state.relations)
        type_infos = backfill(list(state.type_infos), relations)
        logger.info(
            "Structure: %d types (%d declared), %d relations",
            len(type_infos),
            len(state.type_infos),
            len(relations),
        )
        return StructuralAnalysisResult(
            type_infos=frozenset(type_infos),
            type_relations=frozenset(relations),
            has_error=diagnostics.has_error,
            diagnostics=diagnostics.entries,
        )


def type_info(decl: TypeDeclaration) -> TypeInfo:
    return TypeInfo(
        scope=fully_qualified_scope(decl),
        name=decl.name,
        declaration=decl,
        is_interface=decl.kind is DeclarationKind.INTERFACE,
        is_local=is_local_type(decl),
    )


def backfill(
    type_infos: list[TypeInfo], relations: list[TypeRelationInfo]
) -> list[TypeInfo]:
    """Add a declaration-less entry for every relation target not catalogued.

    Implementation targets are interfaces, and so are the inheritance
    targets of an interface.
    """
    known = {(info.scope, info.name): info for info in type_infos}
    for relation in relations:
        key = (relation.to_scope, relation.to_type)
        if key in known:
            continue
        source = known.get((relation.from_scope, relation.from_type))
        is_interface = relation.kind is RelationKind.IMPLEMENTATION or (
            relation.kind is RelationKind.INHERITANCE
            and source is not None
            and source.is_interface
        )
        known[key] = TypeInfo(
            relation.to_scope,
            relation.to_type,
            None,
            is_interface,
            relation.is_local,
        )
    return list(known.values())
