"""Relation facts between types.

:func:`local_relations` looks at one declaration in isolation: its
supertypes, the types its fields hold and the type it is nested in.
:func:`reconcile` then works over the whole project, completing scopes the
resolver could not find and merging edges that only make sense together.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from typeweave.analyzers import multiplicity
from typeweave.java.resolver import ProjectResolver
from typeweave.java.tree import (
    ClassType,
    DeclarationKind,
    LocalClassDeclaration,
    Node,
    TypeDeclaration,
    TypeRef,
    enclosing_type,
    fully_qualified_scope,
)
from typeweave.model import RelationKind, TypeInfo, TypeRelationInfo

logger = logging.getLogger(__name__)

Relations = dict[TypeRelationInfo, None]


def local_relations(
    type_info: TypeInfo, resolver: ProjectResolver
) -> list[TypeRelationInfo]:
    """Relations declared by *type_info* itself, in declaration order."""
    decl = type_info.declaration
    if decl is None:
        return []
    relations: Relations = {}
    for rule in _RULES[decl.kind]:
        rule(type_info, decl, resolver, relations)
    return list(relations)


def _inheritance(type_info, decl, resolver, relations) -> None:
    _supertypes(type_info, decl.extended_types, RelationKind.INHERITANCE, resolver, relations)


def _implementation(type_info, decl, resolver, relations) -> None:
    _supertypes(
        type_info, decl.implemented_types, RelationKind.IMPLEMENTATION, resolver, relations
    )


def _supertypes(
    type_info: TypeInfo,
    supertypes: list[ClassType],
    kind: RelationKind,
    resolver: ProjectResolver,
    relations: Relations,
) -> None:
    for supertype in supertypes:
        scope = resolver.type_scope(supertype, type_info.declaration)
        to_scope = scope.value if scope.ok else ""
        if not scope.ok:
            logger.debug("Supertype %s of %s: %s", supertype, type_info.name, scope.reason)
        written = str(supertype.unqualified())
        relations[
            TypeRelationInfo(type_info.name, type_info.scope, written, to_scope, kind)
        ] = None
        if supertype.is_generic:
            # Base<String> is a Base
            relations[
                TypeRelationInfo(written, to_scope, supertype.name, to_scope, kind)
            ] = None


def _record_components(type_info, decl, resolver, relations) -> None:
    for component in decl.record_components:
        if component.type is not None:
            _associations(type_info, component.type, component, resolver, relations)


def _fields(type_info, decl, resolver, relations) -> None:
    for field_decl in decl.fields:
        for variable in field_decl.variables:
            _associations(type_info, variable.type, variable, resolver, relations)


def _associations(
    type_info: TypeInfo,
    type_ref: TypeRef,
    context: Node,
    resolver: ProjectResolver,
    relations: Relations,
) -> None:
    for held, is_multiple in multiplicity.analyze(type_ref).items():
        scope = resolver.type_scope(held, context)
        kind = (
            RelationKind.MULTIPLICITY_UNIDIRECTIONAL_ASSOCIATION
            if is_multiple
            else RelationKind.UNIDIRECTIONAL_ASSOCIATION
        )
        relations[
            TypeRelationInfo(
                type_info.name,
                type_info.scope,
                held.name,
                scope.value if scope.ok else "",
                kind,
            )
        ] = None


def _nesting(type_info, decl, resolver, relations) -> None:
    parent = decl.parent
    if isinstance(parent, TypeDeclaration):
        outer, local = parent, False
    elif isinstance(parent, LocalClassDeclaration):
        outer, local = enclosing_type(parent), True
    else:
        # top level, or the body of an anonymous class or enum constant
        return
    if outer is None:
        return

    if local:
        kind = RelationKind.CONTAINMENT
    elif _is_static_member(decl, outer):
        kind = RelationKind.AGGREGATION
    else:
        kind = RelationKind.COMPOSITION
    relations[
        TypeRelationInfo(
            type_info.name,
            type_info.scope,
            outer.name,
            fully_qualified_scope(outer),
            kind,
            local,
        )
    ] = None


def _is_static_member(decl: TypeDeclaration, outer: TypeDeclaration) -> bool:
    """Explicitly static, or implicitly so by the Java rules for member types."""
    return (
        decl.is_static
        or decl.kind is not DeclarationKind.CLASS
        or outer.kind in (DeclarationKind.INTERFACE, DeclarationKind.ANNOTATION)
    )


_Rule = Callable[[TypeInfo, TypeDeclaration, ProjectResolver, Relations], None]

_RULES: dict[DeclarationKind, tuple[_Rule, ...]] = {
    DeclarationKind.CLASS: (_inheritance, _implementation, _fields, _nesting),
    DeclarationKind.INTERFACE: (_inheritance, _fields, _nesting),
    DeclarationKind.ENUM: (_implementation, _fields, _nesting),
    DeclarationKind.RECORD: (_implementation, _record_components, _fields, _nesting),
    DeclarationKind.ANNOTATION: (_fields, _nesting),
}


# ---------------------------------------------------------------------------
# Project-wide reconciliation
# ---------------------------------------------------------------------------


def reconcile(
    type_infos: Iterable[TypeInfo], relations: Iterable[TypeRelationInfo]
) -> list[TypeRelationInfo]:
    """Complete supertype scopes, absorb single associations, merge mirrored ones."""
    catalogue = list(type_infos)
    edges = list(dict.fromkeys(relations))
    edges = _complete_scopes(catalogue, edges)
    edges = _absorb_multiplicity(edges)
    return _merge_bidirectional(edges)


def _complete_scopes(
    catalogue: list[TypeInfo], edges: list[TypeRelationInfo]
) -> list[TypeRelationInfo]:
    completed: Relations = {}
    for edge in edges:
        if (
            edge.kind in (RelationKind.INHERITANCE, RelationKind.IMPLEMENTATION)
            and not edge.to_scope
        ):
            candidates = [info for info in catalogue if info.name == edge.to_type]
            if candidates:
                same_scope = [c for c in candidates if c.scope == edge.from_scope]
                chosen = (same_scope or candidates)[0]
                logger.debug("Completed scope of %s as %r", edge.to_type, chosen.scope)
                edge = edge.with_target_scope(chosen.scope)
        completed[edge] = None
    return list(completed)


def _absorb_multiplicity(edges: list[TypeRelationInfo]) -> list[TypeRelationInfo]:
    present = set(edges)
    return [
        edge
        for edge in edges
        if edge.kind is not RelationKind.UNIDIRECTIONAL_ASSOCIATION
        or edge.with_kind(RelationKind.MULTIPLICITY_UNIDIRECTIONAL_ASSOCIATION)
        not in present
    ]


def _merge_bidirectional(edges: list[TypeRelationInfo]) -> list[TypeRelationInfo]:
    remaining = dict.fromkeys(edges)
    merged: Relations = {}
    for edge in edges:
        if edge not in remaining:
            continue
        if edge.kind is RelationKind.UNIDIRECTIONAL_ASSOCIATION and not _is_self_loop(edge):
            mirror = edge.mirrored()
            if mirror in remaining:
                del remaining[edge]
                del remaining[mirror]
                merged[edge.with_kind(RelationKind.BIDIRECTIONAL_ASSOCIATION)] = None
                continue
        merged[edge] = None
    return list(merged)


def _is_self_loop(edge: TypeRelationInfo) -> bool:
    return edge.from_type == edge.to_type and edge.from_scope == edge.to_scope
