"""JSON-ready views of the analysis results.

Sets and counters are emitted as sorted lists so the same project always
produces the same report.
"""

from __future__ import annotations

import json
from pathlib import Path

from typeweave.diagnostics import Diagnostic
from typeweave.model import (
    AccessedFieldInfo,
    CalleeMethodInfo,
    CallerMethodInfo,
    DependencyAnalysisResult,
    DependencyInfo,
    StructuralAnalysisResult,
)


def _parameters_to_list(parameters: tuple[tuple[str, str], ...]) -> list[dict]:
    return [{"name": name, "type": type_} for name, type_ in parameters]


def _diagnostic_to_dict(diagnostic: Diagnostic) -> dict:
    entry = {"kind": diagnostic.kind.value, "message": diagnostic.message}
    if diagnostic.path is not None:
        entry["path"] = str(diagnostic.path)
    if diagnostic.line is not None:
        entry["line"] = diagnostic.line
    return entry


def structural_report(result: StructuralAnalysisResult) -> dict:
    types = []
    for info in sorted(result.type_infos, key=lambda i: (i.scope, i.name)):
        entry = {"scope": info.scope, "name": info.name}
        if info.is_interface:
            entry["is_interface"] = True
        if info.is_local:
            entry["is_local"] = True
        if info.declaration is None:
            entry["declared"] = False
        types.append(entry)

    relations = []
    for rel in sorted(
        result.type_relations,
        key=lambda r: (r.from_scope, r.from_type, r.to_scope, r.to_type, r.kind.value),
    ):
        entry = {
            "from": {"scope": rel.from_scope, "name": rel.from_type},
            "to": {"scope": rel.to_scope, "name": rel.to_type},
            "kind": rel.kind.value,
        }
        if rel.is_local:
            entry["is_local"] = True
        relations.append(entry)

    return {
        "types": types,
        "relations": relations,
        "has_error": result.has_error,
        "diagnostics": [_diagnostic_to_dict(d) for d in result.diagnostics],
    }


def _caller_key(caller: CallerMethodInfo) -> tuple:
    return (caller.name, caller.parameters, caller.return_type or "")


def _callee_to_dict(callee: CalleeMethodInfo, count: int) -> dict:
    return {
        "declaring_type": callee.declaring_type,
        "name": callee.name,
        "parameters": _parameters_to_list(callee.parameters),
        "return_type": callee.return_type,
        "count": count,
    }


def _field_to_dict(accessed: AccessedFieldInfo, count: int) -> dict:
    return {
        "declaring_type": accessed.declaring_type,
        "name": accessed.field_name,
        "access": accessed.access.value,
        "count": count,
    }


def _dependency_to_dict(caller: CallerMethodInfo, info: DependencyInfo) -> dict:
    callees = sorted(
        info.callees.items(),
        key=lambda item: (
            item[0].declaring_type,
            item[0].name,
            item[0].parameters,
            item[0].return_type or "",
        ),
    )
    fields = sorted(
        info.fields.items(),
        key=lambda item: (item[0].declaring_type, item[0].field_name, item[0].access.value),
    )
    return {
        "name": caller.name,
        "parameters": _parameters_to_list(caller.parameters),
        "return_type": caller.return_type,
        "callees": [_callee_to_dict(c, n) for c, n in callees],
        "fields": [_field_to_dict(f, n) for f, n in fields],
    }


def dependency_report(result: DependencyAnalysisResult) -> dict:
    types = {}
    for type_name in sorted(result.dependencies):
        callers = result.dependencies[type_name]
        types[type_name] = [
            _dependency_to_dict(caller, callers[caller])
            for caller in sorted(callers, key=_caller_key)
        ]
    return {
        "types": types,
        "has_error": result.has_error,
        "diagnostics": [_diagnostic_to_dict(d) for d in result.diagnostics],
    }


def write_report(report: dict, output_path: Path) -> None:
    """Write *report* as indented JSON to *output_path*."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2) + "\n")
