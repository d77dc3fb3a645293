"""Error taxonomy and the per-run diagnostics sink."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class TypeweaveError(Exception):
    """Base class for errors raised by typeweave."""


class JavaSyntaxError(TypeweaveError):
    """A source file could not be parsed."""

    def __init__(self, message: str, path: Path | None = None, line: int | None = None):
        super().__init__(message)
        self.path = path
        self.line = line


class ConfigError(TypeweaveError):
    """The project configuration is invalid."""


class DiagnosticKind(enum.Enum):
    IO_FAILURE = "io_failure"
    PARSE_FAILURE = "parse_failure"
    UNIT_FAILURE = "unit_failure"
    UNRESOLVED_CALL = "unresolved_call"
    UNRESOLVED_CONSTRUCTION = "unresolved_construction"
    UNRESOLVED_INVOCATION = "unresolved_invocation"


# Everything else is per-expression and logged at debug level.
_WARNING_KINDS = {
    DiagnosticKind.IO_FAILURE,
    DiagnosticKind.PARSE_FAILURE,
    DiagnosticKind.UNIT_FAILURE,
}


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    path: Path | None = None
    line: int | None = None

    def __str__(self) -> str:
        where = ""
        if self.path is not None:
            where = f"{self.path}:{self.line}: " if self.line else f"{self.path}: "
        return f"{where}{self.message}"


class Diagnostics:
    """Collects everything that went wrong during one analysis run."""

    def __init__(self) -> None:
        self._entries: list[Diagnostic] = []
        self.current_path: Path | None = None

    def report(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind, message, path or self.current_path, line)
        self._entries.append(diagnostic)
        if kind in _WARNING_KINDS:
            logger.warning("%s", diagnostic)
        else:
            logger.debug("%s", diagnostic)
        return diagnostic

    @property
    def has_error(self) -> bool:
        return bool(self._entries)

    @property
    def entries(self) -> tuple[Diagnostic, ...]:
        return tuple(self._entries)

    def count(self, kind: DiagnosticKind) -> int:
        return sum(1 for d in self._entries if d.kind is kind)

    def __len__(self) -> int:
        return len(self._entries)
