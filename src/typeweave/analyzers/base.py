"""Shared driver for the analyzers: file walk, per-unit dispatch, diagnostics."""

from __future__ import annotations

import fnmatch
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar

from typeweave.config import AnalyzerConfig
from typeweave.diagnostics import DiagnosticKind, Diagnostics, JavaSyntaxError
from typeweave.java.library import LibraryIndex
from typeweave.java.parser import JavaSourceParser
from typeweave.java.resolver import ProjectResolver
from typeweave.java.tree import CompilationUnit

logger = logging.getLogger(__name__)

R = TypeVar("R", covariant=True)

# Package and module descriptors declare no types.
_SKIPPED_FILES = {"package-info.java", "module-info.java"}


class Analyzer(Protocol[R]):
    """Protocol for project-wide analyses."""

    def analyze(
        self,
        source_root: Path,
        library_root: Path | None = None,
        *,
        sources: SourceSet | None = None,
    ) -> R:
        """Analyze every Java file under *source_root*."""
        ...


@dataclass
class SourceFile:
    path: Path
    unit: CompilationUnit | None = None
    error: Exception | None = None


class SourceSet:
    """The parsed Java files of one source root, each parsed exactly once."""

    def __init__(self, root: Path, files: list[SourceFile] | None = None):
        self.root = root
        self.files = files or []

    @classmethod
    def load(
        cls,
        source_root: Path,
        config: AnalyzerConfig | None = None,
        parser: JavaSourceParser | None = None,
    ) -> SourceSet:
        """Parse every ``*.java`` file under *source_root*.

        Raises OSError when the root itself cannot be read; a file that
        cannot be read or parsed is kept with its error.
        """
        config = config or AnalyzerConfig()
        if parser is None:
            parser = JavaSourceParser(
                encoding=config.encoding,
                tolerate_syntax_errors=config.tolerate_syntax_errors,
            )
        if not source_root.is_dir():
            raise NotADirectoryError(f"{source_root} is not a directory")

        files = []
        for path in sorted(source_root.rglob("*.java")):
            if not path.is_file() or path.name in _SKIPPED_FILES:
                continue
            relative = path.relative_to(source_root).as_posix()
            if any(fnmatch.fnmatch(relative, pattern) for pattern in config.exclude):
                logger.debug("Excluded %s", relative)
                continue
            try:
                files.append(SourceFile(path, parser.parse_file(path)))
            except (OSError, UnicodeDecodeError, LookupError, JavaSyntaxError) as e:
                files.append(SourceFile(path, error=e))
        logger.debug("Loaded %d Java files from %s", len(files), source_root)
        return cls(source_root, files)

    @property
    def units(self) -> list[CompilationUnit]:
        return [f.unit for f in self.files if f.unit is not None]

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


S = TypeVar("S")


class AbstractAnalyzer(ABC, Generic[S, R]):
    """Runs an analysis over a source set, one compilation unit at a time.

    Subclasses provide the accumulator (:meth:`initialize`), the facts one
    unit contributes (:meth:`analyze_unit`), how a fact is folded into the
    accumulator (:meth:`merge`) and the final result (:meth:`build_result`).
    All run state lives in the accumulator, so one instance can be reused.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def analyze(
        self,
        source_root: Path,
        library_root: Path | None = None,
        *,
        sources: SourceSet | None = None,
    ) -> R:
        diagnostics = Diagnostics()
        if sources is None:
            try:
                sources = SourceSet.load(source_root, self.config)
            except OSError as e:
                diagnostics.report(
                    DiagnosticKind.IO_FAILURE,
                    f"Cannot read source directory: {e}",
                    path=source_root,
                )
                sources = SourceSet(source_root)

        library = LibraryIndex.scan(library_root or self.config.library_root)
        resolver = ProjectResolver(sources.units, library)
        state = self.initialize()

        for source in sources:
            diagnostics.current_path = source.path
            if source.unit is None:
                _report_load_failure(diagnostics, source)
                continue
            try:
                for fact in self.analyze_unit(source.unit, resolver, diagnostics):
                    self.merge(state, fact)
            except Exception as e:
                logger.debug("Analysis of %s failed", source.path, exc_info=True)
                diagnostics.report(
                    DiagnosticKind.UNIT_FAILURE, f"{type(e).__name__}: {e}"
                )
        diagnostics.current_path = None

        result = self.build_result(state, diagnostics)
        logger.info(
            "%s: %d files, %d diagnostics",
            type(self).__name__,
            len(sources),
            len(diagnostics),
        )
        return result

    @abstractmethod
    def initialize(self) -> S: ...

    @abstractmethod
    def analyze_unit(
        self,
        unit: CompilationUnit,
        resolver: ProjectResolver,
        diagnostics: Diagnostics,
    ) -> Iterable[Any]: ...

    @abstractmethod
    def merge(self, state: S, fact: Any) -> None: ...

    @abstractmethod
    def build_result(self, state: S, diagnostics: Diagnostics) -> R: ...


def _report_load_failure(diagnostics: Diagnostics, source: SourceFile) -> None:
    error = source.error
    if isinstance(error, JavaSyntaxError):
        diagnostics.report(DiagnosticKind.PARSE_FAILURE, str(error), line=error.line)
    else:
        diagnostics.report(DiagnosticKind.IO_FAILURE, f"Cannot read file: {error}")
