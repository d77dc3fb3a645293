"""Orchestrator: locate sources → analyze → report."""

from __future__ import annotations

import logging
from pathlib import Path

from typeweave.analyzers import DependencyAnalyzer, SourceSet, StructuralAnalyzer
from typeweave.config import load_config
from typeweave.report import dependency_report, structural_report, write_report

logger = logging.getLogger(__name__)

MODES = ("structure", "dependency", "all")


def find_source_root(project_dir: Path) -> Path:
    """Maven and Gradle keep main sources in src/main/java; otherwise use the project itself."""
    conventional = project_dir / "src" / "main" / "java"
    if conventional.is_dir():
        return conventional
    return project_dir


def run(
    project_dir: Path,
    *,
    source_root: Path | None = None,
    library_root: Path | None = None,
    mode: str = "all",
    output: Path | None = None,
) -> dict:
    """Analyze the Java project in *project_dir* and return the report.

    The report is also written to *output* when given.  Raises ConfigError
    for an invalid project configuration.
    """
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}, expected one of {', '.join(MODES)}")

    project_dir = project_dir.resolve()
    config = load_config(project_dir)
    if library_root is not None:
        config.library_root = library_root
    source_root = source_root or find_source_root(project_dir)
    logger.debug("Source root: %s, library root: %s", source_root, config.library_root)

    try:
        sources = SourceSet.load(source_root, config)
    except OSError as e:
        # each analyzer reports the unreadable root itself
        logger.debug("Cannot load %s: %s", source_root, e)
        sources = None

    report: dict = {"project": project_dir.name, "source_root": str(source_root)}
    if mode in ("structure", "all"):
        result = StructuralAnalyzer(config).analyze(source_root, sources=sources)
        report["structure"] = structural_report(result)
    if mode in ("dependency", "all"):
        result = DependencyAnalyzer(config).analyze(source_root, sources=sources)
        report["dependencies"] = dependency_report(result)
    report["has_error"] = any(
        report[section]["has_error"]
        for section in ("structure", "dependencies")
        if section in report
    )

    if output is not None:
        write_report(report, output)
        logger.info("Wrote %s", output)
    return report
