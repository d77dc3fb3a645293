"""Command-line interface for typeweave."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from typeweave.diagnostics import ConfigError
from typeweave.pipeline import MODES, run

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="typeweave",
        description="Type relations and method dependencies of a Java project, as JSON.",
        epilog=(
            "Exit status is 0 for a clean run, 1 when a file could not be parsed or a "
            "call could not be resolved (the report is still written), and 2 for an "
            "invalid configuration."
        ),
    )
    parser.add_argument(
        "project_dir",
        type=Path,
        help="Path to the Java project to analyze",
    )
    parser.add_argument(
        "--source-root",
        type=Path,
        default=None,
        help="Directory holding the Java sources (default: src/main/java or the project)",
    )
    parser.add_argument(
        "--lib",
        type=Path,
        default=None,
        dest="library_root",
        help="Directory searched recursively for dependency jars",
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="all",
        help="Which analyses to run (default: all)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output JSON file path (default: standard output)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("typeweave").setLevel(logging.DEBUG)

    try:
        report = run(
            args.project_dir,
            source_root=args.source_root,
            library_root=args.library_root,
            mode=args.mode,
            output=args.output,
        )
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2

    if args.output is None:
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")
    return 1 if report["has_error"] else 0


if __name__ == "__main__":
    sys.exit(main())
