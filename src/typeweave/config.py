"""Per-project settings read from ``.typeweave.toml`` or ``pyproject.toml``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from typeweave.diagnostics import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class AnalyzerConfig:
    exclude: list[str] = field(default_factory=list)
    library_root: Path | None = None
    encoding: str = "utf-8"
    tolerate_syntax_errors: bool = False


def _read_table(project_dir: Path) -> tuple[dict, Path | None]:
    """Return the typeweave settings table and the file it came from."""
    # Try .typeweave.toml first
    typeweave_toml = project_dir / ".typeweave.toml"
    if typeweave_toml.exists():
        try:
            with open(typeweave_toml, "rb") as f:
                data = tomllib.load(f)
            return data.get("typeweave", {}), typeweave_toml
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring %s: %s", typeweave_toml, e)

    # Fall back to [tool.typeweave] in pyproject.toml
    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            tool = data.get("tool", {})
            if not isinstance(tool, dict):
                raise ConfigError(f"{pyproject}: 'tool' must be a table")
            return tool.get("typeweave", {}), pyproject
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring %s: %s", pyproject, e)

    return {}, None


def load_config(project_dir: Path) -> AnalyzerConfig:
    """Load the analyzer settings for *project_dir*, defaults when absent."""
    table, origin = _read_table(project_dir)
    config = AnalyzerConfig()
    if not table:
        return config

    if not isinstance(table, dict):
        raise ConfigError(f"{origin}: typeweave settings must be a table")

    exclude = table.get("exclude", [])
    if not isinstance(exclude, list) or not all(isinstance(p, str) for p in exclude):
        raise ConfigError(f"{origin}: 'exclude' must be a list of glob patterns")
    config.exclude = exclude

    library_root = table.get("library_root")
    if library_root is not None:
        if not isinstance(library_root, str):
            raise ConfigError(f"{origin}: 'library_root' must be a path string")
        path = Path(library_root)
        config.library_root = path if path.is_absolute() else project_dir / path

    encoding = table.get("encoding", config.encoding)
    if not isinstance(encoding, str):
        raise ConfigError(f"{origin}: 'encoding' must be a string")
    config.encoding = encoding

    tolerate = table.get("tolerate_syntax_errors", config.tolerate_syntax_errors)
    if not isinstance(tolerate, bool):
        raise ConfigError(f"{origin}: 'tolerate_syntax_errors' must be true or false")
    config.tolerate_syntax_errors = tolerate

    logger.debug("Loaded settings from %s", origin)
    return config
