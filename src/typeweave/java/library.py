"""Index of the class names shipped in library archives."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

logger = logging.getLogger(__name__)


class LibraryIndex:
    """Qualified names of the classes found in ``*.jar`` files.

    Nested classes are recorded with ``.`` separators (``a.b.Outer.Inner``);
    anonymous and synthetic classes are skipped.
    """

    def __init__(self, names: set[str] | None = None):
        self._names: set[str] = set(names or ())

    @classmethod
    def scan(cls, library_root: Path | None) -> LibraryIndex:
        index = cls()
        if library_root is None:
            return index
        if not library_root.is_dir():
            logger.warning("Library directory %s not found", library_root)
            return index

        for jar in sorted(library_root.rglob("*.jar")):
            if not jar.is_file():
                continue
            try:
                index.add_jar(jar)
            except (OSError, zipfile.BadZipFile) as e:
                logger.warning("Skipping library %s: %s", jar.name, e)
        logger.debug("Library index: %d classes", len(index))
        return index

    def add_jar(self, jar: Path) -> None:
        with zipfile.ZipFile(jar) as archive:
            count = 0
            for entry in archive.namelist():
                name = _class_name(entry)
                if name is not None:
                    self._names.add(name)
                    count += 1
        logger.debug("Added %s (%d classes)", jar.name, count)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._names

    def __len__(self) -> int:
        return len(self._names)


def _class_name(entry: str) -> str | None:
    if not entry.endswith(".class"):
        return None
    path = entry[: -len(".class")]
    if path.startswith("META-INF/") or path.endswith(("module-info", "package-info")):
        return None
    parts = path.split("/")
    nested = parts[-1].split("$")
    # Anonymous classes are numbered: Outer$1, Outer$1Local
    if any(not segment or segment[0].isdigit() for segment in nested):
        return None
    return ".".join(parts[:-1] + nested)
