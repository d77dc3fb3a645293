"""Java front end: syntax model, tree-sitter parser and symbol resolver."""

from typeweave.java.library import LibraryIndex
from typeweave.java.parser import JavaSourceParser
from typeweave.java.resolver import ProjectResolver, Resolution

__all__ = [
    "JavaSourceParser",
    "LibraryIndex",
    "ProjectResolver",
    "Resolution",
]
