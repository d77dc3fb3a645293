"""Project-wide analyses over a Java source root."""

from typeweave.analyzers.base import AbstractAnalyzer, Analyzer, SourceSet
from typeweave.analyzers.dependency import DependencyAnalyzer
from typeweave.analyzers.structural import StructuralAnalyzer

__all__ = [
    "AbstractAnalyzer",
    "Analyzer",
    "DependencyAnalyzer",
    "SourceSet",
    "StructuralAnalyzer",
]
