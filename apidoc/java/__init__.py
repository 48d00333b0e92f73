"""Java source parsing and type resolution."""

from .index import SourceTypeResolver
from .javadoc import Javadoc, parse_javadoc
from .parser import TREE_SITTER_AVAILABLE, CompilationUnit, JavaSourceParser
from .scanner import iter_java_sources

__all__ = [
    "CompilationUnit",
    "JavaSourceParser",
    "Javadoc",
    "SourceTypeResolver",
    "TREE_SITTER_AVAILABLE",
    "iter_java_sources",
    "parse_javadoc",
]
