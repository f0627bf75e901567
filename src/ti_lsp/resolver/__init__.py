"""Inheritance-aware symbol resolution."""

from .graph import InheritanceGraph
from .symbols import SymbolResolver, matches, method_name_of

__all__ = [
    "InheritanceGraph",
    "SymbolResolver",
    "matches",
    "method_name_of",
]
