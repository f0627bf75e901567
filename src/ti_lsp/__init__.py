"""ti-lsp - Ruby language server backed by the Ruby-TI oracle."""

__version__ = "0.1.0"

from .config import Config
from .documents import DocumentStore
from .oracle import OracleClient, ProcessRunner
from .resolver import InheritanceGraph, SymbolResolver

__all__ = [
    "Config",
    "DocumentStore",
    "OracleClient",
    "ProcessRunner",
    "InheritanceGraph",
    "SymbolResolver",
]
