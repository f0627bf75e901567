"""Bridge to the external `ti` oracle: subprocess runner, output decoder, client."""

from .records import (
    ClassNode,
    InheritanceEdge,
    PrefixInfo,
    DefinitionCandidate,
    DefinitionReport,
    Suggestion,
    HoverInfo,
    OracleDiagnostic,
    SignatureLens,
)
from .runner import ProcessRunner, OracleResult
from .client import OracleClient

__all__ = [
    "ClassNode",
    "InheritanceEdge",
    "PrefixInfo",
    "DefinitionCandidate",
    "DefinitionReport",
    "Suggestion",
    "HoverInfo",
    "OracleDiagnostic",
    "SignatureLens",
    "ProcessRunner",
    "OracleResult",
    "OracleClient",
]
