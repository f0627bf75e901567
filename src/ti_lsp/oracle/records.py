"""Typed records decoded from oracle output."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ClassNode:
    """A class within a frame. Used as a graph key."""

    frame: str
    klass: str


@dataclass(frozen=True)
class InheritanceEdge:
    """Directed child -> parent relation reported by `$` lines."""

    child: ClassNode
    parent: ClassNode


@dataclass(frozen=True)
class PrefixInfo:
    """Inferred type of the receiver in front of the cursor token."""

    frame: str
    klass: str

    @property
    def node(self) -> ClassNode:
        return ClassNode(self.frame, self.klass)


@dataclass(frozen=True)
class DefinitionCandidate:
    """One place where a method is declared. `row` is 0-based."""

    frame: str
    klass: str
    method: str
    file: str
    row: int


@dataclass(frozen=True)
class Suggestion:
    """A completion entry."""

    method: str
    detail: str


@dataclass(frozen=True)
class HoverInfo:
    method: str
    signature: str
    documentation: str = ""


@dataclass(frozen=True)
class OracleDiagnostic:
    """An error reported by the oracle. `row` is 0-based."""

    file: str
    row: int
    message: str


@dataclass(frozen=True)
class SignatureLens:
    """Inferred signature of a method declared at `row` (0-based)."""

    file: str
    row: int
    signature: str


@dataclass
class DefinitionReport:
    """Everything a single `--define` invocation reports."""

    prefix: PrefixInfo | None = None
    candidates: list[DefinitionCandidate] = field(default_factory=list)
    edges: list[InheritanceEdge] = field(default_factory=list)
