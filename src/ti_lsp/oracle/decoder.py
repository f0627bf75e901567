"""Decoder for the oracle's line-tagged output.

Every line starts with a tag character:

    @   prefix info (``frame:::class``) or, for ``-i``, ``file:::row:::signature``
    %   candidate / suggestion / hover signature, fields vary by flag
    $   inheritance edge ``childFrame:::childClass:::parentFrame:::parentClass``

Untagged lines that contain the delimiter are diagnostics
(``file:::row:::message``). Fields are split with a bounded split so the last
field may itself contain the delimiter. Lines without enough fields, and rows
that are zero or not integers, are dropped.
"""

from __future__ import annotations

import logging
from typing import Iterator

from .records import (
    ClassNode,
    DefinitionCandidate,
    DefinitionReport,
    HoverInfo,
    InheritanceEdge,
    OracleDiagnostic,
    PrefixInfo,
    SignatureLens,
    Suggestion,
)

logger = logging.getLogger(__name__)

DELIMITER = ":::"

PREFIX_TAG = "@"
CANDIDATE_TAG = "%"
EDGE_TAG = "$"
TAGS = (PREFIX_TAG, CANDIDATE_TAG, EDGE_TAG)


def split_fields(body: str, count: int) -> list[str] | None:
    """Split into at most `count` fields; None when fewer are present."""
    parts = body.split(DELIMITER, count - 1)
    if len(parts) < count:
        return None
    return parts


def parse_row(value: str) -> int | None:
    """Convert a 1-based oracle row to a 0-based editor row."""
    try:
        row = int(value)
    except ValueError:
        return None
    if row < 1:
        return None
    return row - 1


def _tagged(output: str, tag: str) -> Iterator[str]:
    for line in output.splitlines():
        if line.startswith(tag):
            yield line[len(tag):]


def decode_suggestions(output: str) -> list[Suggestion]:
    """`%method:::detail` lines, deduplicated by detail text."""
    seen: set[str] = set()
    suggestions: list[Suggestion] = []

    for body in _tagged(output, CANDIDATE_TAG):
        fields = split_fields(body, 2)
        if fields is None:
            continue
        method, detail = fields
        if detail in seen:
            continue
        seen.add(detail)
        suggestions.append(Suggestion(method=method, detail=detail))

    return suggestions


def decode_hover(output: str) -> HoverInfo | None:
    """First `%method:::signature[:::documentation]` line."""
    for line in output.splitlines():
        line = line.strip()
        if not line.startswith(CANDIDATE_TAG):
            continue
        parts = line[1:].split(DELIMITER, 2)
        if len(parts) < 2:
            continue
        documentation = parts[2] if len(parts) == 3 else ""
        return HoverInfo(method=parts[0], signature=parts[1], documentation=documentation)
    return None


def decode_prefix(body: str) -> PrefixInfo | None:
    """`frame:::class` with an optional trailing `:::rest`."""
    parts = body.split(DELIMITER, 2)
    if len(parts) < 2:
        return None
    return PrefixInfo(frame=parts[0], klass=parts[1])


def decode_candidate(body: str) -> DefinitionCandidate | None:
    fields = split_fields(body, 5)
    if fields is None:
        return None
    frame, klass, method, file, row_text = fields
    row = parse_row(row_text)
    if row is None:
        return None
    return DefinitionCandidate(frame=frame, klass=klass, method=method, file=file, row=row)


def decode_edge(body: str) -> InheritanceEdge | None:
    fields = split_fields(body, 4)
    if fields is None:
        return None
    return InheritanceEdge(
        child=ClassNode(fields[0], fields[1]),
        parent=ClassNode(fields[2], fields[3]),
    )


def decode_edges(output: str) -> list[InheritanceEdge]:
    edges = []
    for body in _tagged(output, EDGE_TAG):
        edge = decode_edge(body)
        if edge is not None:
            edges.append(edge)
    return edges


def decode_definition(output: str) -> DefinitionReport:
    """Prefix info, candidates and edges of one `--define` run.

    Candidates keep the order the oracle emitted them in; resolution
    depends on it.
    """
    report = DefinitionReport()

    for line in output.splitlines():
        if not line:
            continue
        tag, body = line[0], line[1:]
        if tag == PREFIX_TAG:
            prefix = decode_prefix(body)
            if prefix is not None:
                report.prefix = prefix
        elif tag == CANDIDATE_TAG:
            candidate = decode_candidate(body)
            if candidate is not None:
                report.candidates.append(candidate)
        elif tag == EDGE_TAG:
            edge = decode_edge(body)
            if edge is not None:
                report.edges.append(edge)

    return report


def decode_diagnostics(output: str) -> list[OracleDiagnostic]:
    """Untagged `file:::row:::message` lines."""
    diagnostics = []

    for line in output.splitlines():
        if not line or line[0] in TAGS or DELIMITER not in line:
            continue
        fields = split_fields(line, 3)
        if fields is None:
            continue
        row = parse_row(fields[1])
        if row is None:
            logger.debug("Dropping diagnostic with bad row: %r", line)
            continue
        diagnostics.append(OracleDiagnostic(file=fields[0], row=row, message=fields[2]))

    return diagnostics


def decode_signatures(output: str) -> list[SignatureLens]:
    """`@file:::row:::signature` lines emitted by `-i`."""
    lenses = []
    for body in _tagged(output, PREFIX_TAG):
        fields = split_fields(body, 3)
        if fields is None:
            continue
        row = parse_row(fields[1])
        if row is None:
            continue
        lenses.append(SignatureLens(file=fields[0], row=row, signature=fields[2]))
    return lenses
