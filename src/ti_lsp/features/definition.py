"""Go to definition via `--define` and inheritance-aware matching."""

from __future__ import annotations

import logging
from pathlib import Path

from lsprotocol.types import Location, Position, Range

from ..builtin_config import BuiltinConfigRepository
from ..cursor import extract_target, line_at, replace_line
from ..oracle import DefinitionCandidate, OracleClient
from ..resolver import SymbolResolver, method_name_of

logger = logging.getLogger(__name__)


def location_at(uri: str, row: int) -> Location:
    start = Position(line=row, character=0)
    return Location(uri=uri, range=Range(start=start, end=start))


def candidate_uri(oracle: OracleClient, candidate: DefinitionCandidate, document_uri: str) -> str:
    """Map the candidate's file back to an editor URI.

    Declarations in the temporary document copy belong to the document
    itself; other paths are relative to the working directory.
    """
    if oracle.runner.is_temp_path(candidate.file):
        return document_uri
    return (Path.cwd() / candidate.file).as_uri()


def receiver_class(target: str) -> str:
    """"JSON.parse" -> "JSON", "Hoge" -> "Hoge"."""
    return target.split(".", 1)[0].strip()


def definition(
    oracle: OracleClient,
    resolver: SymbolResolver,
    text: str,
    uri: str,
    position: Position,
    builtins: BuiltinConfigRepository | None = None,
) -> Location | None:
    line = line_at(text, position.line)
    if line is None:
        return None

    target = extract_target(line, position.character)
    if not target:
        return None

    report = oracle.define(replace_line(text, position.line, target), position.line)
    if report.prefix is None:
        return None

    candidate = resolver.resolve(report, method_name_of(target))
    if candidate is not None:
        return location_at(candidate_uri(oracle, candidate, uri), candidate.row)

    # References to a builtin class itself point at its config file
    if builtins is not None:
        json_path = builtins.find(receiver_class(target))
        if json_path is not None:
            return location_at(json_path.as_uri(), 0)

    logger.debug("No definition for %r", target)
    return None
