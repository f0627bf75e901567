"""Match a used method to its declaring class."""

from __future__ import annotations

import logging

from ..cursor import extract_word
from ..oracle.records import DefinitionCandidate, DefinitionReport, PrefixInfo
from .graph import InheritanceGraph

logger = logging.getLogger(__name__)


def method_name_of(target: str) -> str:
    """Bare method name of a cursor token.

    Examples: "h.test" -> "test", "test" -> "test", "h.nil?" -> "nil?"
    """
    return extract_word(target, len(target))


def matches(
    candidate: DefinitionCandidate,
    prefix: PrefixInfo,
    method_name: str,
    graph: InheritanceGraph,
) -> bool:
    if candidate.method != method_name:
        return False

    if candidate.frame == prefix.frame and candidate.klass == prefix.klass:
        return True

    return graph.has_ancestor_class(prefix.node, candidate.klass)


class SymbolResolver:
    """Picks the definition a cursor token refers to.

    Candidates are tried in the order the oracle emitted them and the first
    one declared on the receiver's type, or on one of its ancestors, wins.
    """

    def resolve(self, report: DefinitionReport, method_name: str) -> DefinitionCandidate | None:
        if report.prefix is None or not method_name:
            return None

        graph = InheritanceGraph(report.edges)

        for candidate in report.candidates:
            if matches(candidate, report.prefix, method_name, graph):
                logger.debug(
                    "Resolved %s on %s:%s to %s:%s",
                    method_name,
                    report.prefix.frame,
                    report.prefix.klass,
                    candidate.frame,
                    candidate.klass,
                )
                return candidate

        return None
