"""Per-request inheritance graph built from `$` edges."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from ..oracle.records import ClassNode, InheritanceEdge

logger = logging.getLogger(__name__)


class InheritanceGraph:
    """Maps each class node to its declared parents, in emission order.

    Built fresh for every request and thrown away afterwards. The oracle
    should never report a cycle, but traversals track visited nodes so a
    bad edge list still terminates.
    """

    def __init__(self, edges: Iterable[InheritanceEdge] = ()) -> None:
        self._parents: dict[ClassNode, list[ClassNode]] = {}
        for edge in edges:
            self.add_edge(edge.child, edge.parent)

    def add_edge(self, child: ClassNode, parent: ClassNode) -> None:
        self._parents.setdefault(child, []).append(parent)

    def parents(self, node: ClassNode) -> list[ClassNode]:
        return list(self._parents.get(node, ()))

    def __len__(self) -> int:
        return len(self._parents)

    def _walk(self, start: ClassNode) -> Iterator[ClassNode]:
        """Depth-first preorder over ancestors of `start`, each node once.

        `start` itself is only yielded when a cycle leads back to it.
        """
        visited: set[ClassNode] = set()
        stack = list(reversed(self._parents.get(start, ())))

        while stack:
            node = stack.pop()
            if node in visited:
                continue
            if node == start:
                logger.debug("Inheritance cycle through %s:%s", start.frame, start.klass)
            visited.add(node)
            yield node
            stack.extend(reversed(self._parents.get(node, ())))

    def ancestors(self, node: ClassNode) -> list[ClassNode]:
        return list(self._walk(node))

    def is_ancestor(self, child: ClassNode, ancestor: ClassNode) -> bool:
        """True iff a directed path leads from `child` to `ancestor`."""
        return any(node == ancestor for node in self._walk(child))

    def has_ancestor_class(self, child: ClassNode, class_name: str) -> bool:
        """True iff some ancestor of `child`, in any frame, is named `class_name`."""
        return any(node.klass == class_name for node in self._walk(child))
