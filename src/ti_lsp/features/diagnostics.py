"""Diagnostics: run the oracle on the whole document and publish its errors."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range

from ..oracle import OracleClient, OracleDiagnostic

logger = logging.getLogger(__name__)

SOURCE = "ruby-ti"
# Diagnostics cover the whole line; clients clamp the end column.
LINE_END = 1000


def to_diagnostic(record: OracleDiagnostic) -> Diagnostic:
    return Diagnostic(
        range=Range(
            start=Position(line=record.row, character=0),
            end=Position(line=record.row, character=LINE_END),
        ),
        severity=DiagnosticSeverity.Error,
        source=SOURCE,
        message=record.message,
    )


def collect_diagnostics(oracle: OracleClient, text: str) -> list[Diagnostic]:
    return [to_diagnostic(record) for record in oracle.diagnostics(text)]


class DiagnosticsPublisher:
    """Runs one detached validation cycle per document change.

    Each cycle clears the document's diagnostics and then publishes the
    fresh list. A cycle that finishes after a newer one was scheduled for
    the same URI is dropped, so older oracle output never overwrites newer.

    Must be used from the event loop thread; the oracle call itself runs
    in a worker thread.
    """

    def __init__(
        self,
        oracle: OracleClient,
        publish: Callable[[str, list[Diagnostic]], None],
    ) -> None:
        self._oracle = oracle
        self._publish = publish
        self._generations: dict[str, int] = {}
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, uri: str, text: str) -> asyncio.Task:
        generation = self._generations.get(uri, 0) + 1
        self._generations[uri] = generation

        task = asyncio.get_running_loop().create_task(self._run(uri, text, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, uri: str, text: str, generation: int) -> None:
        diagnostics = await asyncio.to_thread(collect_diagnostics, self._oracle, text)

        if self._generations.get(uri) != generation:
            logger.debug("Dropping stale diagnostics for %s", uri)
            return

        self._publish(uri, [])
        self._publish(uri, diagnostics)
        logger.debug("Published %d diagnostics for %s", len(diagnostics), uri)
