"""Feature-level oracle calls: build flags, run, decode."""

from __future__ import annotations

import logging

from ..config import Config
from . import decoder
from .records import (
    DefinitionReport,
    HoverInfo,
    InheritanceEdge,
    OracleDiagnostic,
    SignatureLens,
    Suggestion,
)
from .runner import ProcessRunner

logger = logging.getLogger(__name__)


def row_flag(row: int) -> str:
    """Oracle rows are 1-based; `row` is the 0-based editor row."""
    return f"--row={row + 1}"


class OracleClient:
    """One method per oracle flag.

    Each call writes the given text to a fresh temp file, so results always
    reflect the text at call start. Nothing is cached.
    """

    def __init__(self, runner: ProcessRunner, config: Config) -> None:
        self._runner = runner
        self._config = config

    @property
    def runner(self) -> ProcessRunner:
        return self._runner

    def diagnostics(self, text: str) -> list[OracleDiagnostic]:
        # The oracle exits non-zero when it reports errors, so decode
        # whatever was printed regardless of `ok`.
        result = self._runner.run_on_text(text, [], self._config.interactive_timeout)
        return decoder.decode_diagnostics(result.stdout)

    def suggest(self, text: str, row: int) -> list[Suggestion]:
        result = self._runner.run_on_text(
            text, ["--suggest", row_flag(row)], self._config.interactive_timeout
        )
        if not result.ok:
            return []
        return decoder.decode_suggestions(result.stdout)

    def all_types(self, text: str) -> list[Suggestion]:
        result = self._runner.run_on_text(text, ["--all-type"], self._config.interactive_timeout)
        if not result.ok:
            return []
        return decoder.decode_suggestions(result.stdout)

    def hover(self, text: str, row: int) -> HoverInfo | None:
        result = self._runner.run_on_text(
            text, ["--hover", row_flag(row)], self._config.interactive_timeout
        )
        if not result.ok:
            return None
        return decoder.decode_hover(result.stdout)

    def define(self, text: str, row: int) -> DefinitionReport:
        result = self._runner.run_on_text(
            text, ["--define", row_flag(row)], self._config.interactive_timeout
        )
        if not result.ok:
            return DefinitionReport()
        return decoder.decode_definition(result.stdout)

    def extends(self, text: str, class_name: str) -> list[InheritanceEdge]:
        result = self._runner.run_on_text(
            text, ["--extends", f"--class={class_name}"], self._config.interactive_timeout
        )
        if not result.ok:
            return []
        return decoder.decode_edges(result.stdout)

    def signatures(self, text: str) -> list[SignatureLens]:
        # Whole-file inference is slow; syntax errors yield no lenses.
        result = self._runner.run_on_text(
            text, ["-i"], self._config.slow_timeout, combine_stderr=True
        )
        if not result.ok:
            return []
        return decoder.decode_signatures(result.stdout)
