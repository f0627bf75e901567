"""Run the oracle executable under a deadline."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleResult:
    """Captured stdout and whether the run succeeded.

    `ok` is False on timeout, spawn failure and non-zero exit. Output
    written before a non-zero exit is kept. Stdout is decoded as UTF-8
    regardless of locale; invalid bytes become U+FFFD.
    """

    stdout: str
    ok: bool


FAILED = OracleResult(stdout="", ok=False)


class ProcessRunner:
    """Invokes the oracle as a subprocess.

    Failures never propagate: callers get an `OracleResult` with `ok=False`
    and treat it as "the oracle had nothing to say".

    Usage:
        runner = ProcessRunner("ti")
        result = runner.run_on_text(source, ["--hover", "--row=3"], timeout=1.0)
    """

    def __init__(
        self,
        executable: str = "ti",
        temp_prefix: str = "ti-lsp-",
        temp_suffix: str = ".rb",
    ) -> None:
        self.executable = executable
        self.temp_prefix = temp_prefix
        self.temp_suffix = temp_suffix

    def run(
        self,
        args: Sequence[str],
        timeout: float,
        combine_stderr: bool = False,
    ) -> OracleResult:
        """Run the oracle with `args`, killing it after `timeout` seconds."""
        command = [self.executable, *args]
        logger.debug("Running %s (timeout %.1fs)", command, timeout)

        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if combine_stderr else subprocess.DEVNULL,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Oracle timed out after %.1fs: %s", timeout, command)
            return FAILED
        except OSError as e:
            logger.info("Could not start oracle %s: %s", self.executable, e)
            return FAILED

        stdout = completed.stdout or ""
        if completed.returncode != 0:
            logger.debug("Oracle exited with %d: %s", completed.returncode, command)
            return OracleResult(stdout=stdout, ok=False)

        return OracleResult(stdout=stdout, ok=True)

    @contextmanager
    def document_copy(self, text: str) -> Iterator[Path]:
        """Write `text` to a fresh temp file, removed on exit.

        Raises:
            OSError: If the file cannot be created or written
        """
        fd, name = tempfile.mkstemp(prefix=self.temp_prefix, suffix=self.temp_suffix)
        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            yield path
        finally:
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    def run_on_text(
        self,
        text: str,
        flags: Sequence[str],
        timeout: float,
        combine_stderr: bool = False,
    ) -> OracleResult:
        """Run `oracle <tempfile> *flags` against unsaved document text."""
        try:
            with self.document_copy(text) as path:
                return self.run([str(path), *flags], timeout, combine_stderr)
        except OSError as e:
            logger.warning("Could not write document copy for oracle: %s", e)
            return FAILED

    def is_temp_path(self, file_name: str) -> bool:
        """Whether `file_name` names a document copy made by this runner."""
        return Path(file_name).name.startswith(self.temp_prefix)
