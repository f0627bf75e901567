"""Tests for ProcessRunner - subprocess invocation, timeouts and temp files."""

import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from ti_lsp.oracle import OracleResult, ProcessRunner


def _completed(stdout: str, returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["ti"], returncode=returncode, stdout=stdout)


class TestRun:
    """Test process execution and failure mapping."""

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_passes_args_and_timeout(self, mock_run):
        """Arguments and the deadline reach subprocess.run."""
        mock_run.return_value = _completed("%a:::b\n")

        result = ProcessRunner("ti").run(["file.rb", "--hover", "--row=2"], timeout=1.0)

        assert result == OracleResult(stdout="%a:::b\n", ok=True)
        mock_run.assert_called_once_with(
            ["ti", "file.rb", "--hover", "--row=2"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            encoding="utf-8",
            errors="replace",
            timeout=1.0,
        )

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_combined_output(self, mock_run):
        """Stderr can be merged into stdout."""
        mock_run.return_value = _completed("")

        ProcessRunner("ti").run(["file.rb", "-i"], timeout=5.0, combine_stderr=True)

        assert mock_run.call_args[1]["stderr"] == subprocess.STDOUT

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_timeout_is_not_ok(self, mock_run):
        """A timeout gives an empty failed result."""
        mock_run.side_effect = subprocess.TimeoutExpired("ti", 1.0)

        result = ProcessRunner("ti").run(["file.rb"], timeout=1.0)

        assert result == OracleResult(stdout="", ok=False)

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_spawn_failure_is_not_ok(self, mock_run):
        """A missing executable gives an empty failed result."""
        mock_run.side_effect = FileNotFoundError("ti")

        result = ProcessRunner("ti").run(["file.rb"], timeout=1.0)

        assert result.ok is False
        assert result.stdout == ""

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_nonzero_exit_keeps_output(self, mock_run):
        """Output before a non-zero exit is kept."""
        mock_run.return_value = _completed("a.rb:::1:::boom\n", returncode=1)

        result = ProcessRunner("ti").run(["file.rb"], timeout=1.0)

        assert result.ok is False
        assert result.stdout == "a.rb:::1:::boom\n"


class TestRunOnText:
    """Test the temporary document copy."""

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_writes_text_and_removes_file(self, mock_run):
        """The document copy holds the text and is removed afterwards."""
        seen = {}

        def fake_run(command, **kwargs):
            path = Path(command[1])
            seen["path"] = path
            seen["text"] = path.read_text(encoding="utf-8")
            return _completed("ok")

        mock_run.side_effect = fake_run

        result = ProcessRunner("ti").run_on_text("puts 1\n", ["--suggest", "--row=1"], timeout=1.0)

        assert result.ok is True
        assert seen["text"] == "puts 1\n"
        assert seen["path"].name.startswith("ti-lsp-")
        assert seen["path"].suffix == ".rb"
        assert not seen["path"].exists()

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_removes_file_after_timeout(self, mock_run):
        """The document copy is removed after a timeout."""
        paths = []

        def fake_run(command, **kwargs):
            paths.append(Path(command[1]))
            raise subprocess.TimeoutExpired("ti", 1.0)

        mock_run.side_effect = fake_run

        result = ProcessRunner("ti").run_on_text("x", [], timeout=1.0)

        assert result.ok is False
        assert not paths[0].exists()

    @patch("ti_lsp.oracle.runner.subprocess.run")
    def test_fresh_file_per_call(self, mock_run):
        """Every call gets its own copy."""
        paths = []

        def fake_run(command, **kwargs):
            paths.append(command[1])
            return _completed("")

        mock_run.side_effect = fake_run
        runner = ProcessRunner("ti")

        runner.run_on_text("a", [], timeout=1.0)
        runner.run_on_text("b", [], timeout=1.0)

        assert paths[0] != paths[1]

    @patch("ti_lsp.oracle.runner.tempfile.mkstemp")
    def test_temp_file_failure(self, mock_mkstemp):
        """Failing to write the copy gives a failed result."""
        mock_mkstemp.side_effect = OSError("disk full")

        result = ProcessRunner("ti").run_on_text("x", [], timeout=1.0)

        assert result == OracleResult(stdout="", ok=False)


class TestIsTempPath:
    def test_recognises_copies(self):
        runner = ProcessRunner("ti", temp_prefix="ti-lsp-")
        assert runner.is_temp_path("/tmp/ti-lsp-abc123.rb") is True
        assert runner.is_temp_path("ti-lsp-abc123.rb") is True
        assert runner.is_temp_path("app/models/user.rb") is False


def _write_oracle(directory: Path, body: str) -> Path:
    script = directory / "fake-ti"
    script.write_text("#!/bin/sh\n" + body + "\n")
    script.chmod(0o755)
    return script


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
class TestRealProcess:
    """Run a real executable standing in for the oracle."""

    def test_invalid_utf8_is_replaced(self, tmp_path):
        """Undecodable bytes degrade to U+FFFD instead of raising."""
        script = _write_oracle(tmp_path, r"printf 'a.rb:::1:::bad \377 byte\n'")

        result = ProcessRunner(str(script)).run_on_text("x", [], timeout=5.0)

        assert result.ok is True
        assert result.stdout == "a.rb:::1:::bad \ufffd byte\n"

    def test_utf8_output_is_decoded(self, tmp_path):
        """Non-ASCII output decodes as UTF-8 whatever the locale."""
        script = _write_oracle(tmp_path, r"printf '%%foo:::foo() -> String:::caf\303\251\n'")

        result = ProcessRunner(str(script)).run(["file.rb"], timeout=5.0)

        assert result.stdout == "%foo:::foo() -> String:::café\n"

    def test_deadline_kills_slow_oracle(self, tmp_path):
        """A hung oracle yields an empty, failed result."""
        script = _write_oracle(tmp_path, "sleep 5")

        result = ProcessRunner(str(script)).run(["file.rb"], timeout=0.5)

        assert result == OracleResult(stdout="", ok=False)
