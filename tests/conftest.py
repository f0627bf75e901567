"""Pytest configuration and shared fixtures."""

import pytest
from dataclasses import dataclass
from pathlib import Path
from ti_lsp.config import Config, BUILTIN_CONFIG_SUBDIR
from ti_lsp.oracle import OracleClient, OracleResult, ProcessRunner


@dataclass
class OracleCall:
    flags: list[str]
    text: str
    path: str
    timeout: float
    combine_stderr: bool


class ScriptedRunner(ProcessRunner):
    """Runner that answers from a script instead of spawning the oracle.

    Output is looked up by the first flag ("" for a plain diagnostics run).
    The document copy is still written by the real `run_on_text`, so each
    call records the exact text the oracle would have seen.
    """

    def __init__(self, outputs: dict[str, str] | None = None, ok: bool = True):
        super().__init__("ti")
        self.outputs = outputs or {}
        self.ok = ok
        self.calls: list[OracleCall] = []

    def run(self, args, timeout, combine_stderr=False):
        path, *flags = args
        self.calls.append(
            OracleCall(
                flags=list(flags),
                text=Path(path).read_text(encoding="utf-8"),
                path=path,
                timeout=timeout,
                combine_stderr=combine_stderr,
            )
        )
        key = flags[0] if flags else ""
        return OracleResult(stdout=self.outputs.get(key, ""), ok=self.ok)


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Provide a test configuration rooted in a temporary ruby-ti checkout."""
    ti_path = tmp_path / "ruby-ti"
    ti_path.mkdir()
    return Config(ti_path=ti_path, build_command=["true"])


@pytest.fixture
def builtin_dir(config: Config) -> Path:
    """Create the builtin config directory."""
    config_dir = config.ti_path / BUILTIN_CONFIG_SUBDIR
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def make_oracle(config: Config):
    """Factory for an OracleClient backed by a ScriptedRunner."""

    def _make(outputs: dict[str, str] | None = None, ok: bool = True) -> OracleClient:
        return OracleClient(ScriptedRunner(outputs, ok), config)

    return _make


@pytest.fixture
def script_oracle(tmp_path: Path, config: Config):
    """Factory for an OracleClient that spawns a real shell script."""

    def _make(body: str) -> OracleClient:
        script = tmp_path / "fake-ti"
        script.write_text("#!/bin/sh\n" + body + "\n")
        script.chmod(0o755)
        return OracleClient(ProcessRunner(str(script)), config)

    return _make
