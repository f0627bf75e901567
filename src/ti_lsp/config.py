"""Configuration management for the ti language server."""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


DEFAULT_BUILD_COMMAND = ["make", "install"]

# Relative to RUBY_TI_PATH
BUILTIN_CONFIG_SUBDIR = Path("builtin") / "builtin_config"


class Config(BaseModel):
    """Server configuration."""

    # Oracle Settings
    oracle_executable: str = Field(default="ti")
    ti_path: Optional[Path] = Field(default=None)
    interactive_timeout: float = Field(default=1.0)
    slow_timeout: float = Field(default=5.0)

    # Temp file naming, also used to recognise the document copy in oracle output
    temp_prefix: str = Field(default="ti-lsp-")
    temp_suffix: str = Field(default=".rb")

    # Build Settings
    build_command: list[str] = Field(default_factory=lambda: DEFAULT_BUILD_COMMAND.copy())
    build_timeout: float = Field(default=300.0)

    # Presentation
    language_id: str = Field(default="ruby")

    @property
    def builtin_config_dir(self) -> Optional[Path]:
        """Directory holding one JSON file per builtin class, if it exists."""
        if self.ti_path is None:
            return None
        config_dir = self.ti_path / BUILTIN_CONFIG_SUBDIR
        if config_dir.is_dir():
            return config_dir
        return None

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        def _parse_float(value: Optional[str], fallback: float) -> float:
            try:
                return float(value) if value is not None else fallback
            except ValueError:
                return fallback

        ti_path_env = (os.getenv("RUBY_TI_PATH") or "").strip().strip("\"'")

        build_command = DEFAULT_BUILD_COMMAND.copy()
        build_env = os.getenv("TI_BUILD_COMMAND")
        if build_env and build_env.split():
            build_command = build_env.split()

        return cls(
            oracle_executable=os.getenv("TI_EXECUTABLE", "ti"),
            ti_path=Path(ti_path_env) if ti_path_env else None,
            interactive_timeout=_parse_float(os.getenv("TI_TIMEOUT"), 1.0),
            slow_timeout=_parse_float(os.getenv("TI_SLOW_TIMEOUT"), 5.0),
            build_command=build_command,
            build_timeout=_parse_float(os.getenv("TI_BUILD_TIMEOUT"), 300.0),
        )
