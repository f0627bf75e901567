"""Read, write and rebuild the oracle's builtin class configuration."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Optional

from .config import Config
from .models import BuiltinArgument, BuiltinClassConfig, BuiltinMethod, BuiltinReturnType

logger = logging.getLogger(__name__)

UNTYPED = "Untyped"


def class_stub(class_name: str) -> BuiltinClassConfig:
    """A new builtin class with a single `new` class method returning itself."""
    return BuiltinClassConfig(
        frame="Builtin",
        klass=class_name,
        class_methods=[
            BuiltinMethod(
                name="new",
                return_type=BuiltinReturnType(type=[class_name]),
            )
        ],
    )


def method_stub(method_name: str) -> BuiltinMethod:
    """A method taking one untyped argument and returning an untyped value."""
    return BuiltinMethod(
        name=method_name,
        arguments=[BuiltinArgument(type=[UNTYPED])],
        return_type=BuiltinReturnType(type=[UNTYPED]),
    )


def dump_config(config: BuiltinClassConfig) -> str:
    """2-space indented JSON with a trailing newline."""
    return json.dumps(config.model_dump(by_alias=True), indent=2, ensure_ascii=False) + "\n"


class BuiltinConfigRepository:
    """One JSON file per class, named after the lower-cased class name.

    Example:
        repo = BuiltinConfigRepository(config.builtin_config_dir)
        hoge = repo.load("Hoge")
    """

    def __init__(self, config_dir: str | Path):
        self._config_dir = Path(config_dir).resolve()

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def path_for(self, class_name: str) -> Path:
        return self._config_dir / f"{class_name.lower()}.json"

    def find(self, class_name: str) -> Optional[Path]:
        """Path of the class's config file if it exists."""
        path = self.path_for(class_name)
        return path if path.is_file() else None

    def load(self, class_name: str) -> BuiltinClassConfig:
        """Parse the class's config file.

        Raises:
            OSError: If the file cannot be read
            pydantic.ValidationError: If the JSON does not match the schema
        """
        data = self.path_for(class_name).read_text(encoding="utf-8")
        return BuiltinClassConfig.model_validate_json(data)

    def save(self, config: BuiltinClassConfig) -> Path:
        """Write the config to its file, replacing any previous content.

        Raises:
            OSError: If the file cannot be written
        """
        path = self.path_for(config.klass)
        path.write_text(dump_config(config), encoding="utf-8")
        logger.info("Wrote builtin config %s", path)
        return path

    def contains(self, path: str | Path) -> bool:
        """Whether `path` is a JSON file inside the config directory."""
        candidate = Path(path)
        if candidate.suffix != ".json":
            return False
        try:
            candidate.resolve().relative_to(self._config_dir)
        except (ValueError, OSError):
            return False
        return True


def repository_for(config: Config) -> Optional[BuiltinConfigRepository]:
    config_dir = config.builtin_config_dir
    if config_dir is None:
        return None
    return BuiltinConfigRepository(config_dir)


def run_build(config: Config) -> bool:
    """Rebuild the oracle after its builtin config changed.

    Failures are logged and reported through the return value only.
    """
    if config.ti_path is None:
        return False

    logger.info("Running %s in %s", " ".join(config.build_command), config.ti_path)
    try:
        subprocess.run(
            config.build_command,
            cwd=config.ti_path,
            check=True,
            capture_output=True,
            text=True,
            timeout=config.build_timeout,
        )
    except subprocess.CalledProcessError as e:
        logger.warning("Build failed with exit code %d: %s", e.returncode, (e.stderr or "").strip())
        return False
    except subprocess.TimeoutExpired:
        logger.warning("Build timed out after %.0fs", config.build_timeout)
        return False
    except OSError as e:
        logger.warning("Could not run build command: %s", e)
        return False

    logger.info("Build complete")
    return True
