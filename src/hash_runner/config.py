"""Run configuration: validated model and config file discovery.

The loosely-typed mapping read from disk is converted into a frozen
RunConfig at this single boundary, so the rest of the engine never has to
deal with missing or malformed fields.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    CONFIG_FILENAMES,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_STORE_FILE,
    PYPROJECT_FILE,
    TOOL_NAME,
)
from .errors import ConfigNotFoundError, InvalidConfigError

logger = logging.getLogger(__name__)


class RunConfig(BaseModel):
    """
    Fully resolved configuration for one run.

    base_dir is the directory that held the config file; every relative
    path (patterns, store_path, snapshot keys) is interpreted against it.

    include and exclude are .gitignore-style patterns, not shell globs:
    `*.ts` matches at any depth, while `/*.ts` or `src/*.ts` is anchored
    to base_dir. See PatternSet.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    base_dir: Path
    include: List[str] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)
    command: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("command", "exec_on_change", "execOnChange"),
    )
    store_path: str = Field(
        DEFAULT_STORE_FILE,
        min_length=1,
        validation_alias=AliasChoices("store_path", "hash_file", "hashFile"),
    )
    chunk_size: int = Field(
        DEFAULT_CHUNK_SIZE,
        ge=1,
        validation_alias=AliasChoices("chunk_size", "comparison_chunk_size", "comparisonChunkSize"),
    )
    force: bool = False
    silent: bool = False

    @field_validator("command")
    @classmethod
    def _command_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("command must not be blank")
        return value

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _single_pattern_as_list(cls, value: Any) -> Any:
        # Allow `include: "src/**"` as shorthand for a one-element list
        if isinstance(value, str):
            return [value]
        return value

    @property
    def store_file(self) -> Path:
        """Absolute location of the snapshot store."""
        return self.base_dir / self.store_path


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from start to find the nearest hash-runner config file.

    Dedicated config files win over pyproject.toml in the same directory;
    a pyproject.toml only counts when it has a [tool.hash-runner] table.
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate

        pyproject = directory / PYPROJECT_FILE
        if pyproject.is_file() and _read_pyproject_table(pyproject) is not None:
            return pyproject

    return None


def _read_pyproject_table(path: Path) -> Optional[Dict[str, Any]]:
    """Return the [tool.hash-runner] table of a pyproject.toml, if any."""
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Ignoring unreadable %s: %s", path, e)
        return None
    return data.get("tool", {}).get(TOOL_NAME)


def read_config_file(path: Path) -> Optional[Dict[str, Any]]:
    """Parse a config file into a raw mapping.

    Returns:
        The mapping, or None when the file holds no configuration.

    Raises:
        InvalidConfigError: If the file cannot be parsed or is not a mapping.
    """
    if path.name == PYPROJECT_FILE:
        data = _read_pyproject_table(path)
    else:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidConfigError(path, str(e)) from e
        try:
            if path.suffix == ".json":
                data = json.loads(text) if text.strip() else None
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise InvalidConfigError(path, f"could not parse file ({e})") from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise InvalidConfigError(path, f"expected a mapping, got {type(data).__name__}")
    return data


def load_run_config(
    config_path: Optional[Path] = None,
    *,
    start: Optional[Path] = None,
    force: Optional[bool] = None,
    silent: Optional[bool] = None,
) -> RunConfig:
    """Locate, read and validate the run configuration.

    Args:
        config_path: Explicit config file; skips discovery when given
        start: Directory to start discovery from (default: cwd)
        force: Overrides the file's `force` when not None
        silent: Overrides the file's `silent` when not None

    Raises:
        ConfigNotFoundError: No config file, or the file is empty
        InvalidConfigError: The file content does not validate
    """
    if config_path is not None:
        path = Path(config_path).resolve()
        if not path.is_file():
            raise ConfigNotFoundError(path)
    else:
        path = find_config_file(start)
        if path is None:
            raise ConfigNotFoundError()

    data = read_config_file(path)
    if not data:
        raise ConfigNotFoundError(path)

    logger.debug("Loaded config from %s", path)

    raw = dict(data)
    raw["base_dir"] = path.parent
    if force is not None:
        raw["force"] = force
    if silent is not None:
        raw["silent"] = silent

    try:
        return RunConfig.model_validate(raw)
    except ValidationError as e:
        reasons = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidConfigError(path, reasons) from e
