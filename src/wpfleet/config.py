"""Configuration management for wpfleet."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import (
    CLEANUP_COMMAND_TIMEOUT,
    CONFIG_FILE,
    DEFAULT_LOCK_DIR,
    DEFAULT_LOCK_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    LOCK_SUFFIX,
)


class ConfigError(Exception):
    """Error loading configuration."""


class ProjectConfig(BaseModel):
    """Project-level configuration."""

    name: str = "wpfleet"


class LocksConfig(BaseModel):
    """Configuration for fleet operation locks."""

    directory: Path = Field(
        default=Path(DEFAULT_LOCK_DIR), description="Directory holding named locks"
    )
    timeout: float = Field(default=DEFAULT_LOCK_TIMEOUT, ge=0, description="Seconds to wait")
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between attempts"
    )

    def resolve(self, name: str | Path) -> Path:
        """Resolve a lock name to a lock directory.

        Absolute paths are used as-is. Bare names live in ``directory``
        and get a ``.lock`` suffix.
        """
        path = Path(name)
        if path.is_absolute():
            return path
        if not path.name.endswith(LOCK_SUFFIX):
            path = path.with_name(path.name + LOCK_SUFFIX)
        return self.directory / path


class CleanupConfig(BaseModel):
    """Configuration for shutdown cleanup."""

    command_timeout: float = Field(default=CLEANUP_COMMAND_TIMEOUT, gt=0)


class WPFleetConfig(BaseModel):
    """Root configuration for wpfleet."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    locks: LocksConfig = Field(default_factory=LocksConfig)
    cleanup: CleanupConfig = Field(default_factory=CleanupConfig)


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_FILE


def load_config(config_path: Path | None = None) -> WPFleetConfig:
    """Load config from a TOML file.

    Args:
        config_path: Path to wpfleet.toml (default: current directory)

    Returns:
        Loaded configuration, or defaults if the file doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    config_path = config_path or default_config_path()
    if not config_path.exists():
        return WPFleetConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return WPFleetConfig.model_validate(data)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def write_config_template(config_path: Path | None = None) -> Path:
    """Write default wpfleet.toml template.

    Args:
        config_path: Destination (default: current directory)

    Returns:
        Path to the written config file
    """
    config_path = config_path or default_config_path()
    template = {
        "project": {"name": "wpfleet"},
        "locks": {
            "directory": DEFAULT_LOCK_DIR,
            "timeout": DEFAULT_LOCK_TIMEOUT,
            "poll_interval": DEFAULT_POLL_INTERVAL,
        },
        "cleanup": {"command_timeout": CLEANUP_COMMAND_TIMEOUT},
    }
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(tomli_w.dumps(template).encode())
    return config_path
