"""
Configuration for sdkcache.

All paths the cache registry touches are carried by an explicit CacheConfig
instead of module-level globals, so the registry can be bound to any root
(a temporary directory in tests, a custom location from config.yaml).

Layout (defaults, relative to the sdkcache home):
    versions/          : One directory per cached version
    versions/.staging/ : Fetch staging area
    versions/.lock     : Advisory lock for mutating operations
    default            : Global pointer (symlink to a version directory)
    config.yaml        : Optional overrides
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from sdkcache.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "SDKCACHE_HOME"
CONFIG_FILE_NAME = "config.yaml"

DEFAULT_GIT_URL = "https://github.com/flutter/flutter.git"
POINTER_KINDS = ("symlink", "file")


def default_home() -> Path:
    """
    Get the platform-specific sdkcache home directory.

    Returns:
        Path: $SDKCACHE_HOME when set, otherwise
            - Windows: %USERPROFILE%\\.sdkcache
            - Linux/macOS: ~/.sdkcache
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser().absolute()

    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ConfigError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine sdkcache home directory."
            )
        return Path(user_profile) / ".sdkcache"
    return Path.home() / ".sdkcache"


@dataclass
class CacheConfig:
    """Paths and settings the cache registry is bound to."""

    home: Path
    cache_root: Path = None  # type: ignore[assignment]
    global_link: Path = None  # type: ignore[assignment]
    executable: str = "bin/flutter"
    """Executable path relative to a version directory"""

    metadata_file: str = "version"
    """File inside a version directory whose first line is the SDK version"""

    global_pointer: str = "symlink"
    lock_timeout: float = 30.0
    git_url: str = DEFAULT_GIT_URL

    def __post_init__(self):
        self.home = Path(self.home).expanduser().absolute()
        if self.cache_root is None:
            self.cache_root = self.home / "versions"
        if self.global_link is None:
            self.global_link = self.home / "default"
        self.cache_root = self._under_home(self.cache_root)
        self.global_link = self._under_home(self.global_link)

        if self.global_pointer not in POINTER_KINDS:
            raise ConfigError(
                f"global_pointer must be one of {', '.join(POINTER_KINDS)}, "
                f"got {self.global_pointer!r}"
            )
        if self.lock_timeout < 0:
            raise ConfigError("lock_timeout must not be negative")

    def _under_home(self, path: Union[str, Path]) -> Path:
        path = Path(path).expanduser()
        if not path.is_absolute():
            path = self.home / path
        return path.absolute()

    @property
    def staging_dir(self) -> Path:
        """Directory where fetchers populate new versions before adoption."""
        return self.cache_root / ".staging"

    @property
    def lock_path(self) -> Path:
        return self.cache_root / ".lock"

    def pointer(self):
        """Build the configured global pointer backend."""
        from sdkcache.cache.pointer import PointerFile, SymlinkPointer

        if self.global_pointer == "file":
            return PointerFile(self.global_link)
        return SymlinkPointer(self.global_link)


def _coerce(name: str, value: Any, expected: type) -> Any:
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, expected):
        raise ConfigError(
            f"Invalid value for '{name}': expected {expected.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


_FIELD_TYPES = {
    "cache_root": str,
    "global_link": str,
    "executable": str,
    "metadata_file": str,
    "global_pointer": str,
    "lock_timeout": float,
    "git_url": str,
}


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigError: If the file is required but missing, or cannot be parsed
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigError(f"Top level of {config_file} must be a mapping")
    return config


def load_config(
    config_file: Optional[Path] = None, home: Optional[Path] = None
) -> CacheConfig:
    """
    Build a CacheConfig from defaults and an optional YAML file.

    Args:
        config_file: Explicit config file (must exist). Defaults to
            <home>/config.yaml, which is optional.
        home: sdkcache home directory (default: default_home())

    Returns:
        CacheConfig with file values applied

    Example:
        >>> config = load_config(home=Path("/tmp/sdk"))
        >>> config.cache_root
        PosixPath('/tmp/sdk/versions')
    """
    home = Path(home) if home is not None else default_home()

    if config_file is not None:
        data = load_yaml_config(Path(config_file), required=True)
    else:
        data = load_yaml_config(home / CONFIG_FILE_NAME)

    known = {f.name for f in fields(CacheConfig)} - {"home"}
    values: Dict[str, Any] = {}

    for key, value in data.items():
        if key in known:
            values[key] = _coerce(key, value, _FIELD_TYPES[key])
        else:
            logger.debug(f"Ignoring unknown configuration key: {key}")

    return CacheConfig(home=home, **values)


__all__ = [
    "CacheConfig",
    "default_home",
    "load_config",
    "load_yaml_config",
    "HOME_ENV_VAR",
    "CONFIG_FILE_NAME",
]
