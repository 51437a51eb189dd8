"""
Core functionality for sdkcache.

This package contains the configuration, locking, filesystem and exception
modules the cache registry and CLI depend on.
"""

from .config import (
    CacheConfig,
    default_home,
    load_config,
    load_yaml_config,
)

from .locking import CacheLock

from .exceptions import (
    SdkCacheError,
    InvalidVersionError,
    CacheError,
    UnresolvedVersionError,
    CacheLockTimeout,
    FetchError,
    ConfigError,
)

__all__ = [
    "CacheConfig",
    "default_home",
    "load_config",
    "load_yaml_config",
    "CacheLock",
    "SdkCacheError",
    "InvalidVersionError",
    "CacheError",
    "UnresolvedVersionError",
    "CacheLockTimeout",
    "FetchError",
    "ConfigError",
]
