"""
Centralized exception hierarchy for sdkcache.

Not-found conditions are never exceptions: lookups return None instead.
Filesystem errors raised while deleting, renaming or linking are OSError
and propagate unchanged.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SdkCacheError(Exception):
    """Base exception for all sdkcache errors."""

    pass


# ============================================================================
# Version Exceptions
# ============================================================================


class InvalidVersionError(SdkCacheError, ValueError):
    """Raised when a name is neither a known channel nor a semantic version."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        msg = f"Invalid version name: {name!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(SdkCacheError):
    """Base exception for cache registry errors."""

    pass


class UnresolvedVersionError(CacheError):
    """Raised when promoting an entry whose SDK version could not be read."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Cannot move '{name}' to its SDK version directory: "
            "the SDK version is unknown"
        )


class CacheLockTimeout(CacheError):
    """Raised when the cache lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Fetch / Configuration Exceptions
# ============================================================================


class FetchError(SdkCacheError):
    """Raised when a version could not be fetched into the cache."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"Failed to fetch '{name}': {message}")


class ConfigError(SdkCacheError):
    """Raised when the configuration file cannot be loaded."""

    pass
