"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import sys
from typing import List, Optional

from sdkcache.cache.entry import CachedVersion
from sdkcache.cache.fetcher import GitFetcher
from sdkcache.cache.registry import VersionCacheRegistry
from sdkcache.core.config import CacheConfig, load_config
from sdkcache.core.exceptions import InvalidVersionError

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration / Registry
# ============================================================================


def load_cli_config(args) -> CacheConfig:
    """
    Load configuration honouring the global --config and --home options.

    Args:
        args: Parsed command-line arguments

    Returns:
        CacheConfig for this invocation
    """
    config_file = getattr(args, "config", None)
    home = getattr(args, "home", None)
    return load_config(config_file=config_file, home=home)


def build_registry(args) -> VersionCacheRegistry:
    """
    Create the cache registry for a command invocation.

    Args:
        args: Parsed command-line arguments

    Returns:
        VersionCacheRegistry with a git fetcher
    """
    config = load_cli_config(args)
    logger.debug(f"Using cache root: {config.cache_root}")
    return VersionCacheRegistry(config, fetcher=GitFetcher(config.git_url))


def list_versions(registry: VersionCacheRegistry) -> Optional[List[CachedVersion]]:
    """
    List cached versions, reporting a malformed cache directory to the user.

    Returns:
        Cached versions, or None if a directory in the cache root is not
        named after a version (an error has been printed)
    """
    try:
        return registry.list_all()
    except InvalidVersionError as e:
        print_error(
            f"{registry.cache_root / e.name} is not a cached SDK version",
            "Remove or rename it, then try again",
        )
        return None


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)
