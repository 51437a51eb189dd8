"""
Version cache module for sdkcache.

This module provides:
- Version name parsing and canonical ordering
- Cached version handles and integrity checks
- The cache registry (list, store, promote, remove, global version)
- Global pointer backends and version fetchers
"""

from sdkcache.cache.version import (
    CHANNELS,
    LabelKind,
    VersionLabel,
    VersionRequest,
    compare_versions,
    is_channel,
    sort_key,
)
from sdkcache.cache.entry import (
    CacheIntegrity,
    CachedVersion,
    verify_integrity,
)
from sdkcache.cache.pointer import (
    GlobalPointer,
    PointerFile,
    SymlinkPointer,
)
from sdkcache.cache.fetcher import (
    GitFetcher,
    VersionFetcher,
)
from sdkcache.cache.registry import VersionCacheRegistry

__all__ = [
    # Versions
    "CHANNELS",
    "LabelKind",
    "VersionLabel",
    "VersionRequest",
    "compare_versions",
    "is_channel",
    "sort_key",
    # Entries
    "CacheIntegrity",
    "CachedVersion",
    "verify_integrity",
    # Global pointer
    "GlobalPointer",
    "PointerFile",
    "SymlinkPointer",
    # Fetchers
    "GitFetcher",
    "VersionFetcher",
    # Registry
    "VersionCacheRegistry",
]
