"""
Registry of cached SDK versions.

This module is the only place that changes the structure of the cache root:
it lists, stores, relocates and removes version directories and maintains
the global version pointer. Mutating operations run under an advisory file
lock; read operations tolerate a missing cache root and treat it as empty.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional

from sdkcache.cache.entry import CacheIntegrity, CachedVersion, verify_integrity
from sdkcache.cache.fetcher import VersionFetcher
from sdkcache.cache.pointer import GlobalPointer
from sdkcache.cache.version import VersionLabel, VersionRequest
from sdkcache.core.config import CacheConfig
from sdkcache.core.exceptions import InvalidVersionError, UnresolvedVersionError
from sdkcache.core.filesystem import remove_tree
from sdkcache.core.locking import CacheLock

logger = logging.getLogger(__name__)


class VersionCacheRegistry:
    """
    Lists, verifies, stores, relocates and removes cached versions.

    Example:
        >>> registry = VersionCacheRegistry(load_config())
        >>> for entry in registry.list_all():
        ...     marker = " (global)" if registry.is_global(entry) else ""
        ...     print(f"{entry.name}{marker}")
        master (global)
        stable
        2.0.0
    """

    def __init__(
        self,
        config: CacheConfig,
        fetcher: Optional[VersionFetcher] = None,
        pointer: Optional[GlobalPointer] = None,
    ):
        """
        Initialize registry.

        Args:
            config: Paths and settings the registry is bound to
            fetcher: Fetcher used by materialize() (required only there)
            pointer: Global pointer backend (default: config.pointer())
        """
        self.config = config
        self.fetcher = fetcher
        self.pointer = pointer if pointer is not None else config.pointer()
        self.lock = CacheLock(config.lock_path, timeout=config.lock_timeout)

        logger.debug(f"Initialized version cache at {self.cache_root}")

    @property
    def cache_root(self) -> Path:
        return self.config.cache_root

    def version_dir(self, name: str) -> Path:
        """Canonical directory for a version name."""
        return self.cache_root / name

    def _entry(self, name: str, directory: Path) -> CachedVersion:
        return CachedVersion(
            name,
            directory,
            executable=self.config.executable,
            metadata_file=self.config.metadata_file,
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> Optional[CachedVersion]:
        """
        Get the cached version with the given name.

        Integrity is not checked.

        Returns:
            CachedVersion, or None if no such version directory exists

        Raises:
            InvalidVersionError: If name is not a valid version name
        """
        VersionLabel.parse(name)

        directory = self.version_dir(name)
        if not directory.is_dir():
            logger.debug(f"Version not cached: {name}")
            return None

        return self._entry(name, directory)

    def list_all(self) -> List[CachedVersion]:
        """
        List cached versions in presentation order.

        Channels come first (master, stable, beta, dev), then semantic
        versions newest first. Files in the cache root and the registry's own
        staging and lock paths are skipped.

        Returns:
            List of cached versions (empty if the cache root does not exist)

        Raises:
            InvalidVersionError: If a version directory has a malformed name
        """
        if not self.cache_root.is_dir():
            logger.debug(f"Cache root does not exist: {self.cache_root}")
            return []

        entries = []
        for child in self.cache_root.iterdir():
            if not child.is_dir() or child.name.startswith("."):
                continue
            entries.append(self._entry(child.name, child))

        entries.sort(key=lambda entry: entry.label)
        entries.reverse()
        return entries

    def verify(self, entry: CachedVersion) -> CacheIntegrity:
        """Check the integrity of a cached version (read-only)."""
        integrity = verify_integrity(entry)
        logger.debug(f"Integrity of {entry.name}: {integrity.value}")
        return integrity

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def materialize(self, request: VersionRequest) -> CachedVersion:
        """
        Make sure a version is cached, fetching it if necessary.

        The fetcher populates a fresh staging directory which is renamed into
        place once fetch() returns. Integrity is not checked; callers that
        need it call verify() on the result.

        Args:
            request: Validated version request

        Returns:
            The existing or newly cached version

        Raises:
            FetchError: If the fetcher fails (the staging directory is removed)
            ValueError: If the registry has no fetcher
        """
        existing = self.find_by_name(request.name)
        if existing is not None:
            logger.debug(f"Version already cached: {request.name}")
            return existing

        if self.fetcher is None:
            raise ValueError("A fetcher is required to cache new versions")

        with self.lock:
            # Another process may have finished the same fetch meanwhile
            existing = self.find_by_name(request.name)
            if existing is not None:
                return existing

            suffix = uuid.uuid4().hex[:8]
            staging = self.config.staging_dir / f"{request.name}-{suffix}"
            staging.mkdir(parents=True)

            try:
                self.fetcher.fetch(request, staging)
                destination = self.version_dir(request.name)
                staging.rename(destination)
            finally:
                remove_tree(staging)

        logger.info(f"Cached version {request.name} at {destination}")
        return self._entry(request.name, destination)

    def remove(self, entry: CachedVersion) -> None:
        """
        Delete a cached version directory recursively.

        A no-op if the directory is already gone. The global pointer is left
        alone even if it targets this entry; callers unset it first.
        """
        with self.lock:
            if remove_tree(entry.directory):
                logger.info(f"Removed cached version {entry.name}")
            else:
                logger.debug(f"Cached version already absent: {entry.name}")

    def promote_to_resolved_version(self, entry: CachedVersion) -> CachedVersion:
        """
        Move a cached version to the directory of its resolved SDK version.

        Any directory already cached under that version is replaced.

        Args:
            entry: Cached version whose SDK version differs from its name

        Returns:
            The relocated entry, named after the SDK version

        Raises:
            UnresolvedVersionError: If the SDK version is unknown (nothing is moved)
            InvalidVersionError: If the SDK version is not a valid version name
            FileNotFoundError: If entry.directory was removed (nothing is deleted)
        """
        sdk_version = entry.resolve_sdk_version()
        if sdk_version is None:
            raise UnresolvedVersionError(entry.name)

        try:
            VersionLabel.parse(sdk_version)
        except InvalidVersionError as e:
            raise InvalidVersionError(
                sdk_version, f"SDK version recorded in {entry.metadata_path}"
            ) from e

        new_dir = self.version_dir(sdk_version)
        if new_dir == entry.directory:
            return entry

        with self.lock:
            # The canonical directory is only replaced by a source that exists
            if not entry.directory.is_dir():
                raise FileNotFoundError(
                    f"Cached version directory no longer exists: {entry.directory}"
                )
            logger.info(f"Moving {entry.name} to {new_dir}")
            remove_tree(new_dir)
            entry.directory.rename(new_dir)

        return entry.relocated(sdk_version, new_dir)

    # ------------------------------------------------------------------
    # Global version
    # ------------------------------------------------------------------

    def set_global(self, entry: CachedVersion) -> None:
        """Point the global pointer at a cached version."""
        with self.lock:
            self.pointer.set_target(entry.directory)

    def unset_global(self) -> bool:
        """
        Remove the global pointer.

        Returns:
            True if a pointer was removed
        """
        with self.lock:
            return self.pointer.clear()

    def get_global_name(self) -> Optional[str]:
        """Name of the version the global pointer targets, without lookup."""
        target = self.pointer.get_target()
        if target is None:
            return None
        return target.name

    def get_global(self) -> Optional[CachedVersion]:
        """
        Get the global cached version.

        Returns:
            CachedVersion, or None if no pointer exists, its target is not a
            cached version, or the target name is not a valid version
        """
        name = self.get_global_name()
        if name is None:
            return None

        try:
            return self.find_by_name(name)
        except InvalidVersionError:
            logger.warning(f"Global pointer targets an unknown version: {name}")
            return None

    def is_global(self, entry: CachedVersion) -> bool:
        """Whether the global pointer targets exactly entry.directory."""
        target = self.pointer.get_target()
        return target is not None and target == entry.directory


__all__ = ["VersionCacheRegistry"]
