"""
In-memory handle to one cached SDK version and its integrity check.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from sdkcache.cache.version import VersionLabel
from sdkcache.core.filesystem import IS_WINDOWS, is_executable

logger = logging.getLogger(__name__)

_UNRESOLVED = object()


class CacheIntegrity(Enum):
    """Outcome of verifying a cached version."""

    VALID = "valid"
    INVALID = "invalid"  # Executable missing or not executable
    VERSION_MISMATCH = "version_mismatch"  # SDK version differs from the name


class CachedVersion:
    """
    A version directory under the cache root.

    The entry owns everything beneath `directory`. The SDK version recorded
    in the metadata file is only read when resolve_sdk_version() is called;
    the result is cached on the instance.

    Example:
        >>> entry = CachedVersion("2.0.0", Path("/cache/versions/2.0.0"))
        >>> entry.executable_path
        PosixPath('/cache/versions/2.0.0/bin/flutter')
        >>> entry.metadata_path
        PosixPath('/cache/versions/2.0.0/version')
        >>> entry.resolve_sdk_version()  # no metadata file on disk
        >>> entry.sdk_version is None
        True
    """

    def __init__(
        self,
        name: str,
        directory: Path,
        executable: str = "bin/flutter",
        metadata_file: str = "version",
    ):
        """
        Initialize cached version.

        Args:
            name: Version name (channel or semantic version)
            directory: Version directory inside the cache root
            executable: Executable path relative to the directory
            metadata_file: Metadata file path relative to the directory

        Raises:
            InvalidVersionError: If name is not a valid version name
        """
        self.label = VersionLabel.parse(name)
        self.directory = Path(directory)
        self._executable = executable
        self._metadata_file = metadata_file
        self._sdk_version = _UNRESOLVED

    @property
    def name(self) -> str:
        return self.label.name

    @property
    def is_channel(self) -> bool:
        return self.label.is_channel

    @property
    def executable_path(self) -> Path:
        path = self.directory / self._executable
        if IS_WINDOWS and not path.suffix:
            path = path.with_suffix(".bat")
        return path

    @property
    def metadata_path(self) -> Path:
        return self.directory / self._metadata_file

    @property
    def sdk_version(self) -> Optional[str]:
        """SDK version from the last resolve_sdk_version() call, if any."""
        if self._sdk_version is _UNRESOLVED:
            return None
        return self._sdk_version

    def resolve_sdk_version(self, refresh: bool = False) -> Optional[str]:
        """
        Read the SDK version from the metadata file.

        The file is read once; later calls return the cached value unless
        refresh is True.

        Returns:
            First non-empty line of the metadata file, or None if the file is
            absent, unreadable or empty
        """
        if self._sdk_version is not _UNRESOLVED and not refresh:
            return self._sdk_version

        self._sdk_version = self._read_metadata()
        return self._sdk_version

    def _read_metadata(self) -> Optional[str]:
        path = self.metadata_path
        if not path.is_file():
            logger.debug(f"No SDK version metadata for {self.name}: {path}")
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read SDK version from {path}: {e}")
            return None

        for line in content.splitlines():
            line = line.strip()
            if line:
                return line
        return None

    def relocated(self, name: str, directory: Path) -> "CachedVersion":
        """Return a handle for the same build under a new name and directory."""
        return CachedVersion(
            name,
            directory,
            executable=self._executable,
            metadata_file=self._metadata_file,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CachedVersion):
            return NotImplemented
        return self.name == other.name and self.directory == other.directory

    def __hash__(self) -> int:
        return hash((self.name, self.directory))

    def __lt__(self, other: "CachedVersion") -> bool:
        if not isinstance(other, CachedVersion):
            return NotImplemented
        return self.label < other.label

    def __repr__(self) -> str:
        return f"CachedVersion({self.name!r}, {str(self.directory)!r})"


def verify_integrity(entry: CachedVersion) -> CacheIntegrity:
    """
    Check that a cached version can be executed and matches its name.

    Read-only: nothing is repaired. Channels float to whatever build was
    fetched, so they are never reported as a version mismatch; neither are
    entries whose SDK version is unknown.

    Args:
        entry: Cached version to check

    Returns:
        CacheIntegrity.INVALID if the executable is missing or not executable,
        CacheIntegrity.VERSION_MISMATCH if the SDK version differs from the
        name, CacheIntegrity.VALID otherwise
    """
    if not is_executable(entry.executable_path):
        return CacheIntegrity.INVALID

    if entry.is_channel:
        return CacheIntegrity.VALID

    sdk_version = entry.resolve_sdk_version()
    if sdk_version is not None and sdk_version != entry.name:
        return CacheIntegrity.VERSION_MISMATCH

    return CacheIntegrity.VALID


__all__ = ["CacheIntegrity", "CachedVersion", "verify_integrity"]
