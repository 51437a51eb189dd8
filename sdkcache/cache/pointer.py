"""
Global version pointer backends.

The global (default) version is designated out-of-band by a pointer whose
target is one version directory. SymlinkPointer is the standard backend;
PointerFile stores the target path in a small text file for filesystems or
platforms where symlinks are unavailable.
"""

import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from sdkcache.core.filesystem import IS_WINDOWS, atomic_write

logger = logging.getLogger(__name__)


class GlobalPointer(ABC):
    """Abstract pointer to the global version directory."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @abstractmethod
    def exists(self) -> bool:
        """Whether a pointer is present (its target may no longer exist)."""
        pass

    @abstractmethod
    def get_target(self) -> Optional[Path]:
        """
        Read the pointer target.

        Returns:
            Absolute target path, or None if no pointer is present
        """
        pass

    @abstractmethod
    def set_target(self, target: Path) -> None:
        """Point at target, replacing any previous target."""
        pass

    @abstractmethod
    def clear(self) -> bool:
        """
        Remove the pointer.

        Returns:
            True if a pointer was removed, False if none was present
        """
        pass


class SymlinkPointer(GlobalPointer):
    """Global pointer stored as a filesystem symlink."""

    def exists(self) -> bool:
        return self.path.is_symlink()

    def get_target(self) -> Optional[Path]:
        if not self.path.is_symlink():
            return None

        target = Path(os.readlink(self.path))
        if not target.is_absolute():
            target = self.path.parent / target
        return target

    def set_target(self, target: Path) -> None:
        """
        Create or replace the symlink.

        The new link is created under a temporary name next to the pointer
        and renamed over it, so readers never see the pointer missing.

        Raises:
            FileExistsError: If the pointer path is a real file or directory
            OSError: If link creation fails
        """
        target = Path(target)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        if self.path.exists() and not self.path.is_symlink():
            raise FileExistsError(
                f"Global pointer path exists and is not a symlink: {self.path}"
            )

        temp_link = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")
        os.symlink(target, temp_link, target_is_directory=True)

        try:
            if IS_WINDOWS and self.path.is_symlink():
                # Windows cannot rename over an existing directory link
                os.rmdir(self.path)
            os.replace(temp_link, self.path)
        except BaseException:
            if temp_link.is_symlink():
                temp_link.unlink()
            raise

        logger.info(f"Linked global version: {self.path} -> {target}")

    def clear(self) -> bool:
        if not self.path.is_symlink():
            return False

        if IS_WINDOWS and self.path.is_dir():
            os.rmdir(self.path)
        else:
            self.path.unlink()
        logger.info(f"Removed global version link: {self.path}")
        return True


class PointerFile(GlobalPointer):
    """Global pointer stored as a text file holding the target path."""

    def exists(self) -> bool:
        return self.path.is_file()

    def get_target(self) -> Optional[Path]:
        if not self.path.is_file():
            return None

        content = self.path.read_text(encoding="utf-8").strip()
        if not content:
            return None
        return Path(content)

    def set_target(self, target: Path) -> None:
        atomic_write(self.path, f"{target}\n")
        logger.info(f"Set global version pointer: {self.path} -> {target}")

    def clear(self) -> bool:
        if not self.path.is_file():
            return False

        self.path.unlink()
        logger.info(f"Removed global version pointer: {self.path}")
        return True


__all__ = ["GlobalPointer", "SymlinkPointer", "PointerFile"]
