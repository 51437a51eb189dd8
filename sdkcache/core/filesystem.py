"""
File system helpers shared by the cache modules.

Unlike higher-level helpers, nothing here wraps OSError: callers of the
cache registry see permission and disk errors unchanged.
"""

import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Union

IS_WINDOWS = os.name == "nt"


def is_executable(path: Union[str, Path]) -> bool:
    """
    Check that a path is an existing regular file with execute permission.

    On Windows, where there is no execute bit, existence is enough.
    """
    path = Path(path)
    if not path.is_file():
        return False
    if IS_WINDOWS:
        return True

    mode = path.stat().st_mode
    return bool(mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def atomic_write(
    file_path: Union[str, Path], content: str, encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state; if the write
    fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write('default', '/home/user/.sdkcache/versions/stable')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "w", encoding=encoding) as f:
            f.write(content)
        temp_path.replace(file_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def remove_tree(path: Union[str, Path]) -> bool:
    """
    Recursively delete a directory if it exists.

    Returns:
        True if something was deleted, False if the path was already absent
    """
    path = Path(path)
    if not path.exists() and not path.is_symlink():
        return False

    if path.is_symlink() or not path.is_dir():
        path.unlink()
        return True

    if IS_WINDOWS:

        def handle_remove_readonly(func, failed_path, exc):
            """Clear the read-only flag git sets on pack files, then retry."""
            if not os.access(failed_path, os.W_OK):
                os.chmod(failed_path, stat.S_IWRITE)
                func(failed_path)
            else:
                raise exc[1]

        shutil.rmtree(path, onerror=handle_remove_readonly)
    else:
        shutil.rmtree(path)
    return True


__all__ = ["is_executable", "atomic_write", "remove_tree", "IS_WINDOWS"]
