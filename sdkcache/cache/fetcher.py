"""
Fetchers populate a staging directory with a working SDK build.

The cache registry owns the staging directory and adopts it once fetch()
returns. A fetcher only has to leave a complete checkout at the destination
or raise.
"""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from sdkcache.cache.version import VersionRequest
from sdkcache.core.exceptions import FetchError

logger = logging.getLogger(__name__)


class VersionFetcher(ABC):
    """Abstract interface for components that can fetch an SDK version."""

    @abstractmethod
    def fetch(self, request: VersionRequest, destination: Path) -> None:
        """
        Populate destination with the requested version.

        Args:
            request: Validated version request
            destination: Empty directory controlled by the cache registry

        Raises:
            FetchError: If the version cannot be fetched
        """
        pass


class GitFetcher(VersionFetcher):
    """
    Fetch versions by shallow-cloning a branch or tag of the SDK repository.

    Channels map to branches and semantic versions to tags of the same name.

    Example:
        >>> fetcher = GitFetcher("https://github.com/flutter/flutter.git")
        >>> fetcher.fetch(VersionRequest.parse("stable"), Path("/tmp/stage"))
    """

    def __init__(self, git_url: str, git_executable: Optional[str] = None):
        self.git_url = git_url
        self.git_executable = git_executable or shutil.which("git") or "git"

    def _clone_command(self, request: VersionRequest, destination: Path) -> List[str]:
        return [
            self.git_executable,
            "clone",
            "--progress",
            "--depth",
            "1",
            "--single-branch",
            "--branch",
            request.name,
            self.git_url,
            str(destination),
        ]

    def fetch(self, request: VersionRequest, destination: Path) -> None:
        cmd = self._clone_command(request, destination)
        logger.info(f"Cloning {request.name} from {self.git_url}")
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise FetchError(
                request.name, f"git executable not found ({self.git_executable})"
            ) from e
        except OSError as e:
            raise FetchError(
                request.name, f"failed to execute git: {e}\nCommand: {' '.join(cmd)}"
            ) from e

        if result.returncode != 0:
            raise FetchError(
                request.name,
                f"git clone failed with exit code {result.returncode}\n"
                f"Command: {' '.join(cmd)}\n"
                f"Error output:\n{result.stderr.strip()}",
            )

        logger.debug(f"Cloned {request.name} into {destination}")


__all__ = ["VersionFetcher", "GitFetcher"]
