"""
Install command implementation.

Caches an SDK version, re-fetching it when the cached copy is broken.
"""

import logging

from sdkcache.cache.entry import CacheIntegrity
from sdkcache.cache.version import VersionRequest
from sdkcache.cli.utils import build_registry, print_warning

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments (version, set_global, fix_mismatch)

    Returns:
        Exit code (0 for success, 1 if the cached version is unusable)
    """
    request = VersionRequest.parse(args.version)
    registry = build_registry(args)

    was_global = False
    existing = registry.find_by_name(request.name)
    if existing is not None and registry.verify(existing) == CacheIntegrity.INVALID:
        logger.warning(f"Cached version {request.name} is corrupted, re-installing")
        if registry.is_global(existing):
            was_global = True
            registry.unset_global()
        registry.remove(existing)

    entry = registry.materialize(request)
    integrity = registry.verify(entry)

    if integrity == CacheIntegrity.INVALID:
        logger.error(
            f"Version {entry.name} was fetched but {entry.executable_path} "
            "is missing or not executable"
        )
        if was_global:
            print_warning(f"Global version {entry.name} was unset")
        return 1

    if integrity == CacheIntegrity.VERSION_MISMATCH:
        sdk_version = entry.resolve_sdk_version()
        if args.fix_mismatch:
            entry = registry.promote_to_resolved_version(entry)
            logger.info(f"Moved {request.name} to SDK version {entry.name}")
        else:
            print_warning(
                f"Version {entry.name} contains SDK version {sdk_version}. "
                "Re-run with --fix-mismatch to move it."
            )

    if args.set_global or was_global:
        registry.set_global(entry)
        logger.info(f"Global version set to {entry.name}")

    print(f"Version {entry.name} is installed at {entry.directory}")
    return 0
