"""
Remove command implementation.

Removes a cached version. If it is the global version, the global link
is removed first so it never dangles.
"""

import logging

from sdkcache.cache.version import VersionRequest
from sdkcache.cli.utils import build_registry, print_error

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the remove command.

    Args:
        args: Parsed command-line arguments (version)

    Returns:
        Exit code (0 for success, 1 if the version is not cached)
    """
    request = VersionRequest.parse(args.version)
    registry = build_registry(args)

    entry = registry.find_by_name(request.name)
    if entry is None:
        print_error(f"Version {request.name} is not cached")
        return 1

    if registry.is_global(entry):
        registry.unset_global()
        logger.info(f"Unset global version {entry.name}")

    registry.remove(entry)
    print(f"Removed version {entry.name}")
    return 0
