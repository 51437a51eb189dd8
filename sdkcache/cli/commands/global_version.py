"""
Global command implementation.

Shows, sets or unsets the global (default) version.
"""

import logging

from sdkcache.cache.version import VersionRequest
from sdkcache.cli.utils import build_registry, print_error

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the global command.

    Args:
        args: Parsed command-line arguments (version, unset)

    Returns:
        Exit code (0 for success, 1 on error)
    """
    registry = build_registry(args)

    if args.unset:
        if args.version:
            print_error("--unset cannot be combined with a version")
            return 1
        if registry.unset_global():
            print("Global version unset")
        else:
            print("No global version configured")
        return 0

    if not args.version:
        entry = registry.get_global()
        if entry is not None:
            print(entry.name)
            return 0

        name = registry.get_global_name()
        if name is not None:
            print_error(f"Global version {name} is no longer cached")
            return 1

        print("No global version configured")
        return 0

    request = VersionRequest.parse(args.version)
    entry = registry.find_by_name(request.name)
    if entry is None:
        print_error(
            f"Version {request.name} is not cached",
            f"Run 'sdkcache install {request.name}' first",
        )
        return 1

    registry.set_global(entry)
    print(f"Global version set to {entry.name}")
    return 0
