"""
List command implementation.

Lists cached versions in presentation order and marks the global one.
"""

import logging

from sdkcache.cli.utils import build_registry, list_versions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if the cache root holds a stray directory)
    """
    registry = build_registry(args)
    entries = list_versions(registry)
    if entries is None:
        return 1

    if not entries:
        print(f"No SDK versions cached in {registry.cache_root}")
        return 0

    print(f"Cached versions ({registry.cache_root}):")
    for entry in entries:
        line = f"  {entry.name}"

        sdk_version = entry.resolve_sdk_version()
        if sdk_version and sdk_version != entry.name:
            line += f" ({sdk_version})"
        if registry.is_global(entry):
            line += " [global]"

        print(line)

    return 0
