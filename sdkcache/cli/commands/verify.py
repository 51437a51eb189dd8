"""
Verify command implementation.

Verifies that cached versions are executable and match their names.
"""

import logging

from sdkcache.cache.entry import CacheIntegrity
from sdkcache.cache.version import VersionRequest
from sdkcache.cli.utils import build_registry, list_versions, print_error

logger = logging.getLogger(__name__)

_STATUS = {
    CacheIntegrity.VALID: "ok",
    CacheIntegrity.INVALID: "invalid (executable missing)",
    CacheIntegrity.VERSION_MISMATCH: "version mismatch",
}


def run(args) -> int:
    """
    Run the verify command.

    Args:
        args: Parsed command-line arguments (optional version)

    Returns:
        Exit code (0 if every checked version is valid, 1 otherwise)
    """
    registry = build_registry(args)

    if args.version:
        request = VersionRequest.parse(args.version)
        entry = registry.find_by_name(request.name)
        if entry is None:
            print_error(f"Version {request.name} is not cached")
            return 1
        entries = [entry]
    else:
        entries = list_versions(registry)
        if entries is None:
            return 1

    if not entries:
        print("No SDK versions cached")
        return 0

    failures = 0
    for entry in entries:
        integrity = registry.verify(entry)
        status = _STATUS[integrity]
        if integrity == CacheIntegrity.VERSION_MISMATCH:
            status += f" (contains {entry.resolve_sdk_version()})"
        if integrity != CacheIntegrity.VALID:
            failures += 1

        print(f"  {entry.name}: {status}")

    logger.debug(f"Verified {len(entries)} version(s), {failures} failed")
    return 1 if failures else 0
