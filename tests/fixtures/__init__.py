"""Test fixtures for sdkcache tests.

- versions: cache configs and fake SDK version directories

Import fixtures in your tests using:
    from tests.fixtures.versions import make_version
"""

__all__ = [
    "versions",
]
