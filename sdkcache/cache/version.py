"""
Version names and their canonical ordering.

A cached version is named either by a release channel (master, stable,
beta, dev) or by a semantic version such as "2.0.0" or "1.22.0-1.0.pre".
VersionLabel parses a name into one of those two kinds and defines the
ascending order used for sorting. Listings present that order reversed:

    master, stable, beta, dev, 2.0.0, 1.22.0-1.0.pre, 1.21.0-9.1.pre, 1.20.0

Example:
    >>> sorted(["1.3.1", "stable", "1.20.0"], key=sort_key, reverse=True)
    ['stable', '1.20.0', '1.3.1']
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from sdkcache.core.exceptions import InvalidVersionError

# Most privileged first
CHANNELS = ("master", "stable", "beta", "dev")

Identifier = Union[int, str]

_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class LabelKind(Enum):
    """Kinds of version names."""

    CHANNEL = "channel"
    SEMANTIC = "semantic"


def _parse_identifiers(text: Optional[str]) -> Tuple[Identifier, ...]:
    if not text:
        return ()
    # "01" stays textual so that distinct names never compare equal
    return tuple(
        int(part) if part.isdigit() and (part == "0" or part[0] != "0") else part
        for part in text.split(".")
    )


def _identifier_key(identifier: Identifier) -> Tuple[int, int, str]:
    # Numeric identifiers sort below alphanumeric ones
    if isinstance(identifier, int):
        return (0, identifier, "")
    return (1, 0, identifier)


def _identifiers_key(identifiers: Tuple[Identifier, ...]) -> tuple:
    return tuple(_identifier_key(identifier) for identifier in identifiers)


@dataclass(frozen=True)
class VersionLabel:
    """
    Parsed representation of a version name.

    Attributes:
        name: The raw version name
        kind: LabelKind.CHANNEL or LabelKind.SEMANTIC
        channel_rank: Index into CHANNELS (channels only, 0 = master)
        major, minor, patch: Release numbers (semantic only)
        prerelease: Pre-release identifiers, e.g. (1, 0, "pre")
        build: Build metadata identifiers (text after '+')
    """

    name: str
    kind: LabelKind
    channel_rank: Optional[int] = None
    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[Identifier, ...] = ()
    build: Tuple[Identifier, ...] = ()

    @classmethod
    def parse(cls, name: str) -> "VersionLabel":
        """
        Parse a version name.

        Args:
            name: Channel name or semantic version string

        Returns:
            VersionLabel for the name

        Raises:
            InvalidVersionError: If name is neither a channel nor a semantic version
        """
        if not isinstance(name, str):
            raise InvalidVersionError(repr(name), "version names must be strings")

        if name in CHANNELS:
            return cls(
                name=name, kind=LabelKind.CHANNEL, channel_rank=CHANNELS.index(name)
            )

        match = _SEMVER_RE.fullmatch(name)
        if match is None:
            raise InvalidVersionError(
                name,
                f"expected one of {', '.join(CHANNELS)} "
                "or MAJOR.MINOR.PATCH[-PRERELEASE]",
            )

        return cls(
            name=name,
            kind=LabelKind.SEMANTIC,
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=_parse_identifiers(match.group("prerelease")),
            build=_parse_identifiers(match.group("build")),
        )

    @property
    def is_channel(self) -> bool:
        return self.kind is LabelKind.CHANNEL

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def release(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def sort_key(self) -> tuple:
        """
        Key implementing the ascending order.

        Channels sort above every semantic version and among themselves by
        reverse rank, so reversing an ascending sort puts master first.
        """
        if self.is_channel:
            return (1, -self.channel_rank)

        # A release sorts above all of its pre-releases
        prerelease_key = (
            (0, _identifiers_key(self.prerelease)) if self.prerelease else (1, ())
        )
        build_key = (1, _identifiers_key(self.build)) if self.build else (0, ())
        return (0, self.release, prerelease_key, build_key)

    def compare(self, other: "VersionLabel") -> int:
        """Return -1, 0 or 1 as self sorts below, equal to or above other."""
        mine, theirs = self.sort_key(), other.sort_key()
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        return 0

    def __lt__(self, other: "VersionLabel") -> bool:
        if not isinstance(other, VersionLabel):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: "VersionLabel") -> bool:
        if not isinstance(other, VersionLabel):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: "VersionLabel") -> bool:
        if not isinstance(other, VersionLabel):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: "VersionLabel") -> bool:
        if not isinstance(other, VersionLabel):
            return NotImplemented
        return self.sort_key() >= other.sort_key()

    def __str__(self) -> str:
        return self.name


def sort_key(name: str) -> tuple:
    """Sort key for a bare version name (raises InvalidVersionError)."""
    return VersionLabel.parse(name).sort_key()


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version names.

    Returns:
        -1 if a sorts below b, 0 if they are the same name, 1 otherwise

    Raises:
        InvalidVersionError: If either name is malformed
    """
    return VersionLabel.parse(a).compare(VersionLabel.parse(b))


def is_channel(name: str) -> bool:
    return name in CHANNELS


@dataclass(frozen=True)
class VersionRequest:
    """
    A validated request for a version to be cached.

    Example:
        >>> VersionRequest.parse(" stable ").name
        'stable'
    """

    label: VersionLabel

    @classmethod
    def parse(cls, raw: str) -> "VersionRequest":
        """
        Validate a user supplied version string.

        Raises:
            InvalidVersionError: If the string is not a valid version name
        """
        if not isinstance(raw, str):
            raise InvalidVersionError(repr(raw), "version names must be strings")
        return cls(label=VersionLabel.parse(raw.strip()))

    @property
    def name(self) -> str:
        return self.label.name

    @property
    def is_channel(self) -> bool:
        return self.label.is_channel


__all__ = [
    "CHANNELS",
    "LabelKind",
    "VersionLabel",
    "VersionRequest",
    "compare_versions",
    "is_channel",
    "sort_key",
]
