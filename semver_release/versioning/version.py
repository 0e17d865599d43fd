"""
Version utility module for semantic version strings.

Release ordering is delegated to the standard packaging.version library;
the pre-release qualifier (e.g. SNAPSHOT) is carried along but does not
take part in comparisons between release triples.
"""

import re
from typing import Optional, Union

from packaging.version import Version as PackagingVersion

from semver_release.constants import SNAPSHOT, BumpKind

from .exceptions import MalformedVersionError

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-([^.]+))?$")
_TRIPLE_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")


class SemanticVersion:
    """
    An immutable semantic version: major.minor.patch[-qualifier].

    Version format: exactly three non-negative integer components, optionally
    followed by a single hyphen and a pre-release/build qualifier.
    """

    __slots__ = ("_major", "_minor", "_patch", "_pre_release", "_version")

    def __init__(
        self, major: int, minor: int, patch: int, pre_release: Optional[str] = None
    ):
        for component in (major, minor, patch):
            if not isinstance(component, int) or component < 0:
                raise MalformedVersionError(f"{major}.{minor}.{patch}")

        object.__setattr__(self, "_major", major)
        object.__setattr__(self, "_minor", minor)
        object.__setattr__(self, "_patch", patch)
        object.__setattr__(self, "_pre_release", pre_release or None)
        object.__setattr__(
            self, "_version", PackagingVersion(f"{major}.{minor}.{patch}")
        )

    def __setattr__(self, name, value):
        raise AttributeError("SemanticVersion is immutable")

    @property
    def major(self) -> int:
        """Major version component."""
        return self._major

    @property
    def minor(self) -> int:
        """Minor version component."""
        return self._minor

    @property
    def patch(self) -> int:
        """Patch version component."""
        return self._patch

    @property
    def pre_release(self) -> Optional[str]:
        """Pre-release qualifier, None for a plain release."""
        return self._pre_release

    @property
    def release(self) -> str:
        """The release triple without qualifier."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        if self.pre_release is None:
            return self.release
        return f"{self.release}-{self.pre_release}"

    def __repr__(self) -> str:
        return f"SemanticVersion('{str(self)}')"

    def __eq__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return False
        return (self.major, self.minor, self.patch, self.pre_release) == (
            other.major,
            other.minor,
            other.patch,
            other.pre_release,
        )

    def __lt__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._version < other._version

    def __le__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._version <= other._version

    def __gt__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._version > other._version

    def __ge__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._version >= other._version

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.pre_release))

    def bump(self, kind: BumpKind) -> "SemanticVersion":
        """
        Return the next release, incrementing one component.

        Every component of lower significance is reset to 0 and the
        qualifier is dropped.
        """
        if kind is BumpKind.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if kind is BumpKind.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        if kind is BumpKind.PATCH:
            return SemanticVersion(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown version component: {kind}")

    def as_snapshot(self) -> "SemanticVersion":
        """Return the development (pre-release) counterpart of this release."""
        return SemanticVersion(self.major, self.minor, self.patch, SNAPSHOT)


def parse_version(version_string: Union[str, "SemanticVersion"]) -> SemanticVersion:
    """
    Parse a version string into a SemanticVersion.

    Args:
        version_string: Version string such as "1.2.3" or "1.2.3-SNAPSHOT"

    Returns:
        SemanticVersion object

    Raises:
        MalformedVersionError: If the string does not hold exactly three
            non-negative integer components
    """
    if isinstance(version_string, SemanticVersion):
        return version_string
    raw = str(version_string).strip() if version_string is not None else ""
    match = _VERSION_PATTERN.match(raw)
    if match is None:
        raise MalformedVersionError(raw)
    major, minor, patch, qualifier = match.groups()
    return SemanticVersion(int(major), int(minor), int(patch), qualifier)


def increment_version(version: str, component: str = "patch") -> str:
    """
    Increment a version string.

    Args:
        version: Current version string
        component: Which component to increment ("major", "minor", or "patch")

    Returns:
        Incremented release string

    Raises:
        MalformedVersionError: If the version string is invalid
        ValueError: If the component is unknown
    """
    try:
        kind = BumpKind(component)
    except ValueError:
        raise ValueError(f"Unknown version component: {component}") from None
    return parse_version(version).bump(kind).release


def leading_release_triple(text: str) -> Optional[SemanticVersion]:
    """Read the x.y.z triple a tag name starts with, if any."""
    match = _TRIPLE_PATTERN.match(text)
    if match is None:
        return None
    return SemanticVersion(*(int(g) for g in match.groups()))


def compare_versions(version1: str, version2: str) -> int:
    """
    Compare the release triples of two version strings.

    Returns:
        -1 if version1 < version2
         0 if version1 == version2
         1 if version1 > version2
    """
    v1 = parse_version(version1)
    v2 = parse_version(version2)

    if v1 < v2:
        return -1
    elif v1 > v2:
        return 1
    else:
        return 0
