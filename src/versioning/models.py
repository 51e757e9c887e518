"""Data models for versions and canonical half-open version ranges."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import semantic_version

from constants import Constants
from exceptions import InvalidVersionRange

MAX = Constants.VERSION_COMPONENT_MAX


class RangeShape(Enum):
    """Shorthand forms accepted when declaring a dependency's versions."""
    HALF_OPEN = "half_open"
    CLOSED = "closed"
    MAJOR = "major"
    MAJOR_MINOR = "major_minor"
    EXACT = "exact"


@dataclass(frozen=True, order=True)
class Version:
    """A (major, minor, patch) triple ordered lexicographically."""
    major: int
    minor: int = 0
    patch: int = 0

    def __post_init__(self):
        for part in ("major", "minor", "patch"):
            value = getattr(self, part)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Version {part} must be an int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"Version {part} must be non-negative, got {value}")

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse strict "major.minor.patch" text.

        Prerelease and build metadata are rejected; the manifest format only
        carries numeric triples.
        """
        try:
            sv = semantic_version.Version(text.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid version: {text!r}") from exc
        if sv.prerelease or sv.build:
            raise ValueError(f"Prerelease/build metadata not supported: {text!r}")
        return cls(sv.major, sv.minor, sv.patch)

    def successor(self) -> "Version":
        """Next version in patch order."""
        return Version(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class VersionRange:
    """Half-open interval [lower_bound, upper_bound) over Version.

    Every shorthand canonicalizes to this single representation through the
    classmethod constructors below.
    """
    lower_bound: Version
    upper_bound: Version

    def __post_init__(self):
        if self.lower_bound > self.upper_bound:
            raise InvalidVersionRange(
                f"lower bound {self.lower_bound} is greater than upper bound {self.upper_bound}"
            )

    @classmethod
    def half_open(cls, lower: Version, upper: Version) -> "VersionRange":
        return cls(lower, upper)

    @classmethod
    def closed(cls, lower: Version, upper: Version) -> "VersionRange":
        """[lower, upper] stored as [lower, upper.successor())."""
        return cls(lower, upper.successor())

    @classmethod
    def major(cls, major: int) -> "VersionRange":
        """Any minor/patch under ``major``."""
        return cls(Version(major, 0, 0), Version(major, MAX, MAX))

    @classmethod
    def major_minor(cls, major: int, minor: int) -> "VersionRange":
        """Any patch under ``major.minor``."""
        return cls(Version(major, minor, 0), Version(major, minor, MAX))

    @classmethod
    def exact(cls, version: Version) -> "VersionRange":
        return cls.closed(version, version)

    def contains(self, version: Version) -> bool:
        return self.lower_bound <= version < self.upper_bound

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)

    def __str__(self) -> str:
        return f"{self.lower_bound}..<{self.upper_bound}"
