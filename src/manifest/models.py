"""Object model a build script constructs to describe its package."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from constants import ProductTypes, ProviderLabels
from versioning.models import Version, VersionRange
from versioning.parser import parse_version_spec

from .context import current_context

VersionLike = Union[Version, str]


def _as_version(value: VersionLike) -> Version:
    if isinstance(value, Version):
        return value
    return Version.parse(value)


@dataclass(frozen=True)
class Dependency:
    """A package dependency: source url plus canonical half-open version range."""
    url: str
    version_range: VersionRange

    @classmethod
    def package(
        cls,
        url: str,
        versions: Union[VersionRange, Tuple[VersionLike, VersionLike], str, None] = None,
        major_version: Optional[int] = None,
        minor: Optional[int] = None,
        version: Optional[VersionLike] = None,
    ) -> "Dependency":
        """Declare a dependency using one of the shorthand forms.

        Exactly one of ``versions``, ``major_version`` or ``version`` is
        required. ``versions`` may be a VersionRange (half-open), a
        ``(lower, upper)`` tuple (closed, both ends included) or a shorthand
        string such as ``"1.0.0..<2.0.0"``. ``minor`` narrows ``major_version``.
        """
        given = [v is not None for v in (versions, major_version, version)]
        if sum(given) != 1:
            raise ValueError("Specify exactly one of versions, major_version or version")
        if minor is not None and major_version is None:
            raise ValueError("minor requires major_version")

        if version is not None:
            return cls(url, VersionRange.exact(_as_version(version)))
        if major_version is not None:
            if minor is not None:
                return cls(url, VersionRange.major_minor(major_version, minor))
            return cls(url, VersionRange.major(major_version))
        if isinstance(versions, VersionRange):
            return cls(url, versions)
        if isinstance(versions, str):
            return cls(url, parse_version_spec(versions))
        lower, upper = versions  # type: ignore[misc]
        return cls(url, VersionRange.closed(_as_version(lower), _as_version(upper)))


@dataclass(frozen=True)
class SystemPackageProvider:
    """A system package manager able to supply a system module."""
    label: ProviderLabels
    value: str

    @classmethod
    def brew(cls, name: str) -> "SystemPackageProvider":
        return cls(ProviderLabels.BREW, name)

    @classmethod
    def apt(cls, name: str) -> "SystemPackageProvider":
        return cls(ProviderLabels.APT, name)

    @property
    def name_value(self) -> Tuple[str, str]:
        """(label, name) pair, e.g. ("Brew", "openssl")."""
        return self.label.value, self.value


class TargetDependencyKind(Enum):
    """Kinds of target dependency.

    Only references to other targets of the same package exist today.
    """
    TARGET = "target"


@dataclass(frozen=True)
class TargetDependency:
    kind: TargetDependencyKind
    name: str

    @classmethod
    def target(cls, name: str) -> "TargetDependency":
        return cls(TargetDependencyKind.TARGET, name)


@dataclass
class Target:
    """A named build unit and the targets it depends on."""
    name: str
    dependencies: List[TargetDependency] = field(default_factory=list)

    def __post_init__(self):
        self.dependencies = [
            d if isinstance(d, TargetDependency) else TargetDependency.target(d)
            for d in self.dependencies
        ]


@dataclass
class Product:
    """A product vended by the package, built from some of its targets."""
    name: str
    type: ProductTypes = ProductTypes.LIBRARY
    targets: List[str] = field(default_factory=list)


@dataclass
class Package:
    """The description of a complete package.

    Equality compares name, targets and dependencies only; the remaining
    fields are auxiliary metadata.
    """
    name: str
    pkg_config: Optional[str] = field(default=None, compare=False)
    providers: Optional[List[SystemPackageProvider]] = field(default=None, compare=False)
    targets: List[Target] = field(default_factory=list)
    dependencies: List[Dependency] = field(default_factory=list)
    swift_language_versions: Optional[List[int]] = field(default=None, compare=False)
    exclude: List[str] = field(default_factory=list, compare=False)

    def __post_init__(self):
        self.targets = list(self.targets)
        self.dependencies = list(self.dependencies)
        self.exclude = list(self.exclude)
        if self.providers is not None:
            self.providers = list(self.providers)
        if self.swift_language_versions is not None:
            self.swift_language_versions = list(self.swift_language_versions)
        current_context().package_created(self)
