"""Shorthand parsing utilities for dependency version specifications."""

from typing import Optional, Tuple

from .models import RangeShape, Version, VersionRange

HALF_OPEN_OP = "..<"
CLOSED_OP = "..."


def tokenize_range(s: str) -> Tuple[str, Optional[str], Optional[str]]:
    """Return (lower, operator or None, upper or None).

    The half-open operator is checked first since it shares a prefix with the
    closed one.
    """
    s = s.strip()
    for op in (HALF_OPEN_OP, CLOSED_OP):
        if op in s:
            lower, upper = s.split(op, 1)
            return lower.strip(), op, upper.strip()
    return s, None, None


def determine_shape(spec: str) -> RangeShape:
    """Determine which shorthand a spec string uses."""
    _, op, _ = tokenize_range(spec)
    if op == HALF_OPEN_OP:
        return RangeShape.HALF_OPEN
    if op == CLOSED_OP:
        return RangeShape.CLOSED
    dots = spec.strip().count(".")
    if dots == 0:
        return RangeShape.MAJOR
    if dots == 1:
        return RangeShape.MAJOR_MINOR
    return RangeShape.EXACT


def _parse_component(token: str, spec: str) -> int:
    if not token.isdigit():
        raise ValueError(f"Invalid version component {token!r} in {spec!r}")
    return int(token)


def parse_version_spec(spec: str) -> VersionRange:
    """Parse a shorthand spec into its canonical half-open range.

    Accepted forms:
        "1"               major only
        "1.2"             major and minor
        "1.2.3"           exact version
        "1.0.0..<2.0.0"   half-open range
        "1.0.0...1.4.2"   closed range
    """
    if not spec or not spec.strip():
        raise ValueError("Empty version spec")

    shape = determine_shape(spec)
    lower, _, upper = tokenize_range(spec)

    if shape == RangeShape.HALF_OPEN:
        return VersionRange.half_open(Version.parse(lower), Version.parse(upper or ""))
    if shape == RangeShape.CLOSED:
        return VersionRange.closed(Version.parse(lower), Version.parse(upper or ""))
    if shape == RangeShape.MAJOR:
        return VersionRange.major(_parse_component(lower, spec))
    if shape == RangeShape.MAJOR_MINOR:
        major, minor = lower.split(".")
        return VersionRange.major_minor(_parse_component(major, spec), _parse_component(minor, spec))
    return VersionRange.exact(Version.parse(lower))
