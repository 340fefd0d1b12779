"""Semantic version checks (semver 2.0.0) backed by the ``semver`` package.

Loose input forms accepted by :func:`valid_semver`: surrounding whitespace
and a leading ``v`` or ``=`` are stripped before parsing.
"""

from __future__ import annotations

from semver import Version


def valid_semver(value: str | None) -> str | None:
    """Return the cleaned version string if *value* is valid semver, else None.

    Examples:
        >>> valid_semver("v1.2.3")
        '1.2.3'
        >>> valid_semver("1.2") is None
        True
    """
    if not value:
        return None
    candidate = value.strip().lstrip("=v")
    if not Version.is_valid(candidate):
        return None
    return candidate


def is_semver(value: str) -> bool:
    """Predicate form of :func:`valid_semver` for field validators."""
    return valid_semver(value) is not None
