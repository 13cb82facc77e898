"""Apple bundle version numbers: a version triple plus optional extra components."""

from __future__ import annotations

import functools
from dataclasses import dataclass

_U32_MAX = 2**32 - 1


class VersionNumberError(ValueError):
    """Raised when a version string cannot be parsed."""


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _parse_u32(raw: str) -> int:
    """Parse an unsigned 32-bit integer, rejecting anything else."""
    digits = raw[1:] if raw.startswith("+") else raw
    if not digits:
        raise ValueError("cannot parse integer from empty string")
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError("invalid digit found in string")
    value = int(digits)
    if value > _U32_MAX:
        raise ValueError("number too large to fit in target type")
    return value


@dataclass(frozen=True, order=True)
class VersionTriple:
    """A `major.minor.patch` version."""

    major: int
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _triple_from_parts(parts: list[str], original: str) -> VersionTriple:
    if not 1 <= len(parts) <= 3:
        raise VersionNumberError(
            f"Failed to parse version triple: {_quoted(original)} "
            "must have between one and three components"
        )
    try:
        numbers = [_parse_u32(part) for part in parts]
    except ValueError as err:
        raise VersionNumberError(
            f"Failed to parse version triple: {_quoted(original)}: {err}"
        ) from err
    return VersionTriple(*numbers)


def parse_version_triple(text: str) -> VersionTriple:
    """Parse `major[.minor[.patch]]`; missing components are zero."""
    return _triple_from_parts(text.split("."), text)


@functools.total_ordering
@dataclass(eq=True)
class VersionNumber:
    """A version triple followed by any number of extra numeric components."""

    triple: VersionTriple
    extra: list[int] | None = None

    def _key(self) -> tuple:
        return (self.triple, self.extra is not None, list(self.extra or ()))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = str(self.triple)
        if self.extra is not None:
            text += "".join(f".{number}" for number in self.extra)
        return text

    def push_extra(self, number: int) -> None:
        """Append an extra component, creating the list if needed."""
        if self.extra is None:
            self.extra = []
        self.extra.append(number)


def parse_version_number(text: str) -> VersionNumber:
    """Parse a version number such as `1.2.3` or `1.2.3.4.5`."""
    parts = text.split(".")
    if len(parts) <= 3:
        return VersionNumber(parse_version_triple(text))
    triple = _triple_from_parts(parts[:3], text)
    try:
        extra = [_parse_u32(part) for part in parts[3:]]
    except ValueError as err:
        raise VersionNumberError(
            f"Failed to parse extra version from {_quoted(text)}: {err}"
        ) from err
    return VersionNumber(triple, extra)