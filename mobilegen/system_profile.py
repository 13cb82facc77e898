"""Xcode version detection from `system_profiler` output."""

from __future__ import annotations

import re
from dataclasses import dataclass

COMMAND = "system_profiler SPDeveloperToolsDataType"
_U32_MAX = 2**32 - 1
_VERSION_RE = re.compile(r"\bVersion: (?P<major>\d+)\.(?P<minor>\d+)\b", re.ASCII)


class SystemProfileError(Exception):
    """Raised when developer tool information cannot be determined."""


class XcodeNotInstalled(SystemProfileError):
    def __init__(self) -> None:
        super().__init__("Xcode doesn't appear to be installed.")


class VersionSearchFailed(SystemProfileError):
    """The output did not contain a recognisable version line."""

    def __init__(self, command: str, output: str):
        self.command = command
        self.output = output
        super().__init__(f"Didn't find a version in the output of `{command}`: {output!r}")


@dataclass(frozen=True)
class DeveloperTools:
    version: tuple[int, int]


def _parse_component(raw: str, which: str) -> int:
    value = int(raw)
    if value > _U32_MAX:
        raise SystemProfileError(
            f'The {which} version "{raw}" wasn\'t a valid number: '
            "number too large to fit in target type"
        )
    return value


def parse_developer_tools(output: str) -> DeveloperTools:
    """Extract the Xcode version from `system_profiler` output."""
    if not output:
        raise XcodeNotInstalled()
    match = _VERSION_RE.search(output)
    if match is None:
        raise VersionSearchFailed(COMMAND, output)
    major = _parse_component(match["major"], "major")
    minor = _parse_component(match["minor"], "minor")
    return DeveloperTools(version=(major, minor))