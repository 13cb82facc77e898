"""Apple build targets and their Xcode requirements."""

from __future__ import annotations

import functools
from dataclasses import dataclass

DEFAULT_KEY = "aarch64"


class VersionCheckError(Exception):
    """Raised when the installed Xcode cannot be used for a target."""


class XcodeVersionTooLow(VersionCheckError):
    """The installed Xcode is older than a target requires."""

    def __init__(self, msg: str, you_have: tuple[int, int], you_need: tuple[int, int]):
        self.msg = msg
        self.you_have = you_have
        self.you_need = you_need
        super().__init__(
            f"Installed Xcode version too low ({msg} Xcode {you_need[0]}.{you_need[1]}; "
            f"you have Xcode {you_have[0]}.{you_have[1]}.); please upgrade and try again"
        )


@functools.total_ordering
@dataclass(frozen=True)
class Target:
    """A Rust target triple together with its Xcode arch and SDK."""

    triple: str
    arch: str
    sdk: str
    alias: str | None = None
    min_xcode_version: tuple[tuple[int, int], str] | None = None

    def _key(self) -> tuple:
        return (
            self.triple,
            self.arch,
            self.sdk,
            self.alias is not None,
            self.alias or "",
            self.min_xcode_version is not None,
            self.min_xcode_version or ((0, 0), ""),
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Target):
            return NotImplemented
        return self._key() < other._key()

    def is_macos(self) -> bool:
        return self == macos_target()

    def check_xcode_version(self, installed_version: tuple[int, int]) -> None:
        """Raise XcodeVersionTooLow if the installed Xcode is below the minimum."""
        if self.min_xcode_version is None:
            return
        min_version, msg = self.min_xcode_version
        if tuple(installed_version) < tuple(min_version):
            raise XcodeVersionTooLow(msg, tuple(installed_version), tuple(min_version))


_TARGETS: dict[str, Target] = {
    "aarch64": Target(
        triple="aarch64-apple-ios",
        arch="arm64",
        sdk="iphoneos",
        alias="arm64e",
    ),
    "aarch64-sim": Target(
        triple="aarch64-apple-ios-sim",
        arch="arm64-sim",
        sdk="iphonesimulator",
        alias="arm64e-sim",
    ),
    # The simulator only supports Metal as of Xcode 11.0.
    "x86_64": Target(
        triple="x86_64-apple-ios",
        arch="x86_64",
        sdk="iphonesimulator",
        min_xcode_version=((11, 0), "iOS Simulator doesn't support Metal until"),
    ),
}


def all_targets() -> dict[str, Target]:
    """All known iOS targets, keyed by name in sorted order."""
    return dict(sorted(_TARGETS.items()))


def target_names() -> list[str]:
    return sorted(_TARGETS)


def macos_target() -> Target:
    return Target(triple="x86_64-apple-darwin", arch="x86_64", sdk="iphoneos")


def for_arch(arch: str) -> Target | None:
    """Find the target whose arch or alias matches `arch`."""
    return next(
        (t for t in all_targets().values() if t.arch == arch or t.alias == arch),
        None,
    )


def verbosity(pedantic: bool) -> str | None:
    """The xcodebuild verbosity flag for the given noise level."""
    return None if pedantic else "-quiet"