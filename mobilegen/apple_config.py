"""Apple metadata and bundle version settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mobilegen.version_number import (
    VersionNumber,
    VersionNumberError,
    VersionTriple,
    parse_version_number,
    parse_version_triple,
)

DEFAULT_PROJECT_DIR = "gen/apple"


class ConfigError(Exception):
    """Raised when the Apple configuration is invalid."""


_SCRIPT_FIELDS: dict[str, type] = {
    "path": str,
    "script": str,
    "name": str,
    "input_files": list,
    "output_files": list,
    "input_file_lists": list,
    "output_file_lists": list,
    "shell": str,
    "show_env_vars": bool,
    "run_only_when_installing": bool,
    "based_on_dependency_analysis": bool,
    "discovered_dependency_file": str,
}


def _kebab(name: str) -> str:
    return name.replace("_", "-")


def _check(value: Any, kind: type, key: str) -> Any:
    if kind is list:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"`{key}` must be a list of strings")
        return list(value)
    if kind is bool and not isinstance(value, bool):
        raise ValueError(f"`{key}` must be a boolean")
    if kind is str and not isinstance(value, str):
        raise ValueError(f"`{key}` must be a string")
    return value


@dataclass
class BuildScript:
    """A build phase script for the Xcode project."""

    path: str | None = None
    script: str | None = None
    name: str | None = None
    input_files: list[str] | None = None
    output_files: list[str] | None = None
    input_file_lists: list[str] | None = None
    output_file_lists: list[str] | None = None
    shell: str | None = None
    show_env_vars: bool | None = None
    run_only_when_installing: bool | None = None
    based_on_dependency_analysis: bool | None = None
    discovered_dependency_file: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> BuildScript:
        if not isinstance(data, dict):
            raise ValueError("build script must be a table")
        values = {}
        for name, kind in _SCRIPT_FIELDS.items():
            key = _kebab(name)
            if data.get(key) is not None:
                values[name] = _check(data[key], kind, key)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Kebab-case mapping of the fields that are set."""
        return {
            _kebab(name): getattr(self, name)
            for name in _SCRIPT_FIELDS
            if getattr(self, name) is not None
        }


@dataclass
class Platform:
    """Per-platform (iOS or macOS) project metadata."""

    no_default_features: bool = False
    cargo_args: list[str] | None = None
    features: list[str] | None = None
    libraries: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    valid_archs: list[str] | None = None
    vendor_frameworks: list[str] = field(default_factory=list)
    vendor_sdks: list[str] = field(default_factory=list)
    asset_catalogs: list[Path] | None = None
    pods: list[Any] | None = None
    pod_options: list[str] | None = None
    additional_targets: list[Path] | None = None
    pre_build_scripts: list[BuildScript] | None = None
    post_compile_scripts: list[BuildScript] | None = None
    post_build_scripts: list[BuildScript] | None = None
    command_line_arguments: list[str] = field(default_factory=list)


_OPTIONAL_STR_LISTS = ("cargo_args", "features", "valid_archs", "pod_options")
_DEFAULTED_STR_LISTS = (
    "libraries",
    "frameworks",
    "vendor_frameworks",
    "vendor_sdks",
    "command_line_arguments",
)
_PATH_LISTS = ("asset_catalogs", "additional_targets")
_SCRIPT_LISTS = ("pre_build_scripts", "post_compile_scripts", "post_build_scripts")


def platform_from_dict(data: Any) -> Platform:
    """Read platform metadata from a mapping with kebab-case keys."""
    if data is None:
        return Platform()
    if not isinstance(data, dict):
        raise ValueError("platform metadata must be a table")
    values: dict[str, Any] = {}
    if data.get("no-default-features") is not None:
        values["no_default_features"] = _check(
            data["no-default-features"], bool, "no-default-features"
        )
    for name in _OPTIONAL_STR_LISTS + _DEFAULTED_STR_LISTS:
        key = _kebab(name)
        if data.get(key) is not None:
            values[name] = _check(data[key], list, key)
    for name in _PATH_LISTS:
        key = _kebab(name)
        if data.get(key) is not None:
            values[name] = [Path(p) for p in _check(data[key], list, key)]
    for name in _SCRIPT_LISTS:
        key = _kebab(name)
        if data.get(key) is not None:
            if not isinstance(data[key], list):
                raise ValueError(f"`{key}` must be a list")
            values[name] = [BuildScript.from_dict(item) for item in data[key]]
    if data.get("pods") is not None:
        if not isinstance(data["pods"], list):
            raise ValueError("`pods` must be a list")
        values["pods"] = list(data["pods"])
    return Platform(**values)


@dataclass
class Metadata:
    """Apple metadata from the package manifest."""

    supported: bool = True
    ios: Platform = field(default_factory=Platform)
    macos: Platform = field(default_factory=Platform)


def metadata_from_dict(data: Any) -> Metadata:
    """Read Apple metadata; support defaults to true."""
    if data is None:
        return Metadata()
    if not isinstance(data, dict):
        raise ValueError("apple metadata must be a table")
    supported = data.get("supported", True)
    if not isinstance(supported, bool):
        raise ValueError("`supported` must be a boolean")
    return Metadata(
        supported=supported,
        ios=platform_from_dict(data.get("ios")),
        macos=platform_from_dict(data.get("macos")),
    )


@dataclass(frozen=True)
class VersionInfo:
    version_number: VersionNumber | None
    short_version_number: VersionTriple | None


def version_info_from_raw(
    version_string: str | None, short_version_string: str | None
) -> VersionInfo:
    """Parse and cross-check the bundle version and its short form."""
    version_number = None
    if version_string is not None:
        try:
            version_number = parse_version_number(version_string)
        except VersionNumberError as err:
            raise ConfigError(
                f"`apple.app-version` short and long version number don't match: {err}"
            ) from err
    short_version_number = None
    if short_version_string is not None:
        try:
            short_version_number = parse_version_triple(short_version_string)
        except VersionNumberError as err:
            raise ConfigError(f"`apple.app-version` invalid: {err}") from err
    if short_version_number is not None and version_number is None:
        raise ConfigError(
            "`apple.app-version` `bundle-version-short` cannot be specified "
            "without also specifying `bundle-version`"
        )
    if (
        version_number is not None
        and short_version_number is not None
        and version_number.triple != short_version_number
    ):
        raise ConfigError("`apple.app-version` short and long version number don't match")
    return VersionInfo(version_number, short_version_number)