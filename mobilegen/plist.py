"""Raw Apple configuration and the property-list pairs it carries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from mobilegen.teams import Team


class DetectError(Exception):
    """Raised when a configuration cannot be detected automatically."""


@dataclass(frozen=True)
class PlistPair:
    """A key and the property-list value stored under it."""

    key: str
    value: PlistValue

    @classmethod
    def from_dict(cls, data: Any) -> PlistPair:
        if not isinstance(data, dict):
            raise ValueError("plist pair must be an object")
        if not isinstance(data.get("key"), str):
            raise ValueError("plist pair is missing a string `key`")
        if "value" not in data:
            raise ValueError("plist pair is missing `value`")
        return cls(key=data["key"], value=parse_plist_value(data["value"]))

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": _serialize_value(self.value)}


@dataclass(frozen=True)
class PlistDictionary:
    """An ordered list of nested key/value pairs."""

    dictionary: tuple[PlistPair, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return _dictionary_to_string(self)


PlistValue = Union[bool, str, list, PlistDictionary]


def value_to_string(value: PlistValue) -> str:
    """Render a property-list value in the compact form used by templates."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "[" + ",".join(value_to_string(item) for item in value) + "]"
    if isinstance(value, PlistDictionary):
        return _dictionary_to_string(value)
    raise TypeError(f"not a plist value: {value!r}")


def pair_to_string(key: str, value: PlistValue) -> str:
    return f"{key}: {value_to_string(value)}"


def _dictionary_to_string(dictionary: PlistDictionary) -> str:
    joint = ",".join(pair_to_string(pair.key, pair.value) for pair in dictionary.dictionary)
    return "{" + joint + "}"


def _serialize_value(value: PlistValue) -> Any:
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    if isinstance(value, PlistDictionary):
        return _dictionary_to_string(value)
    return value


def parse_plist_value(data: Any) -> PlistValue:
    """Interpret JSON-like data as a bool, string, array or dictionary value."""
    if isinstance(data, (bool, str)):
        return data
    if isinstance(data, list):
        return [parse_plist_value(item) for item in data]
    if isinstance(data, dict) and isinstance(data.get("dictionary"), list):
        return PlistDictionary(tuple(PlistPair.from_dict(item) for item in data["dictionary"]))
    raise ValueError("data did not match any variant of untagged enum PlistValue")


def _optional(data: dict, key: str, kind: type) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if kind is bool:
        if not isinstance(value, bool):
            raise ValueError(f"`{key}` must be a boolean")
    elif kind is str:
        if not isinstance(value, str):
            raise ValueError(f"`{key}` must be a string")
    elif kind is list:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ValueError(f"`{key}` must be a list of strings")
        value = list(value)
    return value


@dataclass
class RawConfig:
    """The `apple` section of the configuration as written by the user."""

    development_team: str
    project_dir: str | None = None
    ios_no_default_features: bool | None = None
    ios_features: list[str] | None = None
    macos_no_default_features: bool | None = None
    macos_features: list[str] | None = None
    bundle_version: str | None = None
    bundle_version_short: str | None = None
    ios_version: str | None = None
    macos_version: str | None = None
    use_legacy_build_system: bool | None = None
    plist_pairs: list[PlistPair] | None = None
    enable_bitcode: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RawConfig:
        """Read a raw config from a mapping with kebab-case keys."""
        if not isinstance(data, dict):
            raise ValueError("apple config must be a table")
        team = data.get("development-team")
        if not isinstance(team, str):
            raise ValueError("missing field `development-team`")
        pairs = data.get("plist-pairs")
        if pairs is not None:
            if not isinstance(pairs, list):
                raise ValueError("`plist-pairs` must be a list")
            pairs = [PlistPair.from_dict(item) for item in pairs]
        return cls(
            development_team=team,
            project_dir=_optional(data, "project-dir", str),
            ios_no_default_features=_optional(data, "ios-no-default-features", bool),
            ios_features=_optional(data, "ios-features", list),
            macos_no_default_features=_optional(data, "macos-no-default-features", bool),
            macos_features=_optional(data, "macos-features", list),
            bundle_version=_optional(data, "bundle-version", str),
            bundle_version_short=_optional(data, "bundle-version-short", str),
            ios_version=_optional(data, "ios-version", str),
            macos_version=_optional(data, "macos-version", str),
            use_legacy_build_system=_optional(data, "use-legacy-build-system", bool),
            plist_pairs=pairs,
            enable_bitcode=_optional(data, "enable-bitcode", bool),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise with kebab-case keys."""
        return {
            "development-team": self.development_team,
            "project-dir": self.project_dir,
            "ios-no-default-features": self.ios_no_default_features,
            "ios-features": self.ios_features,
            "macos-no-default-features": self.macos_no_default_features,
            "macos-features": self.macos_features,
            "bundle-version": self.bundle_version,
            "bundle-version-short": self.bundle_version_short,
            "ios-version": self.ios_version,
            "macos-version": self.macos_version,
            "use-legacy-build-system": self.use_legacy_build_system,
            "plist-pairs": (
                None if self.plist_pairs is None else [p.to_dict() for p in self.plist_pairs]
            ),
            "enable-bitcode": self.enable_bitcode,
        }


def raw_from_teams(teams: Sequence[Team]) -> RawConfig:
    """Build a raw config that uses the first detected development team."""
    if not teams:
        raise DetectError("No Apple developer teams were detected.")
    return RawConfig(development_team=teams[0].id)