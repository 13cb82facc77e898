from pathlib import Path

import pytest

from mobilegen.apple_config import (
    BuildScript,
    ConfigError,
    Metadata,
    Platform,
    metadata_from_dict,
    platform_from_dict,
    version_info_from_raw,
)
from mobilegen.version_number import VersionTriple


def test_build_script_to_dict_skips_unset():
    script = BuildScript(name="gen", input_files=["a.txt"], show_env_vars=False)
    assert script.to_dict() == {
        "name": "gen",
        "input-files": ["a.txt"],
        "show-env-vars": False,
    }


def test_build_script_round_trip():
    script = BuildScript(script="echo", output_file_lists=["o"], shell="/bin/sh")
    assert BuildScript.from_dict(script.to_dict()) == script


def test_empty_platform_defaults():
    platform = platform_from_dict({})
    assert platform == Platform()
    assert platform.libraries == []
    assert platform.valid_archs is None
    assert platform.no_default_features is False


def test_platform_fields():
    platform = platform_from_dict(
        {
            "no-default-features": True,
            "libraries": ["libz.tbd"],
            "valid-archs": ["arm64"],
            "asset-catalogs": ["Assets.xcassets"],
            "pre-build-scripts": [{"name": "pre"}],
        }
    )
    assert platform.no_default_features is True
    assert platform.libraries == ["libz.tbd"]
    assert platform.valid_archs == ["arm64"]
    assert platform.asset_catalogs == [Path("Assets.xcassets")]
    assert platform.pre_build_scripts == [BuildScript(name="pre")]


def test_platform_rejects_bad_list():
    with pytest.raises(ValueError):
        platform_from_dict({"features": "not-a-list"})


def test_metadata_defaults_to_supported():
    meta = metadata_from_dict({})
    assert meta == Metadata()
    assert meta.supported is True


def test_metadata_unsupported_and_platforms():
    meta = metadata_from_dict({"supported": False, "macos": {"frameworks": ["AppKit"]}})
    assert meta.supported is False
    assert meta.macos.frameworks == ["AppKit"]
    assert meta.ios.frameworks == []


def test_version_info_none():
    info = version_info_from_raw(None, None)
    assert info.version_number is None
    assert info.short_version_number is None


def test_version_info_matching():
    info = version_info_from_raw("1.2.3.4", "1.2.3")
    assert str(info.version_number) == "1.2.3.4"
    assert info.short_version_number == VersionTriple(1, 2, 3)


def test_version_info_mismatch():
    with pytest.raises(ConfigError, match="don't match"):
        version_info_from_raw("1.2.3", "1.2.4")


def test_version_info_short_without_long():
    with pytest.raises(ConfigError, match="cannot be specified without"):
        version_info_from_raw(None, "1.0.0")


def test_version_info_invalid_long():
    with pytest.raises(ConfigError):
        version_info_from_raw("1.x.3", None)


def test_version_info_invalid_short():
    with pytest.raises(ConfigError, match="invalid"):
        version_info_from_raw("1.0.0", "a.b")