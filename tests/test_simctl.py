import json

import pytest

from mobilegen.simctl import SimulatorDevice, SimulatorListError, parse_simulator_list

LISTING = json.dumps(
    {
        "devices": {
            "com.apple.CoreSimulator.SimRuntime.iOS-16-0": [
                {"name": "Sim B", "udid": "fake-udid-2", "state": "Shutdown"},
                {"name": "Sim A", "udid": "fake-udid-1"},
            ],
            "com.apple.CoreSimulator.SimRuntime.watchOS-9-0": [
                {"name": "Watch", "udid": "fake-udid-3"},
            ],
            "com.apple.CoreSimulator.SimRuntime.iOS-15-0": [
                {"name": "Sim A", "udid": "fake-udid-1"},
            ],
        }
    }
)


def test_only_ios_devices_sorted_and_deduped():
    devices = parse_simulator_list(LISTING.encode(), b"")
    assert devices == [
        SimulatorDevice("Sim A", "fake-udid-1"),
        SimulatorDevice("Sim B", "fake-udid-2"),
    ]


def test_empty_output_is_no_devices():
    assert parse_simulator_list(b"", b"") == []


def test_invalid_json_raises():
    with pytest.raises(SimulatorListError, match="invalid JSON"):
        parse_simulator_list("{not json", "")


def test_missing_devices_key_raises():
    with pytest.raises(SimulatorListError):
        parse_simulator_list(json.dumps({"other": {}}), "")


def test_str_is_name():
    assert str(SimulatorDevice("Sim A", "fake-udid-1")) == "Sim A"


def test_to_device_on_arm_host():
    device = SimulatorDevice("Sim A", "fake-udid-1").to_device("aarch64")
    assert device.simulator is True
    assert device.id == "fake-udid-1"
    assert device.name == "Sim A"
    assert device.model == ""
    assert device.target.arch == "arm64-sim"


def test_to_device_on_intel_host():
    device = SimulatorDevice("Sim B", "fake-udid-2").to_device("x86_64")
    assert device.target.triple == "x86_64-apple-ios"
    assert device.simulator is True