import json

import pytest

from mobilegen.ios_deploy import (
    ArchInvalid,
    DeviceInfo,
    DeviceListError,
    EventKind,
    parse_device_list,
    parse_events,
)
from mobilegen.target import all_targets


def detected(identifier, name, arch, model):
    return json.dumps(
        {
            "Event": "DeviceDetected",
            "Device": {
                "DeviceIdentifier": identifier,
                "DeviceName": name,
                "modelArch": arch,
                "modelName": model,
            },
        }
    )


def test_parse_events_splits_documents():
    text = (
        detected("fake-device-0001", "Phone A", "arm64", "Model A")
        + json.dumps({"Event": "Error", "Code": 7, "Status": "bad"})
        + json.dumps({"Event": "SomethingElse"})
    )
    events = parse_events(text)
    assert [e.kind for e in events] == [
        EventKind.DEVICE_DETECTED,
        EventKind.ERROR,
        EventKind.UNKNOWN,
    ]
    assert events[0].device == DeviceInfo("fake-device-0001", "Phone A", "arm64", "Model A")
    assert events[1].details == {"code": 7, "status": "bad"}


def test_parse_events_skips_invalid_documents():
    text = '{"NoTag": 1}' + '{"Event": "BundleCopy", "Percent": 5}' + detected(
        "fake-device-0002", "B", "arm64", "M"
    )
    events = parse_events(text)
    assert len(events) == 1
    assert events[0].device.device_identifier == "fake-device-0002"


def test_parse_events_bundle_copy_details():
    text = json.dumps(
        {"Event": "BundleCopy", "Percent": 10, "OverallPercent": 20, "Path": "a/b"}
    )
    (event,) = parse_events(text)
    assert event.kind is EventKind.BUNDLE_COPY
    assert event.details == {"percent": 10, "overall_percent": 20, "path": "a/b"}


def test_parse_events_empty():
    assert parse_events("") == []


def test_device_list_resolves_targets_and_sorts():
    out = (
        detected("fake-device-0009", "Second", "arm64e", "M2")
        + detected("fake-device-0003", "First", "arm64", "M1")
        + detected("fake-device-0003", "First", "arm64", "M1")
    ).encode()
    devices = parse_device_list(out, b"")
    assert [d.id for d in devices] == ["fake-device-0003", "fake-device-0009"]
    assert all(d.target == all_targets()["aarch64"] for d in devices)
    assert devices[0].model == "M1"
    assert all(not d.simulator for d in devices)


def test_device_list_empty_output():
    assert parse_device_list(b"", b"") == []


def test_device_list_ignores_other_events():
    out = json.dumps({"Event": "Error", "Code": 1, "Status": "x"})
    assert parse_device_list(out, "") == []


def test_device_list_invalid_arch():
    out = detected("fake-device-0004", "Odd", "mips", "M")
    with pytest.raises(ArchInvalid) as info:
        parse_device_list(out, "")
    assert info.value.arch == "mips"
    assert isinstance(info.value, DeviceListError)