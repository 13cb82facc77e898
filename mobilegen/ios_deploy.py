"""Parsing of `ios-deploy --json` event streams and device lists."""

from __future__ import annotations

import enum
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from mobilegen.device import Device
from mobilegen.target import for_arch

log = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1
_BOUNDARY_RE = re.compile(r"\}\{")


class DeviceListError(Exception):
    """Raised when the connected device list cannot be determined."""


class ArchInvalid(DeviceListError):
    def __init__(self, arch: str):
        self.arch = arch
        escaped = arch.replace("\\", "\\\\").replace('"', '\\"')
        super().__init__(f'"{escaped}" isn\'t a valid target arch.')


class EventKind(enum.Enum):
    BUNDLE_COPY = "BundleCopy"
    BUNDLE_INSTALL = "BundleInstall"
    DEVICE_DETECTED = "DeviceDetected"
    ERROR = "Error"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class DeviceInfo:
    device_identifier: str
    device_name: str
    model_arch: str
    model_name: str

    @classmethod
    def from_json(cls, data: Any) -> DeviceInfo:
        if not isinstance(data, dict):
            raise ValueError("device info must be an object")
        return cls(
            device_identifier=_require(data, "DeviceIdentifier", str),
            device_name=_require(data, "DeviceName", str),
            model_arch=_require(data, "modelArch", str),
            model_name=_require(data, "modelName", str),
        )


@dataclass(frozen=True)
class Event:
    """One event reported by `ios-deploy`."""

    kind: EventKind
    device: DeviceInfo | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> Event:
        if not isinstance(data, dict):
            raise ValueError("event must be an object")
        if "Event" not in data:
            raise ValueError("missing field `Event`")
        tag = data["Event"]
        if not isinstance(tag, str):
            raise ValueError("field `Event` must be a string")
        if tag == EventKind.DEVICE_DETECTED.value:
            if "Device" not in data:
                raise ValueError("missing field `Device`")
            return cls(EventKind.DEVICE_DETECTED, device=DeviceInfo.from_json(data["Device"]))
        spec = _DETAIL_FIELDS.get(tag)
        if spec is None:
            return cls(EventKind.UNKNOWN)
        details = {name: _require(data, key, kind) for key, (name, kind) in spec.items()}
        return cls(EventKind(tag), details=details)


_DETAIL_FIELDS: dict[str, dict[str, tuple[str, type]]] = {
    EventKind.BUNDLE_COPY.value: {
        "Percent": ("percent", int),
        "OverallPercent": ("overall_percent", int),
        "Path": ("path", str),
    },
    EventKind.BUNDLE_INSTALL.value: {
        "Percent": ("percent", int),
        "OverallPercent": ("overall_percent", int),
        "Status": ("status", str),
    },
    EventKind.ERROR.value: {
        "Code": ("code", int),
        "Status": ("status", str),
    },
}


def _require(data: dict, key: str, kind: type) -> Any:
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    value = data[key]
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U32_MAX:
            raise ValueError(f"field `{key}` must be an unsigned 32-bit integer")
    elif not isinstance(value, kind):
        raise ValueError(f"field `{key}` must be a {kind.__name__}")
    return value


def _parse_into(text: str, events: list[Event]) -> None:
    if not text:
        return
    try:
        event = Event.from_json(json.loads(text))
    except ValueError as err:
        log.error("failed to parse `ios-deploy` event: %s\nraw event text:\n%s", err, text)
        return
    log.debug("parsed `ios-deploy` event: %r", event)
    events.append(event)


def parse_events(text: str) -> list[Event]:
    """Split concatenated JSON documents and parse each as an event."""
    events: list[Event] = []
    start = 0
    for match in _BOUNDARY_RE.finditer(text):
        end = match.start() + 1
        _parse_into(text[start:end], events)
        start = end
    _parse_into(text[start:], events)
    return events


def _decode(output: bytes | str) -> str:
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def parse_device_list(stdout: bytes | str, stderr: bytes | str = b"") -> list[Device]:
    """Turn `ios-deploy --detect --json` output into a sorted device list."""
    if not stdout and not stderr:
        log.info(
            "device detection output is empty; "
            "interpreting as a successful run with no devices connected"
        )
        return []
    devices: set[Device] = set()
    for event in parse_events(_decode(stdout)):
        info = event.device
        if info is None:
            continue
        target = for_arch(info.model_arch)
        if target is None:
            raise ArchInvalid(info.model_arch)
        devices.add(Device(info.device_identifier, info.device_name, info.model_name, target))
    return sorted(devices)