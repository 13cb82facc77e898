"""iOS simulators listed by `simctl`."""

from __future__ import annotations

import json
import logging
import platform
from dataclasses import dataclass

from mobilegen.device import Device
from mobilegen.target import for_arch

log = logging.getLogger(__name__)


class SimulatorListError(Exception):
    """Raised when the simulator list cannot be read."""


@dataclass(frozen=True, order=True)
class SimulatorDevice:
    name: str
    udid: str

    def __str__(self) -> str:
        return self.name

    def to_device(self, host_arch: str | None = None) -> Device:
        """Convert to a deployable simulator device for the host architecture."""
        arch = platform.machine() if host_arch is None else host_arch
        sim_arch = "arm64-sim" if arch in ("aarch64", "arm64") else "x86_64"
        target = for_arch(sim_arch)
        assert target is not None
        return Device(self.udid, self.name, "", target).as_simulator()


def _invalid(reason: str) -> SimulatorListError:
    return SimulatorListError(f"`simctl list` returned an invalid JSON: {reason}")


def _device_from_json(data: object) -> SimulatorDevice:
    if not isinstance(data, dict):
        raise _invalid("device entry must be an object")
    for key in ("name", "udid"):
        if not isinstance(data.get(key), str):
            raise _invalid(f"missing or invalid field `{key}`")
    return SimulatorDevice(name=data["name"], udid=data["udid"])


def parse_simulator_list(stdout: bytes | str, stderr: bytes | str = b"") -> list[SimulatorDevice]:
    """Parse `simctl list --json devices available` output into iOS simulators."""
    if not stdout and not stderr:
        log.info(
            "device detection output is empty; "
            "interpreting as a successful run with no devices connected"
        )
        return []
    text = stdout.decode("utf-8", errors="replace") if isinstance(stdout, bytes) else stdout
    try:
        data = json.loads(text)
    except ValueError as err:
        raise _invalid(str(err)) from err
    if not isinstance(data, dict) or not isinstance(data.get("devices"), dict):
        raise _invalid("missing field `devices`")
    devices: set[SimulatorDevice] = set()
    for runtime, entries in data["devices"].items():
        if not isinstance(entries, list):
            raise _invalid("device group must be a list")
        parsed = [_device_from_json(entry) for entry in entries]
        if "iOS" in runtime:
            devices.update(parsed)
    return sorted(devices)