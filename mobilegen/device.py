"""Connected Apple devices and simulators."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from mobilegen.target import Target


@dataclass(frozen=True, order=True)
class Device:
    """A physical device or simulator that apps can be deployed to."""

    id: str
    name: str
    model: str
    target: Target
    simulator: bool = False

    def as_simulator(self) -> Device:
        """Return a copy of this device marked as a simulator."""
        return dataclasses.replace(self, simulator=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.model})"