"""Track device pitch and roll by integrating gyroscope angular rates.

Readings that stay within a small band of the previous reading count as
drift and are ignored.  Angles are accumulated in single precision.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = ["GyroTracker", "DRIFT_CORRECTION", "SAMPLE_INTERVAL"]

DRIFT_CORRECTION = 12
"""Range of readings around the previous one that is treated as drift."""

SAMPLE_INTERVAL = 0.01
"""Seconds between samples."""

_F32 = struct.Struct("<f")


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def _is_drift(current: float, previous: float) -> bool:
    now, before = math.ceil(current), math.ceil(previous)
    return before - DRIFT_CORRECTION <= now <= before + DRIFT_CORRECTION


@dataclass
class GyroTracker:
    """Accumulated pitch (around X) and roll (around Y) from gyro readings."""

    precision: float = 10.0
    pitch: float = 0.0
    roll: float = 0.0
    old_x: float = 0.0
    old_y: float = 0.0

    def update(self, x: float, y: float) -> None:
        """Feed one angular-rate reading and integrate it unless it is drift."""
        if not _is_drift(x, self.old_x):
            step = _f32(_f32(x) / _f32(self.precision)) * SAMPLE_INTERVAL
            self.pitch = _f32(self.pitch + step)
        if not _is_drift(y, self.old_y):
            step = _f32(_f32(y) / _f32(self.precision)) * SAMPLE_INTERVAL
            self.roll = _f32(self.roll - step)
        self.old_x = x
        self.old_y = y

    def set_home(self) -> None:
        """Make the current orientation the zero position."""
        self.pitch = 0.0
        self.roll = 0.0

    def position(self, x: float, y: float) -> tuple[float, float]:
        """Feed a reading and return the pitch and roll rounded up."""
        self.update(x, y)
        return float(math.ceil(self.pitch)), float(math.ceil(self.roll))