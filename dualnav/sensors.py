"""Latest-sample cell written by the IMU callbacks and read by the DR loop."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional

from common.interface import ImuSensor
from common.types import SensorSample
from dualnav.path import now_ms


class LatestSampleHolder(ImuSensor):
    """
    Last-writer-wins holder for the merged IMU reading.

    Accelerometer and gyroscope events arrive separately; each one builds a
    complete new ``SensorSample`` from its own axes plus the other sensor's
    latest axes and swaps it in whole, so readers never see a half-written
    record. There is no queue: samples between reads are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sample = SensorSample()
        self._events = 0

    @property
    def event_count(self) -> int:
        return self._events

    def on_accelerometer(self, x: float, y: float, z: float, timestamp_ms: Optional[int] = None) -> None:
        ts = now_ms() if timestamp_ms is None else int(timestamp_ms)
        with self._lock:
            self._sample = replace(
                self._sample, accel_x=float(x), accel_y=float(y), accel_z=float(z), timestamp_ms=ts
            )
            self._events += 1

    def on_gyroscope(self, x: float, y: float, z: float, timestamp_ms: Optional[int] = None) -> None:
        ts = now_ms() if timestamp_ms is None else int(timestamp_ms)
        with self._lock:
            self._sample = replace(
                self._sample, gyro_x=float(x), gyro_y=float(y), gyro_z=float(z), timestamp_ms=ts
            )
            self._events += 1

    def publish(self, sample: SensorSample) -> None:
        """Replace the whole record at once (drivers that deliver both sensors together)."""
        with self._lock:
            self._sample = sample
            self._events += 1

    def latest(self, timestamp_ms: Optional[int] = None) -> SensorSample:
        """Return the current record, optionally restamped with the read time."""
        with self._lock:
            sample = self._sample
        if timestamp_ms is None:
            return sample
        return replace(sample, timestamp_ms=int(timestamp_ms))

    def read(self) -> SensorSample:
        return self.latest(now_ms())


__all__ = ["LatestSampleHolder"]
