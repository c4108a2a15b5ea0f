"""Step-and-heading dead reckoning from accelerometer + gyroscope samples."""

from __future__ import annotations

import math
from typing import Callable, Optional, Tuple

from common.logger import get_logger
from common.math import magnitude, wrap_angle
from common.types import ORIGIN, Position, SensorSample
from dualnav.config import DeadReckoningParams
from dualnav.filters import GyroBiasCalibrator, LowPassFilter, StepDetector

logger = get_logger("dead_reckoning")


class DeadReckoning:
    """
    Pedestrian dead reckoning: yaw from the gyro Z rate, displacement from
    detected steps of fixed length along the current heading.

    Continuous double integration of consumer accelerometers diverges within
    seconds, so position only moves on a detected footfall.
    """

    def __init__(
        self,
        params: DeadReckoningParams | None = None,
        on_position_update: Optional[Callable[[Position], None]] = None,
    ):
        self.params = params or DeadReckoningParams()
        self.on_position_update = on_position_update
        self._lowpass = LowPassFilter(self.params.alpha)
        self._calibrator = GyroBiasCalibrator(self.params.calibration_samples)
        self._steps = StepDetector(
            high=self.params.step_high,
            low=self.params.step_low,
            debounce_ms=self.params.step_debounce_ms,
        )
        self._position = ORIGIN
        self._yaw = 0.0
        self._last_timestamp: Optional[int] = None

    # -- Public API -------------------------------------------------------------

    @property
    def position(self) -> Position:
        return self._position

    @property
    def heading(self) -> float:
        """Yaw in radians, in (-pi, pi]."""
        return self._yaw

    @property
    def initialized(self) -> bool:
        return self._last_timestamp is not None

    @property
    def is_calibrated(self) -> bool:
        return self._calibrator.calibrated

    @property
    def calibration_progress(self) -> float:
        return self._calibrator.progress

    @property
    def gyro_bias(self) -> float:
        return self._calibrator.bias

    @property
    def filtered_accel(self) -> Tuple[float, ...]:
        return self._lowpass.value

    @property
    def in_step(self) -> bool:
        return self._steps.in_step

    def step_count(self) -> int:
        return self._steps.count

    def heading_degrees(self) -> float:
        return math.degrees(self._yaw)

    def reset(self) -> None:
        self._lowpass.reset()
        self._calibrator.reset()
        self._steps.reset()
        self._position = ORIGIN
        self._yaw = 0.0
        self._last_timestamp = None

    def update(self, sample: SensorSample) -> Position:
        """Advance the estimate with one sample and return the current position."""
        t = int(sample.timestamp_ms)
        if self._last_timestamp is None:
            self._last_timestamp = t
            return self._position

        dt = (t - self._last_timestamp) / 1000.0
        self._last_timestamp = t
        if dt <= 0.0 or dt > self.params.max_dt:
            logger.debug(f"Skipping sample with dt={dt:.3f}s")
            return self._position

        if not self._calibrator.calibrated and self._calibrator.add(sample.gyro_z):
            logger.info(f"Gyro Z bias calibrated: {self._calibrator.bias:.5f} rad/s")

        self._update_orientation(sample.gyro_z, dt)
        self._lowpass.update(sample.accel)

        accel_mag = magnitude(sample.accel_x, sample.accel_y, sample.accel_z)
        if self._steps.update(accel_mag, t):
            self._advance_one_step()

        if self.on_position_update is not None:
            self.on_position_update(self._position)
        return self._position

    # -- Internals --------------------------------------------------------------

    def _update_orientation(self, gyro_z: float, dt: float) -> None:
        rate = gyro_z - self._calibrator.bias
        if abs(rate) > self.params.gyro_deadband:
            self._yaw += rate * dt
        self._yaw = wrap_angle(self._yaw)

    def _advance_one_step(self) -> None:
        length = self.params.step_length
        # Flat-surface assumption: y stays put.
        self._position = Position(
            x=self._position.x + length * math.cos(self._yaw),
            y=self._position.y,
            z=self._position.z + length * math.sin(self._yaw),
        )


__all__ = ["DeadReckoning"]
