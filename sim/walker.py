"""
Synthetic pedestrian: IMU stream, ground-truth path, and a simulated pose source.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from common.interface import PoseSource
from common.logger import get_logger
from common.math import GRAVITY
from common.realtime import PeriodicTask, monotonic_time
from common.types import Position, SensorSample
from dualnav.sensors import LatestSampleHolder

logger = get_logger("sim")


@dataclass(frozen=True)
class WalkerProfile:
    cadence_hz: float = 1.8  # steps per second
    step_length: float = 0.7  # true stride used for ground truth (m)
    bounce: float = 3.0  # vertical accel amplitude around gravity (m/s²)
    turn_rate: float = 0.0  # rad/s
    gyro_bias: float = 0.0  # rad/s
    accel_noise_std: float = 0.05
    gyro_noise_std: float = 0.002
    rate_hz: float = 100.0

    @property
    def speed(self) -> float:
        return self.step_length * self.cadence_hz


class WalkerSimulator:
    """
    Phone held flat by a walker: the Z accelerometer carries gravity plus a
    sinusoidal bounce (one period per step), the Z gyro carries the turn rate.
    """

    def __init__(self, profile: WalkerProfile | None = None, seed: Optional[int] = None):
        self.profile = profile or WalkerProfile()
        self._rng = np.random.default_rng(seed)
        self._rng_lock = threading.Lock()

    def accel_z(self, t: np.ndarray | float) -> np.ndarray | float:
        p = self.profile
        return GRAVITY + p.bounce * np.sin(2.0 * np.pi * p.cadence_hz * np.asarray(t))

    def truth_at(self, t: float) -> Position:
        """Ground-truth position after ``t`` seconds of walking (constant turn rate)."""
        p = self.profile
        v, w = p.speed, p.turn_rate
        if abs(w) < 1e-9:
            return Position(x=v * t, y=0.0, z=0.0)
        return Position(x=v / w * math.sin(w * t), y=0.0, z=v / w * (1.0 - math.cos(w * t)))

    def sample_at(self, t: float, timestamp_ms: Optional[int] = None) -> SensorSample:
        p = self.profile
        with self._rng_lock:
            accel_noise = self._rng.normal(0.0, p.accel_noise_std, 3)
            gyro_noise = self._rng.normal(0.0, p.gyro_noise_std, 3)
        return SensorSample(
            accel_x=float(accel_noise[0]),
            accel_y=float(accel_noise[1]),
            accel_z=float(self.accel_z(t) + accel_noise[2]),
            gyro_x=float(gyro_noise[0]),
            gyro_y=float(gyro_noise[1]),
            gyro_z=float(p.turn_rate + p.gyro_bias + gyro_noise[2]),
            timestamp_ms=int(round(t * 1000.0)) if timestamp_ms is None else int(timestamp_ms),
        )

    def generate(self, duration_s: float, start_ms: int = 0) -> Tuple[List[SensorSample], np.ndarray]:
        """Return a sample stream at ``rate_hz`` and the matching (N, 3) truth array."""
        p = self.profile
        n = int(round(duration_s * p.rate_hz)) + 1
        t = np.arange(n) / p.rate_hz
        with self._rng_lock:
            accel_noise = self._rng.normal(0.0, p.accel_noise_std, (n, 3))
            gyro_noise = self._rng.normal(0.0, p.gyro_noise_std, (n, 3))
        az = self.accel_z(t) + accel_noise[:, 2]
        gz = p.turn_rate + p.gyro_bias + gyro_noise[:, 2]
        stamps = start_ms + np.round(t * 1000.0).astype(np.int64)

        samples = [
            SensorSample(
                accel_x=float(accel_noise[i, 0]),
                accel_y=float(accel_noise[i, 1]),
                accel_z=float(az[i]),
                gyro_x=float(gyro_noise[i, 0]),
                gyro_y=float(gyro_noise[i, 1]),
                gyro_z=float(gz[i]),
                timestamp_ms=int(stamps[i]),
            )
            for i in range(n)
        ]
        truth = np.array([self.truth_at(float(ti)).as_tuple() for ti in t])
        return samples, truth


class SimulatedPoseSource(PoseSource):
    """Noisy ground truth standing in for a visual-inertial tracker."""

    def __init__(
        self,
        truth: Callable[[], Position],
        noise_std: float = 0.02,
        dropout: float = 0.0,
        failure_rate: float = 0.0,
        seed: Optional[int] = None,
    ):
        self._truth = truth
        self.noise_std = float(noise_std)
        self.dropout = float(dropout)
        self.failure_rate = float(failure_rate)
        self._rng = np.random.default_rng(seed)
        self._origin = Position()
        self.resets = 0
        self.destroyed = False
        self._status = "NOT_STARTED"

    @property
    def tracking_status(self) -> str:
        return self._status

    def update(self) -> Optional[Position]:
        if self.destroyed:
            self._status = "STOPPED"
            return None
        if self.failure_rate and self._rng.random() < self.failure_rate:
            self._status = "FAILED"
            raise RuntimeError("simulated tracker failure")
        if self.dropout and self._rng.random() < self.dropout:
            self._status = "PAUSED"
            return None
        self._status = "TRACKING"
        p = self._truth()
        nx, ny, nz = self._rng.normal(0.0, self.noise_std, 3) if self.noise_std > 0 else (0.0, 0.0, 0.0)
        return Position(
            x=p.x - self._origin.x + float(nx),
            y=p.y - self._origin.y + float(ny),
            z=p.z - self._origin.z + float(nz),
        )

    def reset_tracking(self) -> None:
        self._origin = self._truth()
        self.resets += 1

    def destroy(self) -> None:
        self.destroyed = True


class SimImuFeed:
    """Plays a walker into a ``LatestSampleHolder`` in real time, one event per sensor."""

    def __init__(self, walker: WalkerSimulator, holder: LatestSampleHolder):
        self.walker = walker
        self.holder = holder
        self._t0 = monotonic_time()
        self._task = PeriodicTask("sim-imu", 1.0 / walker.profile.rate_hz, self._tick)

    def elapsed(self) -> float:
        return monotonic_time() - self._t0

    def truth(self) -> Position:
        return self.walker.truth_at(self.elapsed())

    def start(self) -> None:
        self._t0 = monotonic_time()
        self._task.start()
        logger.info(f"Simulated IMU running at {self.walker.profile.rate_hz:.0f} Hz")

    def stop(self) -> None:
        self._task.cancel(join=True)

    def _tick(self) -> None:
        s = self.walker.sample_at(self.elapsed())
        self.holder.on_accelerometer(s.accel_x, s.accel_y, s.accel_z)
        self.holder.on_gyroscope(s.gyro_x, s.gyro_y, s.gyro_z)


__all__ = ["WalkerProfile", "WalkerSimulator", "SimulatedPoseSource", "SimImuFeed"]
