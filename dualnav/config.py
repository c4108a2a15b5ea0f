"""Tunable parameters for the dead-reckoning engine and the update loops."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class DeadReckoningParams:
    step_length: float = 0.65  # m per detected step
    step_high: float = 10.8  # m/s², enter step
    step_low: float = 9.5  # m/s², leave step
    step_debounce_ms: int = 250
    alpha: float = 0.3  # accel low-pass smoothing factor
    gyro_deadband: float = 0.02  # rad/s
    calibration_samples: int = 50
    max_dt: float = 1.0  # s, longer gaps are treated as stale

    def __post_init__(self) -> None:
        if self.step_length <= 0.0:
            raise ValueError("step_length must be positive")
        if self.step_low >= self.step_high:
            raise ValueError("step_low must be below step_high")
        if self.step_debounce_ms < 0:
            raise ValueError("step_debounce_ms must be non-negative")
        if not 0.0 < self.alpha <= 1.0:
            raise ValueError("alpha must be in (0, 1]")
        if self.gyro_deadband < 0.0:
            raise ValueError("gyro_deadband must be non-negative")
        if self.calibration_samples < 0:
            raise ValueError("calibration_samples must be non-negative")
        if self.max_dt <= 0.0:
            raise ValueError("max_dt must be positive")


@dataclass(frozen=True)
class LoopConfig:
    dr_period: float = 0.050  # 20 Hz
    pose_period: float = 0.033  # ~30 Hz
    pose_start_delay: float = 0.5  # camera warm-up before the first poll
    pose_log_interval: float = 3.0

    def __post_init__(self) -> None:
        if self.dr_period <= 0.0 or self.pose_period <= 0.0:
            raise ValueError("loop periods must be positive")
        if self.pose_start_delay < 0.0:
            raise ValueError("pose_start_delay must be non-negative")
        if self.pose_log_interval <= 0.0:
            raise ValueError("pose_log_interval must be positive")

    @classmethod
    def from_env(cls, environ=None) -> LoopConfig:
        """Build a config from DUALNAV_* millisecond overrides."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            dr_period=_ms(env, "DUALNAV_DR_PERIOD_MS", defaults.dr_period),
            pose_period=_ms(env, "DUALNAV_POSE_PERIOD_MS", defaults.pose_period),
            pose_start_delay=_ms(env, "DUALNAV_POSE_START_DELAY_MS", defaults.pose_start_delay),
            pose_log_interval=defaults.pose_log_interval,
        )


def _ms(env, key: str, default_s: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default_s
    try:
        return float(raw) / 1000.0
    except ValueError as exc:
        raise ValueError(f"{key} must be a number of milliseconds, got {raw!r}") from exc


__all__ = ["DeadReckoningParams", "LoopConfig"]
