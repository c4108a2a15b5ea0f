"""Signal-conditioning blocks used by the dead-reckoning engine."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

__all__ = ["LowPassFilter", "GyroBiasCalibrator", "StepDetector"]


class LowPassFilter:
    """Per-axis exponential smoothing: ``y = alpha * x + (1 - alpha) * y_prev``."""

    def __init__(self, alpha: float, axes: int = 3) -> None:
        if not 0.0 < alpha <= 1.0:
            raise ValueError("alpha must be in (0, 1]")
        self.alpha = float(alpha)
        self._axes = int(axes)
        self._value = [0.0] * self._axes

    @property
    def value(self) -> Tuple[float, ...]:
        return tuple(self._value)

    def reset(self) -> None:
        self._value = [0.0] * self._axes

    def update(self, sample: Sequence[float]) -> Tuple[float, ...]:
        if len(sample) != self._axes:
            raise ValueError(f"expected {self._axes} axes, got {len(sample)}")
        a = self.alpha
        self._value = [a * float(x) + (1.0 - a) * prev for x, prev in zip(sample, self._value)]
        return tuple(self._value)


class GyroBiasCalibrator:
    """
    Running mean of the gyro rate over the first ``samples`` readings.

    The bias stays at zero until the last calibration sample arrives, at
    which point the mean is computed once and then frozen.
    """

    def __init__(self, samples: int) -> None:
        if samples < 0:
            raise ValueError("samples must be non-negative")
        self.samples = int(samples)
        self._sum = 0.0
        self._count = 0
        self._bias: Optional[float] = None if self.samples > 0 else 0.0

    @property
    def calibrated(self) -> bool:
        return self._bias is not None

    @property
    def count(self) -> int:
        return self._count

    @property
    def bias(self) -> float:
        return self._bias if self._bias is not None else 0.0

    @property
    def progress(self) -> float:
        if self.samples == 0:
            return 1.0
        return min(self._count / self.samples, 1.0)

    def reset(self) -> None:
        self._sum = 0.0
        self._count = 0
        self._bias = None if self.samples > 0 else 0.0

    def add(self, rate: float) -> bool:
        """Accumulate one reading; returns True on the call that finalizes the bias."""
        if self.calibrated:
            return False
        self._sum += float(rate)
        self._count += 1
        if self._count >= self.samples:
            self._bias = self._sum / self._count
            return True
        return False


class StepDetector:
    """
    Two-threshold hysteresis on acceleration magnitude.

    Rising above ``high`` enters the step state; the crossing is counted only
    if at least ``debounce_ms`` have passed since the last counted step. The
    detector re-arms once the magnitude drops below ``low``.
    """

    def __init__(self, high: float, low: float, debounce_ms: int) -> None:
        if low >= high:
            raise ValueError("low threshold must be below high threshold")
        self.high = float(high)
        self.low = float(low)
        self.debounce_ms = int(debounce_ms)
        self.count = 0
        self.in_step = False
        self.last_step_ms: Optional[int] = None

    def reset(self) -> None:
        self.count = 0
        self.in_step = False
        self.last_step_ms = None

    def update(self, magnitude: float, timestamp_ms: int) -> bool:
        if self.in_step:
            if magnitude < self.low:
                self.in_step = False
            return False
        if magnitude <= self.high:
            return False
        # A crossing inside the debounce window still latches, so it cannot
        # be counted later while the magnitude stays high.
        self.in_step = True
        if not self._debounced(timestamp_ms):
            return False
        self.count += 1
        self.last_step_ms = timestamp_ms
        return True

    def _debounced(self, timestamp_ms: int) -> bool:
        if self.last_step_ms is None:
            return True
        return timestamp_ms - self.last_step_ms >= self.debounce_ms
