"""
Interface definitions for IMU sensors and external pose sources.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from common.types import Position, SensorSample


class ImuSensor(ABC):
    """Abstract base for IMU drivers."""

    @abstractmethod
    def read(self) -> SensorSample:
        """Return the most recent merged IMU sample."""


class PoseSource(ABC):
    """
    External pose estimator (visual odometry, SLAM, a test double, ...).
    The aggregator relies on nothing beyond these calls.
    """

    @abstractmethod
    def update(self) -> Optional[Position]:
        """Poll for the latest pose; ``None`` means tracking is currently unavailable."""

    @abstractmethod
    def reset_tracking(self) -> None:
        """Re-anchor the source's origin at the current pose."""

    @property
    def tracking_status(self) -> str:
        """Human-readable tracker state for logs."""
        return "N/A"

    def destroy(self) -> None:
        """Release resources held by the source."""
        return None
