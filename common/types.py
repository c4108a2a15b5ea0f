"""
Shared data structures for the sensor feed ↔ engine ↔ aggregator ↔ consumer boundaries.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Position:
    """Point in the world frame (meters). Origin is where tracking started."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: Position) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


ORIGIN = Position()


@dataclass(frozen=True)
class SensorSample:
    """Merged accelerometer (m/s², gravity included) + gyroscope (rad/s) reading."""

    accel_x: float = 0.0
    accel_y: float = 0.0
    accel_z: float = 0.0
    gyro_x: float = 0.0
    gyro_y: float = 0.0
    gyro_z: float = 0.0
    timestamp_ms: int = 0

    @property
    def accel(self) -> Tuple[float, float, float]:
        return (self.accel_x, self.accel_y, self.accel_z)

    @property
    def gyro(self) -> Tuple[float, float, float]:
        return (self.gyro_x, self.gyro_y, self.gyro_z)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accel": list(self.accel),
            "gyro": list(self.gyro),
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass(frozen=True, eq=False)
class TrajectoryView(Sequence):
    """
    Read-only window onto a trajectory's first ``length`` points.

    The backing lists are append-only for as long as they are shared, so the
    prefix seen here never changes after the view is taken.
    """

    _positions: List[Position] = field(default_factory=list, repr=False)
    _timestamps: List[int] = field(default_factory=list, repr=False)
    length: int = 0
    distance: float = 0.0

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._positions[: self.length][index]
        if index < 0:
            index += self.length
        if not 0 <= index < self.length:
            raise IndexError("trajectory index out of range")
        return self._positions[index]

    def __iter__(self) -> Iterator[Position]:
        for i in range(self.length):
            yield self._positions[i]

    @property
    def positions(self) -> Tuple[Position, ...]:
        return tuple(self._positions[: self.length])

    @property
    def timestamps(self) -> Tuple[int, ...]:
        return tuple(self._timestamps[: self.length])

    def current_position(self) -> Optional[Position]:
        if self.length == 0:
            return None
        return self._positions[self.length - 1]

    def total_distance(self) -> float:
        return self.distance

    def to_dict(self) -> Dict[str, Any]:
        return {
            "positions": [p.as_tuple() for p in self.positions],
            "timestamps": list(self.timestamps),
            "total_distance": self.distance,
        }


@dataclass(frozen=True, eq=False)
class NavigationSnapshot:
    """Consistent cross-section of navigation state. Replaced, never mutated."""

    dr_path: TrajectoryView = field(default_factory=TrajectoryView)
    slam_path: TrajectoryView = field(default_factory=TrajectoryView)
    is_tracking: bool = False
    dr_distance: float = 0.0
    slam_distance: float = 0.0
    drift_error: float = 0.0
    step_count: int = 0
    current_sensor_data: SensorSample = field(default_factory=SensorSample)
    obstacle_points: Tuple[Position, ...] = ()
    version: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "is_tracking": self.is_tracking,
            "dr_path": self.dr_path.to_dict(),
            "slam_path": self.slam_path.to_dict(),
            "dr_distance": self.dr_distance,
            "slam_distance": self.slam_distance,
            "drift_error": self.drift_error,
            "step_count": self.step_count,
            "current_sensor_data": self.current_sensor_data.to_dict(),
            "obstacle_points": [p.as_tuple() for p in self.obstacle_points],
        }


__all__ = [
    "Position",
    "ORIGIN",
    "SensorSample",
    "TrajectoryView",
    "NavigationSnapshot",
]
