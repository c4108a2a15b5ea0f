"""Append-only trajectories with incrementally maintained path length."""

from __future__ import annotations

import time
from typing import List, Optional, Tuple

from common.types import Position, TrajectoryView


def now_ms() -> int:
    return int(time.time() * 1000)


class Trajectory:
    """
    Ordered (position, timestamp) pairs; insertion order is chronological.

    Storage is only ever appended to. ``clear()`` swaps in fresh lists, so
    views taken before the clear keep what they saw.
    """

    def __init__(self) -> None:
        self._positions: List[Position] = []
        self._timestamps: List[int] = []
        self._distance = 0.0

    def __len__(self) -> int:
        return len(self._positions)

    @property
    def positions(self) -> Tuple[Position, ...]:
        return tuple(self._positions)

    @property
    def timestamps(self) -> Tuple[int, ...]:
        return tuple(self._timestamps)

    def add_position(self, position: Position, timestamp: int | None = None) -> None:
        if self._positions:
            self._distance += self._positions[-1].distance_to(position)
        self._positions.append(position)
        self._timestamps.append(now_ms() if timestamp is None else int(timestamp))

    def clear(self) -> None:
        self._positions = []
        self._timestamps = []
        self._distance = 0.0

    def current_position(self) -> Optional[Position]:
        return self._positions[-1] if self._positions else None

    def total_distance(self) -> float:
        return self._distance

    def view(self) -> TrajectoryView:
        return TrajectoryView(
            self._positions,
            self._timestamps,
            length=len(self._positions),
            distance=self._distance,
        )


__all__ = ["Trajectory", "now_ms"]
