"""
Small math helpers shared across the engine and simulator.
"""

from __future__ import annotations

import math

GRAVITY = 9.81
TWO_PI = 2.0 * math.pi


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into (-pi, pi]."""
    wrapped = (angle + math.pi) % TWO_PI - math.pi
    if wrapped <= -math.pi:
        wrapped += TWO_PI
    return wrapped


def magnitude(x: float, y: float, z: float) -> float:
    return math.sqrt(x * x + y * y + z * z)


__all__ = ["GRAVITY", "TWO_PI", "wrap_angle", "magnitude"]
