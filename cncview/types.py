"""
Type definitions for cncview.

Defines enums and small value types used across the public API.
"""

from enum import Enum
from typing import NamedTuple

import numpy as np


class Point2(NamedTuple):
    """Point on the 2D view plane."""
    x: float
    y: float


class Point3(NamedTuple):
    """Absolute machine-space point."""
    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, arr) -> "Point3":
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array(self, dtype=float)


ORIGIN = Point3(0.0, 0.0, 0.0)


class MoveKind(Enum):
    """Linear move flavour; only affects rendering downstream."""
    RAPID = "rapid"  # G0
    FEED = "feed"    # G1 (arcs are always cut at feed)


class ArcDirection(Enum):
    CW = "cw"    # G2
    CCW = "ccw"  # G3


class Plane(Enum):
    """Active arc plane; value is the (u, v) axis index pair."""
    XY = (0, 1)  # G17
    XZ = (0, 2)  # G18
    YZ = (1, 2)  # G19

    @property
    def normal_axis(self) -> int:
        return 3 - sum(self.value)

    @property
    def normal(self) -> np.ndarray:
        """Outward normal, u x v."""
        u = np.zeros(3)
        v = np.zeros(3)
        u[self.value[0]] = 1.0
        v[self.value[1]] = 1.0
        return np.cross(u, v)


class ProjectionMode(Enum):
    ORTHOGRAPHIC = "orthographic"
    PERSPECTIVE = "perspective"

    @classmethod
    def parse(cls, raw: str) -> "ProjectionMode":
        name = raw.strip().lower()
        if name in ("orthographic", "ortho"):
            return cls.ORTHOGRAPHIC
        if name in ("perspective", "persp"):
            return cls.PERSPECTIVE
        raise ValueError(f"unknown projection mode: {raw}")


class SpeedUnit(Enum):
    """Unit of the animation speed setting."""
    SEGMENTS = "segments"  # segments per second
    DISTANCE = "distance"  # path length units per second
