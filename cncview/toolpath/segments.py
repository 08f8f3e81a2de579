"""
Immutable toolpath geometry primitives.
"""

import math
from dataclasses import dataclass, replace

import numpy as np

from cncview.gcode.utils import TAU, plane_coords
from cncview.types import ArcDirection, MoveKind, Plane, Point3


def _clamp_fraction(fraction: float) -> float:
    return min(max(float(fraction), 0.0), 1.0)


@dataclass(frozen=True)
class LineSegment:
    """Straight G0/G1 move"""

    start: Point3
    end: Point3
    kind: MoveKind
    line_number: int

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)

    def point_at(self, fraction: float) -> Point3:
        """Linear interpolation between start (0.0) and end (1.0)"""
        t = _clamp_fraction(fraction)
        if t >= 1.0:
            return self.end
        return Point3(*(s + (e - s) * t for s, e in zip(self.start, self.end)))

    def points(self, chords: int = 1) -> np.ndarray:
        return np.array([self.start, self.end], dtype=float)

    def split(self, fraction: float) -> "LineSegment":
        """Leading part of the segment up to fraction"""
        return replace(self, end=self.point_at(fraction))


@dataclass(frozen=True)
class ArcSegment:
    """
    Circular (optionally helical) G2/G3 move.

    ``sweep_angle`` is the unsigned angular extent in (0, 2*pi]. The winding
    is ``direction`` read against the plane normal: CCW turns from the
    plane's u axis towards its v axis. Motion along the normal axis is
    interpolated linearly with the angle.
    """

    start: Point3
    end: Point3
    center: Point3
    plane: Plane
    sweep_angle: float
    direction: ArcDirection
    line_number: int

    @property
    def kind(self) -> MoveKind:
        return MoveKind.FEED

    @property
    def normal(self) -> tuple[float, float, float]:
        return tuple(float(c) for c in self.plane.normal)

    @property
    def radius(self) -> float:
        su, sv = plane_coords(self.start, self.plane)
        cu, cv = plane_coords(self.center, self.plane)
        return math.hypot(su - cu, sv - cv)

    @property
    def is_full_circle(self) -> bool:
        return math.isclose(self.sweep_angle, TAU)

    @property
    def length(self) -> float:
        axis = self.plane.normal_axis
        rise = self.end[axis] - self.start[axis]
        return math.hypot(self.radius * self.sweep_angle, rise)

    def _signed_sweep(self) -> float:
        return self.sweep_angle if self.direction is ArcDirection.CCW else -self.sweep_angle

    def _points_at(self, fractions: np.ndarray) -> np.ndarray:
        su, sv = plane_coords(self.start, self.plane)
        cu, cv = plane_coords(self.center, self.plane)
        start_angle = math.atan2(sv - cv, su - cu)
        angles = start_angle + self._signed_sweep() * fractions
        radius = self.radius

        u_axis, v_axis = self.plane.value
        n_axis = self.plane.normal_axis
        pts = np.empty((len(fractions), 3), dtype=float)
        pts[:, u_axis] = cu + radius * np.cos(angles)
        pts[:, v_axis] = cv + radius * np.sin(angles)
        pts[:, n_axis] = self.start[n_axis] + (self.end[n_axis] - self.start[n_axis]) * fractions
        return pts

    def point_at(self, fraction: float) -> Point3:
        """Point reached after ``fraction`` of the sweep"""
        t = _clamp_fraction(fraction)
        if t <= 0.0:
            return self.start
        if t >= 1.0:
            return self.end
        return Point3.from_array(self._points_at(np.array([t]))[0])

    def points(self, chords: int) -> np.ndarray:
        """
        Sample the arc into ``chords`` straight pieces

        Returns:
            (chords + 1, 3) array; first and last rows are exactly start and end
        """
        chords = max(1, int(chords))
        pts = self._points_at(np.linspace(0.0, 1.0, chords + 1))
        pts[0] = self.start
        pts[-1] = self.end
        return pts

    def split(self, fraction: float) -> "ArcSegment":
        """Leading part of the arc up to fraction of the sweep"""
        t = _clamp_fraction(fraction)
        if t >= 1.0:
            return self
        return replace(self, end=self.point_at(t), sweep_angle=self.sweep_angle * t)


Segment = LineSegment | ArcSegment
