"""
G-code modal state for cncview

Tracks modal states while a program is parsed:
- Motion mode (G0/G1/G2/G3)
- Positioning mode (G90/G91)
- Units (G20/G21)
- Active plane (G17/G18/G19)
- Feed rate (advisory only, never used for geometry)
- Current absolute position

The state is immutable; every update returns a new ModalState so the parser
can thread it through the parse loop as an accumulator.
"""

from dataclasses import dataclass, replace
from enum import Enum

from cncview.types import ORIGIN, Plane, Point3

INCH_TO_MM = 25.4


class MotionMode(Enum):
    RAPID = 0     # G0
    FEED = 1      # G1
    ARC_CW = 2    # G2
    ARC_CCW = 3   # G3


class DistanceMode(Enum):
    ABSOLUTE = 90     # G90
    INCREMENTAL = 91  # G91


MOTION_CODES = {mode.value: mode for mode in MotionMode}
PLANE_CODES = {17: Plane.XY, 18: Plane.XZ, 19: Plane.YZ}
UNIT_CODES = {20: INCH_TO_MM, 21: 1.0}
DISTANCE_CODES = {mode.value: mode for mode in DistanceMode}

MODAL_CODES = frozenset(MOTION_CODES) | frozenset(PLANE_CODES) | frozenset(UNIT_CODES) | frozenset(DISTANCE_CODES)


@dataclass(frozen=True)
class ModalState:
    """Modal G-code state at a point in the program"""

    motion_mode: MotionMode = MotionMode.RAPID
    position: Point3 = ORIGIN
    plane: Plane = Plane.XY
    distance_mode: DistanceMode = DistanceMode.ABSOLUTE
    units_scale: float = 1.0  # multiplier to convert program units to mm
    feed_rate: float | None = None

    def apply_gcode(self, code: int) -> "ModalState":
        """
        Return the state after a modal G word

        Args:
            code: integer G number; must be in MODAL_CODES

        Returns:
            Updated state
        """
        if code in MOTION_CODES:
            return replace(self, motion_mode=MOTION_CODES[code])
        if code in PLANE_CODES:
            return replace(self, plane=PLANE_CODES[code])
        if code in UNIT_CODES:
            return replace(self, units_scale=UNIT_CODES[code])
        if code in DISTANCE_CODES:
            return replace(self, distance_mode=DISTANCE_CODES[code])
        raise ValueError(f"G{code} is not a modal code")

    def with_feed_rate(self, value: float) -> "ModalState":
        return replace(self, feed_rate=value * self.units_scale)

    def moved_to(self, position: Point3) -> "ModalState":
        return replace(self, position=position)

    def scale(self, value: float) -> float:
        return value * self.units_scale

    def calculate_target_position(self, axes: dict[str, float]) -> Point3:
        """
        Calculate target position from the axis words on a line

        Axes missing from ``axes`` inherit the current position.

        Args:
            axes: Mapping of 'X'/'Y'/'Z' to raw program values

        Returns:
            Absolute target point
        """
        target = list(self.position)
        for index, axis in enumerate("XYZ"):
            if axis in axes:
                value = self.scale(axes[axis])
                if self.distance_mode is DistanceMode.ABSOLUTE:
                    target[index] = value
                else:
                    target[index] = self.position[index] + value
        return Point3(*target)
