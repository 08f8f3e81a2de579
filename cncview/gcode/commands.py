"""
Parsed G-code commands

One Command is emitted per non-blank source line. Commands carry resolved
absolute targets; they hold no geometry beyond what the line specified.
"""

from dataclasses import dataclass

from cncview.types import ArcDirection, MoveKind, Plane, Point3
from cncview.utils.errors import ParseErrorKind


@dataclass(frozen=True)
class Command:
    """Base class for parsed commands"""

    line_number: int


@dataclass(frozen=True)
class MoveCommand(Command):
    """G0/G1 straight move"""

    kind: MoveKind
    target: Point3


@dataclass(frozen=True)
class ArcCommand(Command):
    """
    G2/G3 circular move

    Exactly one centre spec survives parsing: ``offsets`` (I, J, K relative
    to the arc start, already unit-scaled, missing words as 0.0) or
    ``radius`` (signed R).
    """

    direction: ArcDirection
    target: Point3
    plane: Plane
    offsets: tuple[float, float, float] | None = None
    radius: float | None = None

    @property
    def clockwise(self) -> bool:
        return self.direction is ArcDirection.CW


@dataclass(frozen=True)
class IgnoredCommand(Command):
    """A line that contributes no geometry"""

    reason: ParseErrorKind
    detail: str = ""
