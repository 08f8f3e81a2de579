"""
Toolpath builder for cncview

Turns parsed Commands into an immutable, contiguous sequence of Segments and
precomputes everything the viewer queries per frame (bounds, per-line
segment index, cumulative path length).
"""

import logging
import math
import os
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from cncview.config import POINT_EPS, ParserSettings
from cncview.gcode.commands import ArcCommand, Command, IgnoredCommand, MoveCommand
from cncview.gcode.parser import ModalParser
from cncview.gcode.utils import ijk_to_center, plane_coords, radius_to_center, sweep_angle, validate_arc
from cncview.types import ORIGIN, MoveKind, Point3
from cncview.utils.errors import DegenerateArcError, Diagnostic, ParseErrorKind, Severity

from .segments import ArcSegment, LineSegment, Segment

logger = logging.getLogger(__name__)

# Chord density used only for bounding-box sampling of arcs
_BOUNDS_STEP_RAD = math.radians(5.0)

_IGNORED_SEVERITY = {
    ParseErrorKind.NO_MOTION: Severity.INFO,
    ParseErrorKind.MALFORMED_TOKEN: Severity.WARNING,
    ParseErrorKind.UNSUPPORTED_GCODE: Severity.WARNING,
}


@dataclass(frozen=True)
class Bounds3:
    min: Point3
    max: Point3

    @classmethod
    def from_points(cls, points: np.ndarray) -> "Bounds3":
        return cls(Point3.from_array(points.min(axis=0)), Point3.from_array(points.max(axis=0)))

    @property
    def size(self) -> Point3:
        return Point3(*(hi - lo for lo, hi in zip(self.min, self.max)))

    @property
    def center(self) -> Point3:
        return Point3(*((lo + hi) * 0.5 for lo, hi in zip(self.min, self.max)))

    def corners(self) -> np.ndarray:
        lo, hi = self.min, self.max
        return np.array(
            [[x, y, z] for z in (lo.z, hi.z) for y in (lo.y, hi.y) for x in (lo.x, hi.x)],
            dtype=float,
        )


@dataclass(frozen=True)
class ToolpathStats:
    line_count: int = 0
    segment_count: int = 0
    rapid_moves: int = 0
    feed_moves: int = 0
    arc_moves: int = 0


@dataclass(frozen=True)
class Toolpath:
    """
    Ordered, immutable toolpath built from one G-code program.

    ``line_segment_ends[i]`` is the number of segments produced by source
    lines 1..i+1, so the segments of line n are
    ``segments[line_segment_ends[n-2]:line_segment_ends[n-1]]``.
    ``cumulative_lengths[i]`` is the path length up to the end of segment i.
    """

    segments: tuple[Segment, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    stats: ToolpathStats = field(default_factory=ToolpathStats)
    bounds: Bounds3 | None = None
    line_segment_ends: tuple[int, ...] = ()
    cumulative_lengths: np.ndarray = field(default_factory=lambda: np.zeros(0), compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def total_length(self) -> float:
        if len(self.cumulative_lengths) == 0:
            return 0.0
        return float(self.cumulative_lengths[-1])

    def segment_range_for_lines(self, first_line: int, last_line: int) -> tuple[int, int]:
        """
        Half-open segment index range produced by source lines first..last

        Args:
            first_line: 1-based first source line (inclusive)
            last_line: 1-based last source line (inclusive)
        """
        ends = self.line_segment_ends
        if not ends:
            return 0, 0
        first = min(max(first_line, 1), len(ends))
        last = min(max(last_line, first), len(ends))
        start_idx = ends[first - 2] if first > 1 else 0
        return start_idx, ends[last - 1]


class ToolpathBuilder:
    """Converts commands into contiguous segments"""

    def __init__(self, start: Point3 = ORIGIN):
        self.start = start
        self.diagnostics: list[Diagnostic] = []

    def _arc_segment(self, command: ArcCommand, start: Point3) -> ArcSegment:
        plane = command.plane
        if command.offsets is not None:
            center = ijk_to_center(start, command.offsets, plane)
            su, sv = plane_coords(start, plane)
            cu, cv = plane_coords(center, plane)
            if math.hypot(su - cu, sv - cv) < POINT_EPS:
                raise DegenerateArcError("arc centre offset is zero", command.line_number)
        else:
            try:
                center = radius_to_center(start, command.target, command.radius, command.clockwise, plane)
            except ValueError as e:
                raise DegenerateArcError(str(e), command.line_number) from e

        if not validate_arc(start, command.target, center, plane):
            self.diagnostics.append(
                Diagnostic(
                    command.line_number,
                    ParseErrorKind.ARC_RADIUS_MISMATCH,
                    "start and end are not equidistant from the arc centre",
                    Severity.WARNING,
                )
            )

        sweep = sweep_angle(start, command.target, center, command.clockwise, plane)
        return ArcSegment(
            start=start,
            end=command.target,
            center=center,
            plane=plane,
            sweep_angle=sweep,
            direction=command.direction,
            line_number=command.line_number,
        )

    def build(
        self,
        commands: Iterable[Command],
        line_count: int | None = None,
        diagnostics: Iterable[Diagnostic] = (),
    ) -> Toolpath:
        """
        Build a toolpath from commands in source order

        Args:
            commands: Parsed commands
            line_count: Number of source lines (defaults to the last command's line)
            diagnostics: Extra diagnostics to carry (parser warnings)

        Returns:
            Immutable Toolpath

        Raises:
            DegenerateArcError: an arc whose centre cannot be resolved
        """
        self.diagnostics = list(diagnostics)
        segments: list[Segment] = []
        # segments produced per source line
        per_line: dict[int, int] = {}
        rapid_moves = feed_moves = arc_moves = 0
        position = self.start
        last_line = 0

        for command in commands:
            last_line = max(last_line, command.line_number)
            if isinstance(command, IgnoredCommand):
                severity = _IGNORED_SEVERITY.get(command.reason, Severity.WARNING)
                self.diagnostics.append(
                    Diagnostic(command.line_number, command.reason, command.detail, severity)
                )
                continue

            if isinstance(command, MoveCommand):
                if math.dist(position, command.target) < POINT_EPS:
                    logger.trace(f"line {command.line_number}: zero-length move skipped")
                    continue
                segment: Segment = LineSegment(position, command.target, command.kind, command.line_number)
                if command.kind is MoveKind.RAPID:
                    rapid_moves += 1
                else:
                    feed_moves += 1
            elif isinstance(command, ArcCommand):
                segment = self._arc_segment(command, position)
                arc_moves += 1
                feed_moves += 1
            else:
                raise TypeError(f"Unknown command type: {type(command).__name__}")

            segments.append(segment)
            per_line[command.line_number] = per_line.get(command.line_number, 0) + 1
            position = segment.end

        total_lines = max(line_count or 0, last_line)
        line_ends = np.cumsum([per_line.get(n, 0) for n in range(1, total_lines + 1)], dtype=int)

        lengths = np.array([seg.length for seg in segments], dtype=float)
        cumulative = np.cumsum(lengths)
        cumulative.setflags(write=False)

        self.diagnostics.sort(key=lambda d: d.line_number)
        toolpath = Toolpath(
            segments=tuple(segments),
            diagnostics=tuple(self.diagnostics),
            stats=ToolpathStats(
                line_count=total_lines,
                segment_count=len(segments),
                rapid_moves=rapid_moves,
                feed_moves=feed_moves,
                arc_moves=arc_moves,
            ),
            bounds=_compute_bounds(segments),
            line_segment_ends=tuple(int(n) for n in line_ends),
            cumulative_lengths=cumulative,
        )
        logger.debug(
            f"Built toolpath: {len(segments)} segments, length {toolpath.total_length:.3f}, "
            f"{len(self.diagnostics)} diagnostics"
        )
        return toolpath


def _compute_bounds(segments: list[Segment]) -> Bounds3 | None:
    if not segments:
        return None
    chunks = []
    for seg in segments:
        if isinstance(seg, ArcSegment):
            chunks.append(seg.points(math.ceil(seg.sweep_angle / _BOUNDS_STEP_RAD)))
        else:
            chunks.append(seg.points())
    return Bounds3.from_points(np.vstack(chunks))


def parse(text: str, options: ParserSettings | None = None) -> Toolpath:
    """
    Parse a complete program into a Toolpath

    The parse is atomic: any fatal error propagates and no toolpath is returned.

    Args:
        text: G-code program text
        options: Word ignore rules

    Returns:
        Toolpath

    Raises:
        UnsupportedWordError, DegenerateArcError
    """
    parser = ModalParser(options)
    commands = parser.parse_program(text)
    return ToolpathBuilder().build(commands, len(text.splitlines()), parser.get_diagnostics())


def parse_file(path: str | os.PathLike, options: ParserSettings | None = None) -> Toolpath:
    """
    Read a G-code file fully and parse it

    Raises:
        OSError: file missing or unreadable
    """
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        text = f.read()
    toolpath = parse(text, options)
    logger.info(f"Loaded {path}: {toolpath.stats.segment_count} segments from {toolpath.stats.line_count} lines")
    return toolpath
