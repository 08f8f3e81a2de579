"""
Tessellation of toolpath segments into projected 2D polylines.

Downstream renderers only draw straight chords, so arcs are sampled into a
bounded number of chords proportional to their sweep before projection.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from cncview.config import MAX_ARC_CHORDS
from cncview.toolpath.segments import ArcSegment, Segment
from cncview.types import MoveKind

from .camera import ProjectionConfig, ViewState, project_array


@dataclass(frozen=True)
class Stroke:
    """Projected polyline for one (part of a) segment"""

    kind: MoveKind
    line_number: int
    points: np.ndarray = field(compare=False)  # (M, 2), M >= 2


def chord_count(segment: Segment, angular_tolerance_deg: float = 5.0, max_chords: int = MAX_ARC_CHORDS) -> int:
    """Number of straight chords used to draw a segment"""
    if not isinstance(segment, ArcSegment):
        return 1
    if angular_tolerance_deg <= 0:
        raise ValueError("angular_tolerance_deg must be positive")
    n = math.ceil(segment.sweep_angle / math.radians(angular_tolerance_deg))
    return min(max(n, 1), max_chords)


def tessellate(segment: Segment, angular_tolerance_deg: float = 5.0, max_chords: int = MAX_ARC_CHORDS) -> np.ndarray:
    """
    Sample a segment into 3D polyline vertices

    Returns:
        (chords + 1, 3) array starting at segment.start and ending at segment.end
    """
    return segment.points(chord_count(segment, angular_tolerance_deg, max_chords))


def _visible_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    """Half-open index ranges of consecutive True entries with at least two points"""
    runs = []
    start = None
    for i, ok in enumerate(mask):
        if ok and start is None:
            start = i
        elif not ok and start is not None:
            if i - start >= 2:
                runs.append((start, i))
            start = None
    if start is not None and len(mask) - start >= 2:
        runs.append((start, len(mask)))
    return runs


def project_segments(
    segments: Iterable[Segment],
    config: ProjectionConfig,
    view: ViewState | None = None,
    angular_tolerance_deg: float | None = None,
    max_chords: int = MAX_ARC_CHORDS,
) -> list[Stroke]:
    """
    Project segments into drawable strokes

    Unprojectable vertices (behind a perspective camera) break the polyline;
    chords touching them are dropped for this frame.

    Args:
        segments: Segments to draw, usually a visible prefix
        config: Camera parameters
        view: Pan/zoom/rotation deltas
        angular_tolerance_deg: Max sweep per arc chord (defaults to config.arc_tolerance_deg)
        max_chords: Upper bound on chords per arc

    Returns:
        Strokes in segment order
    """
    view = view or ViewState()
    if angular_tolerance_deg is None:
        angular_tolerance_deg = config.arc_tolerance_deg
    strokes: list[Stroke] = []
    for segment in segments:
        pts3 = tessellate(segment, angular_tolerance_deg, max_chords)
        screen, visible = project_array(pts3, config, view)
        for lo, hi in _visible_runs(visible):
            strokes.append(Stroke(segment.kind, segment.line_number, screen[lo:hi]))
    return strokes
