"""
Progressive reveal of a toolpath over time.

Everything here is a pure function of elapsed playback time over the
toolpath's precomputed cumulative length table. PlaybackState is immutable;
``toggle``/``tick``/``reset`` return new states, so the caller owns the
clock and drives it with discrete ticks.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple

import numpy as np

from cncview.config import AnimationSettings
from cncview.toolpath.builder import Toolpath
from cncview.toolpath.segments import Segment
from cncview.types import SpeedUnit

logger = logging.getLogger(__name__)


class PlaybackStatus(Enum):
    PLAYING = "playing"
    PAUSED = "paused"


class VisiblePrefix(NamedTuple):
    """Segments revealed up to a path length"""

    segments: list[Segment]  # whole segments, then the partial one if any
    total_length: float  # revealed length, clamped to the toolpath length
    partial: bool  # True when the last entry is a split segment


def visible_prefix(toolpath: Toolpath, length: float) -> VisiblePrefix:
    """
    Segments revealed when ``length`` of path has been drawn

    Segments ending at or before ``length`` are returned whole; the segment
    straddling ``length`` is split (linearly for lines, by angle for arcs).

    Args:
        toolpath: Built toolpath
        length: Revealed path length (clamped to [0, total])
    """
    cumulative = toolpath.cumulative_lengths
    revealed = min(max(float(length), 0.0), toolpath.total_length)
    if len(cumulative) == 0:
        return VisiblePrefix([], 0.0, False)

    full = int(np.searchsorted(cumulative, revealed, side="right"))
    segments = list(toolpath.segments[:full])
    if full < len(cumulative):
        seg_start = float(cumulative[full - 1]) if full > 0 else 0.0
        seg_length = float(cumulative[full]) - seg_start
        if revealed > seg_start and seg_length > 0.0:
            fraction = (revealed - seg_start) / seg_length
            segments.append(toolpath.segments[full].split(fraction))
            return VisiblePrefix(segments, revealed, True)
    return VisiblePrefix(segments, revealed, False)


def length_for_segment_count(toolpath: Toolpath, count: float) -> float:
    """Path length after ``count`` segments; fractional counts interpolate into the next segment"""
    cumulative = toolpath.cumulative_lengths
    if len(cumulative) == 0:
        return 0.0
    knots = np.arange(len(cumulative) + 1, dtype=float)
    lengths = np.concatenate(([0.0], cumulative))
    return float(np.interp(count, knots, lengths))


@dataclass(frozen=True)
class PlaybackState:
    """Play/pause state machine for the reveal animation"""

    status: PlaybackStatus = PlaybackStatus.PAUSED
    elapsed: float = 0.0  # seconds of playback so far
    speed: float = 800.0
    unit: SpeedUnit = SpeedUnit.SEGMENTS
    finished: bool = False

    def __post_init__(self):
        if self.speed <= 0:
            raise ValueError("playback speed must be positive")

    @classmethod
    def from_settings(cls, settings: AnimationSettings) -> "PlaybackState":
        return cls(speed=settings.speed, unit=settings.unit)

    @property
    def playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    def toggle(self) -> "PlaybackState":
        """Flip between playing and paused; a finished playback stays put until reset"""
        if self.finished:
            return self
        if self.playing:
            return replace(self, status=PlaybackStatus.PAUSED)
        return replace(self, status=PlaybackStatus.PLAYING)

    def reset(self) -> "PlaybackState":
        """Rewind to length 0, keeping play/pause status"""
        return replace(self, elapsed=0.0, finished=False)

    def _limit(self, toolpath: Toolpath) -> float:
        if self.unit is SpeedUnit.SEGMENTS:
            return float(len(toolpath.segments))
        return toolpath.total_length

    def tick(self, dt: float, toolpath: Toolpath) -> "PlaybackState":
        """
        Advance playback by ``dt`` seconds

        Reaching the end of the toolpath pauses and marks the state finished.
        """
        if not self.playing or dt <= 0:
            return self
        end_time = self._limit(toolpath) / self.speed
        elapsed = self.elapsed + dt
        if elapsed >= end_time:
            logger.debug("Playback reached end of toolpath")
            return replace(self, elapsed=end_time, status=PlaybackStatus.PAUSED, finished=True)
        return replace(self, elapsed=elapsed)

    def revealed_length(self, toolpath: Toolpath) -> float:
        """Path length revealed at the current elapsed time"""
        progress = self.speed * self.elapsed
        if self.unit is SpeedUnit.SEGMENTS:
            return length_for_segment_count(toolpath, progress)
        return min(progress, toolpath.total_length)

    def visible(self, toolpath: Toolpath) -> VisiblePrefix:
        return visible_prefix(toolpath, self.revealed_length(toolpath))
