"""
Reveal animation over a built toolpath.
"""

from .playback import (
    PlaybackState,
    PlaybackStatus,
    VisiblePrefix,
    length_for_segment_count,
    visible_prefix,
)

__all__ = [
    "PlaybackState",
    "PlaybackStatus",
    "VisiblePrefix",
    "length_for_segment_count",
    "visible_prefix",
]
