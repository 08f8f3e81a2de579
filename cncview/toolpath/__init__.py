"""
Toolpath model: segments and the builder that produces them.
"""

from .builder import Bounds3, Toolpath, ToolpathBuilder, ToolpathStats, parse, parse_file
from .segments import ArcSegment, LineSegment, Segment

__all__ = [
    "ArcSegment",
    "Bounds3",
    "LineSegment",
    "Segment",
    "Toolpath",
    "ToolpathBuilder",
    "ToolpathStats",
    "parse",
    "parse_file",
]
