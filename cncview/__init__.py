"""
cncview Python Package

G-code toolpath parsing and preview engine: turns a restricted G-code
dialect into an immutable toolpath, projects it into 2D for display and
reveals it progressively over time.

Key components:
- parse / parse_file: one-shot text or file to Toolpath
- ModalParser: line-by-line modal G-code parser
- project / project_segments: camera projection of points and segments
- PlaybackState / visible_prefix: time-based reveal of the toolpath
"""

from ._version import __version__
from .animation import PlaybackState, PlaybackStatus, VisiblePrefix, visible_prefix
from .config import AnimationSettings, ParserSettings, ProjectionSettings, Settings, load_settings
from .gcode import ModalParser
from .projection import ProjectionConfig, Stroke, ViewState, fit_projection, project, project_segments
from .toolpath import ArcSegment, LineSegment, Toolpath, parse, parse_file
from .types import ArcDirection, MoveKind, Plane, Point2, Point3, ProjectionMode, SpeedUnit
from .utils.errors import ConfigError, DegenerateArcError, Diagnostic, ParseError, UnsupportedWordError

__all__ = [
    "__version__",
    "parse",
    "parse_file",
    "ModalParser",
    "Toolpath",
    "LineSegment",
    "ArcSegment",
    "ProjectionConfig",
    "ViewState",
    "Stroke",
    "project",
    "project_segments",
    "fit_projection",
    "PlaybackState",
    "PlaybackStatus",
    "VisiblePrefix",
    "visible_prefix",
    "Settings",
    "ParserSettings",
    "ProjectionSettings",
    "AnimationSettings",
    "load_settings",
    "ArcDirection",
    "MoveKind",
    "Plane",
    "Point2",
    "Point3",
    "ProjectionMode",
    "SpeedUnit",
    "ConfigError",
    "DegenerateArcError",
    "Diagnostic",
    "ParseError",
    "UnsupportedWordError",
]
