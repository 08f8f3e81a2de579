"""
Projection engine: camera model, per-point projection and stroke tessellation.
"""

from .camera import (
    Bounds2,
    ProjectionConfig,
    ViewState,
    camera_rotation,
    fit_projection,
    project,
    project_array,
    projected_bounds,
)
from .strokes import Stroke, chord_count, project_segments, tessellate

__all__ = [
    "Bounds2",
    "ProjectionConfig",
    "ViewState",
    "Stroke",
    "camera_rotation",
    "chord_count",
    "fit_projection",
    "project",
    "project_array",
    "project_segments",
    "projected_bounds",
    "tessellate",
]
