"""
3D-to-2D projection for toolpath previews.

The camera orbits ``ProjectionConfig.target``: yaw turns about the vertical
(machine Z) axis, then pitch tilts about the resulting horizontal axis. With
yaw = pitch = 0 the view looks along the Z axis and (x, y) map unchanged.
Pan/zoom from the UI-owned ViewState are applied last as a 2D affine map.
"""

import math
from dataclasses import dataclass, replace

import numpy as np
from scipy.spatial.transform import Rotation

from cncview.config import CAMERA_DISTANCE_SCALE, CAMERA_NEAR_EPS, MIN_ZOOM, ProjectionSettings
from cncview.types import ORIGIN, Point2, Point3, ProjectionMode
from cncview.utils.errors import ConfigError


@dataclass(frozen=True)
class ProjectionConfig:
    """Camera parameters for one frame; replaced wholesale on change"""

    mode: ProjectionMode = ProjectionMode.ORTHOGRAPHIC
    yaw_deg: float = 0.0
    pitch_deg: float = 0.0
    fov_deg: float | None = None
    camera_distance: float = 10.0  # focal distance for perspective division
    target: Point3 = ORIGIN
    arc_tolerance_deg: float = 5.0  # max arc sweep per drawn chord

    def __post_init__(self):
        if self.camera_distance <= 0:
            raise ConfigError("camera_distance must be positive")
        if self.arc_tolerance_deg <= 0:
            raise ConfigError("arc_tolerance_deg must be positive")

    @classmethod
    def from_settings(cls, settings: ProjectionSettings) -> "ProjectionConfig":
        return cls(
            mode=settings.mode,
            yaw_deg=settings.yaw_deg,
            pitch_deg=settings.pitch_deg,
            fov_deg=settings.fov_deg,
            arc_tolerance_deg=settings.arc_tolerance_deg,
        )

    def toggled(self) -> "ProjectionConfig":
        """Same camera with the other projection mode"""
        if self.mode is ProjectionMode.ORTHOGRAPHIC:
            return replace(self, mode=ProjectionMode.PERSPECTIVE)
        return replace(self, mode=ProjectionMode.ORTHOGRAPHIC)


@dataclass(frozen=True)
class ViewState:
    """Interactive view adjustments owned by the UI"""

    pan: Point2 = Point2(0.0, 0.0)
    zoom: float = 1.0
    yaw_deg: float = 0.0  # added to ProjectionConfig.yaw_deg
    pitch_deg: float = 0.0  # added to ProjectionConfig.pitch_deg

    def panned(self, dx: float, dy: float) -> "ViewState":
        return replace(self, pan=Point2(self.pan.x + dx, self.pan.y + dy))

    def zoomed(self, factor: float) -> "ViewState":
        return replace(self, zoom=max(self.zoom * factor, MIN_ZOOM))

    def rotated(self, d_yaw_deg: float = 0.0, d_pitch_deg: float = 0.0) -> "ViewState":
        return replace(self, yaw_deg=self.yaw_deg + d_yaw_deg, pitch_deg=self.pitch_deg + d_pitch_deg)


@dataclass(frozen=True)
class Bounds2:
    min: Point2
    max: Point2

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    @property
    def center(self) -> Point2:
        return Point2((self.min.x + self.max.x) * 0.5, (self.min.y + self.max.y) * 0.5)


def camera_rotation(config: ProjectionConfig, view: ViewState) -> Rotation:
    """Rotation taking world offsets (from the target) into camera space"""
    yaw = config.yaw_deg + view.yaw_deg
    pitch = config.pitch_deg + view.pitch_deg
    # extrinsic: yaw about Z first, then pitch about the fixed X axis
    return Rotation.from_euler("zx", [yaw, pitch], degrees=True)


def project_array(points, config: ProjectionConfig, view: ViewState) -> tuple[np.ndarray, np.ndarray]:
    """
    Project many points at once

    Args:
        points: (N, 3) array-like of world points
        config: Camera parameters
        view: Pan/zoom/rotation deltas

    Returns:
        Tuple of ((N, 2) screen points, (N,) bool mask of projectable points).
        Rows where the mask is False hold NaN.
    """
    pts = np.atleast_2d(np.asarray(points, dtype=float))
    cam = camera_rotation(config, view).apply(pts - np.asarray(config.target, dtype=float))
    xy = cam[:, :2]

    if config.mode is ProjectionMode.PERSPECTIVE:
        focal = config.camera_distance
        # camera sits at camera-space z = -focal; points at or behind it are dropped
        denom = focal + cam[:, 2]
        visible = denom > CAMERA_NEAR_EPS
        factor = np.full(len(pts), np.nan)
        factor[visible] = focal / denom[visible]
        xy = xy * factor[:, None]
    else:
        visible = np.ones(len(pts), dtype=bool)

    screen = (xy - np.asarray(view.pan, dtype=float)) * view.zoom
    return screen, visible


def project(point: Point3, config: ProjectionConfig, view: ViewState | None = None) -> Point2 | None:
    """
    Project a single point onto the view plane

    Returns:
        Screen point, or None when the point is at or behind the camera
    """
    screen, visible = project_array([point], config, view or ViewState())
    if not visible[0]:
        return None
    return Point2(float(screen[0, 0]), float(screen[0, 1]))


def fit_projection(bounds, config: ProjectionConfig) -> ProjectionConfig:
    """
    Aim the camera at a toolpath's bounding box

    Centres the orbit on the box and backs the camera off far enough to see
    all of it: 2.5x the largest dimension, or the distance that fits the box
    into ``fov_deg`` when one is set.

    Args:
        bounds: Bounds3 of the toolpath, or None for an empty toolpath
        config: Current camera parameters
    """
    if bounds is None:
        return replace(config, target=ORIGIN)
    max_dim = max(max(bounds.size), 1.0)
    if config.fov_deg is not None:
        half = max_dim * 0.5
        distance = half / math.tan(math.radians(config.fov_deg) * 0.5) + half
    else:
        distance = max_dim * CAMERA_DISTANCE_SCALE
    return replace(config, target=bounds.center, camera_distance=distance)


def projected_bounds(bounds, config: ProjectionConfig, view: ViewState | None = None) -> Bounds2 | None:
    """2D extent of a Bounds3 box's projectable corners, for viewport framing"""
    if bounds is None:
        return None
    screen, visible = project_array(bounds.corners(), config, view or ViewState())
    if not visible.any():
        return None
    shown = screen[visible]
    lo = shown.min(axis=0)
    hi = shown.max(axis=0)
    return Bounds2(Point2(float(lo[0]), float(lo[1])), Point2(float(hi[0]), float(hi[1])))
