import math

import numpy as np
import pytest

from cncview.projection import (
    ProjectionConfig,
    ViewState,
    chord_count,
    fit_projection,
    project,
    project_array,
    project_segments,
    projected_bounds,
)
from cncview.config import ProjectionSettings
from cncview.toolpath import parse
from cncview.toolpath.builder import Bounds3
from cncview.types import MoveKind, Point2, Point3, ProjectionMode
from cncview.utils.errors import ConfigError

pytestmark = pytest.mark.unit

ORTHO = ProjectionConfig(mode=ProjectionMode.ORTHOGRAPHIC)


def test_orthographic_top_view_is_identity_on_xy():
    assert project(Point3(3.0, -2.0, 7.0), ORTHO) == pytest.approx((3.0, -2.0))


def test_yaw_turns_about_vertical_axis():
    config = ProjectionConfig(yaw_deg=90.0)
    assert project(Point3(1.0, 0.0, 0.0), config) == pytest.approx((0.0, 1.0), abs=1e-12)


def test_pitch_tilts_vertical_into_view():
    config = ProjectionConfig(pitch_deg=90.0)
    assert project(Point3(0.0, 0.0, 1.0), config) == pytest.approx((0.0, -1.0), abs=1e-12)


def test_view_rotation_adds_to_config():
    config = ProjectionConfig(yaw_deg=45.0)
    view = ViewState().rotated(d_yaw_deg=45.0)
    assert project(Point3(1.0, 0.0, 0.0), config, view) == pytest.approx((0.0, 1.0), abs=1e-12)


def test_pan_then_zoom():
    view = ViewState(pan=Point2(1.0, 2.0), zoom=2.0)
    assert project(Point3(3.0, 4.0, 0.0), ORTHO, view) == pytest.approx((4.0, 4.0))


def test_projection_is_relative_to_target():
    config = ProjectionConfig(target=Point3(10.0, 10.0, 0.0))
    assert project(Point3(10.0, 12.0, 0.0), config) == pytest.approx((0.0, 2.0))


@pytest.mark.parametrize(
    "z, expected",
    [
        (0.0, (1.0, 1.0)),
        (5.0, (2.0 / 3.0, 2.0 / 3.0)),
        (10.0, (0.5, 0.5)),
        (-5.0, (2.0, 2.0)),
    ],
)
def test_perspective_scales_by_depth(z, expected):
    config = ProjectionConfig(mode=ProjectionMode.PERSPECTIVE, camera_distance=10.0)
    assert project(Point3(1.0, 1.0, z), config) == pytest.approx(expected)


@pytest.mark.parametrize("z", [-10.0, -20.0])
def test_points_at_or_behind_camera_are_unprojectable(z):
    config = ProjectionConfig(mode=ProjectionMode.PERSPECTIVE, camera_distance=10.0)
    assert project(Point3(1.0, 1.0, z), config) is None


def test_project_array_masks_unprojectable_rows():
    config = ProjectionConfig(mode=ProjectionMode.PERSPECTIVE, camera_distance=10.0)
    screen, visible = project_array([[0.0, 0.0, 0.0], [1.0, 1.0, -20.0]], config, ViewState())
    assert visible.tolist() == [True, False]
    assert np.isnan(screen[1]).all()


def test_camera_distance_must_be_positive():
    with pytest.raises(ConfigError):
        ProjectionConfig(camera_distance=0.0)


def test_toggle_switches_mode_only():
    config = ProjectionConfig(yaw_deg=30.0)
    toggled = config.toggled()
    assert toggled.mode is ProjectionMode.PERSPECTIVE
    assert toggled.yaw_deg == 30.0
    assert toggled.toggled() == config


def test_zoom_is_clamped():
    assert ViewState().zoomed(0.001).zoom == pytest.approx(0.05)
    assert ViewState().zoomed(2.0).zoomed(1.5).zoom == pytest.approx(3.0)


def test_panned_accumulates():
    assert ViewState().panned(1.0, 2.0).panned(-0.5, 1.0).pan == Point2(0.5, 3.0)


def test_fit_projection_centres_on_bounds():
    bounds = Bounds3(Point3(0.0, 0.0, 0.0), Point3(40.0, 20.0, 10.0))
    fitted = fit_projection(bounds, ORTHO)
    assert fitted.target == Point3(20.0, 10.0, 5.0)
    assert fitted.camera_distance == pytest.approx(100.0)


def test_fit_projection_with_field_of_view():
    bounds = Bounds3(Point3(0.0, 0.0, 0.0), Point3(20.0, 20.0, 0.0))
    fitted = fit_projection(bounds, ProjectionConfig(fov_deg=90.0))
    assert fitted.camera_distance == pytest.approx(20.0)


def test_fit_projection_empty_toolpath():
    assert fit_projection(None, ORTHO).target == Point3(0.0, 0.0, 0.0)


def test_projected_bounds_top_view():
    bounds = Bounds3(Point3(-1.0, -2.0, 0.0), Point3(3.0, 4.0, 5.0))
    extent = projected_bounds(bounds, ORTHO)
    assert extent.min == pytest.approx((-1.0, -2.0))
    assert extent.max == pytest.approx((3.0, 4.0))
    assert extent.width == pytest.approx(4.0)
    assert extent.center == pytest.approx((1.0, 1.0))
    assert projected_bounds(None, ORTHO) is None


def test_chord_count_scales_with_sweep():
    toolpath = parse("G2 X0 Y0 I5 J0\nG1 X10")
    arc, line = toolpath.segments
    assert chord_count(arc, 7.0) == 52
    assert chord_count(arc, 0.001) == 512
    assert chord_count(line, 5.0) == 1
    with pytest.raises(ValueError):
        chord_count(arc, 0.0)


def test_project_segments_emits_one_stroke_per_segment():
    toolpath = parse("G0 X10\nG3 X-10 Y0 I-10 J0")
    strokes = project_segments(toolpath.segments, ORTHO, angular_tolerance_deg=7.0)
    assert [s.kind for s in strokes] == [MoveKind.RAPID, MoveKind.FEED]
    assert [s.line_number for s in strokes] == [1, 2]
    assert strokes[0].points.shape == (2, 2)
    assert strokes[1].points.shape == (27, 2)
    assert np.allclose(np.hypot(strokes[1].points[:, 0], strokes[1].points[:, 1]), 10.0)


def test_project_segments_breaks_stroke_behind_camera():
    config = ProjectionConfig(mode=ProjectionMode.PERSPECTIVE, camera_distance=10.0)
    toolpath = parse("G1 Z-20")
    assert project_segments(toolpath.segments, config) == []


def test_orbit_preserves_orthographic_distances():
    config = ProjectionConfig(yaw_deg=-45.0, pitch_deg=70.0)
    a = project(Point3(0.0, 0.0, 0.0), config)
    b = project(Point3(0.0, 0.0, 3.0), config)
    # a vertical unit drops by sin(pitch) on screen when viewed from the orbit
    assert math.dist(a, b) == pytest.approx(3.0 * math.sin(math.radians(70.0)))


def test_configured_arc_tolerance_drives_stroke_density():
    (circle,) = parse("G2 X0 Y0 I5 J0").segments
    coarse = ProjectionConfig.from_settings(ProjectionSettings(mode="orthographic", arc_tolerance_deg=13.0))
    fine = ProjectionConfig(mode=ProjectionMode.ORTHOGRAPHIC, arc_tolerance_deg=7.0)
    assert coarse.arc_tolerance_deg == 13.0

    (coarse_stroke,) = project_segments([circle], coarse)
    (fine_stroke,) = project_segments([circle], fine)
    assert coarse_stroke.points.shape == (29, 2)
    assert fine_stroke.points.shape == (53, 2)
    # an explicit argument overrides the config
    (override,) = project_segments([circle], coarse, angular_tolerance_deg=7.0)
    assert override.points.shape == (53, 2)


def test_arc_tolerance_must_be_positive():
    with pytest.raises(ConfigError):
        ProjectionConfig(arc_tolerance_deg=0.0)
