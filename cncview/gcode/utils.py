"""
Arc geometry helpers for G-code processing

Centre reconstruction from I/J/K offsets or a signed R radius, and sweep
angle computation in the active plane.
"""

import math

from cncview.config import ARC_RADIUS_TOL, POINT_EPS
from cncview.types import Plane, Point3

TAU = 2.0 * math.pi


def plane_coords(point: Point3, plane: Plane) -> tuple[float, float]:
    """Project a point onto the (u, v) axes of the plane"""
    u_axis, v_axis = plane.value
    return point[u_axis], point[v_axis]


def with_plane_coords(point: Point3, plane: Plane, u: float, v: float) -> Point3:
    """Replace the in-plane coordinates of a point, keeping the normal axis"""
    coords = list(point)
    u_axis, v_axis = plane.value
    coords[u_axis] = u
    coords[v_axis] = v
    return Point3(*coords)


def ijk_to_center(start: Point3, offsets: tuple[float, float, float], plane: Plane) -> Point3:
    """
    Convert IJK offsets to arc center point

    Only the offset pair belonging to the plane is used (I/J for XY, I/K for
    XZ, J/K for YZ). The normal-axis coordinate is taken from ``start``.

    Args:
        start: Arc start position
        offsets: (I, J, K) relative to start
        plane: Active plane

    Returns:
        Center point
    """
    u_axis, v_axis = plane.value
    su, sv = plane_coords(start, plane)
    return with_plane_coords(start, plane, su + offsets[u_axis], sv + offsets[v_axis])


def sweep_angle(start: Point3, end: Point3, center: Point3, clockwise: bool, plane: Plane) -> float:
    """
    Angular extent of the arc from start to end in its rotation direction

    Returns:
        Sweep in (0, 2*pi]; coincident in-plane endpoints give a full circle
    """
    su, sv = plane_coords(start, plane)
    eu, ev = plane_coords(end, plane)
    cu, cv = plane_coords(center, plane)

    if math.hypot(eu - su, ev - sv) < POINT_EPS:
        return TAU

    start_angle = math.atan2(sv - cv, su - cu)
    end_angle = math.atan2(ev - cv, eu - cu)
    if clockwise:
        sweep = (start_angle - end_angle) % TAU
    else:
        sweep = (end_angle - start_angle) % TAU
    return sweep if sweep > 0.0 else TAU


def radius_to_center(start: Point3, end: Point3, radius: float, clockwise: bool, plane: Plane) -> Point3:
    """
    Calculate arc center from a signed radius

    Two circles of radius |R| pass through both endpoints; the sign of R
    selects between them.

    Args:
        start: Starting position
        end: Ending position
        radius: Arc radius (positive for sweep <= 180 deg, negative for > 180 deg)
        clockwise: True for G2, False for G3
        plane: Active plane

    Returns:
        Center point

    Raises:
        ValueError: zero radius, coincident endpoints, or radius too small for the chord
    """
    if abs(radius) < POINT_EPS:
        raise ValueError("arc radius is zero")

    su, sv = plane_coords(start, plane)
    eu, ev = plane_coords(end, plane)
    du = eu - su
    dv = ev - sv
    chord = math.hypot(du, dv)
    if chord < POINT_EPS:
        raise ValueError("arc radius with coincident endpoints")

    r_abs = abs(radius)
    if chord > 2.0 * r_abs + POINT_EPS:
        raise ValueError(f"arc radius {radius} too small for chord {chord:.6g}")

    mid_u = (su + eu) * 0.5
    mid_v = (sv + ev) * 0.5
    h = math.sqrt(max(r_abs * r_abs - (chord * 0.5) ** 2, 0.0))
    perp_u = -dv / chord
    perp_v = du / chord

    first = with_plane_coords(start, plane, mid_u + perp_u * h, mid_v + perp_v * h)
    second = with_plane_coords(start, plane, mid_u - perp_u * h, mid_v - perp_v * h)
    sweep_first = sweep_angle(start, end, first, clockwise, plane)
    sweep_second = sweep_angle(start, end, second, clockwise, plane)

    # R > 0 selects the short arc (sweep <= pi), R < 0 the long arc (sweep > pi)
    if radius > 0:
        pick_first = sweep_first <= sweep_second
    else:
        pick_first = sweep_first >= sweep_second
    return first if pick_first else second


def validate_arc(start: Point3, end: Point3, center: Point3, plane: Plane, tolerance: float = ARC_RADIUS_TOL) -> bool:
    """
    Check that start and end lie on the same circle around center

    Returns:
        True if in-plane radii agree within tolerance
    """
    su, sv = plane_coords(start, plane)
    eu, ev = plane_coords(end, plane)
    cu, cv = plane_coords(center, plane)
    r_start = math.hypot(su - cu, sv - cv)
    r_end = math.hypot(eu - cu, ev - cv)
    return abs(r_start - r_end) < tolerance
