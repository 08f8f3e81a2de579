import math

import numpy as np
import pytest

from cncview.gcode import ArcCommand, IgnoredCommand, MoveCommand
from cncview.toolpath import ArcSegment, LineSegment, ToolpathBuilder, parse, parse_file
from cncview.types import ArcDirection, MoveKind, Plane, Point3
from cncview.utils.errors import ParseErrorKind, Severity, UnsupportedWordError

pytestmark = pytest.mark.unit


def test_demo_program_statistics(demo_program, demo_length, lenient_options):
    toolpath = parse(demo_program, lenient_options)
    stats = toolpath.stats
    assert stats.line_count == 12
    assert stats.segment_count == 7
    assert stats.rapid_moves == 2
    assert stats.feed_moves == 5
    assert stats.arc_moves == 2
    assert len(toolpath) == 7
    assert toolpath.total_length == pytest.approx(demo_length)


def test_segments_are_contiguous(demo_program, lenient_options):
    segments = parse(demo_program, lenient_options).segments
    assert segments[0].start == Point3(0.0, 0.0, 0.0)
    for previous, current in zip(segments, segments[1:]):
        assert current.start == previous.end


def test_segment_types_follow_commands(demo_program, lenient_options):
    segments = parse(demo_program, lenient_options).segments
    assert [type(s) for s in segments] == [
        LineSegment,
        LineSegment,
        LineSegment,
        ArcSegment,
        ArcSegment,
        LineSegment,
        LineSegment,
    ]
    assert segments[0].kind is MoveKind.RAPID
    assert segments[3].direction is ArcDirection.CCW
    assert segments[4].direction is ArcDirection.CW


def test_line_segment_ends_table(demo_program, lenient_options):
    toolpath = parse(demo_program, lenient_options)
    assert toolpath.line_segment_ends == (0, 0, 0, 1, 2, 3, 4, 5, 6, 7, 7, 7)
    assert toolpath.segment_range_for_lines(7, 8) == (3, 5)
    assert toolpath.segment_range_for_lines(1, 3) == (0, 0)
    assert toolpath.segment_range_for_lines(1, 99) == (0, 7)


def test_diagnostics_are_reported_in_line_order(demo_program, lenient_options):
    diagnostics = parse(demo_program, lenient_options).diagnostics
    assert [(d.line_number, d.kind) for d in diagnostics] == [
        (3, ParseErrorKind.NO_MOTION),
        (11, ParseErrorKind.NO_MOTION),
    ]
    assert all(d.severity is Severity.INFO for d in diagnostics)


def test_strict_options_reject_m_codes(demo_program, strict_options):
    with pytest.raises(UnsupportedWordError) as excinfo:
        parse(demo_program, strict_options)
    assert excinfo.value.letter == "M"
    assert excinfo.value.line_number == 11


def test_bounds_include_arc_extremes(demo_program, lenient_options):
    bounds = parse(demo_program, lenient_options).bounds
    assert bounds.min == pytest.approx((0.0, 0.0, -1.0))
    # the G3 arc bulges out to x = 30
    assert bounds.max == pytest.approx((30.0, 20.0, 5.0))
    assert bounds.center == pytest.approx((15.0, 10.0, 2.0))
    assert bounds.corners().shape == (8, 3)


def test_cumulative_lengths_are_monotone_and_read_only(demo_program, lenient_options):
    cumulative = parse(demo_program, lenient_options).cumulative_lengths
    assert np.all(np.diff(cumulative) > 0)
    with pytest.raises(ValueError):
        cumulative[0] = 1.0


def test_zero_length_moves_are_skipped():
    toolpath = parse("G0 X0\nG1 X5\nG1 X5")
    assert len(toolpath) == 1
    assert toolpath.line_segment_ends == (0, 1, 1)


def test_empty_program():
    toolpath = parse("(nothing here)\n")
    assert len(toolpath) == 0
    assert toolpath.bounds is None
    assert toolpath.total_length == 0.0
    assert toolpath.segment_range_for_lines(1, 1) == (0, 0)


def test_malformed_line_becomes_warning():
    toolpath = parse("G1 X1\nG1 X1..5\nG1 Y1")
    (diagnostic,) = toolpath.diagnostics
    assert diagnostic.kind is ParseErrorKind.MALFORMED_TOKEN
    assert diagnostic.severity is Severity.WARNING
    assert diagnostic.line_number == 2
    assert len(toolpath) == 2


def test_builder_accepts_commands_directly():
    commands = [
        MoveCommand(1, MoveKind.FEED, Point3(10.0, 0.0, 0.0)),
        IgnoredCommand(2, ParseErrorKind.NO_MOTION, "G90"),
        ArcCommand(3, ArcDirection.CCW, Point3(-10.0, 0.0, 0.0), Plane.XY, radius=10.0),
    ]
    toolpath = ToolpathBuilder().build(commands)
    assert toolpath.stats.line_count == 3
    assert toolpath.line_segment_ends == (1, 1, 2)
    assert toolpath.total_length == pytest.approx(10.0 + 10.0 * math.pi)


def test_builder_start_position():
    toolpath = ToolpathBuilder(start=Point3(1.0, 1.0, 1.0)).build([MoveCommand(1, MoveKind.RAPID, Point3(1.0, 1.0, 4.0))])
    assert toolpath.segments[0].start == Point3(1.0, 1.0, 1.0)
    assert toolpath.total_length == pytest.approx(3.0)


def test_parse_file_reads_program(write_gcode, demo_program, lenient_options):
    path = write_gcode(demo_program)
    toolpath = parse_file(path, lenient_options)
    assert toolpath.stats.segment_count == 7


def test_parse_file_missing_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        parse_file(tmp_path / "missing.nc")
