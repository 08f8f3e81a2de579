"""
CLI entry point for the cncview-inspect command.

Parses a G-code file with the environment-configured settings and reports
toolpath statistics, diagnostics, reveal progress and projected extent.
"""

import argparse
import logging
import sys

from cncview import config
from cncview.animation import PlaybackState
from cncview.config import LOG_LEVEL_DEFAULT, TRACE, load_settings
from cncview.projection import ProjectionConfig, fit_projection, projected_bounds
from cncview.toolpath import parse_file
from cncview.utils.errors import ConfigError, ParseError

logger = logging.getLogger("cncview.cli.inspect")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect a G-code toolpath")
    parser.add_argument("file", help="G-code file to parse")
    parser.add_argument("--at", type=float, metavar="SECONDS",
                        help="Report the revealed path after SECONDS of playback")
    parser.add_argument("--project", action="store_true",
                        help="Report the projected 2D extent with the configured camera")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Enable quiet logging (WARNING level)")
    parser.add_argument("--log-level", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Set specific log level")
    return parser


def _log_level(args) -> int:
    if args.log_level:
        return TRACE if args.log_level == "TRACE" else getattr(logging, args.log_level)
    if args.verbose >= 3:
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    if config.TRACE_ENABLED:
        return TRACE
    return getattr(logging, LOG_LEVEL_DEFAULT)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=_log_level(args),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        toolpath = parse_file(args.file, settings.parser)
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1
    except ParseError as e:
        logger.error(str(e))
        return 1

    stats = toolpath.stats
    print(f"lines: {stats.line_count}")
    print(f"segments: {stats.segment_count} (rapid {stats.rapid_moves}, feed {stats.feed_moves}, arc {stats.arc_moves})")
    print(f"length: {toolpath.total_length:.3f}")
    if toolpath.bounds is not None:
        lo, hi = toolpath.bounds.min, toolpath.bounds.max
        print(f"bounds: ({lo.x:.3f}, {lo.y:.3f}, {lo.z:.3f}) - ({hi.x:.3f}, {hi.y:.3f}, {hi.z:.3f})")
    for diagnostic in toolpath.diagnostics:
        print(diagnostic)

    if args.at is not None:
        playback = PlaybackState.from_settings(settings.animation).toggle()
        playback = playback.tick(args.at, toolpath)
        prefix = playback.visible(toolpath)
        state = "finished" if playback.finished else playback.status.value
        print(
            f"at {args.at:g}s: {prefix.total_length:.3f} of {toolpath.total_length:.3f} revealed, "
            f"{len(prefix.segments)} segments ({state})"
        )

    if args.project:
        config = fit_projection(toolpath.bounds, ProjectionConfig.from_settings(settings.projection))
        extent = projected_bounds(toolpath.bounds, config)
        if extent is None:
            print("projection: nothing visible")
        else:
            print(
                f"projection ({config.mode.value}): ({extent.min.x:.3f}, {extent.min.y:.3f}) - "
                f"({extent.max.x:.3f}, {extent.max.y:.3f})"
            )
    return 0


def main_entry():
    """Entry point for the cncview-inspect command."""
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
