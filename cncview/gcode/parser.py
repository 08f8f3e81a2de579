"""
Modal G-code parser for cncview

Converts scanned lines into Commands while threading ModalState through the
program. Supported words:
- G0/G1/G2/G3 motion, G17/G18/G19 plane, G20/G21 units, G90/G91 distance mode
- X/Y/Z targets (inherited from the modal position when absent)
- I/J/K arc centre offsets, R arc radius
- F feed rate (advisory), N line numbers

Anything else is subject to the two ignore rules in ParserSettings.
"""

import logging
from collections.abc import Iterable

from cncview.config import ParserSettings
from cncview.types import ArcDirection, MoveKind
from cncview.utils.errors import (
    DegenerateArcError,
    Diagnostic,
    ParseErrorKind,
    Severity,
    UnsupportedWordError,
)

from .commands import ArcCommand, Command, IgnoredCommand, MoveCommand
from .state import MODAL_CODES, MOTION_CODES, ModalState, MotionMode
from .tokenizer import LineTokens, scan_program

logger = logging.getLogger(__name__)

AXIS_LETTERS = frozenset("XYZ")
OFFSET_LETTERS = frozenset("IJK")
KNOWN_LETTERS = frozenset("GXYZIJKRFN")


class ModalParser:
    """G-code parser that turns scanned lines into Commands"""

    def __init__(self, options: ParserSettings | None = None):
        self.options = options or ParserSettings()
        self.diagnostics: list[Diagnostic] = []
        self.state = ModalState()

    def _ignores_missing(self, letter: str) -> bool:
        if letter in self.options.ignore_missing_words:
            return True
        return self.options.ignore_unknown_words and letter not in KNOWN_LETTERS

    def _ignores_unknown(self, letter: str) -> bool:
        return self.options.ignore_unknown_words or letter in self.options.ignore_missing_words

    def _warn(self, line_number: int, kind: ParseErrorKind, message: str) -> None:
        diagnostic = Diagnostic(line_number, kind, message, Severity.WARNING)
        logger.debug(str(diagnostic))
        self.diagnostics.append(diagnostic)

    def parse_line(self, line: LineTokens, state: ModalState) -> tuple[Command | None, ModalState]:
        """
        Parse one scanned line

        Args:
            line: Scanner output for the line
            state: Modal state before the line

        Returns:
            Tuple of (command or None for blank lines, modal state after the line)

        Raises:
            UnsupportedWordError: word not interpretable and not covered by an ignore rule
            DegenerateArcError: arc with neither I/J/K nor R
        """
        line_number = line.line_number
        if line.malformed is not None:
            return IgnoredCommand(line_number, ParseErrorKind.MALFORMED_TOKEN, line.malformed), state
        if line.is_empty:
            return None, state

        next_state = state
        motion: MotionMode | None = None
        axes: dict[str, float] = {}
        offsets: dict[str, float] = {}
        radius: float | None = None
        feed: float | None = None
        unknown_gcodes: list[str] = []

        for token in line.tokens:
            letter, value = token.letter, token.value
            if value is None:
                if self._ignores_missing(letter):
                    logger.trace(f"line {line_number}: skipping valueless word {letter}")
                    continue
                raise UnsupportedWordError(letter, line_number, reason="missing value for")

            if letter == "G":
                code = int(value) if value.is_integer() else None
                if code in MODAL_CODES:
                    next_state = next_state.apply_gcode(code)
                    if code in MOTION_CODES:
                        motion = MOTION_CODES[code]
                else:
                    unknown_gcodes.append(str(token))
            elif letter in AXIS_LETTERS:
                axes[letter] = value
            elif letter in OFFSET_LETTERS:
                offsets[letter] = value
            elif letter == "R":
                radius = value
            elif letter == "F":
                feed = value
            elif letter == "N":
                continue
            elif self._ignores_unknown(letter):
                logger.trace(f"line {line_number}: ignoring word {token}")
            else:
                raise UnsupportedWordError(letter, line_number)

        if feed is not None:
            next_state = next_state.with_feed_rate(feed)

        # Bare coordinates continue the modal motion
        if motion is None and (axes or offsets):
            motion = next_state.motion_mode

        if motion is None:
            if unknown_gcodes and not self.options.ignore_unknown_words:
                return (
                    IgnoredCommand(line_number, ParseErrorKind.UNSUPPORTED_GCODE, " ".join(unknown_gcodes)),
                    next_state,
                )
            return IgnoredCommand(line_number, ParseErrorKind.NO_MOTION, line.raw_line.strip()), next_state

        if unknown_gcodes and not self.options.ignore_unknown_words:
            self._warn(
                line_number,
                ParseErrorKind.UNSUPPORTED_GCODE,
                f"skipped {' '.join(unknown_gcodes)} on a motion line",
            )

        target = next_state.calculate_target_position(axes)

        if motion in (MotionMode.RAPID, MotionMode.FEED):
            if offsets or radius is not None:
                logger.trace(f"line {line_number}: arc words on a linear move ignored")
            kind = MoveKind.RAPID if motion is MotionMode.RAPID else MoveKind.FEED
            command: Command = MoveCommand(line_number, kind, target)
        else:
            direction = ArcDirection.CW if motion is MotionMode.ARC_CW else ArcDirection.CCW
            command = self._arc_command(line_number, direction, target, offsets, radius, next_state)

        return command, next_state.moved_to(target)

    def _arc_command(self, line_number, direction, target, offsets, radius, state) -> ArcCommand:
        if offsets:
            if radius is not None:
                # I/J/K wins; R is dropped
                self._warn(
                    line_number,
                    ParseErrorKind.AMBIGUOUS_ARC_SPEC,
                    "both I/J/K and R given; using I/J/K",
                )
            scaled = tuple(state.scale(offsets.get(letter, 0.0)) for letter in "IJK")
            return ArcCommand(line_number, direction, target, state.plane, offsets=scaled)
        if radius is not None:
            return ArcCommand(line_number, direction, target, state.plane, radius=state.scale(radius))
        raise DegenerateArcError("arc requires I/J/K offsets or R radius", line_number)

    def parse_program(self, program: str | Iterable[str]) -> list[Command]:
        """
        Parse a complete G-code program

        Args:
            program: Either a string with newlines or an iterable of lines

        Returns:
            Commands in source line order
        """
        self.diagnostics = []
        state = ModalState()
        commands: list[Command] = []

        for line in scan_program(program):
            command, state = self.parse_line(line, state)
            if command is not None:
                commands.append(command)

        self.state = state
        logger.debug(f"Parsed {len(commands)} commands, {len(self.diagnostics)} warnings")
        return commands

    def get_diagnostics(self) -> list[Diagnostic]:
        """Get warnings recorded by the last parse"""
        return list(self.diagnostics)
