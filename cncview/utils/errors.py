"""
Custom exception and diagnostic types for the cncview parse pipeline.
Keep this focused and non-redundant; prefer built-ins where appropriate.
"""

from dataclasses import dataclass
from enum import Enum


class ParseErrorKind(Enum):
    """Taxonomy of everything the parser can report about a line."""

    MALFORMED_TOKEN = "malformed_token"
    UNSUPPORTED_WORD = "unsupported_word"
    UNSUPPORTED_GCODE = "unsupported_gcode"
    NO_MOTION = "no_motion"
    AMBIGUOUS_ARC_SPEC = "ambiguous_arc_spec"
    ARC_RADIUS_MISMATCH = "arc_radius_mismatch"
    DEGENERATE_ARC = "degenerate_arc"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal finding attached to a source line."""

    line_number: int
    kind: ParseErrorKind
    message: str
    severity: Severity = Severity.INFO

    def __str__(self):
        return f"line {self.line_number}: [{self.severity.value}] {self.kind.value}: {self.message}"


class ParseError(RuntimeError):
    """G-code parse failure that aborts the whole program."""

    kind = ParseErrorKind.UNSUPPORTED_WORD

    def __init__(self, message: str, line_number: int):
        self.original_message = message
        self.line_number = line_number
        super().__init__(f"Parse Error (line {line_number}): {message}")

    def __str__(self):
        return f"Parse Error (line {self.line_number}): {self.original_message}"


class UnsupportedWordError(ParseError):
    """A word the parser cannot interpret and no ignore rule covers."""

    kind = ParseErrorKind.UNSUPPORTED_WORD

    def __init__(self, letter: str, line_number: int, reason: str = "unsupported word"):
        self.letter = letter
        super().__init__(f"{reason} '{letter}'", line_number)


class DegenerateArcError(ParseError):
    """Arc whose centre cannot be resolved (zero radius, ill-posed radius solve)."""

    kind = ParseErrorKind.DEGENERATE_ARC


class ConfigError(ValueError):
    """Invalid configuration value."""

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"Config Error: {message}")

    def __str__(self):
        return f"Config Error: {self.original_message}"
