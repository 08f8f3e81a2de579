"""
G-code line scanner for cncview

Strips comments and splits each source line into (letter, value) words.
Scanning never fails: malformed numbers are reported on the LineTokens so
the parser can skip that one line.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class GcodeToken:
    """A single G-code word"""

    letter: str  # 'G', 'X', 'I', ...
    value: float | None  # None when the letter carries no number

    def __str__(self):
        if self.value is None:
            return self.letter
        return f"{self.letter}{self.value:.10g}"


@dataclass(frozen=True)
class LineTokens:
    """Scanner output for one physical source line"""

    line_number: int  # 1-based
    tokens: tuple[GcodeToken, ...]
    raw_line: str = ""
    malformed: str | None = None  # offending word text

    @property
    def is_empty(self) -> bool:
        return not self.tokens and self.malformed is None

    def letters(self) -> list[str]:
        return [t.letter for t in self.tokens]


# Regex patterns for scanning
COMMENT_PATTERN = re.compile(r"\([^)]*\)|;.*$")
WORD_PATTERN = re.compile(r"([A-Za-z])([^A-Za-z\s]*)")
NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


def strip_comments(line: str) -> str:
    """
    Remove parenthesised and semicolon comments from a line

    An unterminated '(' comments out the rest of the line.
    """
    cleaned = COMMENT_PATTERN.sub(" ", line)
    open_idx = cleaned.find("(")
    if open_idx >= 0:
        cleaned = cleaned[:open_idx]
    return cleaned


def scan_line(line: str, line_number: int) -> LineTokens:
    """
    Scan a single line of G-code into tokens

    Args:
        line: Raw G-code line
        line_number: 1-based source line number

    Returns:
        LineTokens; ``malformed`` is set when a word's number does not parse
    """
    raw_line = line.rstrip("\r\n")
    cleaned = strip_comments(raw_line).strip()
    if not cleaned or cleaned.startswith("%"):
        return LineTokens(line_number, (), raw_line)

    tokens: list[GcodeToken] = []
    for match in WORD_PATTERN.finditer(cleaned):
        letter = match.group(1).upper()
        text = match.group(2)
        if not text:
            tokens.append(GcodeToken(letter, None))
            continue
        if not NUMBER_PATTERN.match(text):
            return LineTokens(line_number, tuple(tokens), raw_line, malformed=f"{letter}{text}")
        tokens.append(GcodeToken(letter, float(text)))

    return LineTokens(line_number, tuple(tokens), raw_line)


def scan_program(program: str | Iterable[str]) -> Iterator[LineTokens]:
    """
    Scan a complete program, one LineTokens per physical line

    Args:
        program: Either a string with newlines or an iterable of lines
    """
    lines = program.splitlines() if isinstance(program, str) else program
    for line_number, line in enumerate(lines, 1):
        yield scan_line(line, line_number)
