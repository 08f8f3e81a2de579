"""
Pytest configuration and shared fixtures for the cncview test suite.

Provides sample G-code programs, parser settings and a helper for writing
programs to disk.
"""

import logging
import math

import pytest

from cncview.config import ParserSettings

logger = logging.getLogger(__name__)


# ============================================================================
# SAMPLE PROGRAMS
# ============================================================================

DEMO_PROGRAM = """%
(demo part)
G21 G90 G17
G0 X0 Y0 Z5
G1 Z-1 F300
G1 X20 Y0
G3 X20 Y20 I0 J10
G2 X0 Y20 R10 ; half circle
G1 X0 Y0
G0 Z5
M30
%
"""

# 5 + 6 + 20 + 10*pi + 10*pi + 20 + 6
DEMO_LENGTH = 57.0 + 20.0 * math.pi


@pytest.fixture
def demo_program() -> str:
    return DEMO_PROGRAM


@pytest.fixture
def demo_length() -> float:
    return DEMO_LENGTH


@pytest.fixture
def lenient_options() -> ParserSettings:
    """Settings the viewer ships with: unknown words skipped, bare E allowed."""
    return ParserSettings(ignore_unknown_words=True, ignore_missing_words=frozenset({"E"}))


@pytest.fixture
def strict_options() -> ParserSettings:
    return ParserSettings(ignore_unknown_words=False)


@pytest.fixture
def write_gcode(tmp_path):
    """Write program text to a temporary .nc file and return its path."""

    def _write(text: str, name: str = "program.nc"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


# ============================================================================
# PYTEST CONFIGURATION HOOKS
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "gcode: Tests specifically for GCODE parsing and interpretation functionality"
    )


def pytest_sessionstart(session):
    """Called after the Session object has been created."""
    logger.info("Starting cncview test session")
