"""
Central configuration for cncview tunables and shared constants.

Every value can be overridden through a CNCVIEW_* environment variable.
Loading or merging configuration files is left to the embedding UI; it
passes the resulting values in through the settings dataclasses below.
"""

import logging
import os
from dataclasses import dataclass, field

from cncview.types import ProjectionMode, SpeedUnit
from cncview.utils.errors import ConfigError

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("CNCVIEW_TRACE", "0")).lower() in ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)

LOG_LEVEL_DEFAULT: str = "INFO"

# Geometry tolerances (machine units, mm after G20/G21 scaling)
POINT_EPS: float = 1e-9
ARC_RADIUS_TOL: float = 0.01  # start/end radius disagreement tolerated before warning

# Perspective points closer than this to the camera plane are unprojectable
CAMERA_NEAR_EPS: float = 1e-6

# Camera distance as a multiple of the largest toolpath dimension
CAMERA_DISTANCE_SCALE: float = 2.5

MIN_ZOOM: float = 0.05
MAX_ARC_CHORDS: int = 512


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    logger.warning(f"Ignoring unrecognised boolean for {name}: {raw!r}")
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}: {raw!r}")
        return default


def _env_letters(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [p.strip() for p in raw.split(",")]


IGNORE_UNKNOWN_WORDS: bool = _env_bool("CNCVIEW_IGNORE_UNKNOWN_WORDS", True)
IGNORE_MISSING_WORDS: list[str] = _env_letters("CNCVIEW_IGNORE_MISSING_WORDS", "E")
PROJECTION_MODE: str = os.getenv("CNCVIEW_PROJECTION_MODE", "perspective")
YAW_DEG: float = _env_float("CNCVIEW_YAW_DEG", -45.0)
PITCH_DEG: float = _env_float("CNCVIEW_PITCH_DEG", 70.0)
ANIMATION_SPEED: float = _env_float("CNCVIEW_ANIMATION_SPEED", 800.0)
ANIMATION_UNIT: str = os.getenv("CNCVIEW_ANIMATION_UNIT", "segments")
ARC_TOLERANCE_DEG: float = _env_float("CNCVIEW_ARC_TOLERANCE_DEG", 5.0)


def normalize_letters(letters) -> frozenset[str]:
    """
    Validate ignore-list entries and upper-case them.

    Empty entries are skipped; anything longer than one letter is rejected.
    """
    result = set()
    for item in letters:
        trimmed = str(item).strip()
        if not trimmed:
            continue
        if len(trimmed) != 1 or not trimmed.isalpha():
            raise ConfigError(f"ignore_missing_words entry must be a single letter: {item!r}")
        result.add(trimmed.upper())
    return frozenset(result)


@dataclass(frozen=True)
class ParserSettings:
    """Word ignore rules consumed by the modal parser"""

    ignore_unknown_words: bool = False
    ignore_missing_words: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "ignore_missing_words", normalize_letters(self.ignore_missing_words))


@dataclass(frozen=True)
class ProjectionSettings:
    mode: ProjectionMode = ProjectionMode.PERSPECTIVE
    yaw_deg: float = -45.0
    pitch_deg: float = 70.0
    fov_deg: float | None = None
    arc_tolerance_deg: float = 5.0

    def __post_init__(self):
        if isinstance(self.mode, str):
            try:
                object.__setattr__(self, "mode", ProjectionMode.parse(self.mode))
            except ValueError as e:
                raise ConfigError(str(e)) from e
        if self.fov_deg is not None and not 0.0 < self.fov_deg < 180.0:
            raise ConfigError(f"fov_deg must be in (0, 180), got {self.fov_deg}")
        if self.arc_tolerance_deg <= 0:
            raise ConfigError("arc_tolerance_deg must be positive")


@dataclass(frozen=True)
class AnimationSettings:
    speed: float = 800.0
    unit: SpeedUnit = SpeedUnit.SEGMENTS

    def __post_init__(self):
        if isinstance(self.unit, str):
            try:
                object.__setattr__(self, "unit", SpeedUnit(self.unit.strip().lower()))
            except ValueError as e:
                raise ConfigError(f"unknown animation unit: {self.unit!r}") from e
        if self.speed <= 0:
            raise ConfigError("animation speed must be positive")


@dataclass(frozen=True)
class Settings:
    parser: ParserSettings = field(default_factory=ParserSettings)
    projection: ProjectionSettings = field(default_factory=ProjectionSettings)
    animation: AnimationSettings = field(default_factory=AnimationSettings)


def load_settings() -> Settings:
    """
    Build settings from the module defaults (and thus the environment).

    Returns:
        Validated Settings instance

    Raises:
        ConfigError: if any value is out of range
    """
    settings = Settings(
        parser=ParserSettings(
            ignore_unknown_words=IGNORE_UNKNOWN_WORDS,
            ignore_missing_words=frozenset(normalize_letters(IGNORE_MISSING_WORDS)),
        ),
        projection=ProjectionSettings(
            mode=PROJECTION_MODE,
            yaw_deg=YAW_DEG,
            pitch_deg=PITCH_DEG,
            arc_tolerance_deg=ARC_TOLERANCE_DEG,
        ),
        animation=AnimationSettings(speed=ANIMATION_SPEED, unit=ANIMATION_UNIT),
    )
    logger.debug(f"Loaded settings: {settings}")
    return settings
