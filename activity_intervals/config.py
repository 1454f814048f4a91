"""Central configuration for activity interval analysis.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. A few values can be overridden from environment
variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Cache / schema
# ---------------------------------------------------------------------------
# Bump whenever derived data changes shape or meaning. Every cached activity
# with a different version is considered stale.
DB_SCHEMA_VERSION = 1

# Number of (table, date) fingerprints memoised per zone table.
ZONE_FINGERPRINT_CACHE_SIZE = _env_int("ZONE_FINGERPRINT_CACHE_SIZE", 256)


# ---------------------------------------------------------------------------
# Athlete defaults
# ---------------------------------------------------------------------------
# Capacity model used when no power zone range covers the activity date.
DEFAULT_CP = _env_float("DEFAULT_CP", 250.0)
DEFAULT_WPRIME = _env_float("DEFAULT_WPRIME", 22000.0)

# Athlete weight (kg) when neither a measurement nor a metadata tag exists.
DEFAULT_WEIGHT_KG = _env_float("DEFAULT_WEIGHT_KG", 75.0)
# Last resort when every other source resolves to a non-positive value.
FALLBACK_WEIGHT_KG = 80.0

# Metadata tags consulted during analysis.
CP_OVERRIDE_TAG = "CP"
WEIGHT_TAG = "Weight"
COLOR_TAG = "Workout Code"


# ---------------------------------------------------------------------------
# Peak power search
# ---------------------------------------------------------------------------
# (duration seconds, display name) in catalog order.
PEAK_DURATIONS = (
    (1, "1 second"),
    (5, "5 seconds"),
    (10, "10 seconds"),
    (15, "15 seconds"),
    (20, "20 seconds"),
    (30, "30 seconds"),
    (60, "1 minute"),
    (300, "5 minutes"),
    (600, "10 minutes"),
    (1200, "20 minutes"),
    (1800, "30 minutes"),
    (2700, "45 minutes"),
    (3600, "1 hour"),
)


# ---------------------------------------------------------------------------
# Maximal effort (TTE) search
# ---------------------------------------------------------------------------
# Efforts must last longer than this many seconds to qualify.
TTE_MIN_DURATION_S = 120
# Longest window examined from any start point.
TTE_MAX_DURATION_S = 3600


# ---------------------------------------------------------------------------
# Climb detection
# ---------------------------------------------------------------------------
# Milestones are placed at least this far apart (km).
CLIMB_MILESTONE_SPACING_KM = 0.1
# Window size; this many consecutive flat gradients cut the segment.
CLIMB_MILESTONE_COUNT = 10
# Gradient (metres gained per km) below which a milestone step is flat.
CLIMB_FLAT_GRADIENT_M_PER_KM = 20.0
# Fraction of the max-min span the altitude may drop before the climb closes.
CLIMB_DESCENT_FRACTION = 0.2
# (minimum distance km, minimum metres gained per km) acceptance tiers.
CLIMB_THRESHOLDS = (
    (0.5, 60.0),
    (2.0, 40.0),
    (4.0, 20.0),
)


# ---------------------------------------------------------------------------
# Interval admission
# ---------------------------------------------------------------------------
# Supplied intervals within this many recording intervals of both activity
# edges are treated as duplicates of the entire activity.
ENTIRE_ACTIVITY_EDGE_TOLERANCE = 1.0

# Log every derived interval at DEBUG level when enabled.
LOG_DISCOVERED_INTERVALS = _env_bool("LOG_DISCOVERED_INTERVALS", False)
