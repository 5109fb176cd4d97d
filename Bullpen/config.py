"""
config.py

Constants and configuration for the bullpen decision simulator.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "Data"
OUTPUT_DIR = Path(__file__).parent / "output"
PITCHERS_FILE = DATA_DIR / "relievers.csv"

# ---------------------------------------------------------------------------
# State Space Constants
# ---------------------------------------------------------------------------

# 8 base states indexed by their encoding
# Binary representation: bit 0 = 1B, bit 1 = 2B, bit 2 = 3B
BASE_STATE_NAMES = ["empty", "1B", "2B", "1B_2B", "3B", "1B_3B", "2B_3B", "loaded"]

# Runner names as supplied by callers, and their bit in the base state
BASE_NAMES = ["first", "second", "third"]
BASE_BITS = {"first": 1, "second": 2, "third": 4}

# Outs: 0, 1, 2 (3 ends the half-inning)
OUTS = [0, 1, 2]
OUTS_PER_HALF_INNING = 3

# ---------------------------------------------------------------------------
# Outcome Categories
# ---------------------------------------------------------------------------

STRIKEOUT = "strikeout"
WALK = "walk"
HIT_BY_PITCH = "hbp"
SINGLE = "single"
DOUBLE = "double"
TRIPLE = "triple"
HOME_RUN = "hr"
OUT_IN_PLAY = "out"

OUTCOMES = [STRIKEOUT, WALK, HIT_BY_PITCH, SINGLE, DOUBLE, TRIPLE, HOME_RUN, OUT_IN_PLAY]

OUT_OUTCOMES = frozenset({STRIKEOUT, OUT_IN_PLAY})
ADVANCING_OUTCOMES = frozenset({WALK, HIT_BY_PITCH, SINGLE, DOUBLE, TRIPLE, HOME_RUN})

# ---------------------------------------------------------------------------
# League Constants
# ---------------------------------------------------------------------------

# Roughly 4 plate appearances per inning
PA_PER_NINE = 36

# Hit rate on balls in play
LEAGUE_BABIP = 0.298

# Share of balls-in-play hits by type; the remainder (8%) are home runs
HIT_TYPE_SPLIT = {
    SINGLE: 0.65,
    DOUBLE: 0.25,
    TRIPLE: 0.02,
}

# Hit-by-pitch rate per plate appearance (same for every pitcher)
HBP_RATE = 0.01

# ---------------------------------------------------------------------------
# Simulation Parameters
# ---------------------------------------------------------------------------

# Safety cap on plate appearances within one simulated half-inning
MAX_PLATE_APPEARANCES = 100

DEFAULT_ITERATIONS = 1000
MIN_ITERATIONS = 100
MAX_ITERATIONS = 10000

MIN_CANDIDATES = 2
MAX_CANDIDATES = 6

MIN_INNING = 1
MAX_INNING = 15

# Runs-allowed buckets: 0, 1, 2, 3+
RUN_BUCKETS = 4
RUN_BUCKET_LABELS = ["runs0", "runs1", "runs2", "runs3plus"]

# ---------------------------------------------------------------------------
# Win Probability Model
# ---------------------------------------------------------------------------

REGULATION_INNINGS = 9

# Logistic slope scales with sqrt(innings remaining)
WP_LOGISTIC_SCALE = 0.14
MIN_INNINGS_REMAINING = 0.1

# Home side bonus in a close game from the 9th inning on
HOME_LATE_BONUS = 0.03

# Extra innings pull the estimate toward 50-50
EXTRA_INNING_DAMPING = 0.85

WP_FLOOR = 0.01
WP_CEILING = 0.99
