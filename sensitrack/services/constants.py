"""
Constants for symptothermal cycle analysis.
"""
from sensitrack.models.analysis import MucusCode

# Mucus vocabulary. English values first, French synonyms after.
FERTILE_SENSATIONS = {"wet", "slippery", "mouillee", "glissante"}
FERTILE_ASPECTS = {"egg_white", "stretchy", "blanc_oeuf", "filant"}
LESSER_ASPECTS = {"creamy", "yellowish", "sticky", "cremeux", "jaunatre", "collant"}
DAMP_SENSATIONS = {"damp", "humide"}
DRY_SENSATIONS = {"dry", "seche"}
NOTHING_VALUES = {"nothing", "none", "rien"}

MUCUS_WEIGHTS = {
    MucusCode.G_PLUS: 4,
    MucusCode.G: 3,
    MucusCode.H: 2,
    MucusCode.T: 1,
    MucusCode.NONE: 0,
}

# Peak day
PEAK_MIN_WEIGHT = 3
PEAK_LOOKAHEAD_DAYS = 3
DAYS_AFTER_PEAK = 4  # peak + 1 to start the count, + 3 full days

# Temperature
LOW_WINDOW_DAYS = 6
MIN_LOW_TEMPERATURES = 4
HIGH_TEMPERATURES_REQUIRED = 3
SHIFT_MARGIN = 0.2
TEMPERATURE_PRECISION = 2

SPOTTING = "spotting"
NO_BLEEDING = "none"

BLEEDING_LABELS = {
    "spotting": "💧 Spotting",
    "light": "🩸 Light",
    "medium": "🩸🩸 Medium",
    "heavy": "🩸🩸🩸 Heavy",
}
