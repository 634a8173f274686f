"""Application constants."""

# Target intensity (RPE) used for baseline week, deload week and unknown weeks
BASELINE_INTENSITY = 7
MIN_INTENSITY = 1
MAX_INTENSITY = 10

# Template fallbacks when a plan omits set/rep counts
DEFAULT_TEMPLATE_SETS = 2
DEFAULT_TEMPLATE_REPS = 8

# Deload week keeps roughly one third of sets and reps
DELOAD_DIVISOR = 3

# Weekly sets per muscle group above which volume increases are skipped
WEEKLY_SET_CEILING = 21

# Sets one exercise may have in a session: authored, grown by volume feedback or added by hand
MAX_SETS_PER_EXERCISE_PER_SESSION = 12

# Single user until auth: ids in requests default to this UUID
DEFAULT_USER_ID = "00000000-0000-0000-0000-000000000001"
