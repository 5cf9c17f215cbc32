"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_TOLERANCE_METERS = 50
MIN_TOLERANCE_METERS = 10
MAX_TOLERANCE_METERS = 500

DEFAULT_MAX_READING_AGE_MS = 5 * 60 * 1000
DEFAULT_MAX_ACCURACY_METERS = 100.0
DEFAULT_SESSION_MAX_AGE_MS = 2 * 60 * 60 * 1000

HISTORY_CAPACITY = 10
SUSPICIOUS_WINDOW = 3
SUSPICIOUS_DISTANCE_METERS = 1000.0
SUSPICIOUS_ELAPSED_MS = 30_000

DEFAULT_INTEGRITY_SECRET = "attendance-secret"
