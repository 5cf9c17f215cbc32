SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

INTEGRITY_SECRET = "test-integrity-secret"
INTEGRITY_ALGORITHM = "checksum"

DEFAULT_TOLERANCE_METERS = 50
MAX_READING_AGE_MS = 5 * 60 * 1000
MAX_ACCURACY_METERS = 100.0
SESSION_MAX_AGE_MS = 2 * 60 * 60 * 1000

HISTORY_KEYING = "session"

FALLBACK_LOCATION = None
