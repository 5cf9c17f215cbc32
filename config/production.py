import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

INTEGRITY_SECRET = os.getenv("INTEGRITY_SECRET", "please-set-INTEGRITY_SECRET")
INTEGRITY_ALGORITHM = os.getenv("INTEGRITY_ALGORITHM", "hmac")

DEFAULT_TOLERANCE_METERS = int(os.getenv("DEFAULT_TOLERANCE_METERS", "50"))
MAX_READING_AGE_MS = int(os.getenv("MAX_READING_AGE_MS", str(5 * 60 * 1000)))
MAX_ACCURACY_METERS = float(os.getenv("MAX_ACCURACY_METERS", "100"))
SESSION_MAX_AGE_MS = int(os.getenv("SESSION_MAX_AGE_MS", str(2 * 60 * 60 * 1000)))

HISTORY_KEYING = os.getenv("HISTORY_KEYING", "session")

FALLBACK_LOCATION = None
