import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True

# Shared secret for the QR integrity hash
INTEGRITY_SECRET = os.getenv("INTEGRITY_SECRET", "attendance-secret")
# "checksum" keeps compatibility with the browser client; "hmac" is the keyed MAC
INTEGRITY_ALGORITHM = os.getenv("INTEGRITY_ALGORITHM", "checksum")

DEFAULT_TOLERANCE_METERS = int(os.getenv("DEFAULT_TOLERANCE_METERS", "50"))
MAX_READING_AGE_MS = int(os.getenv("MAX_READING_AGE_MS", str(5 * 60 * 1000)))
MAX_ACCURACY_METERS = float(os.getenv("MAX_ACCURACY_METERS", "100"))
SESSION_MAX_AGE_MS = int(os.getenv("SESSION_MAX_AGE_MS", str(2 * 60 * 60 * 1000)))

# "session" or "session_student"
HISTORY_KEYING = os.getenv("HISTORY_KEYING", "session")

# Demo location substituted when the device cannot provide one (set USE_FALLBACK_LOCATION=0 to disable)
FALLBACK_LOCATION = (
    {"latitude": 40.7128, "longitude": -74.0060, "accuracy": 10}
    if bool(int(os.getenv("USE_FALLBACK_LOCATION", "1")))
    else None
)
