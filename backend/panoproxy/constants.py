"""Application-wide constants."""
from enum import Enum


class LoginState(str, Enum):
    """Vendor login states owned by LoginManager."""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


# Recorder state sentinels
RECORDER_STATE_UNKNOWN = "Unknown"
RECORDER_STATE_ERROR = "Error"
RECORDER_STATE_NOT_LOGGED_IN = "Error: Not logged in"

# Session configuration
DEFAULT_SESSION_DURATION_SECONDS = 3600  # Used by /session/start when the session has no duration
MIN_PAUSE_DURATION_SECONDS = 1

# Start-time baselines for /session/start
START_BASELINE_ORIGINAL = "original"
START_BASELINE_NOW = "now"
