"""
Constants used throughout the notification pipeline
"""

# Quality and change thresholds
DEFAULT_MIN_SCORE = 0.6
DEFAULT_SCORE_IMPROVEMENT_PCT = 0.02  # Relative score gain needed on noisy updates

# Silencing
DEFAULT_AUTO_SILENCE_SECS = 25  # Applied to a camera after each notification
SILENCE_ACTION_NAMESPACE = "frigate_ai"
SILENCE_TABLE_SENTINELS = ("unknown", "unavailable")

# Notification display
DEFAULT_NOTIFICATION_TIMEOUT_HOURS = 10
DEFAULT_ICON = "mdi:home-assistant"
ICON_DIR = "/local/icons"

# Home Assistant REST API
DEFAULT_HTTP_TIMEOUT = 10  # seconds

# Environment variables
ENV_HA_URL = "HA_URL"
ENV_HA_TOKEN = "HA_TOKEN"
ENV_DEBUG = "FRIGATE_NOTIFY_DEBUG"
