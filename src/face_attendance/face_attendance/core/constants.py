"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code. Every
value can be overridden from the settings module.
"""

DESCRIPTOR_DIMENSIONS = 128

# Euclidean distance units in descriptor space.
DEFAULT_MATCH_DISTANCE_THRESHOLD = 0.5
DEFAULT_MATCH_SEPARATION_MARGIN = 0.05

DEFAULT_LIVENESS_TIMEOUT_SECONDS = 20.0
DEFAULT_LIVENESS_BUFFER_SIZE = 10
DEFAULT_LIVENESS_MIN_SAMPLES = 5
DEFAULT_LIVENESS_MIN_TICKS = 10
DEFAULT_LIVENESS_MAX_MISSED_TICKS = 30
DEFAULT_LIVENESS_VERDICT_TTL_SECONDS = 60.0
# Pixels, measured in a frame of DEFAULT_REFERENCE_FRAME_WIDTH pixels.
DEFAULT_MOVEMENT_THRESHOLD_PX = 20.0
DEFAULT_REFERENCE_FRAME_WIDTH = 640

DEFAULT_LATE_THRESHOLD_MINUTES = 20
DEFAULT_SCHEDULED_DAILY_HOURS = 8.0
DEFAULT_WORKDAY_TZ = "Asia/Ho_Chi_Minh"

HOURS_DECIMALS = 2
DEFAULT_HISTORY_LIMIT = 31
