"""Settings shared by every environment; values come from the environment (.env)."""

import os

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

WORKDAY_TZ = os.getenv("WORKDAY_TZ", "Asia/Ho_Chi_Minh")

# Descriptor matching (Euclidean distance in descriptor space)
MATCH_DISTANCE_THRESHOLD = float(os.getenv("MATCH_DISTANCE_THRESHOLD", "0.5"))
# 0 disables the ambiguity check (plain nearest match under threshold)
MATCH_SEPARATION_MARGIN = float(os.getenv("MATCH_SEPARATION_MARGIN", "0.05"))
DESCRIPTOR_DIMENSIONS = int(os.getenv("DESCRIPTOR_DIMENSIONS", "128"))
DESCRIPTOR_REFRESH_SECONDS = float(os.getenv("DESCRIPTOR_REFRESH_SECONDS", "60"))

# Liveness
LIVENESS_TIMEOUT_SECONDS = float(os.getenv("LIVENESS_TIMEOUT_SECONDS", "20"))
LIVENESS_BUFFER_SIZE = int(os.getenv("LIVENESS_BUFFER_SIZE", "10"))
LIVENESS_MIN_SAMPLES = int(os.getenv("LIVENESS_MIN_SAMPLES", "5"))
LIVENESS_MIN_TICKS = int(os.getenv("LIVENESS_MIN_TICKS", "10"))
LIVENESS_MAX_MISSED_TICKS = int(os.getenv("LIVENESS_MAX_MISSED_TICKS", "30"))
LIVENESS_VERDICT_TTL_SECONDS = float(os.getenv("LIVENESS_VERDICT_TTL_SECONDS", "60"))
# Pixels at LIVENESS_REFERENCE_FRAME_WIDTH; scaled by the frame width a session declares
LIVENESS_MOVEMENT_THRESHOLD_PX = float(os.getenv("LIVENESS_MOVEMENT_THRESHOLD_PX", "20"))
LIVENESS_REFERENCE_FRAME_WIDTH = int(os.getenv("LIVENESS_REFERENCE_FRAME_WIDTH", "640"))

# Organization-wide default schedule; leave start/end empty to require per-employee shifts
WORK_START_TIME = os.getenv("WORK_START_TIME", "08:00")
WORK_END_TIME = os.getenv("WORK_END_TIME", "17:00")
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "20"))
SCHEDULED_DAILY_HOURS = float(os.getenv("SCHEDULED_DAILY_HOURS", "8"))
WORK_DAYS = os.getenv("WORK_DAYS", "0,1,2,3,4")

LATE_PENALTY_TIERS = os.getenv("LATE_PENALTY_TIERS", "15:25000,30:50000,60:100000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE") or None
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

DEBUG = False
AUTO_INIT_DB = False
