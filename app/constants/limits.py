"""
Description:
Quota, timeout and duration constants shared by routes and services.

Author: @kcaparas1630
"""

# Rate limits for AI-backed endpoints: (max_requests, window_ms)
DEFAULT_RATE_LIMIT = (3, 10 * 60 * 1000)
STRICT_RATE_LIMIT = (2, 15 * 60 * 1000)

# Mock interview length per interview type, in seconds
INTERVIEW_MAX_DURATIONS = {
    "phone-screener": 15 * 60,
    "first-interview": 30 * 60,
}

# Question counts requested from the model
TECHNICAL_QUESTION_COUNT = 20
BEHAVIORAL_QUESTION_COUNT = 5

# Cover letter input bounds
JOB_DESCRIPTION_MIN_LENGTH = 50
JOB_DESCRIPTION_MAX_LENGTH = 10000

# Seconds between sweeps of expired rate limit records
RATE_LIMIT_CLEANUP_INTERVAL = 5 * 60
