"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

QUERY_SUBJECT_MIN_LENGTH = 3
# queries.subject is VARCHAR(255).
QUERY_SUBJECT_MAX_LENGTH = 255
QUERY_DESCRIPTION_MIN_LENGTH = 10
PASSWORD_MIN_LENGTH = 6

DEFAULT_RESET_TOKEN_TTL_MINUTES = 60
DEFAULT_SESSION_HOURS = 24

# Attendance / CGPA thresholds used by the proctor views.
ATTENDANCE_GOOD_PERCENT = 75.0
ATTENDANCE_HIGH_RISK_PERCENT = 65.0
CGPA_AT_RISK = 6.0
CGPA_MEDIUM_RISK = 6.5
CGPA_HIGH_RISK = 5.0
