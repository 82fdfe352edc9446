"""Constants and defaults.

Note: Keep business thresholds here to avoid magic numbers spread across code.
"""

RISK_ATTENDANCE_THRESHOLD = 75.0
DEFAULTERS_LIMIT = 20
RISK_STUDENTS_LIMIT = 20
DAILY_STATS_LIMIT = 30
TOP_PERFORMERS_LIMIT = 10
TOP_PERFORMER_MIN_ASSESSMENTS = 3

ATTENDANCE_WINDOW_DAYS = 30
DEFAULT_HISTORY_LIMIT = 50
TOP_CLASSES_LIMIT = 5

BARCODE_PREFIX = "STU"
BARCODE_MAX_ATTEMPTS = 10

REPORT_DECIMALS = 1
AMOUNT_DECIMALS = 2
UNKNOWN_LABEL = "Unknown"
