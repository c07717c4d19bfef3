"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_NOTIFY_WORKERS = 2
MIN_PASSWORD_LENGTH = 6

DEFAULT_PRIMARY_COLOR = "#2563eb"
DEFAULT_SECONDARY_COLOR = "#1e40af"

STANDARD_HOURS_PER_DAY = 8
# Upper bound for "count everything" reads (dashboard, HR reports).
AGGREGATE_LIMIT = 100_000
