"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_SCHEDULER_RUN_AT = time(0, 5)

# Noon splits the day when an agency has no usable hours configured.
FALLBACK_MIDDAY = time(12, 0)

# An agency with no operating days configured is treated as never operating
# (the absence job skips its placements).
OPERATES_WHEN_NO_DAYS_CONFIGURED = False

HOURS_DECIMALS = 2
