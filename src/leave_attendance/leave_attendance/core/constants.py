"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_LIST_LIMIT = 500
DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0

# Working hours are stored as DECIMAL(5,2).
WORKING_HOURS_QUANTUM = Decimal("0.01")
MINUTES_PER_HOUR = 60
