"""Configuration constants and settings for pomostats."""

from __future__ import annotations

import os
from datetime import tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# ============================================================================
# COMMENT CONVENTION
# ============================================================================

COMMENT_ACTION_TYPE = "commentCard"
POMODORO_PREFIX = "Pomodoro #"
# number of characters after the prefix that may hold the sequence number
SEQUENCE_WINDOW = 12

# ============================================================================
# STATISTICS LAYOUT
# ============================================================================

WEEKDAY_NAMES: List[str] = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
HOUR_NAMES: List[int] = list(range(24))

# ============================================================================
# ENVIRONMENT
# ============================================================================

TIMEZONE_ENV = "POMOSTATS_TIMEZONE"
LOG_LEVEL = os.getenv("POMOSTATS_LOG_LEVEL", "WARNING")


def get_timezone(name: Optional[str] = None) -> Optional[tzinfo]:
    """Resolve the zone used to bucket pomodoros into weekdays and hours.

    An explicit name wins over the POMOSTATS_TIMEZONE environment variable.
    None means the system local zone.

    Raises:
        ValueError: if the name is not a known IANA zone.
    """
    name = name or os.getenv(TIMEZONE_ENV)
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone '{name}'") from e
