from __future__ import annotations

import time

ONE_HOUR_MILLIS = 60 * 60 * 1000
ONE_DAY_MILLIS = 24 * ONE_HOUR_MILLIS


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds (the unit every timestamp column uses)."""
    return int(time.time() * 1000)
