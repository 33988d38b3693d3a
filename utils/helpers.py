"""
============================================================================
CONNECTION MONITOR - HELPERS UTILITY
============================================================================
Time helpers shared by the prober, the report formatter and the writer.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import time
from datetime import datetime, timezone
from typing import Optional


# ============================================================================
# TIME UTILITIES
# ============================================================================

class TimeHelper:
    """
    Time and date manipulation utilities.

    All timestamps handled by the monitor are timezone-aware UTC.
    """

    @staticmethod
    def get_utc_now() -> datetime:
        """Get current UTC datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def to_iso(dt: datetime) -> str:
        """
        Render a datetime as ISO-8601 UTC with millisecond precision.

        Args:
            dt: Datetime to render (naive values are taken as UTC)

        Returns:
            String such as ``2024-05-01T12:00:00.000Z``
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        dt = dt.astimezone(timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def filename_timestamp(dt: Optional[datetime] = None) -> str:
        """ISO-8601 timestamp with ':' and '.' replaced by '-'."""
        iso = TimeHelper.to_iso(dt or TimeHelper.get_utc_now())
        return iso.replace(":", "-").replace(".", "-")

    @staticmethod
    def elapsed_ms(start: float) -> int:
        """Milliseconds since ``start`` (a ``time.perf_counter()`` value)."""
        return max(0, round((time.perf_counter() - start) * 1000))
