"""
Constants Module for Connection Monitor

Contains constant values, enumerations and text templates
used throughout the application.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class SessionState(str, Enum):
    """
    Monitoring Session State

    A session starts IDLE, moves to RUNNING on start and back to
    IDLE on stop.
    """

    IDLE = "idle"
    RUNNING = "running"


class ProbeStatus(str, Enum):
    """Display label of a probe outcome."""

    ONLINE = "Online"
    OFFLINE = "Offline"

    @classmethod
    def from_reachable(cls, reachable: bool) -> "ProbeStatus":
        return cls.ONLINE if reachable else cls.OFFLINE


class TimeIntervals:
    """Time interval constants in seconds / milliseconds."""

    MS_PER_SECOND: Final[int] = 1000
    SECONDS_PER_MINUTE: Final[int] = 60
    MINUTES_PER_HOUR: Final[int] = 60
    HOURS_PER_DAY: Final[int] = 24

    ONE_HOUR: Final[int] = 3600


class Defaults:
    """Default values used when nothing is configured."""

    TARGET_URL: Final[str] = "https://www.google.com/favicon.ico"
    INTERVAL_SECONDS: Final[int] = 5
    TIMEOUT_SECONDS: Final[float] = 5.0
    TTL_SENTINEL: Final[int] = 64
    USER_AGENT: Final[str] = "ConnectionMonitor/1.0 (Reachability Probe)"
    NOTIFY_INTERVAL_SECONDS: Final[int] = TimeIntervals.ONE_HOUR
    REPORT_FILENAME_PREFIX: Final[str] = "connection-log"
    REPORT_FILENAME_SUFFIX: Final[str] = ".txt"


class MessageTemplates:
    """
    Report text templates.

    LOG_LINE is read back by whatever parses saved reports; keep it
    character-exact.
    """

    LOG_LINE: Final[str] = (
        "{timestamp} | Status: {status} | Response Time: {latency_ms}ms | TTL: {ttl}"
    )
    TTL_ABSENT: Final[str] = "N/A"

    TOTAL_DOWNTIME: Final[str] = "Total Downtime: {duration}"
    DOWNTIME_HEADER: Final[str] = "Downtime Periods:"
    DOWNTIME_LINE: Final[str] = "{index}. From {start} to {end} ({duration})"
    NO_DOWNTIME: Final[str] = "No downtime recorded."
    DETAILED_LOGS_HEADER: Final[str] = "Detailed Logs:"


class ProbeHeaders:
    """Request headers that keep caches from answering a probe."""

    NO_CACHE: Final[dict] = {
        "Cache-Control": "no-cache, no-store, max-age=0",
        "Pragma": "no-cache",
    }
