"""
============================================================================
CONNECTION MONITOR - REPORT FORMATTER
============================================================================
Deterministic text rendering of durations, downtime summaries and probe
logs.  The detailed log line shape is read back by tools that parse
saved reports and must not change:

    <timestamp> | Status: <Online|Offline> | Response Time: <n>ms | TTL: <ttl|N/A>

Incident start/end times are rendered as ISO-8601 UTC, never in the
local locale, so the same log always renders to the same text.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from datetime import timedelta
from typing import Iterable, Sequence

from config.constants import MessageTemplates, ProbeStatus, TimeIntervals
from monitoring.aggregator import aggregate
from monitoring.models import DowntimeIncident, ProbeRecord
from utils.helpers import TimeHelper


def format_duration(ms: int) -> str:
    """
    Convert milliseconds to a string like ``1d 1h 1m 1s``.

    Floor division only; zero units are omitted; ``0s`` when nothing
    is left.
    """
    if ms <= 0:
        return "0s"

    seconds = int(ms) // TimeIntervals.MS_PER_SECOND
    minutes, secs = divmod(seconds, TimeIntervals.SECONDS_PER_MINUTE)
    hours, minutes = divmod(minutes, TimeIntervals.MINUTES_PER_HOUR)
    days, hours = divmod(hours, TimeIntervals.HOURS_PER_DAY)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0:
        parts.append(f"{secs}s")

    return " ".join(parts) or "0s"


def format_incident_summary(
    incidents: Sequence[DowntimeIncident], interval_seconds: int
) -> str:
    """
    Numbered list of downtime periods, or the no-downtime sentinel.

    The end of each period is recomputed from *interval_seconds* so the
    summary always matches the cadence the report is generated for.
    """
    if not incidents:
        return MessageTemplates.NO_DOWNTIME

    lines = [MessageTemplates.DOWNTIME_HEADER]
    for index, incident in enumerate(incidents, start=1):
        duration_seconds = incident.probe_count * interval_seconds
        end = incident.start_timestamp + timedelta(seconds=duration_seconds)
        lines.append(
            MessageTemplates.DOWNTIME_LINE.format(
                index=index,
                start=TimeHelper.to_iso(incident.start_timestamp),
                end=TimeHelper.to_iso(end),
                duration=format_duration(duration_seconds * TimeIntervals.MS_PER_SECOND),
            )
        )
    return "\n".join(lines)


def format_log_line(record: ProbeRecord) -> str:
    return MessageTemplates.LOG_LINE.format(
        timestamp=record.iso_timestamp,
        status=ProbeStatus.from_reachable(record.reachable).value,
        latency_ms=record.latency_ms,
        ttl=record.ttl if record.ttl is not None else MessageTemplates.TTL_ABSENT,
    )


def format_detailed_log(log: Iterable[ProbeRecord]) -> str:
    """One line per record, newline separated, no trailing newline."""
    return "\n".join(format_log_line(record) for record in log)


def build_report(log: Iterable[ProbeRecord], interval_seconds: int) -> str:
    """
    Full saved-report document::

        Total Downtime: <duration>
        <incident summary>

        Detailed Logs:
        <log lines>
    """
    records = tuple(log)
    result = aggregate(records, interval_seconds)

    header = MessageTemplates.TOTAL_DOWNTIME.format(
        duration=format_duration(result.total_downtime_ms)
    )
    summary = format_incident_summary(result.incidents, interval_seconds)

    return (
        f"{header}\n"
        f"{summary}\n"
        f"\n"
        f"{MessageTemplates.DETAILED_LOGS_HEADER}\n"
        f"{format_detailed_log(records)}"
    )
