"""
============================================================================
CONNECTION MONITOR - MONITORING VALUE OBJECTS
============================================================================
Immutable records produced by the prober and the downtime aggregator.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from utils.helpers import TimeHelper


# ============================================================================
# PROBE RECORD
# ============================================================================

@dataclass(frozen=True)
class ProbeRecord:
    """
    Outcome of one reachability probe.

    Attributes
    ----------
    timestamp : datetime
        UTC instant the probe was issued.
    reachable : bool
        Classification result.
    latency_ms : int
        Round-trip time, or time until the probe failed or was cancelled.
    ttl : Optional[int]
        Only set on reachable outcomes. HTTP does not expose the IP TTL,
        so this carries the configured placeholder value, not telemetry.
    """
    timestamp: datetime
    reachable: bool
    latency_ms: int
    ttl: Optional[int] = None

    def __post_init__(self):
        if self.latency_ms < 0:
            raise ValueError("latency_ms must be non-negative")
        if not self.reachable and self.ttl is not None:
            raise ValueError("ttl is only recorded for reachable probes")

    @property
    def iso_timestamp(self) -> str:
        return TimeHelper.to_iso(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.iso_timestamp,
            "reachable": self.reachable,
            "latency_ms": self.latency_ms,
            "ttl": self.ttl,
        }


# ============================================================================
# DOWNTIME INCIDENT
# ============================================================================

@dataclass(frozen=True)
class DowntimeIncident:
    """
    A maximal run of consecutive unreachable probes.

    Duration is measured in probe intervals, not in wall-clock time
    between the first and last failing probe.
    """
    start_timestamp: datetime
    probe_count: int
    duration_seconds: int

    @property
    def end_timestamp(self) -> datetime:
        return self.start_timestamp + timedelta(seconds=self.duration_seconds)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": TimeHelper.to_iso(self.start_timestamp),
            "end": TimeHelper.to_iso(self.end_timestamp),
            "probe_count": self.probe_count,
            "duration_seconds": self.duration_seconds,
        }


@dataclass(frozen=True)
class DowntimeAggregate:
    """Incidents and cumulative downtime derived from one log snapshot."""
    incidents: Tuple[DowntimeIncident, ...] = field(default_factory=tuple)
    total_downtime_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "incidents": [incident.to_dict() for incident in self.incidents],
            "total_downtime_ms": self.total_downtime_ms,
        }
