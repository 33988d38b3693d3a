from __future__ import annotations

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

# Settings are read once and cached; pin the test environment before any
# project module is imported.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("SERVER_ENABLED", "false")
os.environ.setdefault("NOTIFY_ENABLED", "false")

import pytest

from monitoring.models import ProbeRecord
from utils.helpers import TimeHelper


BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_log(outcomes: Iterable[bool], interval_seconds: int = 5) -> List[ProbeRecord]:
    """Records spaced *interval_seconds* apart starting at BASE_TIME."""
    records = []
    for i, reachable in enumerate(outcomes):
        records.append(
            ProbeRecord(
                timestamp=BASE_TIME + timedelta(seconds=i * interval_seconds),
                reachable=reachable,
                latency_ms=42 if reachable else 5000,
                ttl=64 if reachable else None,
            )
        )
    return records


class ScriptedProber:
    """
    Stand-in for Prober returning scripted outcomes.

    Tracks how many probes are in flight at once; ``gate`` holds every
    probe until it is set.
    """

    def __init__(self, outcomes: Iterable[bool] = (), delay: float = 0.0):
        self.outcomes = list(outcomes)
        self.delay = delay
        self.gate: Optional[asyncio.Event] = None
        self.calls = 0
        self.completed = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = asyncio.Event()

    async def probe(self, endpoint: str, timeout_seconds: float) -> ProbeRecord:
        self.calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.set()
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        reachable = self.outcomes.pop(0) if self.outcomes else True
        self.completed += 1
        return ProbeRecord(
            timestamp=TimeHelper.get_utc_now(),
            reachable=reachable,
            latency_ms=7,
            ttl=64 if reachable else None,
        )


@pytest.fixture
def session():
    from monitoring.session import MonitoringSession

    return MonitoringSession(
        target_endpoint="https://example.com/favicon.ico",
        interval_seconds=1,
        timeout_seconds=0.5,
    )
