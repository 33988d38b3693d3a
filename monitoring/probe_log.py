"""
Append-only probe history of the monitoring session.

Thread-safety: append, snapshot and clear share one lock, so a reader
(report generation, the control server) always gets a consistent tuple.
"""

import threading
from typing import Iterator, List, Optional, Tuple

from monitoring.models import ProbeRecord


class ProbeLog:
    """Insertion-ordered sequence of ProbeRecords."""

    def __init__(self):
        self._records: List[ProbeRecord] = []
        self._lock = threading.Lock()

    def append(self, record: ProbeRecord) -> int:
        """
        Append *record* and return the new length.

        Raises ValueError if the record is older than the last one; the
        log is only ever extended in issuance order.
        """
        with self._lock:
            if self._records and record.timestamp < self._records[-1].timestamp:
                raise ValueError(
                    "probe records must be appended in non-decreasing timestamp order"
                )
            self._records.append(record)
            return len(self._records)

    def last(self) -> Optional[ProbeRecord]:
        with self._lock:
            return self._records[-1] if self._records else None

    def snapshot(self) -> Tuple[ProbeRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def clear(self) -> int:
        """Drop every record; returns how many were removed."""
        with self._lock:
            removed = len(self._records)
            self._records.clear()
            return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ProbeRecord]:
        return iter(self.snapshot())
