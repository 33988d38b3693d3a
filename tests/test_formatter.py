from __future__ import annotations

import pytest

from conftest import make_log

from monitoring.aggregator import extract_incidents
from reporting.formatter import (
    build_report,
    format_detailed_log,
    format_duration,
    format_incident_summary,
    format_log_line,
)


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (0, "0s"),
        (-5, "0s"),
        (999, "0s"),
        (1000, "1s"),
        (60000, "1m"),
        (90000, "1m 30s"),
        (3600000, "1h"),
        (3660000, "1h 1m"),
        (86400000, "1d"),
        (90061000, "1d 1h 1m 1s"),
        (86401000, "1d 1s"),
    ],
)
def test_format_duration(ms: int, expected: str) -> None:
    assert format_duration(ms) == expected


def test_log_line_for_reachable_record() -> None:
    record = make_log([True])[0]
    assert format_log_line(record) == (
        "2024-05-01T12:00:00.000Z | Status: Online | Response Time: 42ms | TTL: 64"
    )


def test_log_line_for_unreachable_record() -> None:
    record = make_log([True, False])[1]
    assert format_log_line(record) == (
        "2024-05-01T12:00:05.000Z | Status: Offline | Response Time: 5000ms | TTL: N/A"
    )


def test_detailed_log_has_one_line_per_record() -> None:
    log = make_log([True, False, True])
    text = format_detailed_log(log)
    assert len(text.split("\n")) == 3
    assert not text.endswith("\n")
    assert format_detailed_log([]) == ""


def test_empty_incident_summary_uses_sentinel() -> None:
    assert format_incident_summary([], 5) == "No downtime recorded."


def test_incident_summary_lists_numbered_periods() -> None:
    log = make_log([True, False, False, True, False])
    summary = format_incident_summary(extract_incidents(log, 5), 5)
    assert summary.split("\n") == [
        "Downtime Periods:",
        "1. From 2024-05-01T12:00:05.000Z to 2024-05-01T12:00:15.000Z (10s)",
        "2. From 2024-05-01T12:00:20.000Z to 2024-05-01T12:00:25.000Z (5s)",
    ]


def test_report_layout() -> None:
    log = make_log([True, False, True])
    report = build_report(log, 5)
    lines = report.split("\n")

    assert lines[0] == "Total Downtime: 5s"
    assert lines[1] == "Downtime Periods:"
    assert lines[2].startswith("1. From 2024-05-01T12:00:05.000Z")
    assert lines[3] == ""
    assert lines[4] == "Detailed Logs:"
    assert lines[5:] == format_detailed_log(log).split("\n")


def test_report_for_clean_log() -> None:
    report = build_report(make_log([True, True]), 5)
    assert report.startswith("Total Downtime: 0s\nNo downtime recorded.\n\nDetailed Logs:\n")
