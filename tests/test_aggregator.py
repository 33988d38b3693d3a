from __future__ import annotations

from datetime import timedelta

from conftest import BASE_TIME, make_log

from monitoring.aggregator import aggregate, extract_incidents, last_incident, total_downtime_ms


def test_empty_log_has_no_downtime() -> None:
    result = aggregate([], 5)
    assert result.incidents == ()
    assert result.total_downtime_ms == 0
    assert last_incident(result) is None


def test_all_reachable_log_has_no_incidents() -> None:
    log = make_log([True, True, True])
    assert extract_incidents(log, 5) == []
    assert total_downtime_ms(log, 5) == 0


def test_incidents_are_maximal_unreachable_runs() -> None:
    log = make_log([True, False, False, True, False])
    incidents = extract_incidents(log, 5)

    assert [i.probe_count for i in incidents] == [2, 1]
    assert incidents[0].start_timestamp == BASE_TIME + timedelta(seconds=5)
    assert incidents[0].duration_seconds == 10
    # the trailing run is still open but is reported
    assert incidents[1].start_timestamp == BASE_TIME + timedelta(seconds=20)
    assert incidents[1].duration_seconds == 5
    assert total_downtime_ms(log, 5) == 15000


def test_log_starting_with_failure_opens_an_incident() -> None:
    log = make_log([False, True])
    incidents = extract_incidents(log, 5)
    assert len(incidents) == 1
    assert incidents[0].start_timestamp == BASE_TIME
    assert incidents[0].probe_count == 1


def test_all_unreachable_log_is_one_incident() -> None:
    log = make_log([False] * 4, interval_seconds=10)
    result = aggregate(log, 10)
    assert len(result.incidents) == 1
    assert result.incidents[0].probe_count == 4
    assert result.incidents[0].start_timestamp == log[0].timestamp
    assert result.total_downtime_ms == 40000
    assert last_incident(result) is result.incidents[0]


def test_total_matches_sum_of_incident_durations() -> None:
    log = make_log([False, True, False, False, True, True, False, False, False])
    result = aggregate(log, 3)
    summed = sum(i.duration_seconds for i in result.incidents) * 1000
    assert result.total_downtime_ms == summed == 6 * 3 * 1000


def test_aggregate_is_repeatable() -> None:
    log = make_log([True, False, True, False])
    assert aggregate(log, 5) == aggregate(log, 5)


def test_downtime_is_counted_in_interval_units() -> None:
    # same records, different cadence
    log = make_log([False, False])
    assert total_downtime_ms(log, 5) == 10000
    assert total_downtime_ms(log, 60) == 120000


def test_incident_end_follows_probe_count() -> None:
    log = make_log([False, False, False], interval_seconds=5)
    incident = extract_incidents(log, 5)[0]
    assert incident.end_timestamp == BASE_TIME + timedelta(seconds=15)
    assert incident.to_dict()["end"] == "2024-05-01T12:00:15.000Z"


def test_probe_counts_cover_every_unreachable_record() -> None:
    outcomes = [False, False, True, False, True, True, False, False, False, True]
    result = aggregate(make_log(outcomes), 5)
    assert sum(i.probe_count for i in result.incidents) == outcomes.count(False)
