from __future__ import annotations

import pytest

from conftest import make_log

from config.constants import SessionState
from config.settings import Settings
from exceptions.monitoring import SessionStateError
from exceptions.validation import InvalidIntervalError, InvalidURLError, ValidationException
from monitoring.session import MonitoringSession


def test_defaults_from_settings() -> None:
    session = MonitoringSession.from_settings(Settings(environment="testing"))
    assert session.state == SessionState.IDLE
    assert session.target_endpoint == "https://www.google.com/favicon.ico"
    assert session.interval_seconds == 5
    assert session.timeout_seconds == 5.0
    assert session.notify_enabled is False
    assert len(session.probe_log) == 0
    assert session.total_downtime_ms == 0


def test_constructor_validates() -> None:
    with pytest.raises(InvalidURLError):
        MonitoringSession("example.com", 5, 5)
    with pytest.raises(InvalidIntervalError):
        MonitoringSession("https://example.com", 0, 5)


def test_record_updates_total(session) -> None:
    for record in make_log([True, False, False], interval_seconds=1):
        session.record(record)
    assert session.total_downtime_ms == 2000
    assert session.to_dict()["total_downtime"] == "2s"


def test_configure_while_idle(session) -> None:
    session.configure(
        target_endpoint="https://example.org/",
        interval_seconds=10,
        notify_enabled=True,
        notify_email="ops@example.com",
    )
    assert session.target_endpoint == "https://example.org/"
    assert session.interval_seconds == 10
    assert session.timeout_seconds == 0.5
    assert session.wants_notifications


def test_configure_recomputes_total_for_new_interval(session) -> None:
    for record in make_log([False, False], interval_seconds=1):
        session.record(record)
    session.configure(interval_seconds=30)
    assert session.total_downtime_ms == 60000


def test_configure_rejected_while_running(session) -> None:
    session.state = SessionState.RUNNING
    with pytest.raises(SessionStateError) as excinfo:
        session.configure(interval_seconds=10)
    assert excinfo.value.details["operation"] == "configure"
    assert session.interval_seconds == 1


def test_invalid_configure_changes_nothing(session) -> None:
    with pytest.raises(InvalidIntervalError):
        session.configure(target_endpoint="https://example.org/", interval_seconds=-5)
    assert session.target_endpoint == "https://example.com/favicon.ico"


def test_clear_resets_log_and_total(session) -> None:
    for record in make_log([False, True], interval_seconds=1):
        session.record(record)
    assert session.clear() == 2
    assert len(session.probe_log) == 0
    assert session.total_downtime_ms == 0


def test_wants_notifications_needs_address(session) -> None:
    session.configure(notify_enabled=True)
    assert not session.wants_notifications


def test_notify_switch_is_not_coerced(session) -> None:
    with pytest.raises(ValidationException):
        session.configure(notify_enabled="false", notify_email="ops@example.com")
    assert session.notify_enabled is False
    assert session.notify_email == ""
    assert not session.wants_notifications

    with pytest.raises(ValidationException):
        MonitoringSession("https://example.com/", 5, 1, notify_enabled="yes")
