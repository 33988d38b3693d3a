from __future__ import annotations

from pathlib import Path

import pytest

from conftest import BASE_TIME, make_log

from exceptions.monitoring import ReportPersistenceError
from reporting.formatter import build_report
from reporting.writer import report_filename, save_report


def test_report_filename_is_filesystem_safe() -> None:
    name = report_filename(BASE_TIME)
    assert name == "connection-log-2024-05-01T12-00-00-000Z.txt"
    assert ":" not in name


def test_report_filename_prefix() -> None:
    assert report_filename(BASE_TIME, prefix="uplink").startswith("uplink-2024-05-01T")


def test_save_report_writes_document(tmp_path: Path) -> None:
    log = make_log([True, False, True])
    path = save_report(log, 5, tmp_path / "reports", now=BASE_TIME)

    assert path.parent == tmp_path / "reports"
    assert path.read_text(encoding="utf-8") == build_report(log, 5)


def test_save_empty_log(tmp_path: Path) -> None:
    path = save_report([], 5, tmp_path, now=BASE_TIME)
    assert path.read_text(encoding="utf-8").startswith("Total Downtime: 0s\nNo downtime recorded.")


def test_unwritable_directory_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")

    with pytest.raises(ReportPersistenceError) as excinfo:
        save_report(make_log([True]), 5, blocker / "reports", now=BASE_TIME)

    assert excinfo.value.error_code == 5001
    assert "not-a-dir" in excinfo.value.details["path"]
    assert isinstance(excinfo.value.cause, OSError)
