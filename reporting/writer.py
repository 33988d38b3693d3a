"""
============================================================================
CONNECTION MONITOR - REPORT WRITER
============================================================================
Persists the report document as a plain-text file named

    <prefix>-<ISO-8601 timestamp, ':' and '.' replaced by '-'>.txt

e.g. ``connection-log-2024-05-01T12-00-00-000Z.txt``.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from config.constants import Defaults
from exceptions.monitoring import ReportPersistenceError
from monitoring.models import ProbeRecord
from reporting.formatter import build_report
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("ReportWriter")


def report_filename(
    now: Optional[datetime] = None,
    prefix: str = Defaults.REPORT_FILENAME_PREFIX,
) -> str:
    """Filesystem-safe report filename for *now* (defaults to the current time)."""
    return f"{prefix}-{TimeHelper.filename_timestamp(now)}{Defaults.REPORT_FILENAME_SUFFIX}"


def save_report(
    log: Iterable[ProbeRecord],
    interval_seconds: int,
    directory: Union[str, Path],
    prefix: str = Defaults.REPORT_FILENAME_PREFIX,
    now: Optional[datetime] = None,
) -> Path:
    """
    Render the report for *log* and write it into *directory*.

    Returns:
        Path of the written file

    Raises:
        ReportPersistenceError: the directory or file could not be written
    """
    content = build_report(log, interval_seconds)
    directory = Path(directory)
    path = directory / report_filename(now, prefix)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"[Report] Failed to write {path}: {e}")
        raise ReportPersistenceError(
            f"Unable to write report to {path}", path=path, cause=e
        ) from e

    logger.info(f"[Report] Saved report to {path} ({len(content)} bytes)")
    return path
