"""
Reporting Package for Connection Monitor

Text rendering of downtime reports and their persistence:
    • formatter.py — durations, incident summaries, detailed log lines
    • writer.py    — timestamped plain-text report files
"""

from reporting.formatter import (
    format_duration,
    format_incident_summary,
    format_detailed_log,
    format_log_line,
    build_report,
)
from reporting.writer import report_filename, save_report

__all__ = [
    "format_duration",
    "format_incident_summary",
    "format_detailed_log",
    "format_log_line",
    "build_report",
    "report_filename",
    "save_report",
]
