"""
Monitoring Exception Classes for Connection Monitor

Errors raised by the monitoring session lifecycle, the notification
dispatcher and report persistence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from exceptions.base import ConnectionMonitorException


class MonitoringException(ConnectionMonitorException):
    """
    Base Monitoring Exception

    Parent class for all monitoring-related exceptions.
    """

    default_error_code = 4000
    default_recoverable = True


class SessionStateError(MonitoringException):
    """
    Session State Error

    Raised when an operation is not allowed in the session's current
    state: starting a running session, stopping an idle one, or
    reconfiguring while monitoring runs.
    """

    default_error_code = 4001

    def __init__(
        self,
        message: str,
        state: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if state:
            self.details["state"] = state

        if operation:
            self.details["operation"] = operation


class NotificationDeliveryError(MonitoringException):
    """
    Notification Delivery Error

    Describes a failed report delivery. The dispatcher logs it and
    carries on; it never reaches the scheduler.
    """

    default_error_code = 4100

    def __init__(
        self,
        message: str = "Report delivery failed",
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if status_code is not None:
            self.details["status_code"] = status_code

        if endpoint:
            self.details["endpoint"] = endpoint


class ReportException(ConnectionMonitorException):
    """Base class for report generation and persistence errors."""

    default_error_code = 5000
    default_recoverable = True


class ReportPersistenceError(ReportException):
    """
    Report Persistence Error

    Raised to the caller of a save operation when the report artifact
    cannot be written. The in-memory probe log is left untouched.
    """

    default_error_code = 5001

    def __init__(
        self,
        message: str = "Unable to write report",
        path: Optional[Union[str, Path]] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if path is not None:
            self.details["path"] = str(path)
