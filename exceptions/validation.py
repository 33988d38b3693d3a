"""
Validation Exception Classes for Connection Monitor

Raised when operator-supplied configuration (target URL, probe
interval, timeout, notification address) is rejected.
"""

from __future__ import annotations

from typing import Any, Optional
from exceptions.base import ConnectionMonitorException


class ValidationException(ConnectionMonitorException):
    """
    Base Validation Exception

    Parent class for all validation-related exceptions.
    """

    default_error_code = 3000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: The field that failed validation
            value: The invalid value (sanitized)
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        if field:
            self.details["field"] = field

        if value is not None:
            self.details["value"] = self._sanitize_value(value)

    @staticmethod
    def _sanitize_value(value: Any) -> str:
        """Truncate long values so they stay readable in logs."""
        str_value = str(value)

        if len(str_value) > 100:
            str_value = str_value[:100] + "..."

        return str_value


class InvalidURLError(ValidationException):
    """
    Invalid URL Error

    Raised when the target endpoint is not a usable http(s) URL.
    """

    default_error_code = 3001

    def __init__(
        self,
        message: str = "Invalid URL format",
        url: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="target_url", value=url, **kwargs)

        if reason:
            self.details["reason"] = reason


class InvalidIntervalError(ValidationException):
    """
    Invalid Interval Error

    Raised when the probe interval is not a positive whole number of
    seconds within the allowed range.
    """

    default_error_code = 3002

    def __init__(
        self,
        message: str = "Invalid interval",
        interval: Optional[Any] = None,
        min_interval: Optional[int] = None,
        max_interval: Optional[int] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="interval_seconds", value=interval, **kwargs)

        if min_interval is not None:
            self.details["min_interval"] = min_interval

        if max_interval is not None:
            self.details["max_interval"] = max_interval


class InvalidTimeoutError(ValidationException):
    """Raised when the probe timeout is not a positive number."""

    default_error_code = 3003

    def __init__(
        self,
        message: str = "Invalid timeout",
        timeout: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="timeout_seconds", value=timeout, **kwargs)


class InvalidEmailError(ValidationException):
    """Raised when the notification address is malformed."""

    default_error_code = 3004

    def __init__(
        self,
        message: str = "Invalid e-mail address",
        email: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="notify_email", value=email, **kwargs)
