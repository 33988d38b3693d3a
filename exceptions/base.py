"""
Base Exception Classes for Connection Monitor

Every error the monitor raises on purpose derives from
ConnectionMonitorException. The numeric error code selects the family:

    1xxx  startup and configuration
    3xxx  rejected input
    4xxx  monitoring session and notification delivery
    5xxx  report generation and persistence
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from datetime import datetime, timezone


class ConnectionMonitorException(Exception):
    """
    Root of the monitor's error hierarchy.

    Subclasses set ``default_error_code`` and, when the condition cannot
    be retried, ``default_recoverable = False``. The control server
    renders ``to_dict()`` as the JSON error body.
    """

    default_error_code: int = 1000

    default_recoverable: bool = True

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view used by the control server error middleware."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "cause": str(self.cause) if self.cause else None,
        }

    def log_format(self) -> str:
        """One-line rendering for log records: type, code, message, details, cause."""
        parts = [self.__class__.__name__, f"code={self.error_code}", self.message]
        if self.details:
            parts.append(f"details={self.details}")
        if self.cause:
            parts.append(f"cause={self.cause!r}")
        return " | ".join(parts)

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        message: Optional[str] = None,
        **kwargs: Any
    ) -> "ConnectionMonitorException":
        """Wrap a foreign exception, keeping it as ``cause``."""
        return cls(
            message=message or str(exception) or exception.__class__.__name__,
            cause=exception,
            **kwargs
        )

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(ConnectionMonitorException):
    """Settings could not be loaded from the environment or .env file."""

    default_error_code = 1100
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if config_key:
            self.details["config_key"] = config_key


class InitializationError(ConnectionMonitorException):
    """A startup phase of the application failed."""

    default_error_code = 1200
    default_recoverable = False

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if component:
            self.details["component"] = component
