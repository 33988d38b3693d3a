"""
Exceptions Package for Connection Monitor

Provides the exception hierarchy used for error handling
throughout the application.
"""

from exceptions.base import (
    ConnectionMonitorException,
    ConfigurationError,
    InitializationError,
)

from exceptions.validation import (
    ValidationException,
    InvalidURLError,
    InvalidIntervalError,
    InvalidTimeoutError,
    InvalidEmailError,
)

from exceptions.monitoring import (
    MonitoringException,
    SessionStateError,
    NotificationDeliveryError,
    ReportException,
    ReportPersistenceError,
)

__all__ = [
    # Base exceptions
    "ConnectionMonitorException",
    "ConfigurationError",
    "InitializationError",

    # Validation exceptions
    "ValidationException",
    "InvalidURLError",
    "InvalidIntervalError",
    "InvalidTimeoutError",
    "InvalidEmailError",

    # Monitoring exceptions
    "MonitoringException",
    "SessionStateError",
    "NotificationDeliveryError",
    "ReportException",
    "ReportPersistenceError",
]
