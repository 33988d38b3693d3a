"""
Configuration Package for Connection Monitor

This package contains all configuration-related modules including:
- Settings management with environment variable support
- Constants, enums and report templates used throughout the application
"""

from config.settings import (
    Settings,
    MonitoringSettings,
    NotificationSettings,
    ReportSettings,
    LoggingSettings,
    ServerSettings,
    get_settings,
)

from config.constants import (
    SessionState,
    ProbeStatus,
    TimeIntervals,
    Defaults,
    MessageTemplates,
    ProbeHeaders,
)

__all__ = [
    # Settings
    "Settings",
    "MonitoringSettings",
    "NotificationSettings",
    "ReportSettings",
    "LoggingSettings",
    "ServerSettings",
    "get_settings",

    # Constants
    "SessionState",
    "ProbeStatus",
    "TimeIntervals",
    "Defaults",
    "MessageTemplates",
    "ProbeHeaders",
]
