"""
============================================================================
CONNECTION MONITOR - LOGGING UTILITY
============================================================================
loguru configuration with console, rotating file and error-file sinks.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import sys
from typing import Optional

from loguru import logger

from config.settings import get_settings


_configured = False


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(force: bool = False) -> None:
    """
    Configure logging system with multiple handlers.
    Sets up both file and console logging.

    Safe to call more than once; only the first call (or a forced one)
    replaces the sinks.
    """
    global _configured
    if _configured and not force:
        return

    settings = get_settings().logging

    # Remove default loguru handler
    logger.remove()

    log_level = settings.level.value

    # Console Handler
    if settings.to_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=log_level,
            colorize=settings.colorize,
            backtrace=True,
            diagnose=False,
        )

    # File Handler
    if settings.to_file:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            settings.file_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=log_level,
            rotation=settings.max_size,
            retention=settings.backup_count,
            compression="zip",
            serialize=settings.serialize,
            backtrace=True,
            diagnose=False,
        )

        # Error log file (separate file for errors)
        logger.add(
            settings.logs_dir / "errors.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
            level="ERROR",
            rotation="1 day",
            retention="7 days",
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    _configured = True

    logger.debug(
        f"Logging initialized — level={log_level}, "
        f"console={settings.to_console}, file={settings.to_file}"
    )


def get_logger(name: Optional[str] = None):
    """
    Get logger instance with optional name.

    Args:
        name: Logger name (usually the component name)

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


# ============================================================================
# SPECIALIZED LOGGERS
# ============================================================================

class MonitorLogger:
    """
    Specialized logger for monitoring operations.
    """

    def __init__(self):
        self.logger = get_logger("Monitor")

    def log_probe(self, url: str, reachable: bool, latency_ms: int):
        """Log a single probe outcome."""
        if reachable:
            self.logger.debug(f"Probe OK for {url} - Response time: {latency_ms}ms")
        else:
            self.logger.debug(f"Probe failed for {url} after {latency_ms}ms")

    def log_downtime(self, url: str, started_at: str):
        """Log the first unreachable probe after a reachable one."""
        self.logger.warning(f"Downtime detected for {url} at {started_at}")

    def log_recovery(self, url: str, downtime: str):
        """Log the first reachable probe closing an incident."""
        self.logger.info(f"Recovery detected for {url} - Downtime: {downtime}")


# ============================================================================
# INITIALIZE LOGGING ON MODULE IMPORT
# ============================================================================

setup_logging()


# ============================================================================
# END OF LOGGER MODULE
# ============================================================================
