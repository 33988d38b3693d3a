"""
============================================================================
CONNECTION MONITOR - VALIDATORS UTILITY
============================================================================
Validation of operator-supplied configuration: target URL, probe
interval and timeout, notification address.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import ipaddress
from typing import Any
from urllib.parse import urlparse

import validators as external_validators

from exceptions.validation import (
    InvalidURLError,
    InvalidIntervalError,
    InvalidTimeoutError,
    InvalidEmailError,
    ValidationException,
)
from utils.logger import get_logger


logger = get_logger("Validators")


MAX_URL_LENGTH = 2048
MIN_INTERVAL = 1
MAX_INTERVAL = 86400
MAX_TIMEOUT = 300


# ============================================================================
# URL VALIDATORS
# ============================================================================

class URLValidator:
    """
    URL validation for the probed endpoint.
    """

    @staticmethod
    def _is_local_host(hostname: str) -> bool:
        if hostname == "localhost":
            return True
        try:
            ipaddress.ip_address(hostname)
            return True
        except ValueError:
            return False

    @staticmethod
    def is_valid_url(url: str) -> bool:
        """
        Check if URL is a usable http(s) endpoint.

        Args:
            url: URL to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            validate_url(url)
            return True
        except InvalidURLError:
            return False


def validate_url(url: Any) -> str:
    """
    Validate and normalize a target endpoint.

    Returns:
        The stripped URL

    Raises:
        InvalidURLError: if the URL cannot be probed
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("Target URL cannot be empty", url=url, reason="empty")

    url = url.strip()

    if len(url) > MAX_URL_LENGTH:
        raise InvalidURLError("Target URL is too long", url=url, reason="too_long")

    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https"):
        raise InvalidURLError(
            "Target URL must start with http:// or https://",
            url=url,
            reason="no_scheme",
        )

    hostname = parsed.hostname or ""
    if not hostname:
        raise InvalidURLError("Target URL has no host", url=url, reason="malformed")

    # validators rejects bare hosts such as localhost or IP literals
    # with ports on some versions; accept those directly.
    if URLValidator._is_local_host(hostname):
        return url

    if external_validators.url(url) is not True:
        logger.debug(f"URL rejected by validators: {url}")
        raise InvalidURLError("Target URL is malformed", url=url, reason="malformed")

    return url


# ============================================================================
# DATA VALIDATORS
# ============================================================================

def validate_interval(interval: Any) -> int:
    """
    Validate the probe interval: a whole number of seconds, at least 1.

    Raises:
        InvalidIntervalError
    """
    if isinstance(interval, bool):
        raise InvalidIntervalError(
            "Interval must be a whole number of seconds", interval=interval
        )
    try:
        value = int(interval)
    except (ValueError, TypeError):
        raise InvalidIntervalError(
            "Interval must be a whole number of seconds", interval=interval
        )
    if isinstance(interval, float) and not interval.is_integer():
        raise InvalidIntervalError(
            "Interval must be a whole number of seconds", interval=interval
        )
    if not MIN_INTERVAL <= value <= MAX_INTERVAL:
        raise InvalidIntervalError(
            f"Interval must be between {MIN_INTERVAL} and {MAX_INTERVAL} seconds",
            interval=interval,
            min_interval=MIN_INTERVAL,
            max_interval=MAX_INTERVAL,
        )
    return value


def validate_timeout(timeout: Any) -> float:
    """
    Validate the probe timeout: a positive number of seconds.

    Raises:
        InvalidTimeoutError
    """
    if isinstance(timeout, bool):
        raise InvalidTimeoutError("Timeout must be a number of seconds", timeout=timeout)
    try:
        value = float(timeout)
    except (ValueError, TypeError):
        raise InvalidTimeoutError("Timeout must be a number of seconds", timeout=timeout)
    if not 0 < value <= MAX_TIMEOUT:
        raise InvalidTimeoutError(
            f"Timeout must be greater than 0 and at most {MAX_TIMEOUT} seconds",
            timeout=timeout,
        )
    return value


def validate_email(email: Any) -> str:
    """
    Validate the notification address. An empty address is allowed
    and means "no recipient".

    Raises:
        InvalidEmailError
    """
    if email is None:
        return ""
    if not isinstance(email, str):
        raise InvalidEmailError(email=email)
    email = email.strip()
    if email and external_validators.email(email) is not True:
        raise InvalidEmailError(email=email)
    return email


def validate_bool(value: Any, field: str) -> bool:
    """
    Validate an on/off switch. Only real booleans are accepted; strings
    such as ``"false"`` or numbers are rejected rather than coerced.

    Raises:
        ValidationException
    """
    if not isinstance(value, bool):
        raise ValidationException(
            f"{field} must be true or false", field=field, value=value
        )
    return value
