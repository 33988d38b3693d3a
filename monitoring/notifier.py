"""
============================================================================
CONNECTION MONITOR - NOTIFICATION DISPATCHER
============================================================================
Delivers the downtime report to an external service that forwards it
by e-mail.  The request is a JSON POST authenticated with a bearer
token:

    {
        "email":           "<recipient>",
        "logs":            "<detailed log lines>",
        "totalDowntime":   "<formatted duration>",
        "downtimeSummary": "<incident summary text>"
    }

Delivery is best-effort: a failed send is logged and counted, never
raised and never retried.  The next periodic send carries the full log
anyway.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import time
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

import httpx

from config.settings import NotificationSettings
from exceptions.monitoring import NotificationDeliveryError
from monitoring.aggregator import aggregate
from monitoring.models import ProbeRecord
from reporting.formatter import (
    format_detailed_log,
    format_duration,
    format_incident_summary,
)
from utils.logger import get_logger


logger = get_logger("Notifier")


class NotificationDispatcher:
    """
    Sends report payloads to the configured delivery endpoint.

    Parameters
    ----------
    settings : NotificationSettings
        Endpoint, API key and request timeout.
    client : httpx.AsyncClient | None
        Shared client; a short-lived one is created per send otherwise.
    """

    def __init__(
        self,
        settings: NotificationSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self._client = client

        self._sent_count = 0
        self._fail_count = 0
        self._last_send_time: Optional[float] = None
        self._last_send_success: Optional[bool] = None

    # ------------------------------------------------------------------
    # PAYLOAD
    # ------------------------------------------------------------------

    @staticmethod
    def build_payload(
        email: str, log: Iterable[ProbeRecord], interval_seconds: int
    ) -> Dict[str, str]:
        records = tuple(log)
        result = aggregate(records, interval_seconds)
        return {
            "email": email,
            "logs": format_detailed_log(records),
            "totalDowntime": format_duration(result.total_downtime_ms),
            "downtimeSummary": format_incident_summary(result.incidents, interval_seconds),
        }

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key.get_secret_value()}",
        }

    async def _post(self, payload: Dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(
                self.settings.endpoint_url,
                json=payload,
                headers=self._headers(),
                timeout=self.settings.timeout_seconds,
            )
        async with httpx.AsyncClient(timeout=self.settings.timeout_seconds) as client:
            return await client.post(
                self.settings.endpoint_url, json=payload, headers=self._headers()
            )

    # ------------------------------------------------------------------
    # DELIVERY
    # ------------------------------------------------------------------

    async def send_report(
        self, email: str, log: Iterable[ProbeRecord], interval_seconds: int
    ) -> bool:
        """
        Send one report.

        Returns
        -------
        bool
            True if the service accepted it, False if it was skipped or
            delivery failed.
        """
        records = tuple(log)
        if not email or not records:
            logger.debug("[Notifier] Nothing to send (no recipient or empty log)")
            return False

        if not self.settings.endpoint_url:
            logger.warning("[Notifier] No delivery endpoint configured, report not sent")
            return False

        payload = self.build_payload(email, records, interval_seconds)
        self._last_send_time = time.time()

        try:
            response = await self._post(payload)
            if not response.is_success:
                raise NotificationDeliveryError(
                    f"Delivery service answered {response.status_code}",
                    status_code=response.status_code,
                    endpoint=self.settings.endpoint_url,
                )
        except NotificationDeliveryError as e:
            self._record_failure(e)
            return False
        except Exception as e:
            self._record_failure(
                NotificationDeliveryError.from_exception(
                    e, message=f"Report delivery failed: {type(e).__name__}: {str(e)[:200]}"
                )
            )
            return False

        self._sent_count += 1
        self._last_send_success = True
        logger.info(
            f"[Notifier] ✓ Report sent to {email} "
            f"({len(records)} records, total downtime {payload['totalDowntime']})"
        )
        return True

    def _record_failure(self, error: NotificationDeliveryError) -> None:
        self._fail_count += 1
        self._last_send_success = False
        logger.error(f"[Notifier] ✗ {error.log_format()}")

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Return delivery statistics."""
        return {
            "endpoint_configured": bool(self.settings.endpoint_url),
            "interval_seconds": self.settings.interval_seconds,
            "sent_count": self._sent_count,
            "fail_count": self._fail_count,
            "last_send_time": (
                datetime.fromtimestamp(self._last_send_time).isoformat()
                if self._last_send_time else None
            ),
            "last_send_success": self._last_send_success,
        }
