"""
============================================================================
CONNECTION MONITOR - PROBER
============================================================================
Issues one reachability check against the monitored endpoint and turns
whatever happens into a ProbeRecord.

Classification rule
-------------------
A probe is *reachable* iff an HTTP response (any status) arrives before
the deadline.  Status code and body are never looked at.  Every other
outcome (DNS failure, refused connection, TLS error, timeout, any other
transport exception) is *unreachable*.  There is no second check
comparing latency to the timeout: the deadline itself cancels the
request, so a response that arrives is by definition within bounds.

The deadline is enforced by racing the request against a timer with
``asyncio.wait_for``; on expiry the in-flight request is cancelled and
the record carries the time elapsed until cancellation.

TTL
---
HTTP clients cannot see the IP time-to-live of the reply.  Reachable
records carry a fixed placeholder (``MONITOR_TTL_SENTINEL``, default 64)
or ``None`` when the placeholder is disabled.  It is not telemetry.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import time
from typing import Optional

import httpx

from config.constants import Defaults, ProbeHeaders
from config.settings import MonitoringSettings
from monitoring.models import ProbeRecord
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("Prober")


_UNSET = object()


class Prober:
    """
    Content-opaque HTTP reachability prober.

    Parameters
    ----------
    settings : MonitoringSettings | None
        Supplies the user agent and the TTL placeholder.
    client : httpx.AsyncClient | None
        Shared client.  When omitted a short-lived client is created
        for every probe, so no connection is reused between probes.
    ttl_sentinel : int | None
        Overrides ``settings.ttl_sentinel``.
    """

    def __init__(
        self,
        settings: Optional[MonitoringSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
        ttl_sentinel=_UNSET,
    ):
        self._client = client
        self._user_agent = settings.user_agent if settings else Defaults.USER_AGENT
        if ttl_sentinel is _UNSET:
            ttl_sentinel = settings.ttl_sentinel if settings else Defaults.TTL_SENTINEL
        self.ttl_sentinel: Optional[int] = ttl_sentinel

    def _headers(self) -> dict:
        headers = dict(ProbeHeaders.NO_CACHE)
        headers["User-Agent"] = self._user_agent
        return headers

    async def _request(self, endpoint: str, timeout_seconds: float) -> int:
        """
        Send the request and return as soon as response headers arrive.
        The body is never read.
        """
        timeout = httpx.Timeout(timeout_seconds)
        if self._client is not None:
            async with self._client.stream(
                "GET", endpoint, headers=self._headers(), timeout=timeout
            ) as response:
                return response.status_code

        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            limits=httpx.Limits(max_connections=1, max_keepalive_connections=0),
        ) as client:
            async with client.stream("GET", endpoint, headers=self._headers()) as response:
                return response.status_code

    async def probe(self, endpoint: str, timeout_seconds: float) -> ProbeRecord:
        """
        Probe *endpoint* once, bounded by *timeout_seconds*.

        Never raises for probe failures; they become unreachable
        records.  Cancellation of the calling task still propagates.
        """
        timestamp = TimeHelper.get_utc_now()
        start_time = time.perf_counter()

        try:
            status_code = await asyncio.wait_for(
                self._request(endpoint, timeout_seconds),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError:
            elapsed = TimeHelper.elapsed_ms(start_time)
            logger.debug(f"[HTTP] {endpoint} → timed out after {elapsed}ms")
            return ProbeRecord(timestamp=timestamp, reachable=False, latency_ms=elapsed)
        except httpx.TimeoutException as e:
            elapsed = TimeHelper.elapsed_ms(start_time)
            logger.debug(f"[HTTP] {endpoint} → {type(e).__name__} after {elapsed}ms")
            return ProbeRecord(timestamp=timestamp, reachable=False, latency_ms=elapsed)
        except httpx.HTTPError as e:
            elapsed = TimeHelper.elapsed_ms(start_time)
            logger.debug(f"[HTTP] {endpoint} → {type(e).__name__}: {str(e)[:200]}")
            return ProbeRecord(timestamp=timestamp, reachable=False, latency_ms=elapsed)
        except Exception as e:
            elapsed = TimeHelper.elapsed_ms(start_time)
            logger.warning(
                f"[HTTP] {endpoint} → unexpected {type(e).__name__}: {str(e)[:200]}"
            )
            return ProbeRecord(timestamp=timestamp, reachable=False, latency_ms=elapsed)

        elapsed = TimeHelper.elapsed_ms(start_time)
        logger.debug(f"[HTTP] {endpoint} → {status_code} in {elapsed}ms")
        return ProbeRecord(
            timestamp=timestamp,
            reachable=True,
            latency_ms=elapsed,
            ttl=self.ttl_sentinel,
        )
