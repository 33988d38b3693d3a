"""
============================================================================
CONNECTION MONITOR - CONTROL SERVER
============================================================================
A lightweight aiohttp HTTP server exposing the monitoring session to
operators and dashboards.

    GET  /           → 200 "OK"        (liveness)
    GET  /health     → 200 JSON        (process health)
    GET  /status     → 200 JSON        (session state, config, totals)
    GET  /logs       → 200 JSON        (probe records)
    GET  /incidents  → 200 JSON        (downtime incidents)
    GET  /report     → 200 text/plain  (report document)
    POST /start      → start monitoring          (409 if running)
    POST /stop       → stop monitoring           (409 if idle)
    POST /clear      → clear the probe log
    POST /save       → write the report to disk  (500 if it fails)
    POST /notify     → send the report now
    PUT  /config     → reconfigure               (409 if running, 400 if invalid)

Domain errors are rendered as ``{"error", "code", "type", "details"}`` objects.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import functools
import json
import time
from typing import Any, Dict, Optional

from aiohttp import web

from config.settings import Settings
from exceptions.base import ConnectionMonitorException
from exceptions.monitoring import SessionStateError
from exceptions.validation import ValidationException
from monitoring.scheduler import Scheduler
from monitoring.session import MonitoringSession
from reporting.writer import save_report
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("ControlServer")


_CONFIG_FIELDS = (
    "target_endpoint",
    "interval_seconds",
    "timeout_seconds",
    "notify_enabled",
    "notify_email",
)


def _status_for(error: ConnectionMonitorException) -> int:
    if isinstance(error, SessionStateError):
        return 409
    if isinstance(error, ValidationException):
        return 400
    return 500


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Render domain errors as JSON bodies with a matching status."""
    try:
        return await handler(request)
    except ConnectionMonitorException as e:
        status = _status_for(e)
        log = logger.warning if status < 500 else logger.error
        log(f"{request.method} {request.path} → {status}: {e.log_format()}")
        info = e.to_dict()
        return web.json_response(
            {
                "error": info["message"],
                "code": info["error_code"],
                "type": info["type"],
                "details": info["details"],
            },
            status=status,
        )


class ControlServer:
    """
    aiohttp server bound to one session and its scheduler.

    Attributes
    ----------
    app : aiohttp.web.Application
    _runner : aiohttp.web.AppRunner
    _site : aiohttp.web.TCPSite
    _start_time : float          — epoch seconds when the server started
    _request_count : int         — total requests served
    """

    def __init__(
        self,
        settings: Settings,
        session: MonitoringSession,
        scheduler: Scheduler,
    ):
        self.settings = settings
        self.session = session
        self.scheduler = scheduler

        self._host = settings.server.host
        self._port = settings.server.port
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._start_time: float = time.time()
        self._request_count: int = 0

        self.app = web.Application(middlewares=[error_middleware])
        self.app.router.add_get("/", self._handle_root)
        self.app.router.add_get("/health", self._handle_health)
        self.app.router.add_get("/status", self._handle_status)
        self.app.router.add_get("/logs", self._handle_logs)
        self.app.router.add_get("/incidents", self._handle_incidents)
        self.app.router.add_get("/report", self._handle_report)
        self.app.router.add_post("/start", self._handle_start)
        self.app.router.add_post("/stop", self._handle_stop)
        self.app.router.add_post("/clear", self._handle_clear)
        self.app.router.add_post("/save", self._handle_save)
        self.app.router.add_post("/notify", self._handle_notify)
        self.app.router.add_put("/config", self._handle_config)

    async def start(self) -> None:
        """Bind and start serving."""
        self._start_time = time.time()
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        logger.info(f"✓ ControlServer listening on http://{self._host}:{self._port}")

    async def stop(self) -> None:
        """Gracefully shut down the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
        logger.info("✓ ControlServer stopped")

    # ------------------------------------------------------------------
    # READ-ONLY ROUTES
    # ------------------------------------------------------------------

    async def _handle_root(self, request: web.Request) -> web.Response:
        """GET / — simple liveness probe."""
        self._request_count += 1
        return web.Response(text="OK", status=200)

    async def _handle_health(self, request: web.Request) -> web.Response:
        """GET /health — process health JSON."""
        self._request_count += 1
        uptime_seconds = time.time() - self._start_time

        return web.json_response({
            "status": "healthy",
            "uptime_seconds": round(uptime_seconds, 1),
            "requests_served": self._request_count,
            "timestamp": TimeHelper.to_iso(TimeHelper.get_utc_now()),
            "app_name": self.settings.app_name,
            "app_version": self.settings.app_version,
        })

    async def _handle_status(self, request: web.Request) -> web.Response:
        """GET /status — session state, configuration and totals."""
        self._request_count += 1
        body: Dict[str, Any] = self.session.to_dict()
        body["scheduler"] = self.scheduler.get_stats()
        if self.scheduler.notifier is not None:
            body["notifier"] = self.scheduler.notifier.get_stats()
        return web.json_response(body)

    async def _handle_logs(self, request: web.Request) -> web.Response:
        self._request_count += 1
        records = self.session.probe_log.snapshot()
        return web.json_response({
            "count": len(records),
            "records": [record.to_dict() for record in records],
        })

    async def _handle_incidents(self, request: web.Request) -> web.Response:
        self._request_count += 1
        return web.json_response(self.session.aggregate().to_dict())

    async def _handle_report(self, request: web.Request) -> web.Response:
        self._request_count += 1
        return web.Response(text=self.session.report(), content_type="text/plain")

    # ------------------------------------------------------------------
    # CONTROL ROUTES
    # ------------------------------------------------------------------

    async def _handle_start(self, request: web.Request) -> web.Response:
        self._request_count += 1
        record = await self.scheduler.start()
        return web.json_response({
            "state": self.session.state.value,
            "first_probe": record.to_dict() if record else None,
        })

    async def _handle_stop(self, request: web.Request) -> web.Response:
        self._request_count += 1
        await self.scheduler.stop()
        return web.json_response({
            "state": self.session.state.value,
            "records": len(self.session.probe_log),
        })

    async def _handle_clear(self, request: web.Request) -> web.Response:
        self._request_count += 1
        removed = self.session.clear()
        return web.json_response({"removed": removed})

    async def _handle_save(self, request: web.Request) -> web.Response:
        """POST /save — write the report file off the event loop."""
        self._request_count += 1
        loop = asyncio.get_running_loop()
        path = await loop.run_in_executor(
            None,
            functools.partial(
                save_report,
                self.session.probe_log.snapshot(),
                self.session.interval_seconds,
                self.settings.report.directory,
                prefix=self.settings.report.filename_prefix,
            ),
        )
        return web.json_response({"path": str(path)})

    async def _handle_notify(self, request: web.Request) -> web.Response:
        self._request_count += 1
        sent = await self.scheduler.send_report_now()
        return web.json_response({"sent": sent})

    async def _handle_config(self, request: web.Request) -> web.Response:
        """PUT /config — JSON object with any of the configurable fields."""
        self._request_count += 1
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationException("Request body must be a JSON object")
        if not isinstance(body, dict):
            raise ValidationException("Request body must be a JSON object")

        unknown = sorted(set(body) - set(_CONFIG_FIELDS))
        if unknown:
            raise ValidationException(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field=unknown[0],
            )

        self.session.configure(**body)
        return web.json_response(self.session.to_dict())
