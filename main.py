"""
============================================================================
CONNECTION MONITOR - MAIN APPLICATION
============================================================================
Integrates every layer of the monitor:

    Layer 1 — Core
        • Settings (Pydantic)
        • Logging, Validators, Helpers

    Layer 2 — Monitoring
        • MonitoringSession      — configuration, state, probe log
        • Prober                 — bounded HTTP reachability probe
        • NotificationDispatcher — periodic report delivery
        • Scheduler              — start/stop lifecycle, periodic ticks

    Layer 3 — Control surface
        • ControlServer          — aiohttp routes for start/stop/report

Startup Order
-------------
1.  Load settings & configure logging
2.  Create session, prober, notifier and scheduler
3.  Start ControlServer (aiohttp, non-blocking)
4.  Start monitoring if MONITOR_AUTOSTART is set
5.  Wait until a shutdown signal arrives

Shutdown Order (reverse)
-------------------------
On KeyboardInterrupt or SIGTERM:
    Stop scheduler (cancel probe + report tasks) → stop control server →
    close shared HTTP client → exit

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
import signal
import sys
from typing import Optional

import httpx

from config.settings import Settings, get_settings
from exceptions.base import ConfigurationError, InitializationError
from monitoring.control_server import ControlServer
from monitoring.notifier import NotificationDispatcher
from monitoring.prober import Prober
from monitoring.scheduler import Scheduler
from monitoring.session import MonitoringSession
from utils.logger import get_logger, setup_logging


# ---------------------------------------------------------------------------
# Bootstrap logging before anything else runs
# ---------------------------------------------------------------------------
setup_logging()
logger = get_logger("Main")


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class ConnectionMonitorApplication:
    """
    Top-level application orchestrator.

    Owns every subsystem and is the single place that knows the startup /
    shutdown order.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

        # --- subsystems (populated during startup) ---
        self.session: Optional[MonitoringSession] = None
        self.notify_client: Optional[httpx.AsyncClient] = None
        self.notifier: Optional[NotificationDispatcher] = None
        self.scheduler: Optional[Scheduler] = None
        self.control_server: Optional[ControlServer] = None

        self._shutdown_event = asyncio.Event()
        self._is_running = False

        self._print_banner()

    # ------------------------------------------------------------------
    # BANNER
    # ------------------------------------------------------------------

    def _print_banner(self) -> None:
        monitoring = self.settings.monitoring
        banner = f"""
╔══════════════════════════════════════════════════════════════════════════╗
║   📡  {self.settings.app_name} v{self.settings.app_version}
║
║   Target   : {monitoring.target_url}
║   Interval : {monitoring.interval_seconds}s   Timeout : {monitoring.timeout_seconds}s
║   Env      : {self.settings.environment.value}
╚══════════════════════════════════════════════════════════════════════════╝
"""
        logger.info(banner)

    # ==================================================================
    # PHASE 1: MONITORING
    # ==================================================================

    async def _init_monitoring(self) -> bool:
        """Create the session and wire prober, notifier and scheduler."""
        logger.info("── Phase 1: Monitoring ───────────────────────────")
        try:
            self.session = MonitoringSession.from_settings(self.settings)
            prober = Prober(self.settings.monitoring)

            if self.settings.notification.endpoint_url:
                self.notify_client = httpx.AsyncClient(
                    timeout=self.settings.notification.timeout_seconds
                )
                self.notifier = NotificationDispatcher(
                    self.settings.notification, client=self.notify_client
                )

            self.scheduler = Scheduler(
                self.session,
                prober,
                notifier=self.notifier,
                notify_interval_seconds=self.settings.notification.interval_seconds,
            )

            logger.info(
                f"  ✓ Session, Prober, Scheduler created "
                f"(notifications {'configured' if self.notifier else 'not configured'})"
            )
            return True

        except Exception as e:
            error = InitializationError.from_exception(e, component="monitoring")
            logger.exception(f"  ✗ Monitoring init failed: {error.log_format()}")
            return False

    # ==================================================================
    # PHASE 2: CONTROL SERVER
    # ==================================================================

    async def _init_control_server(self) -> bool:
        """Create and start the aiohttp control server."""
        logger.info("── Phase 2: Control Server ───────────────────────")
        if not self.settings.server.enabled:
            logger.info("  Control server disabled")
            return True
        try:
            self.control_server = ControlServer(self.settings, self.session, self.scheduler)
            await self.control_server.start()
            return True

        except Exception as e:
            error = InitializationError.from_exception(e, component="control_server")
            logger.exception(f"  ✗ Control server init failed: {error.log_format()}")
            self.control_server = None
            return False

    # ==================================================================
    # FULL STARTUP SEQUENCE
    # ==================================================================

    async def startup(self) -> bool:
        """
        Execute the complete startup sequence.
        Returns False (and logs errors) if any critical phase fails.
        """
        logger.info("=" * 74)
        logger.info("  STARTING UP …")
        logger.info("=" * 74)

        # Phase 1: Monitoring (critical)
        if not await self._init_monitoring():
            return False

        # Phase 2: Control server (non-critical)
        if not await self._init_control_server():
            logger.warning("  ⚠ Control server failed to start — continuing without it")

        if self.settings.monitoring.autostart:
            await self.scheduler.start()

        self._is_running = True

        logger.info("=" * 74)
        logger.info("  ✓ ALL SYSTEMS OPERATIONAL")
        logger.info("=" * 74)
        if self.control_server:
            logger.info(
                f"  Control endpoint: "
                f"http://{self.settings.server.host}:{self.settings.server.port}/status"
            )
        logger.info(f"  Monitoring state: {self.session.state.value}")
        logger.info("=" * 74)

        return True

    # ==================================================================
    # SHUTDOWN SEQUENCE
    # ==================================================================

    async def shutdown(self) -> None:
        """
        Graceful shutdown in reverse order.
        Each step is wrapped in try/except so a failure in one subsystem
        doesn't prevent the others from cleaning up.
        """
        if not self._is_running and self.scheduler is None:
            return

        logger.info("=" * 74)
        logger.info("  SHUTTING DOWN …")
        logger.info("=" * 74)

        self._is_running = False

        # 1. Stop scheduler (cancels in-flight probe and report tasks)
        if self.scheduler:
            try:
                await self.scheduler.close()
                logger.info("  ✓ Scheduler stopped")
            except Exception as e:
                logger.error(f"  ✗ Scheduler stop error: {e}")

        # 2. Stop control server
        if self.control_server:
            try:
                await self.control_server.stop()
            except Exception as e:
                logger.error(f"  ✗ ControlServer stop error: {e}")

        # 3. Close shared HTTP client
        if self.notify_client:
            try:
                await self.notify_client.aclose()
                logger.info("  ✓ HTTP client closed")
            except Exception as e:
                logger.error(f"  ✗ HTTP client close error: {e}")

        self.scheduler = None
        self.control_server = None
        self.notify_client = None

        logger.info("=" * 74)
        logger.info("  ✓ SHUTDOWN COMPLETE")
        logger.info("=" * 74)

    # ==================================================================
    # RUN
    # ==================================================================

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    async def run(self) -> None:
        """Block until request_shutdown() is called."""
        await self._shutdown_event.wait()


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop, app: ConnectionMonitorApplication
) -> None:
    """
    Install SIGTERM / SIGINT handlers so that the monitor shuts down
    gracefully even when killed by the OS.
    """
    def _handle_signal() -> None:
        logger.info("  ⚡ Signal received — initiating graceful shutdown…")
        app.request_shutdown()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _handle_signal)
        except (NotImplementedError, OSError):
            # Not supported on Windows; KeyboardInterrupt still works
            pass


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

async def main() -> None:
    """
    Async main — creates the app, starts it, and runs until shutdown.
    """
    try:
        app = ConnectionMonitorApplication()
    except ConfigurationError as e:
        logger.error(f"  ✗ {e.log_format()}")
        sys.exit(1)

    _install_signal_handlers(asyncio.get_running_loop(), app)

    if not await app.startup():
        logger.error("  ✗ Startup failed — exiting")
        await app.shutdown()
        sys.exit(1)

    try:
        await app.run()
    except Exception as e:
        logger.exception(f"  ✗ Unhandled error in run: {e}")
    finally:
        await app.shutdown()


# ============================================================================
# SCRIPT ENTRY POINT
# ============================================================================

def cli() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
