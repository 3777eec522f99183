"""Application bootstrap for EventLens.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → instruments → store client
              → index bootstrap → tracker/orchestrator → REST

Shutdown is graceful: components are stopped in reverse startup order.
Each component's stop error is caught and logged independently so that
a single failure does not prevent the rest from shutting down cleanly.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from eventlens.config import load_config
from eventlens.models.config import EventLensConfig
from eventlens.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from eventlens.observability.metrics import EventInstruments
    from eventlens.pipeline.orchestrator import IngestionOrchestrator
    from eventlens.storage.client import OpenSearchClient
    from eventlens.storage.writer import StorageWriter

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class EventLensApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already
    stopped) is safe.
    """

    def __init__(self) -> None:
        self.config: EventLensConfig | None = None

        self._instruments: EventInstruments | None = None
        self._store: OpenSearchClient | None = None
        self._writer: StorageWriter | None = None
        self._orchestrator: IngestionOrchestrator | None = None
        self._rest_server: object | None = None

        self._background_tasks: list[asyncio.Task[None]] = []

        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        The caller (main()) turns this into a non-zero exit.
        """
        # --- 1. Configuration -------------------------------------------
        try:
            self.config = load_config()
        except ValueError as exc:
            raise _ComponentError("config", exc) from exc

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("eventlens starting", version=_eventlens_version())

        # --- 3. Instruments ----------------------------------------------
        self._start_instruments()

        # --- 4. Store client ---------------------------------------------
        self._start_store()

        # --- 5. Index bootstrap (non-fatal) ------------------------------
        await self._bootstrap_indices()

        # --- 6. Tracker + orchestrator -----------------------------------
        self._start_pipeline()

        # --- 7. REST API -------------------------------------------------
        await self._start_rest()

        self._running = True
        self._log.info("eventlens started", port=self.config.api.port)

    # ------------------------------------------------------------------
    # Component startup helpers
    # ------------------------------------------------------------------

    def _start_instruments(self) -> None:
        assert self._log is not None
        from eventlens.observability.metrics import InstrumentSetupError, build_instruments

        try:
            self._instruments = build_instruments()
        except InstrumentSetupError as exc:
            raise _ComponentError("instruments", exc) from exc
        self._log.info("instruments created")

    def _start_store(self) -> None:
        assert self._log is not None
        assert self.config is not None
        from eventlens.storage.client import OpenSearchClient
        from eventlens.storage.writer import StorageWriter

        try:
            self._store = OpenSearchClient(self.config.store)
        except Exception as exc:
            raise _ComponentError("store_client", exc) from exc
        self._writer = StorageWriter(
            self._store,
            events_index=self.config.store.events_index,
            metrics_index=self.config.store.metrics_index,
        )
        self._log.info("store client configured", url=self.config.store.url)

    async def _bootstrap_indices(self) -> None:
        """Create index mappings.  Failure is logged and startup continues."""
        assert self._log is not None
        assert self._writer is not None
        if not await self._writer.bootstrap():
            self._log.warning("index bootstrap incomplete; assuming indices already exist")

    def _start_pipeline(self) -> None:
        assert self._log is not None
        assert self._writer is not None
        assert self._instruments is not None
        from eventlens.engine.tracker import MetricTracker
        from eventlens.pipeline.orchestrator import IngestionOrchestrator

        tracker = MetricTracker(writer=self._writer, instruments=self._instruments)
        self._orchestrator = IngestionOrchestrator(tracker=tracker, writer=self._writer)
        self._log.info("ingestion pipeline started")

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        assert self._instruments is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from eventlens.api import build_app

            fastapi_app = build_app(
                orchestrator=self._orchestrator,
                registry=self._instruments.registry,
            )
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host=self.config.api.host,
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Gracefully stop all components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("eventlens shutting down")

        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True  # type: ignore[attr-defined]

        for task in reversed(self._background_tasks):
            if not task.done():
                task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._background_tasks.clear()

        self._rest_server = None
        self._orchestrator = None
        await self._stop_component("store_client", self._store)
        self._store = None

        log.info("eventlens stopped")

    async def _stop_component(self, name: str, component: object | None) -> None:
        """Call stop() on a component if it has that method, catching all errors."""
        if component is None:
            return
        log = self._log or get_logger("app")
        stop_fn = getattr(component, "stop", None)
        if stop_fn is None:
            return
        try:
            result = stop_fn()
            if asyncio.iscoroutine(result):
                await asyncio.wait_for(result, timeout=_SHUTDOWN_GRACE_SECONDS)
        except TimeoutError:
            log.warning("component stop timed out", component=name, timeout=_SHUTDOWN_GRACE_SECONDS)
        except Exception as exc:
            log.error("component stop raised an error", component=name, error=str(exc))


def _eventlens_version() -> str:
    from eventlens import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = EventLensApp()
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app._running:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()


def run() -> None:
    """Console-script entrypoint."""
    asyncio.run(main())
