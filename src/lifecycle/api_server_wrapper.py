from __future__ import annotations
import asyncio
import uvicorn
from fastapi import FastAPI
from typing import Optional
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Wrapper for running Uvicorn inside an asyncio task without Uvicorn's
    signal handlers interfering with the shutdown pipeline.

    Behaviour:
      - start() launches uvicorn.Server.serve() as a background task and awaits
        an internal stop event. start() returns only after stop() was called.
      - stop() triggers the stop event, attempts graceful shutdown, and forces
        exit if necessary. It also closes sockets and cancels the serve task.
      - Both are safe to call from the shutdown coordinator.
    """

    def __init__(
        self,
        app: FastAPI,
        host: str = "0.0.0.0",
        port: int = 8000,
    ):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event: asyncio.Event = asyncio.Event()

    # ----------------------------------------------------------------------
    # INTERNAL
    # ----------------------------------------------------------------------
    def _create_server(self) -> uvicorn.Server:
        """Create a uvicorn.Server instance with its signal handlers disabled."""
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )

        server = uvicorn.Server(config)

        # Signals belong to the ShutdownCoordinator
        server.install_signal_handlers = lambda: None  # type: ignore

        return server

    async def _wait_started(self, timeout: float) -> None:
        """Wait until uvicorn reports it's started (or timeout)"""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while loop.time() < deadline:
            if getattr(self._server, "started", False):
                log.info("Admin API started")
                return
            if self._serve_task.done():
                # serve() ended early (port in use, bad host)
                log.error("Admin API failed to start")
                return
            await asyncio.sleep(0.05)

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    async def start(self, *, wait_started_timeout: float = 5.0) -> None:
        """
        Start uvicorn server in background and wait until stop() is called.

        Schedule it with create_tracked_task() for a non-blocking start.

        Raises:
            RuntimeError: server already started
        """
        if self._serve_task is not None and not self._serve_task.done():
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"Launching admin API on http://{self.host}:{self.port}")

        self._serve_task = asyncio.create_task(self._server.serve(), name="UvicornServeInternal")

        try:
            await self._wait_started(wait_started_timeout)
            await self._stop_event.wait()
        except asyncio.CancelledError:
            log.debug("start() cancelled externally, invoking stop()")
            await self.stop()
            raise

        log.debug("APIServerWrapper.start() exiting (stop_event set)")

    async def stop(self, *, shutdown_timeout: float = 2.0, force_exit: bool = True) -> None:
        """
        Stop the API server and release the port.

        Steps:
          1. set stop_event so start() unblocks
          2. set server.force_exit to avoid lifespan hang
          3. call server.shutdown() with timeout
          4. close sockets and cancel serve task if still running
        """
        self._stop_event.set()

        if self._server is None:
            log.debug("API server stop() called but server was not running")
            return

        server = self._server

        try:
            if force_exit:
                server.force_exit = True
            await asyncio.wait_for(server.shutdown(), timeout=shutdown_timeout)
            log.info("Admin API shutdown completed")
        except asyncio.TimeoutError:
            log.warn("Admin API shutdown timeout; proceeding to force-close sockets")
        except Exception as e:
            log.error("Error during API server.shutdown()", exception=e)

        # Close low-level sockets opened by the server if any
        for s in getattr(server, "servers", None) or []:
            try:
                s.close()
            except Exception as e:
                log.debug("Exception while closing socket", exception=e)

        if self._serve_task and not self._serve_task.done():
            self._serve_task.cancel()
            try:
                await asyncio.wait_for(self._serve_task, timeout=1.0)
            except asyncio.CancelledError:
                log.debug("Uvicorn serve task cancelled cleanly")
            except asyncio.TimeoutError:
                log.debug("Uvicorn serve task did not stop in time")

        self._server = None
        self._serve_task = None

        log.info("Admin API stopped and port released")

    # ----------------------------------------------------------------------
    # PROPERTIES
    # ----------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        """Return whether a uvicorn serve task is active."""
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._serve_task

    @property
    def server(self) -> Optional[uvicorn.Server]:
        return self._server
