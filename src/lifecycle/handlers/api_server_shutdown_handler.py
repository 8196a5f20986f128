from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from lifecycle.api_server_wrapper import APIServerWrapper

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for the admin API server (FastAPI + Uvicorn).

    Uses APIServerWrapper for clean shutdown with force_exit flag to prevent
    uvicorn/Starlette lifespan task leak that leaves the port orphaned.

    Priority: 90 (after the plugin has unloaded its components)
    """

    def __init__(self, api_wrapper: "APIServerWrapper"):
        self.api_wrapper = api_wrapper

    @property
    def shutdown_priority(self) -> int:
        return 90

    async def shutdown(self) -> None:
        """Stop the API server and release its port."""
        if not self.api_wrapper.is_running:
            log.debug("API server not running")
            return

        log.info("Stopping API server...")
        try:
            await self.api_wrapper.stop()
        except Exception as e:
            log.error("Error stopping API server", exception=e)
