"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, shutdown sequencing, and error handling across
multiple shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import List, Optional, Dict, Set

from lifecycle.shutdown_protocol import IShutdownHandler
from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)

# Task categories whose failure ends the process
CRITICAL_TASK_CATEGORIES: Set[str] = {"API"}


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Maintains a list of shutdown handlers and executes them in priority order
    when shutdown is triggered. Handles signal registration, timeout management,
    and error logging.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(PluginShutdownHandler(plugin))
        coordinator.register(APIServerShutdownHandler(api_wrapper))
        coordinator.register(AllTasksCancellationHandler())

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Initialize shutdown coordinator.

        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List[IShutdownHandler] = []
        self._shutdown_event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._shutdown_trigger: Dict[str, Optional[str]] = {"reason": None}

    @property
    def shutdown_reason(self) -> Optional[str]:
        return self._shutdown_trigger["reason"]

    def register(self, handler: IShutdownHandler) -> None:
        """
        Register a shutdown handler.

        Handler must have:
        - shutdown_priority property (int)
        - async shutdown() method

        Raises:
            ValueError: handler does not implement the protocol
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def _ensure_event(self) -> asyncio.Event:
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        return self._shutdown_event

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """
        Install OS signal handlers for graceful shutdown (SIGINT, SIGTERM).

        Args:
            loop: Running asyncio event loop
        """
        self._ensure_event()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self.request_shutdown(s.name))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str) -> None:
        """Trigger shutdown programmatically (signals use this too)"""
        event = self._ensure_event()
        if not event.is_set():
            self._shutdown_trigger["reason"] = reason
            log.info(f"Shutdown requested: {reason}")
            event.set()

    def _check_critical_task_failures(self) -> bool:
        """Return True (and record the reason) if a critical task has failed"""
        for record in TaskRegistry.instance().failed():
            if record.info.category.name in CRITICAL_TASK_CATEGORIES:
                log.error(
                    f"Critical task failed: {record.info.description} "
                    f"(category: {record.info.category.name})"
                )
                self._shutdown_trigger["reason"] = f"Task failure: {record.info.description}"
                return True
        return False

    async def wait_for_shutdown(self, poll_interval: float = 0.2) -> None:
        """
        Wait for a shutdown request or a critical task failure.

        Args:
            poll_interval: How often critical tasks are re-checked (seconds)
        """
        event = self._ensure_event()

        while not event.is_set():
            if self._check_critical_task_failures():
                return
            try:
                await asyncio.wait_for(event.wait(), timeout=poll_interval)
            except asyncio.TimeoutError:
                continue

        log.debug("Shutdown triggered", reason=self.shutdown_reason)

    async def shutdown_all(self) -> None:
        """
        Execute graceful shutdown of all handlers in priority order.

        Handlers are called in descending priority order (highest first).
        Each handler has its own timeout (timeout_per_handler) and the entire
        shutdown sequence has a global timeout (total_timeout). A failing
        handler is logged and the sequence continues.
        """
        log.info("Initiating graceful shutdown sequence", reason=self.shutdown_reason or "UNKNOWN")

        sorted_handlers = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"{handler_name} shutdown complete")

            except asyncio.TimeoutError:
                log.error(f"{handler_name} shutdown timeout ({self._timeout_per_handler}s)")

            except asyncio.CancelledError:
                log.warn(f"{handler_name} shutdown was cancelled")
                raise

            except Exception as e:
                log.error(f"Error shutting down {handler_name}", exception=e)

        log.info("Shutdown sequence complete")

    def get_handler(self, handler_type: type) -> Optional[IShutdownHandler]:
        """
        Get a registered handler by type.

        Returns:
            Handler instance or None if not found
        """
        for handler in self._handlers:
            if isinstance(handler, handler_type):
                return handler
        return None
