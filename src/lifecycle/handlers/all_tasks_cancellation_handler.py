import asyncio
from typing import List, Optional

from utils.logger import get_logger, LogCategory
from lifecycle.shutdown_protocol import IShutdownHandler
from lifecycle.task_registry import TaskRegistry

log = get_logger().for_category(LogCategory.SHUTDOWN)


class AllTasksCancellationHandler(IShutdownHandler):
    """
    Cancels *all* tracked asyncio tasks except the task that is currently
    executing this shutdown handler and any explicitly excluded tasks.
    This avoids recursive cancellation issues and infinite cancel cascades.

    Priority: 30 (last)
    """

    shutdown_priority = 30

    def __init__(self, exclude_tasks: Optional[List[asyncio.Task]] = None, grace_period: float = 0.05):
        """
        Args:
            exclude_tasks: Tasks that should not be cancelled.
                           The current task is always excluded automatically.
            grace_period: Seconds to wait for cancellations to propagate
        """
        self.exclude_tasks = exclude_tasks or []
        self.grace_period = grace_period

    async def shutdown(self) -> None:
        current = asyncio.current_task()
        registry = TaskRegistry.instance()

        exclude = list(self.exclude_tasks)
        if current:
            exclude.append(current)

        tasks = set(registry.get_tasks_for_shutdown(exclude=exclude))
        if not tasks:
            log.debug("No background tasks to cancel")
            return

        log.info(f"Cancelling {len(tasks)} background task(s)", excluded=len(exclude))

        for t in tasks:
            if not t.done():
                t.cancel(msg="shutdown")

        try:
            await asyncio.wait(tasks, timeout=self.grace_period)
        except asyncio.CancelledError:
            # Handler must not let cancellation propagate
            log.warn("Task cancellation handler was cancelled (ignored)")
            return

        log.info(registry.summary())
