"""
Task Registry
-------------

Centralized tracking of asyncio tasks created across the plugin.
Provides introspection, debugging utilities, and controlled task lifecycle
management.

Features:
- Register tasks with metadata (category, description, owner)
- Track creation time, completion state, cancellation, errors
- Cancel every task owned by a component when it unloads
- Introspection API for the admin API
- Shutdown helpers for the shutdown coordinator
"""

from __future__ import annotations

import asyncio
import traceback
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, List, Any
from datetime import datetime, timezone

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


# ---------------------------------------------------------------------------
# TASK CATEGORY ENUM
# ---------------------------------------------------------------------------

class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    TRIGGER_POLL = auto()     # Proximity polling
    RECEIVER = auto()         # Transition / reactive flows
    AUDIO = auto()            # Delayed sound stops
    SETTINGS_POLL = auto()    # Fallback settings polling
    API = auto()
    SYSTEM = auto()
    GENERAL = auto()


# ---------------------------------------------------------------------------
# TASK METADATA
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskInfo:
    """Immutable metadata captured at task creation time."""
    id: int
    category: TaskCategory
    description: str
    created_at: str  # ISO UTC string
    created_timestamp: float
    origin_stack: str  # short stack trace where create_tracked_task was called
    owner: Optional[str] = None  # component object id, if any


@dataclass
class TaskRecord:
    """Internal structure tracking task state."""
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None
    finished_at: Optional[str] = None  # ISO time when finished

    @property
    def status(self) -> str:
        if not self.task.done():
            return "running"
        if self.cancelled:
            return "cancelled"
        if self.finished_with_error is not None:
            return "failed"
        return "done"


# ---------------------------------------------------------------------------
# TASK REGISTRY SINGLETON
# ---------------------------------------------------------------------------

class TaskRegistry:
    """
    Global registry for all asyncio tasks in the plugin.

    Responsibilities:
    - Track tasks and metadata
    - Detect and log task failures
    - Cancel tasks per owner (component unload)
    - Provide debugging API
    - Assist shutdown coordinator by exposing active tasks

    Finished records are kept up to `history_limit`; the oldest finished
    records are dropped first.
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self, history_limit: int = 500) -> None:
        self._records: Dict[int, TaskRecord] = {}
        self._next_id: int = 1
        self._history_limit = history_limit

    # -----------------------------
    # Singleton accessor
    # -----------------------------
    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> "TaskRegistry":
        """Replace the singleton with a fresh registry (tests, restart)"""
        cls._instance = cls()
        return cls._instance

    # -----------------------------
    # Register new task
    # -----------------------------
    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
        owner: Optional[str] = None,
    ) -> int:
        """Register a new task with metadata."""
        task_id = self._next_id
        self._next_id += 1

        # Capture short stack, dropping the frame inside this module
        stack_lines = traceback.format_stack(limit=8)
        origin_stack = "".join(stack_lines[:-1])

        now = datetime.now(timezone.utc)

        info = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
            origin_stack=origin_stack,
            owner=owner,
        )

        self._records[task_id] = TaskRecord(task=task, info=info)

        log.debug(f"[Task {task_id}] Registered ({category.name}) - {description}")

        # Auto-attach callback to track completion
        task.add_done_callback(self._on_task_done)

        self._prune()
        return task_id

    # -----------------------------
    # Internal completion handler
    # -----------------------------
    def _on_task_done(self, task: asyncio.Task) -> None:
        """Internal callback whenever a task finishes."""
        record = self._get_record_by_task(task)
        if record is None:
            return

        record.finished_at = datetime.now(timezone.utc).isoformat()

        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
            return

        exc = task.exception()
        if exc:
            record.finished_with_error = exc
            log.error(f"[Task {record.info.id}] FAILED: {record.info.description}", exception=exc)
        else:
            record.finished_return = task.result()
            log.debug(f"[Task {record.info.id}] Completed successfully")

    def _get_record_by_task(self, task: asyncio.Task) -> Optional[TaskRecord]:
        for record in self._records.values():
            if record.task is task:
                return record
        return None

    def _prune(self) -> None:
        overflow = len(self._records) - self._history_limit
        if overflow <= 0:
            return
        finished = [tid for tid, r in self._records.items() if r.task.done()]
        for tid in finished[:overflow]:
            del self._records[tid]

    # -----------------------------
    # Public API
    # -----------------------------

    def get(self, task_id: int) -> Optional[TaskRecord]:
        return self._records.get(task_id)

    def list_all(self) -> List[TaskRecord]:
        """Return a list of all tracked task records."""
        return list(self._records.values())

    def active(self) -> List[TaskRecord]:
        """Return only tasks that are still running."""
        return [r for r in self._records.values() if not r.task.done()]

    def failed(self) -> List[TaskRecord]:
        """Return tasks that ended with an exception."""
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        """Return cancelled tasks."""
        return [r for r in self._records.values() if r.cancelled]

    def owned_by(self, owner: str, active_only: bool = True) -> List[TaskRecord]:
        return [
            r for r in self._records.values()
            if r.info.owner == owner and (not active_only or not r.task.done())
        ]

    def cancel_owner(self, owner: str) -> int:
        """
        Cancel every running task owned by `owner` (idempotent)

        Returns:
            Number of tasks cancelled
        """
        records = self.owned_by(owner)
        for record in records:
            record.task.cancel()

        if records:
            log.debug(f"Cancelled {len(records)} task(s) owned by {owner}")
        return len(records)

    def stats(self) -> Dict[str, int]:
        return {
            "total": len(self._records),
            "running": len(self.active()),
            "failed": len(self.failed()),
            "cancelled": len(self.cancelled()),
        }

    def summary(self) -> str:
        """Return human-readable summary for logs."""
        s = self.stats()
        return (
            f"Tasks: total={s['total']}, running={s['running']}, "
            f"failed={s['failed']}, cancelled={s['cancelled']}"
        )

    # -----------------------------
    # Shutdown helpers
    # -----------------------------

    def get_tasks_for_shutdown(
        self,
        exclude: Optional[List[asyncio.Task]] = None
    ) -> List[asyncio.Task]:
        """Return all tasks that should be cancelled during shutdown."""
        exclude = exclude or []
        tasks = [
            r.task for r in self._records.values()
            if not r.task.done() and r.task not in exclude
        ]

        log.debug(f"Shutdown: {len(tasks)} tasks to cancel")
        return tasks


# ---------------------------------------------------------------------------
# Convenience wrapper function
# ---------------------------------------------------------------------------

def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
    owner: Optional[str] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None
) -> asyncio.Task:
    """
    Create and register a task in a single call.
    """
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro)

    TaskRegistry.instance().register(
        task=task,
        category=category,
        description=description,
        owner=owner,
    )

    return task
