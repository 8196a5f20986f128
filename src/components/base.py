"""
Base Component - Shared lifecycle for Asset Link components

Each component instance is bound to one host object. The plugin drives the
lifecycle: load → (settings changed | click)* → unload.

Every task a component starts is registered with its object id as owner,
and every bus subscription is made with the same owner, so unload can
release both in one sweep.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from host.host_interface import IHost
from lifecycle.task_registry import TaskRegistry, TaskCategory, create_tracked_task
from managers.settings_manager import SettingsManager
from models.config import TimingConfig
from models.domain import Position
from models.enums import ComponentKind
from services.animation_timing import AnimationTiming
from services.event_bus import EventBus
from services.role_registry import RoleRegistry
from services.sound_emitter import SoundEmitter
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.LIFECYCLE)


@dataclass
class ComponentContext:
    """Shared plugin services handed to every component"""
    host: IHost
    event_bus: EventBus
    roles: RoleRegistry
    settings: SettingsManager
    timing: TimingConfig
    animation_timing: AnimationTiming
    sound: SoundEmitter
    instance_id: str


class BaseComponent:
    """
    Base class for trigger, receiver and relay components

    Subclasses override the on_* hooks and `settings_poll_interval`.
    """

    kind: ComponentKind
    log_category: LogCategory = LogCategory.LIFECYCLE

    def __init__(self, object_id: str, fields: Dict[str, Any], context: ComponentContext):
        self.object_id = object_id
        self.fields = fields
        self.ctx = context
        self.log = get_logger().for_category(self.log_category)

        self.loaded = False
        self._intervals: Dict[str, asyncio.Task] = {}
        self._fields_snapshot: Dict[str, Any] = dict(fields)

    # -------------------------------
    # Accessors
    # -------------------------------

    @property
    def position(self) -> Position:
        return Position.from_object_fields(self.fields)

    @property
    def settings_poll_interval(self) -> float:
        return self.ctx.timing.receiver_settings_poll_interval

    # -------------------------------
    # Lifecycle (called by the plugin)
    # -------------------------------

    async def load(self) -> None:
        await self.on_load()
        self.loaded = True

        if not self.ctx.host.supports_settings_push:
            self.start_interval("settings", self.settings_poll_interval,
                                self._poll_settings, TaskCategory.SETTINGS_POLL)

        log.info(f"{self.kind.name.title()} loaded", object=self.object_id)

    async def update_fields(self, fields: Dict[str, Any]) -> None:
        """Host pushed edited settings"""
        self.fields = fields
        self._fields_snapshot = dict(fields)
        await self.on_settings_changed()

    async def click(self) -> None:
        await self.on_click()

    async def unload(self) -> None:
        """Release subscriptions and cancel owned tasks (idempotent)"""
        self.ctx.event_bus.unsubscribe_owner(self.object_id)
        self._intervals.clear()
        cancelled = TaskRegistry.instance().cancel_owner(self.object_id)

        if self.loaded:
            self.loaded = False
            await self.on_unload()
            log.info(f"{self.kind.name.title()} unloaded", object=self.object_id, tasks_cancelled=cancelled)

    # -------------------------------
    # Hooks
    # -------------------------------

    async def on_load(self) -> None:
        pass

    async def on_settings_changed(self) -> None:
        pass

    async def on_click(self) -> None:
        pass

    async def on_unload(self) -> None:
        pass

    def describe(self) -> Dict[str, Any]:
        """Runtime snapshot for the admin API"""
        return {
            "object_id": self.object_id,
            "kind": self.kind.value,
            "fields": dict(self.fields),
            "state": {},
        }

    # -------------------------------
    # Task helpers
    # -------------------------------

    def spawn(self, coro: Awaitable, category: TaskCategory, description: str) -> asyncio.Task:
        return create_tracked_task(coro, category=category, description=description, owner=self.object_id)

    def start_interval(
        self,
        name: str,
        period: float,
        callback: Callable[[], Awaitable[None]],
        category: TaskCategory,
    ) -> None:
        """Run `callback` every `period` seconds until stopped (no-op if running)"""
        if self.interval_running(name):
            return
        self._intervals[name] = self.spawn(
            self._run_interval(name, period, callback),
            category=category,
            description=f"{self.object_id} {name} every {period}s",
        )

    def stop_interval(self, name: str) -> None:
        task = self._intervals.pop(name, None)
        if task is not None and not task.done():
            task.cancel()

    def interval_running(self, name: str) -> bool:
        task = self._intervals.get(name)
        return task is not None and not task.done()

    async def _run_interval(self, name: str, period: float, callback: Callable[[], Awaitable[None]]) -> None:
        while True:
            try:
                await callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # One failed tick is abandoned; the next tick starts fresh
                self.log.warn(f"{name} tick failed", object=self.object_id, exception=e)
            await asyncio.sleep(period)

    async def _poll_settings(self) -> None:
        current = dict(self.fields)
        if current != self._fields_snapshot:
            self._fields_snapshot = current
            log.debug("Settings change detected by poll", object=self.object_id)
            await self.on_settings_changed()
