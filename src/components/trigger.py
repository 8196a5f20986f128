"""
Trigger Component

Fires a trigger broadcast on click, on proximity entry, or when enough users
gather nearby. Proximity modes are edge-triggered: a one-shot flag blocks
re-firing until the condition drops.
"""

from typing import Any, Dict, Optional

from components.base import BaseComponent
from lifecycle.task_registry import TaskCategory
from models.domain import TriggerConfig, TriggerState
from models.enums import ComponentKind, InputMode, LogCategory
from models.events import EventType
from models.messages import TriggerMessage

PROXIMITY_INTERVAL = "proximity"


class TriggerComponent(BaseComponent):
    kind = ComponentKind.TRIGGER
    log_category = LogCategory.TRIGGER

    def __init__(self, object_id, fields, context):
        super().__init__(object_id, fields, context)
        self.config: TriggerConfig = self.ctx.settings.build_trigger_config(fields)
        self.state = TriggerState(input_mode=self.config.input_mode)
        self.user_id: Optional[str] = None

    @property
    def settings_poll_interval(self) -> float:
        return self.ctx.timing.trigger_settings_poll_interval

    # -------------------------------
    # Lifecycle
    # -------------------------------

    async def on_load(self) -> None:
        self.user_id = await self.ctx.host.get_user_id()
        self.ctx.event_bus.subscribe(
            EventType.ROLES_CHANGED,
            self._on_roles_changed,
            owner=self.object_id,
        )
        self._apply_input_mode()

    async def on_settings_changed(self) -> None:
        self.config = self.ctx.settings.build_trigger_config(self.fields)

        if self.config.input_mode != self.state.input_mode:
            self.log.info(
                "Input mode changed",
                object=self.object_id,
                old=self.state.input_mode.value,
                new=self.config.input_mode.value,
            )
            self.state.input_mode = self.config.input_mode
            self.state.triggered = False
            self.stop_interval(PROXIMITY_INTERVAL)

        self._apply_input_mode()

    async def on_click(self) -> None:
        if self.config.input_mode == InputMode.ON_CLICK:
            self.log.debug("Clicked", object=self.object_id)
            await self.fire()

    async def _on_roles_changed(self, event) -> None:
        await self.on_settings_changed()

    def _apply_input_mode(self) -> None:
        if self.config.input_mode.uses_proximity:
            self.start_interval(
                PROXIMITY_INTERVAL,
                self.ctx.timing.proximity_poll_interval,
                self.check_proximity,
                TaskCategory.TRIGGER_POLL,
            )
        else:
            self.stop_interval(PROXIMITY_INTERVAL)

    # -------------------------------
    # Proximity
    # -------------------------------

    async def check_proximity(self) -> None:
        """One proximity poll tick"""
        config = self.config
        radius = config.proximity_distance

        user_position = await self.ctx.host.get_user_position()
        distance = self.position.distance_to(user_position)

        if config.input_mode == InputMode.PROXIMITY:
            if distance <= radius:
                if not self.state.triggered:
                    self.state.triggered = True
                    self.log.debug("Proximity entered", object=self.object_id, distance=f"{distance:.2f}")
                    await self.fire()
            else:
                self.state.triggered = False

        elif config.input_mode == InputMode.MULTI_PROXIMITY:
            if distance > radius:
                self.state.triggered = False
                return

            users = await self.ctx.host.get_nearby_users()
            count = sum(1 for u in users if u.is_within(radius))

            if count >= config.required_user_count:
                if not self.state.triggered:
                    self.state.triggered = True
                    self.log.debug("Group gathered", object=self.object_id, count=count)
                    await self.fire()
            else:
                self.state.triggered = False

    # -------------------------------
    # Firing
    # -------------------------------

    async def fire(self) -> bool:
        """
        Gate, assign role, broadcast

        Returns:
            True if the trigger message was sent
        """
        config = self.config
        roles = self.ctx.roles
        host = self.ctx.host

        user_id = self.user_id or await host.get_user_id()
        is_admin = await host.is_admin()

        if config.admin_only and not is_admin:
            self.log.debug("Trigger blocked: admin only", object=self.object_id, user=user_id)
            return False

        if config.role_restricted and config.required_role:
            if not roles.is_valid(config.required_role):
                self.log.debug("Trigger blocked: required role is not valid",
                               object=self.object_id, role=config.required_role)
                return False
            if not roles.has_role(user_id, config.required_role):
                self.log.debug("Trigger blocked: user lacks required role",
                               object=self.object_id, user=user_id, role=config.required_role)
                return False

        if config.assign_role:
            if roles.is_valid(config.assign_role):
                await roles.assign(user_id, config.assign_role)
            else:
                self.log.debug("Assign role is not valid", object=self.object_id, role=config.assign_role)

        message = TriggerMessage(
            action_id=config.action_id,
            instance_id=self.ctx.instance_id,
            user_id=user_id,
            object_id=self.object_id,
            is_admin=is_admin,
        )
        self.state.fire_count += 1
        self.log.info("Trigger fired", object=self.object_id, action=config.action_id, user=user_id)
        await host.send_message(message.to_payload())
        return True

    def describe(self) -> Dict[str, Any]:
        data = super().describe()
        data["state"] = {
            "input_mode": self.state.input_mode.value,
            "triggered": self.state.triggered,
            "fire_count": self.state.fire_count,
            "proximity_polling": self.interval_running(PROXIMITY_INTERVAL),
        }
        return data
