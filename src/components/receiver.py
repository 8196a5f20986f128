"""
Receiver Component

Reacts to trigger broadcasts with a matching action id.

State machine (ReceiverPhase):
    IDLE → PLAYING → IDLE                              cycle / mapping
    IDLE → PLAYING → REVERTING → COOLING_DOWN → IDLE   reactive

Triggers are dropped (never queued) while the phase is not IDLE or while
the cooldown since the last accepted trigger has not elapsed. Each accepted
trigger runs as one tracked task against the config captured when it was
accepted, so settings edits never disturb a transition in flight.
"""

import asyncio
from typing import Any, Dict, Optional

from components.base import BaseComponent
from lifecycle.task_registry import TaskCategory
from models.domain import ReceiverConfig, ReceiverRuntimeState
from models.enums import ComponentKind, Direction, LogCategory, ReceiverPhase
from models.events import EventType, ReceiverStateCommittedEvent, TriggerReceivedEvent
from services.transition_planner import normalize_direction, plan_cycle_step, plan_mapping_step


class ReceiverComponent(BaseComponent):
    kind = ComponentKind.RECEIVER
    log_category = LogCategory.RECEIVER

    def __init__(self, object_id, fields, context):
        super().__init__(object_id, fields, context)
        self.config: ReceiverConfig = self.ctx.settings.build_receiver_config(fields)
        self.runtime = ReceiverRuntimeState()

    # -------------------------------
    # Lifecycle
    # -------------------------------

    async def on_load(self) -> None:
        props = await self.ctx.host.get_object_properties(self.object_id)

        state = props.get("currentState")
        if isinstance(state, str) and state:
            self.runtime.current_state = state
        direction = props.get("currentDirection")
        if direction in (1, -1) and not isinstance(direction, bool):
            self.runtime.direction = Direction(direction)

        self._apply_config(self.config, previous=None)

        self.ctx.event_bus.subscribe(
            EventType.TRIGGER_RECEIVED,
            self.on_trigger,
            filter_fn=self._matches_action,
            owner=self.object_id,
        )
        self.ctx.event_bus.subscribe(
            EventType.ROLES_CHANGED,
            self._on_roles_changed,
            owner=self.object_id,
        )

        self.log.debug(
            "Receiver state restored",
            object=self.object_id,
            state=self.runtime.current_state,
            direction=self.runtime.direction.name if self.runtime.direction else "-",
        )

    async def on_settings_changed(self) -> None:
        previous = self.config
        self.config = self.ctx.settings.build_receiver_config(self.fields)
        self._apply_config(self.config, previous=previous)

    async def _on_roles_changed(self, event) -> None:
        await self.on_settings_changed()

    def _apply_config(self, config: ReceiverConfig, previous: Optional[ReceiverConfig]) -> None:
        """Bring runtime state in line with the configured state graph"""
        runtime = self.runtime

        if config.is_cycle:
            states = config.static_states
            if runtime.current_state in states:
                runtime.current_index = states.index(runtime.current_state)
            else:
                runtime.current_index = 0
                runtime.current_state = states[0]
                runtime.direction = Direction.FORWARD
            runtime.direction = normalize_direction(runtime.current_index, len(states), runtime.direction)

        elif config.is_mapping:
            if previous is None:
                if runtime.current_state is None:
                    runtime.current_state = config.initial_state
            elif config.initial_state != previous.initial_state:
                runtime.current_state = config.initial_state

    # -------------------------------
    # Trigger handling
    # -------------------------------

    def _matches_action(self, event: TriggerReceivedEvent) -> bool:
        return bool(self.config.action_id) and event.action_id == self.config.action_id

    async def on_trigger(self, event: TriggerReceivedEvent) -> None:
        message = event.message
        config = self.config

        if config.admin_only and not message.is_admin:
            self.log.debug("Trigger ignored: admin only", object=self.object_id, user=message.user_id)
            return

        if config.role_restricted and config.required_role:
            roles = self.ctx.roles
            if not roles.is_valid(config.required_role):
                self.log.debug("Trigger ignored: required role is not valid",
                               object=self.object_id, role=config.required_role)
                return
            if not roles.has_role(message.user_id, config.required_role):
                self.log.debug("Trigger ignored: user lacks required role",
                               object=self.object_id, user=message.user_id, role=config.required_role)
                return

        self.handle_trigger()

    def handle_trigger(self) -> bool:
        """
        Accept a trigger if cooldown and single-flight allow it

        Returns:
            True if a transition was started
        """
        runtime = self.runtime
        config = self.config
        now = asyncio.get_running_loop().time()

        if runtime.last_trigger_time is not None and now - runtime.last_trigger_time < config.cooldown:
            self.log.debug("Trigger dropped: cooldown", object=self.object_id)
            return False

        if runtime.busy:
            self.log.debug("Trigger dropped: transition in progress",
                           object=self.object_id, phase=runtime.phase.name)
            return False

        runtime.last_trigger_time = now
        runtime.phase = ReceiverPhase.PLAYING

        if config.is_cycle:
            flow, name = self._run_cycle(config), "cycle"
        elif config.is_mapping:
            flow, name = self._run_mapping(config), "mapping"
        else:
            flow, name = self._run_reactive(config), "reactive"

        self.spawn(
            self._run_flow(flow),
            category=TaskCategory.RECEIVER,
            description=f"{self.object_id} {name} transition",
        )
        return True

    async def _run_flow(self, flow) -> None:
        try:
            await flow
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.log.error("Transition abandoned", object=self.object_id, exception=e)
        finally:
            self.runtime.phase = ReceiverPhase.IDLE

    # -------------------------------
    # Flows
    # -------------------------------

    async def _run_reactive(self, config: ReceiverConfig) -> None:
        duration = await self.ctx.animation_timing.duration_of(self.object_id, config.reactive_animation)

        await self._set_animation(config.reactive_animation)
        await self._emit_sound(config, config.sound, duration)
        self.log.info("Reactive animation started", object=self.object_id,
                      animation=config.reactive_animation, duration=f"{duration:.2f}s")
        await asyncio.sleep(duration)

        self.runtime.phase = ReceiverPhase.REVERTING
        await self._set_animation(config.default_animation)

        self.runtime.phase = ReceiverPhase.COOLING_DOWN
        await asyncio.sleep(config.cooldown)

    async def _run_cycle(self, config: ReceiverConfig) -> None:
        runtime = self.runtime
        step = plan_cycle_step(config, runtime.current_index, runtime.direction)
        if step is None:
            self.log.debug("Cycle has nowhere to go", object=self.object_id, states=len(config.static_states))
            return

        runtime.direction = step.direction
        duration = await self.ctx.animation_timing.duration_of(self.object_id, step.animation)

        await self._set_animation(step.animation)
        await self._emit_sound(config, config.sound, duration)
        self.log.info("Cycle transition started", object=self.object_id, animation=step.animation,
                      target=step.target_state, direction=step.direction.name)
        await asyncio.sleep(duration)

        runtime.current_state = step.target_state
        runtime.current_index = step.target_index
        runtime.direction = normalize_direction(step.target_index, len(config.static_states), step.direction)
        # Settings may have changed while the animation ran
        self._apply_config(self.config, previous=self.config)

        await self.ctx.host.update_object(self.object_id, {
            "animation": [{"name": runtime.current_state}],
            "currentState": runtime.current_state,
            "currentDirection": runtime.direction.value,
        })
        await self._committed()

    async def _run_mapping(self, config: ReceiverConfig) -> None:
        runtime = self.runtime
        step = plan_mapping_step(config.mapping, runtime.current_state)
        if step is None:
            self.log.debug("No mapping entry for state", object=self.object_id, state=runtime.current_state)
            return

        duration = await self.ctx.animation_timing.duration_of(self.object_id, step.animation)

        await self._set_animation(step.animation)
        await self._emit_sound(config, step.sound or config.sound, duration)
        self.log.info("Mapping transition started", object=self.object_id, animation=step.animation,
                      target=step.target_state, direction=step.direction.name)
        await asyncio.sleep(duration)

        runtime.current_state = step.target_state
        await self.ctx.host.update_object(self.object_id, {
            "animation": [{"name": step.target_state}],
            "currentState": step.target_state,
        })
        await self._committed()

    # -------------------------------
    # Effects
    # -------------------------------

    async def _set_animation(self, name: str) -> None:
        await self.ctx.host.update_object(self.object_id, {"animation": [{"name": name}]})

    async def _emit_sound(self, config: ReceiverConfig, sound: Optional[str], duration: float) -> None:
        await self.ctx.sound.emit(
            source_id=self.object_id,
            sound=sound,
            volume=config.volume,
            duration=duration,
            position=self.position,
            local_audio=not config.disable_local_audio,
            owner=self.object_id,
        )

    async def _committed(self) -> None:
        self.log.info("Transition committed", object=self.object_id, state=self.runtime.current_state)
        await self.ctx.event_bus.publish(
            ReceiverStateCommittedEvent(self.object_id, self.runtime.current_state, self.runtime.direction)
        )

    def describe(self) -> Dict[str, Any]:
        data = super().describe()
        runtime = self.runtime
        data["state"] = {
            "phase": runtime.phase.name,
            "current_state": runtime.current_state,
            "current_index": runtime.current_index,
            "direction": runtime.direction.value if runtime.direction else None,
            "animation_mode": self.config.animation_mode.value,
            "transition_mode": self.config.transition_mode.value,
        }
        return data
