"""
Secondary Audio Relay Component

Replays a receiver's sound at this object's position when a relaySound
broadcast names the configured source object.
"""

from typing import Any, Dict

from components.base import BaseComponent
from models.domain import RelayConfig
from models.enums import ComponentKind, LogCategory
from models.events import EventType, RelaySoundReceivedEvent


class RelayComponent(BaseComponent):
    kind = ComponentKind.RELAY
    log_category = LogCategory.RELAY

    def __init__(self, object_id, fields, context):
        super().__init__(object_id, fields, context)
        self.config: RelayConfig = self.ctx.settings.build_relay_config(fields)
        self.play_count = 0

    async def on_load(self) -> None:
        self.ctx.event_bus.subscribe(
            EventType.RELAY_SOUND_RECEIVED,
            self.on_relay_sound,
            filter_fn=self._matches_source,
            owner=self.object_id,
        )

    async def on_settings_changed(self) -> None:
        self.config = self.ctx.settings.build_relay_config(self.fields)

    def _matches_source(self, event: RelaySoundReceivedEvent) -> bool:
        return bool(self.config.source_id) and event.source_id == self.config.source_id

    async def on_relay_sound(self, event: RelaySoundReceivedEvent) -> None:
        message = event.message
        if not message.sound_file:
            return

        self.play_count += 1
        self.log.debug("Relaying sound", object=self.object_id, source=message.source_id,
                       sound=message.sound_file, duration=f"{message.duration:.2f}s")
        await self.ctx.sound.play_for(
            message.sound_file,
            message.volume,
            message.duration,
            self.position,
            owner=self.object_id,
        )

    def describe(self) -> Dict[str, Any]:
        data = super().describe()
        data["state"] = {"source_id": self.config.source_id, "play_count": self.play_count}
        return data
