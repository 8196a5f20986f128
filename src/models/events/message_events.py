"""Events decoded from host broadcast payloads"""

from dataclasses import dataclass

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.messages import TriggerMessage, RelaySoundMessage


@dataclass(init=False)
class TriggerReceivedEvent(Event):
    """A trigger component fired somewhere in the space"""
    message: TriggerMessage

    def __init__(self, message: TriggerMessage):
        super().__init__(
            type=EventType.TRIGGER_RECEIVED,
            source=EventSource.HOST_MESSAGE,
        )
        self.message = message

    @property
    def action_id(self) -> str:
        return self.message.action_id


@dataclass(init=False)
class RelaySoundReceivedEvent(Event):
    """A receiver asked secondary outputs to replay its sound"""
    message: RelaySoundMessage

    def __init__(self, message: RelaySoundMessage):
        super().__init__(
            type=EventType.RELAY_SOUND_RECEIVED,
            source=EventSource.HOST_MESSAGE,
        )
        self.message = message

    @property
    def source_id(self) -> str:
        return self.message.source_id
