"""
Event system for Asset Link

Host payloads are decoded into typed events and routed through the EventBus.
"""

# Event type, base class, and sources
from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource

# Host message events
from models.events.message_events import (
    TriggerReceivedEvent,
    RelaySoundReceivedEvent,
)

# Plugin events
from models.events.plugin_events import (
    RolesChangedEvent,
    ComponentLoadedEvent,
    ComponentUnloadedEvent,
    ReceiverStateCommittedEvent,
)

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # Host messages
    "TriggerReceivedEvent",
    "RelaySoundReceivedEvent",

    # Plugin
    "RolesChangedEvent",
    "ComponentLoadedEvent",
    "ComponentUnloadedEvent",
    "ReceiverStateCommittedEvent",
]
