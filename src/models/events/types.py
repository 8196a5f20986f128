from enum import Enum, auto


class EventType(Enum):
    # Host messages (decoded wire payloads)
    TRIGGER_RECEIVED = auto()
    RELAY_SOUND_RECEIVED = auto()

    # Role registry
    ROLES_CHANGED = auto()

    # Component lifecycle
    COMPONENT_LOADED = auto()
    COMPONENT_UNLOADED = auto()

    # Receiver
    RECEIVER_STATE_COMMITTED = auto()
