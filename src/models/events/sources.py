from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for plugin events"""
    HOST_MESSAGE = auto()    # Payloads delivered by the host broadcast channel
    ROLE_REGISTRY = auto()   # Role assignment / allow-list changes
    PLUGIN = auto()          # Plugin-level lifecycle
    RECEIVER = auto()        # Receiver state machine
