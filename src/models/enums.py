"""
Enums for the Asset Link plugin (component kinds, modes, receiver phases, logging)
"""

from enum import Enum, auto


class ComponentKind(Enum):
    """Component types registered with the host"""
    TRIGGER = "asset-link-trigger"
    RECEIVER = "asset-link-receiver"
    RELAY = "asset-link-secondary"


class InputMode(Enum):
    """
    Trigger input modes

    Values are the option labels shown in the host settings panel.
    """
    ON_CLICK = "On-Click"
    PROXIMITY = "Proximity"
    MULTI_PROXIMITY = "Multi-Proximity"

    @property
    def uses_proximity(self) -> bool:
        return self in (InputMode.PROXIMITY, InputMode.MULTI_PROXIMITY)


class AnimationMode(Enum):
    """Receiver animation modes"""
    REACTIVE = "Reactive"      # One-off animation, then revert to default
    TRANSITION = "Transition"  # Cycle or mapping transitions between states


class TransitionMode(Enum):
    """Receiver transition sub-modes"""
    CYCLE = "Cycle"      # Bidirectional walk through static states
    MAPPING = "Mapping"  # Explicit from/to table


class Direction(Enum):
    """Cycle walk direction (value is what gets persisted)"""
    FORWARD = 1
    REVERSE = -1


class ReceiverPhase(Enum):
    """
    Receiver transition state machine

    IDLE → PLAYING → IDLE                              (cycle / mapping)
    IDLE → PLAYING → REVERTING → COOLING_DOWN → IDLE   (reactive)

    Any phase other than IDLE means a transition is in flight.
    """
    IDLE = auto()
    PLAYING = auto()
    REVERTING = auto()
    COOLING_DOWN = auto()


class RoleChangeReason(Enum):
    """Why the role registry changed"""
    ASSIGNED = auto()
    CLEARED = auto()
    ROLES_DEFINED = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, settings parsing
    TRIGGER = auto()     # Trigger polling and firing
    RECEIVER = auto()    # Receiver transitions
    RELAY = auto()       # Secondary audio relays
    ROLES = auto()       # Role registry and gating
    EVENT = auto()       # Event bus events and handling
    HOST = auto()        # Host calls and simulated host
    SYSTEM = auto()      # Startup, plugin load/unload

    API = auto()

    SHUTDOWN = auto()
    LIFECYCLE = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category
