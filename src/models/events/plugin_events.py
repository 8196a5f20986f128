"""Role registry, component lifecycle and receiver events"""

from dataclasses import dataclass
from typing import Optional

from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource
from models.enums import ComponentKind, Direction, RoleChangeReason


@dataclass(init=False)
class RolesChangedEvent(Event):
    """
    Fired after any role registry mutation:
    - role assigned to a user
    - all roles cleared
    - allow-list redefined
    """
    reason: RoleChangeReason
    user_id: Optional[str] = None
    role: Optional[str] = None

    def __init__(
        self,
        reason: RoleChangeReason,
        user_id: Optional[str] = None,
        role: Optional[str] = None,
    ):
        super().__init__(
            type=EventType.ROLES_CHANGED,
            source=EventSource.ROLE_REGISTRY,
        )
        self.reason = reason
        self.user_id = user_id
        self.role = role


@dataclass(init=False)
class ComponentLoadedEvent(Event):
    object_id: str
    kind: ComponentKind

    def __init__(self, object_id: str, kind: ComponentKind):
        super().__init__(type=EventType.COMPONENT_LOADED, source=EventSource.PLUGIN)
        self.object_id = object_id
        self.kind = kind


@dataclass(init=False)
class ComponentUnloadedEvent(Event):
    object_id: str
    kind: ComponentKind

    def __init__(self, object_id: str, kind: ComponentKind):
        super().__init__(type=EventType.COMPONENT_UNLOADED, source=EventSource.PLUGIN)
        self.object_id = object_id
        self.kind = kind


@dataclass(init=False)
class ReceiverStateCommittedEvent(Event):
    """Receiver finished a transition and committed its new state"""
    object_id: str
    state: str
    direction: Optional[Direction] = None

    def __init__(self, object_id: str, state: str, direction: Optional[Direction] = None):
        super().__init__(type=EventType.RECEIVER_STATE_COMMITTED, source=EventSource.RECEIVER)
        self.object_id = object_id
        self.state = state
        self.direction = direction
