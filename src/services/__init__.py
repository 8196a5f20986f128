"""Services layer"""

from .event_bus import EventBus
from .role_registry import RoleRegistry
from .role_store import RoleStore
from .animation_timing import AnimationTiming
from .sound_emitter import SoundEmitter
from .service_container import ServiceContainer

__all__ = [
    "EventBus",
    "RoleRegistry",
    "RoleStore",
    "AnimationTiming",
    "SoundEmitter",
    "ServiceContainer",
]
