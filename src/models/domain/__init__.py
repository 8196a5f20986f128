"""Domain models - Config and state objects"""

from models.domain.position import Position, NearbyUser
from models.domain.trigger import TriggerConfig, TriggerState
from models.domain.receiver import ReceiverConfig, ReceiverRuntimeState, TransitionMappingEntry
from models.domain.relay import RelayConfig

__all__ = [
    "Position",
    "NearbyUser",
    "TriggerConfig",
    "TriggerState",
    "ReceiverConfig",
    "ReceiverRuntimeState",
    "TransitionMappingEntry",
    "RelayConfig",
]
