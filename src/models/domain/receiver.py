"""
Receiver domain models

Defines immutable receiver configuration and mutable receiver runtime state.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
from models.enums import AnimationMode, TransitionMode, Direction, ReceiverPhase


DEFAULT_STATIC_STATES: Tuple[str, ...] = ("static01", "static02", "static03")
DEFAULT_FORWARD_TRANSITIONS: Tuple[str, ...] = ("transition01", "transition02")
DEFAULT_REVERSE_TRANSITIONS: Tuple[str, ...] = ("return02", "return01")


@dataclass(frozen=True)
class TransitionMappingEntry:
    """One edge of the mapping table (traversable in both directions)"""
    from_state: str
    to_state: str
    forward_animation: str
    reverse_animation: str
    forward_sound: Optional[str] = None
    reverse_sound: Optional[str] = None


@dataclass(frozen=True)
class ReceiverConfig:
    """
    Immutable receiver configuration parsed from host fields.

    `reverse_transitions` is stored already reversed relative to the order
    the admin typed it in, so it is indexed by destination position.
    """
    action_id: str = ""
    admin_only: bool = False
    role_restricted: bool = False
    required_role: str = ""
    sound: str = ""
    volume: float = 1.0
    disable_local_audio: bool = False
    animation_mode: AnimationMode = AnimationMode.REACTIVE
    reactive_animation: str = "active"
    default_animation: str = "default"
    cooldown: float = 1.0
    transition_mode: TransitionMode = TransitionMode.CYCLE
    static_states: Tuple[str, ...] = DEFAULT_STATIC_STATES
    forward_transitions: Tuple[str, ...] = DEFAULT_FORWARD_TRANSITIONS
    reverse_transitions: Tuple[str, ...] = tuple(reversed(DEFAULT_REVERSE_TRANSITIONS))
    initial_state: str = "static01"
    mapping: Tuple[TransitionMappingEntry, ...] = field(default_factory=tuple)

    @property
    def is_cycle(self) -> bool:
        return (
            self.animation_mode == AnimationMode.TRANSITION
            and self.transition_mode == TransitionMode.CYCLE
        )

    @property
    def is_mapping(self) -> bool:
        return (
            self.animation_mode == AnimationMode.TRANSITION
            and self.transition_mode == TransitionMode.MAPPING
        )


@dataclass
class ReceiverRuntimeState:
    """
    Mutable receiver state.

    Only current_state and direction are persisted (host object store).
    """
    current_state: Optional[str] = None
    current_index: int = 0
    direction: Optional[Direction] = None
    phase: ReceiverPhase = ReceiverPhase.IDLE
    last_trigger_time: Optional[float] = None

    @property
    def busy(self) -> bool:
        """True while a transition is in flight (single-flight guard)"""
        return self.phase != ReceiverPhase.IDLE
