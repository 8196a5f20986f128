"""
Transition planning for receivers in Transition mode

Pure functions: given the receiver config and its current position in the
state graph, decide which animation to play and where the receiver ends up.
Execution (timing, sound, persistence) lives in components.receiver.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from models.domain import ReceiverConfig, TransitionMappingEntry
from models.enums import Direction

FALLBACK_FORWARD_ANIMATION = "transition01"
FALLBACK_REVERSE_ANIMATION = "return01"


@dataclass(frozen=True)
class TransitionStep:
    """Planned transition"""
    animation: str
    target_state: str
    direction: Direction
    target_index: Optional[int] = None   # Cycle mode only
    sound: Optional[str] = None          # Per-entry override (mapping mode)


def normalize_direction(index: int, length: int, direction: Optional[Direction]) -> Direction:
    """
    Bounce direction at the ends of the static state sequence.

    Last index → REVERSE, index 0 → FORWARD, otherwise keep (unset → FORWARD).
    """
    if index >= length - 1:
        return Direction.REVERSE
    if index <= 0:
        return Direction.FORWARD
    return direction or Direction.FORWARD


def _pick(animations: Sequence[str], index: int, fallback: str) -> str:
    if 0 <= index < len(animations) and animations[index]:
        return animations[index]
    if animations:
        return animations[0]
    return fallback


def plan_cycle_step(config: ReceiverConfig, index: int,
                    direction: Optional[Direction]) -> Optional[TransitionStep]:
    """
    Next step of the bidirectional cycle.

    Forward steps play forward_transitions[index]; reverse steps play
    reverse_transitions[destination] (the list is stored reversed).

    Returns:
        None when the sequence has nowhere to go (fewer than two states)
    """
    states = config.static_states
    direction = normalize_direction(index, len(states), direction)

    if direction == Direction.FORWARD:
        target = index + 1
        animation = _pick(config.forward_transitions, index, FALLBACK_FORWARD_ANIMATION)
    else:
        target = index - 1
        animation = _pick(config.reverse_transitions, target, FALLBACK_REVERSE_ANIMATION)

    if not 0 <= target < len(states):
        return None

    return TransitionStep(
        animation=animation,
        target_state=states[target],
        direction=direction,
        target_index=target,
    )


def plan_mapping_step(mapping: Sequence[TransitionMappingEntry],
                      current_state: Optional[str]) -> Optional[TransitionStep]:
    """
    Next step through the mapping table.

    The first entry leaving the current state wins (forward). Only when none
    exists is an entry arriving at the current state walked back (reverse).

    Returns:
        None when no entry touches the current state
    """
    for entry in mapping:
        if entry.from_state == current_state:
            return TransitionStep(
                animation=entry.forward_animation,
                target_state=entry.to_state,
                direction=Direction.FORWARD,
                sound=entry.forward_sound,
            )

    for entry in mapping:
        if entry.to_state == current_state:
            return TransitionStep(
                animation=entry.reverse_animation,
                target_state=entry.from_state,
                direction=Direction.REVERSE,
                sound=entry.reverse_sound,
            )

    return None
