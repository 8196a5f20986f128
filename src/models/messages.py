"""
Wire payloads exchanged through the host broadcast channel

Trigger → receivers:
    {"action": "trigger", "actionID", "instanceID", "userID", "objectID", "isAdmin"}

Receiver → secondary relays (duration in milliseconds):
    {"action": "relaySound", "sourceID", "soundFile", "volume", "duration"}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from utils.field_parser import FieldParser

ACTION_TRIGGER = "trigger"
ACTION_RELAY_SOUND = "relaySound"

DEFAULT_RELAY_DURATION_MS = 2000


class MessageDecodeError(ValueError):
    """Payload is not a well-formed Asset Link message"""


@dataclass(frozen=True)
class TriggerMessage:
    action_id: str
    instance_id: str
    user_id: str
    object_id: str
    is_admin: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "action": ACTION_TRIGGER,
            "actionID": self.action_id,
            "instanceID": self.instance_id,
            "userID": self.user_id,
            "objectID": self.object_id,
            "isAdmin": self.is_admin,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TriggerMessage":
        action_id = payload.get("actionID")
        if not isinstance(action_id, str):
            raise MessageDecodeError("trigger message without actionID")
        return cls(
            action_id=action_id,
            instance_id=str(payload.get("instanceID") or ""),
            user_id=str(payload.get("userID") or ""),
            object_id=str(payload.get("objectID") or ""),
            is_admin=payload.get("isAdmin") is True,
        )


@dataclass(frozen=True)
class RelaySoundMessage:
    source_id: str
    sound_file: str
    volume: float = 1.0
    duration_ms: int = DEFAULT_RELAY_DURATION_MS

    @property
    def duration(self) -> float:
        """Duration in seconds"""
        return self.duration_ms / 1000

    def to_payload(self) -> Dict[str, Any]:
        return {
            "action": ACTION_RELAY_SOUND,
            "sourceID": self.source_id,
            "soundFile": self.sound_file,
            "volume": self.volume,
            "duration": self.duration_ms,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RelaySoundMessage":
        source_id = payload.get("sourceID")
        sound_file = payload.get("soundFile")
        if not isinstance(source_id, str) or not isinstance(sound_file, str):
            raise MessageDecodeError("relaySound message without sourceID/soundFile")

        # Non-finite or out-of-range numbers fall back like settings fields do
        return cls(
            source_id=source_id,
            sound_file=sound_file,
            volume=FieldParser.to_float(payload.get("volume"), 1.0, minimum=0, maximum=1),
            duration_ms=int(FieldParser.to_float(payload.get("duration"), DEFAULT_RELAY_DURATION_MS, minimum=1)),
        )


Message = Union[TriggerMessage, RelaySoundMessage]


def decode_message(payload: Any) -> Message:
    """
    Decode a host message payload.

    Raises:
        MessageDecodeError: payload is not a dict or has an unknown action
    """
    if not isinstance(payload, dict):
        raise MessageDecodeError(f"payload must be a dict, got {type(payload).__name__}")

    action = payload.get("action")
    if action == ACTION_TRIGGER:
        return TriggerMessage.from_payload(payload)
    if action == ACTION_RELAY_SOUND:
        return RelaySoundMessage.from_payload(payload)
    raise MessageDecodeError(f"unknown action: {action!r}")
