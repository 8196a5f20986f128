"""
Settings Manager - Parses host component fields into typed configs

Host fields are loosely typed (numbers and booleans may arrive as strings).
They are parsed once here, at the configuration boundary, into frozen
dataclasses; components never re-parse fields at use sites.
"""

import json
from typing import Any, List, Mapping, Optional

from models.enums import InputMode, AnimationMode, TransitionMode
from models.domain.trigger import TriggerConfig
from models.domain.relay import RelayConfig
from models.domain.receiver import (
    ReceiverConfig,
    TransitionMappingEntry,
    DEFAULT_STATIC_STATES,
    DEFAULT_FORWARD_TRANSITIONS,
    DEFAULT_REVERSE_TRANSITIONS,
)
from utils.field_parser import FieldParser
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

DEFAULT_PROXIMITY_DISTANCE = 2.0
DEFAULT_REQUIRED_USERS = 2
DEFAULT_COOLDOWN = 1.0
DEFAULT_VOLUME = 1.0


class SettingsManager:
    """
    Builds component configs from raw host fields.

    Example:
        manager = SettingsManager()
        cfg = manager.build_receiver_config({"animationMode": "Transition", "cooldown": "2"})
        cfg.cooldown  # 2.0
    """

    # ------------------------------------------------------------------
    # Trigger
    # ------------------------------------------------------------------

    def build_trigger_config(self, fields: Mapping[str, Any]) -> TriggerConfig:
        distance = FieldParser.to_float(fields.get("proximityDistance"), DEFAULT_PROXIMITY_DISTANCE, minimum=0)
        if distance == 0:
            distance = DEFAULT_PROXIMITY_DISTANCE

        return TriggerConfig(
            input_mode=FieldParser.to_enum(InputMode, fields.get("inputType"), InputMode.ON_CLICK),
            proximity_distance=distance,
            required_user_count=FieldParser.to_int(fields.get("requiredUserCount"), DEFAULT_REQUIRED_USERS, minimum=1),
            action_id=FieldParser.to_str(fields.get("actionID")),
            admin_only=FieldParser.to_bool(fields.get("adminOnly")),
            role_restricted=FieldParser.to_bool(fields.get("roleRestricted")),
            required_role=FieldParser.to_str(fields.get("requiredRole")),
            assign_role=FieldParser.to_str(fields.get("assignRole")),
        )

    # ------------------------------------------------------------------
    # Receiver
    # ------------------------------------------------------------------

    def build_receiver_config(self, fields: Mapping[str, Any]) -> ReceiverConfig:
        reverse_input = FieldParser.to_list(fields.get("reverseTransitions"), list(DEFAULT_REVERSE_TRANSITIONS))

        return ReceiverConfig(
            action_id=FieldParser.to_str(fields.get("actionID")),
            admin_only=FieldParser.to_bool(fields.get("adminOnly")),
            role_restricted=FieldParser.to_bool(fields.get("roleRestricted")),
            required_role=FieldParser.to_str(fields.get("requiredRole")),
            sound=FieldParser.to_str(fields.get("sound")),
            volume=FieldParser.to_float(fields.get("volume"), DEFAULT_VOLUME, minimum=0, maximum=1),
            disable_local_audio=FieldParser.to_bool(fields.get("disableLocalAudio")),
            animation_mode=FieldParser.to_enum(AnimationMode, fields.get("animationMode"), AnimationMode.REACTIVE),
            reactive_animation=FieldParser.to_str(fields.get("reactiveAnimation"), "active"),
            default_animation=FieldParser.to_str(fields.get("defaultAnimation"), "default"),
            cooldown=FieldParser.to_float(fields.get("cooldown"), DEFAULT_COOLDOWN, minimum=0),
            transition_mode=FieldParser.to_enum(TransitionMode, fields.get("transitionMode"), TransitionMode.CYCLE),
            static_states=tuple(FieldParser.to_list(fields.get("staticStates"), list(DEFAULT_STATIC_STATES))),
            forward_transitions=tuple(
                FieldParser.to_list(fields.get("forwardTransitions"), list(DEFAULT_FORWARD_TRANSITIONS))
            ),
            # Admins list reverse transitions in travel order; index them by destination
            reverse_transitions=tuple(reversed(reverse_input)),
            initial_state=FieldParser.to_str(fields.get("initialState"), "static01"),
            mapping=tuple(self.parse_mapping(fields.get("transitionMapping"))),
        )

    def parse_mapping(self, raw: Any) -> List[TransitionMappingEntry]:
        """
        Parse the transition mapping JSON text.

        Invalid JSON (or a non-list document) yields an empty mapping.
        Entries missing any of from/to/forward/return are skipped.
        """
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return []

        if isinstance(raw, str):
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                log.warn("Invalid transition mapping JSON, using empty mapping", error=str(e))
                return []
        else:
            data = raw

        if not isinstance(data, list):
            log.warn("Transition mapping must be a JSON array, using empty mapping",
                     got=type(data).__name__)
            return []

        entries: List[TransitionMappingEntry] = []
        for i, item in enumerate(data):
            entry = self._parse_mapping_entry(item)
            if entry is None:
                log.warn(f"Skipping malformed mapping entry #{i}", entry=item)
                continue
            entries.append(entry)
        return entries

    @staticmethod
    def _parse_mapping_entry(item: Any) -> Optional[TransitionMappingEntry]:
        if not isinstance(item, dict):
            return None

        required = ("from", "to", "forward", "return")
        if not all(isinstance(item.get(k), str) and item.get(k).strip() for k in required):
            return None

        def _optional(key: str) -> Optional[str]:
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        return TransitionMappingEntry(
            from_state=item["from"].strip(),
            to_state=item["to"].strip(),
            forward_animation=item["forward"].strip(),
            reverse_animation=item["return"].strip(),
            forward_sound=_optional("soundForward"),
            reverse_sound=_optional("soundReturn"),
        )

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------

    def build_relay_config(self, fields: Mapping[str, Any]) -> RelayConfig:
        return RelayConfig(source_id=FieldParser.to_str(fields.get("sourceID")))

