import json

from managers.settings_manager import SettingsManager
from models.domain.receiver import DEFAULT_STATIC_STATES
from models.enums import AnimationMode, InputMode, TransitionMode


def test_trigger_config_defaults():
    cfg = SettingsManager().build_trigger_config({})

    assert cfg.input_mode == InputMode.ON_CLICK
    assert cfg.proximity_distance == 2.0
    assert cfg.required_user_count == 2
    assert cfg.action_id == ""
    assert not cfg.admin_only
    assert not cfg.role_restricted


def test_trigger_config_parses_loose_fields():
    cfg = SettingsManager().build_trigger_config({
        "inputType": "Multi-Proximity",
        "proximityDistance": "5",
        "requiredUserCount": "3",
        "actionID": " door ",
        "adminOnly": "true",
        "roleRestricted": True,
        "requiredRole": "guard",
        "assignRole": "visitor",
    })

    assert cfg.input_mode == InputMode.MULTI_PROXIMITY
    assert cfg.proximity_distance == 5.0
    assert cfg.required_user_count == 3
    assert cfg.action_id == "door"
    assert cfg.admin_only
    assert cfg.role_restricted
    assert cfg.required_role == "guard"
    assert cfg.assign_role == "visitor"


def test_zero_proximity_distance_uses_default():
    assert SettingsManager().build_trigger_config({"proximityDistance": 0}).proximity_distance == 2.0


def test_receiver_config_defaults():
    cfg = SettingsManager().build_receiver_config({})

    assert cfg.animation_mode == AnimationMode.REACTIVE
    assert cfg.transition_mode == TransitionMode.CYCLE
    assert cfg.static_states == DEFAULT_STATIC_STATES
    assert cfg.cooldown == 1.0
    assert cfg.volume == 1.0
    assert cfg.initial_state == "static01"
    assert cfg.mapping == ()


def test_receiver_volume_zero_is_kept():
    assert SettingsManager().build_receiver_config({"volume": 0}).volume == 0


def test_reverse_transitions_are_indexed_by_destination():
    cfg = SettingsManager().build_receiver_config({"reverseTransitions": "r2, r1"})
    assert cfg.reverse_transitions == ("r1", "r2")


def test_mapping_parses_entries_and_skips_malformed():
    raw = json.dumps([
        {"from": "a", "to": "b", "forward": "ab", "return": "ba", "soundForward": "x.mp3"},
        {"from": "b", "to": "c", "forward": "bc"},
        "not-a-dict",
    ])
    mapping = SettingsManager().parse_mapping(raw)

    assert len(mapping) == 1
    assert mapping[0].from_state == "a"
    assert mapping[0].forward_sound == "x.mp3"
    assert mapping[0].reverse_sound is None


def test_invalid_mapping_json_is_empty():
    manager = SettingsManager()
    assert manager.parse_mapping("{not json") == []
    assert manager.parse_mapping('{"from": "a"}') == []
    assert manager.parse_mapping("") == []


def test_relay_config():
    assert SettingsManager().build_relay_config({"sourceID": " door "}).source_id == "door"
