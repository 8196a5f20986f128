"""Receiver component: reactive, cycle and mapping flows, gating, cooldown and persistence."""

import asyncio
import json

import pytest

from host.simulated_host import SimulatedHost
from models.enums import ReceiverPhase
from models.events import EventType
from models.messages import ACTION_RELAY_SOUND, TriggerMessage
from plugin.asset_link import AssetLinkPlugin

REACTIVE_FIELDS = {
    "actionID": "lamp",
    "animationMode": "Reactive",
    "reactiveAnimation": "active",
    "defaultAnimation": "default",
    "cooldown": 0.2,
}

CYCLE_FIELDS = {
    "actionID": "door",
    "animationMode": "Transition",
    "transitionMode": "Cycle",
    "staticStates": "s1, s2, s3",
    "forwardTransitions": "t1, t2",
    "reverseTransitions": "r2, r1",
    "cooldown": 0,
}

CYCLE_ANIMATIONS = [{"name": name, "duration": 0.02} for name in ("t1", "t2", "r1", "r2")]

MAPPING = [
    {"from": "closed", "to": "open", "forward": "opening", "return": "closing", "soundForward": "creak.mp3"},
]

MAPPING_FIELDS = {
    "actionID": "gate",
    "animationMode": "Transition",
    "transitionMode": "Mapping",
    "initialState": "closed",
    "transitionMapping": json.dumps(MAPPING),
    "cooldown": 0,
}


async def send_trigger(plugin, action_id, user_id="user-1", is_admin=False):
    message = TriggerMessage(action_id, "other-instance", user_id, "button", is_admin)
    await plugin.on_message(message.to_payload())


async def trigger_and_settle(plugin, receiver, action_id, wait_until):
    await send_trigger(plugin, action_id)
    assert receiver.runtime.busy
    await wait_until(lambda: not receiver.runtime.busy)


# ---------------------------------------------------------------------------
# Reactive
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_reactive_plays_then_reverts_then_cools_down(plugin, host, wait_until):
    host.add_object("lamp", animations=[{"name": "active", "duration": 0.05}])
    receiver = await plugin.load_component("asset-link-receiver", "lamp", REACTIVE_FIELDS)

    await send_trigger(plugin, "lamp")
    assert receiver.runtime.phase == ReceiverPhase.PLAYING

    await wait_until(lambda: receiver.runtime.phase == ReceiverPhase.COOLING_DOWN)
    assert host.animation_history("lamp") == ["active", "default"]

    # Dropped, not queued
    await send_trigger(plugin, "lamp")
    assert host.animation_history("lamp") == ["active", "default"]

    await wait_until(lambda: receiver.runtime.phase == ReceiverPhase.IDLE)
    await send_trigger(plugin, "lamp")
    await wait_until(lambda: host.animation_history("lamp")[-1] == "active")
    assert host.animation_history("lamp") == ["active", "default", "active"]


@pytest.mark.asyncio
async def test_reactive_does_not_persist_state(plugin, host, wait_until):
    host.add_object("lamp", animations=[{"name": "active", "duration": 0.02}])
    receiver = await plugin.load_component("asset-link-receiver", "lamp", dict(REACTIVE_FIELDS, cooldown=0))

    await trigger_and_settle(plugin, receiver, "lamp", wait_until)

    assert "currentState" not in host.objects["lamp"]


@pytest.mark.asyncio
async def test_trigger_dropped_while_busy(plugin, host):
    host.add_object("lamp", animations=[{"name": "active", "duration": 1}])
    receiver = await plugin.load_component("asset-link-receiver", "lamp", dict(REACTIVE_FIELDS, cooldown=0))

    assert receiver.handle_trigger()
    assert not receiver.handle_trigger()


@pytest.mark.asyncio
async def test_mismatched_or_empty_action_ignored(plugin, host):
    await plugin.load_component("asset-link-receiver", "lamp", REACTIVE_FIELDS)
    blank = await plugin.load_component("asset-link-receiver", "blank", dict(REACTIVE_FIELDS, actionID=""))

    await send_trigger(plugin, "door")
    await send_trigger(plugin, "")

    assert not plugin.get_component("lamp").runtime.busy
    assert not blank.runtime.busy


@pytest.mark.asyncio
async def test_admin_only_receiver(plugin, host):
    receiver = await plugin.load_component("asset-link-receiver", "lamp", dict(REACTIVE_FIELDS, adminOnly=True))

    await send_trigger(plugin, "lamp", is_admin=False)
    assert not receiver.runtime.busy

    await send_trigger(plugin, "lamp", is_admin=True)
    assert receiver.runtime.busy


@pytest.mark.asyncio
async def test_role_restricted_receiver_checks_sender(plugin, host):
    receiver = await plugin.load_component("asset-link-receiver", "lamp", dict(
        REACTIVE_FIELDS, roleRestricted=True, requiredRole="guard",
    ))
    await plugin.define_roles("guard")
    await plugin.roles.assign("guard-user", "guard")

    await send_trigger(plugin, "lamp", user_id="user-1")
    assert not receiver.runtime.busy

    await send_trigger(plugin, "lamp", user_id="guard-user")
    assert receiver.runtime.busy


@pytest.mark.asyncio
async def test_reactive_sound_is_played_and_relayed(plugin, host, wait_until):
    host.add_object("lamp", animations=[{"name": "active", "duration": 0.03}])
    await plugin.load_component("asset-link-receiver", "lamp", dict(
        REACTIVE_FIELDS, sound="hum.mp3", volume=0.4, x=2, y=3, height=1,
    ))

    await send_trigger(plugin, "lamp")
    await wait_until(lambda: host.sounds)

    sound = host.sounds[0]
    assert sound.url.endswith("/hum.mp3")
    assert sound.volume == 0.4
    assert (sound.position.x, sound.position.y, sound.position.z) == (2, 1, 3)

    relay = host.messages_with_action(ACTION_RELAY_SOUND)[0]
    assert relay["sourceID"] == "lamp"
    assert relay["duration"] == 30

    await wait_until(lambda: sound.stopped)


@pytest.mark.asyncio
async def test_disable_local_audio_only_relays(plugin, host, wait_until):
    host.add_object("lamp", animations=[{"name": "active", "duration": 0.02}])
    receiver = await plugin.load_component("asset-link-receiver", "lamp", dict(
        REACTIVE_FIELDS, sound="hum.mp3", disableLocalAudio=True, cooldown=0,
    ))

    await trigger_and_settle(plugin, receiver, "lamp", wait_until)

    assert host.sounds == []
    assert len(host.messages_with_action(ACTION_RELAY_SOUND)) == 1


@pytest.mark.asyncio
async def test_unload_cancels_flow_and_stops_sound(plugin, host, task_registry, wait_until):
    host.add_object("lamp", animations=[{"name": "active", "duration": 5}])
    receiver = await plugin.load_component("asset-link-receiver", "lamp", dict(REACTIVE_FIELDS, sound="hum.mp3"))

    await send_trigger(plugin, "lamp")
    await wait_until(lambda: host.sounds)
    await asyncio.sleep(0.01)

    await plugin.unload_component("lamp")

    await wait_until(lambda: not task_registry.owned_by("lamp"))
    await wait_until(lambda: host.sounds[0].stopped)
    assert receiver.runtime.phase == ReceiverPhase.IDLE
    assert host.animation_history("lamp") == ["active"]


# ---------------------------------------------------------------------------
# Cycle
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cycle_bounces_through_states(plugin, host, wait_until):
    host.add_object("door", animations=CYCLE_ANIMATIONS)
    receiver = await plugin.load_component("asset-link-receiver", "door", CYCLE_FIELDS)
    assert receiver.runtime.current_state == "s1"

    for _ in range(4):
        await trigger_and_settle(plugin, receiver, "door", wait_until)

    assert host.animation_history("door") == ["t1", "s2", "t2", "s3", "r2", "s2", "r1", "s1"]
    assert receiver.runtime.current_state == "s1"
    assert host.objects["door"]["currentDirection"] == 1


@pytest.mark.asyncio
async def test_cycle_cooldown_drops_trigger_after_commit(plugin, host, wait_until):
    host.add_object("door", animations=CYCLE_ANIMATIONS)
    receiver = await plugin.load_component("asset-link-receiver", "door", dict(CYCLE_FIELDS, cooldown=0.3))

    await trigger_and_settle(plugin, receiver, "door", wait_until)
    assert receiver.runtime.phase == ReceiverPhase.IDLE
    history = list(host.animation_history("door"))
    messages = len(host.messages)

    # Idle but still inside the cooldown window
    await send_trigger(plugin, "door")
    assert not receiver.runtime.busy
    assert host.animation_history("door") == history
    assert len(host.messages) == messages
    assert host.sounds == []
    assert receiver.runtime.current_state == "s2"

    await asyncio.sleep(0.3)
    await trigger_and_settle(plugin, receiver, "door", wait_until)
    assert receiver.runtime.current_state == "s3"


@pytest.mark.asyncio
async def test_cycle_persists_state_and_direction(plugin, host, wait_until):
    host.add_object("door", animations=CYCLE_ANIMATIONS)
    receiver = await plugin.load_component("asset-link-receiver", "door", CYCLE_FIELDS)
    committed = []
    plugin.event_bus.subscribe(EventType.RECEIVER_STATE_COMMITTED, committed.append)

    await trigger_and_settle(plugin, receiver, "door", wait_until)
    await trigger_and_settle(plugin, receiver, "door", wait_until)

    assert host.objects["door"]["currentState"] == "s3"
    assert host.objects["door"]["currentDirection"] == -1
    assert [e.state for e in committed] == ["s2", "s3"]


@pytest.mark.asyncio
async def test_cycle_restores_persisted_state(plugin, host):
    host.add_object("door", {"currentState": "s3", "currentDirection": -1}, CYCLE_ANIMATIONS)
    receiver = await plugin.load_component("asset-link-receiver", "door", CYCLE_FIELDS)

    assert receiver.runtime.current_state == "s3"
    assert receiver.runtime.current_index == 2
    assert receiver.runtime.direction.value == -1


@pytest.mark.asyncio
async def test_cycle_unknown_persisted_state_resets(plugin, host):
    host.add_object("door", {"currentState": "gone", "currentDirection": -1})
    receiver = await plugin.load_component("asset-link-receiver", "door", CYCLE_FIELDS)

    assert receiver.runtime.current_state == "s1"
    assert receiver.runtime.current_index == 0
    assert receiver.runtime.direction.value == 1


@pytest.mark.asyncio
async def test_cycle_settings_edit_revalidates_state(plugin, host):
    host.add_object("door", {"currentState": "s3"})
    receiver = await plugin.load_component("asset-link-receiver", "door", CYCLE_FIELDS)

    await plugin.update_component_fields("door", dict(CYCLE_FIELDS, staticStates="a, b"))

    assert receiver.runtime.current_state == "a"
    assert receiver.runtime.current_index == 0


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_mapping_walks_forward_then_back(plugin, host, wait_until):
    host.add_object("gate", animations=[{"name": "opening", "duration": 0.02}, {"name": "closing", "duration": 0.02}])
    receiver = await plugin.load_component("asset-link-receiver", "gate", MAPPING_FIELDS)
    assert receiver.runtime.current_state == "closed"

    await trigger_and_settle(plugin, receiver, "gate", wait_until)
    assert receiver.runtime.current_state == "open"
    assert host.objects["gate"]["currentState"] == "open"
    assert host.sounds[0].url.endswith("/creak.mp3")

    await trigger_and_settle(plugin, receiver, "gate", wait_until)
    assert receiver.runtime.current_state == "closed"
    assert host.animation_history("gate") == ["opening", "open", "closing", "closed"]
    # Reverse entry has no sound and the receiver has no default sound
    assert len(host.sounds) == 1


@pytest.mark.asyncio
async def test_mapping_persisted_state_wins_on_load(plugin, host):
    host.add_object("gate", {"currentState": "open"})
    receiver = await plugin.load_component("asset-link-receiver", "gate", MAPPING_FIELDS)

    assert receiver.runtime.current_state == "open"


@pytest.mark.asyncio
async def test_mapping_initial_state_change_resets(plugin, host):
    receiver = await plugin.load_component("asset-link-receiver", "gate", MAPPING_FIELDS)

    await plugin.update_component_fields("gate", dict(MAPPING_FIELDS, cooldown=1))
    assert receiver.runtime.current_state == "closed"

    await plugin.update_component_fields("gate", dict(MAPPING_FIELDS, initialState="open"))
    assert receiver.runtime.current_state == "open"


@pytest.mark.asyncio
async def test_mapping_without_matching_entry_returns_to_idle(plugin, host, wait_until):
    receiver = await plugin.load_component("asset-link-receiver", "gate", dict(MAPPING_FIELDS, initialState="elsewhere"))

    await trigger_and_settle(plugin, receiver, "gate", wait_until)

    assert receiver.runtime.current_state == "elsewhere"
    assert host.animation_history("gate") == []


@pytest.mark.asyncio
async def test_settings_poll_without_push(plugin_config, wait_until):
    host = SimulatedHost(supports_settings_push=False)
    plugin = AssetLinkPlugin(host, plugin_config)
    await plugin.on_load()
    receiver = await plugin.load_component("asset-link-receiver", "gate", dict(MAPPING_FIELDS))

    receiver.fields["initialState"] = "open"
    await wait_until(lambda: receiver.runtime.current_state == "open")

    await plugin.unload()
