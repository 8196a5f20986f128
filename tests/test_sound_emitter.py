import asyncio

import pytest

from host.simulated_host import SimulatedHost
from lifecycle.task_registry import TaskRegistry
from models.domain import Position
from models.messages import ACTION_RELAY_SOUND
from services.sound_emitter import SoundEmitter


@pytest.mark.asyncio
async def test_local_audio_plays_stops_and_relays(wait_until):
    host = SimulatedHost()
    emitter = SoundEmitter(host)

    audio_id = await emitter.emit("door", "sounds/creak.mp3", 0.5, 0.02, Position(1, 0, 2))

    assert audio_id == "audio-1"
    sound = host.sounds[0]
    assert sound.url == "https://assets.local/assetlink/sounds/creak.mp3"
    assert sound.volume == 0.5
    assert sound.position == Position(1, 0, 2)

    relay = host.messages_with_action(ACTION_RELAY_SOUND)
    assert relay == [{
        "action": "relaySound",
        "sourceID": "door",
        "soundFile": "sounds/creak.mp3",
        "volume": 0.5,
        "duration": 20,
    }]

    await wait_until(lambda: sound.stopped)


@pytest.mark.asyncio
async def test_local_audio_off_only_relays():
    host = SimulatedHost()

    assert await SoundEmitter(host).emit("door", "creak.mp3", 1.0, 1.0, Position(), local_audio=False) is None
    assert host.sounds == []
    assert len(host.messages_with_action(ACTION_RELAY_SOUND)) == 1


@pytest.mark.asyncio
async def test_empty_sound_does_nothing():
    host = SimulatedHost()

    await SoundEmitter(host).emit("door", "  ", 1.0, 1.0, Position())

    assert host.sounds == []
    assert host.messages == []


@pytest.mark.asyncio
async def test_cancelled_stop_task_still_stops_sound(wait_until):
    host = SimulatedHost()
    emitter = SoundEmitter(host)

    await emitter.play_for("creak.mp3", 1.0, 10.0, Position(), owner="door")
    await asyncio.sleep(0)
    assert TaskRegistry.instance().cancel_owner("door") == 1

    await wait_until(lambda: host.sounds[0].stopped)
