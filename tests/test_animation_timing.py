import pytest

from host.simulated_host import SimulatedHost
from services.animation_timing import AnimationTiming


class BrokenHost(SimulatedHost):
    async def get_animations(self, object_id):
        raise ConnectionError("host unavailable")


@pytest.mark.asyncio
async def test_first_substring_match_wins():
    host = SimulatedHost()
    host.add_object("door", animations=[
        {"name": "Door_Open_Fast", "duration": 1.5},
        {"name": "open", "duration": 3},
    ])
    timing = AnimationTiming(host)

    assert await timing.duration_of("door", "open") == 1.5


@pytest.mark.asyncio
@pytest.mark.parametrize("animations", [
    [{"name": "open", "duration": 0}],
    [{"name": "open", "duration": -1}],
    [{"name": "open", "duration": True}],
    [{"name": "open"}],
    [{"name": "close", "duration": 4}],
    "not json",
    '{"name": "open"}',
])
async def test_unusable_metadata_uses_default(animations):
    host = SimulatedHost()
    host.add_object("door", animations=animations)

    assert await AnimationTiming(host, default_duration=2.0).duration_of("door", "open") == 2.0


@pytest.mark.asyncio
async def test_host_failure_uses_default():
    assert await AnimationTiming(BrokenHost(), default_duration=0.5).duration_of("door", "open") == 0.5
