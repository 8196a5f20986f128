"""Shared fixtures: a fresh task registry, a simulated host and a loaded plugin."""

import asyncio

import pytest
import pytest_asyncio

from host.simulated_host import SimulatedHost, SimulatedUser
from lifecycle.task_registry import TaskRegistry
from models.config import PluginConfig, TimingConfig
from models.domain import Position
from plugin.asset_link import AssetLinkPlugin

FAST_TIMING = TimingConfig(
    proximity_poll_interval=0.01,
    trigger_settings_poll_interval=0.02,
    receiver_settings_poll_interval=0.02,
    settings_push_supported=True,
    default_animation_duration=0.05,
)


@pytest.fixture(autouse=True)
def task_registry():
    return TaskRegistry.reset()


@pytest.fixture
def host():
    return SimulatedHost(user=SimulatedUser("user-1", is_admin=False, position=Position(0, 0, 0)))


@pytest.fixture
def plugin_config():
    return PluginConfig(timing=FAST_TIMING)


@pytest_asyncio.fixture
async def plugin(host, plugin_config):
    p = AssetLinkPlugin(host, plugin_config)
    host.attach(p.on_message)
    await p.on_load()
    yield p
    await p.unload()


@pytest.fixture
def wait_until():
    async def _wait(predicate, timeout: float = 1.0, interval: float = 0.005):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met in time")
            await asyncio.sleep(interval)
    return _wait
