"""Scene loading used by main_asyncio.py."""

import pytest

from host.simulated_host import SimulatedHost
from main_asyncio import load_scene_components, read_scene
from managers.config_manager import SRC_DIR
from models.enums import ComponentKind
from plugin.asset_link import AssetLinkPlugin

SCENE_PATH = str(SRC_DIR / "config" / "scene.yaml")


def test_read_scene_missing_or_broken(tmp_path):
    broken = tmp_path / "scene.yaml"
    broken.write_text("objects: [unclosed", encoding="utf-8")

    assert read_scene(None) == {}
    assert read_scene(str(tmp_path / "missing.yaml")) == {}
    assert read_scene(str(broken)) == {}


@pytest.mark.asyncio
async def test_shipped_scene_loads_every_component(plugin_config):
    scene = read_scene(SCENE_PATH)
    host = SimulatedHost.from_scene(scene)
    plugin = AssetLinkPlugin(host, plugin_config)
    host.attach(plugin.on_message)
    await plugin.on_load()
    try:
        assert await load_scene_components(plugin, scene) == 5
        kinds = {oid: c.kind for oid, c in plugin.components.items()}
        assert kinds["door"] == ComponentKind.RECEIVER
        assert kinds["door-speaker"] == ComponentKind.RELAY
        assert host.user.is_admin
    finally:
        await plugin.unload()


@pytest.mark.asyncio
async def test_unknown_kind_is_skipped(plugin):
    scene = {
        "objects": {
            "a": {"component": {"kind": "asset-link-trigger", "fields": {"actionID": "x"}}},
            "b": {"component": {"kind": "teleporter"}},
            "c": {"properties": {"color": "red"}},
        }
    }

    assert await load_scene_components(plugin, scene) == 1
    assert list(plugin.components) == ["a"]
