"""
Tests for ConfigManager: include merging, fallbacks and typed parsing.
"""

from pathlib import Path

import pytest

from managers.config_manager import ConfigManager, SRC_DIR
from models.config import PluginConfig
from models.enums import LogLevel


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def config_dir(tmp_path):
    write(tmp_path / "config.yaml", "include:\n  - timing.yaml\n  - api.yaml\n")
    write(tmp_path / "timing.yaml", "timing:\n  proximity_poll_interval: 0.25\n  settings_push_supported: false\n")
    write(tmp_path / "api.yaml", "api:\n  port: 9001\n  admin_token: secret\n")
    return tmp_path


def test_include_based_config(config_dir):
    config = ConfigManager(config_dir / "config.yaml", config_dir / "missing.yaml").load()

    assert config.timing.proximity_poll_interval == 0.25
    assert config.timing.settings_push_supported is False
    assert config.api.port == 9001
    assert config.api.admin_token == "secret"
    # sections not included keep their defaults
    assert config.plugin_id == "assetlink"
    assert config.logging.level == LogLevel.INFO


def test_monolithic_config(tmp_path):
    path = write(tmp_path / "config.yaml", "plugin:\n  id: demo\nlogging:\n  level: debug\n  use_colors: false\n")

    config = ConfigManager(path, tmp_path / "missing.yaml").load()

    assert config.plugin_id == "demo"
    assert config.logging.level == LogLevel.DEBUG
    assert config.logging.use_colors is False


def test_missing_include_falls_back_to_factory_defaults(tmp_path):
    path = write(tmp_path / "config.yaml", "include:\n  - nope.yaml\n")
    defaults = write(tmp_path / "defaults.yaml", "api:\n  port: 8123\n")

    manager = ConfigManager(path, defaults)
    config = manager.load()

    assert config.api.port == 8123
    assert manager.data == {"api": {"port": 8123}}


def test_builtin_defaults_when_everything_missing(tmp_path):
    config = ConfigManager(tmp_path / "a.yaml", tmp_path / "b.yaml").load()

    assert config == PluginConfig()


def test_invalid_values_use_defaults(tmp_path):
    path = write(
        tmp_path / "config.yaml",
        "timing:\n  proximity_poll_interval: fast\n  default_animation_duration: -3\n"
        "api:\n  port: 0\n  admin_token: ''\n"
        "logging:\n  level: LOUD\n",
    )

    config = ConfigManager(path, tmp_path / "missing.yaml").load()

    assert config.timing.proximity_poll_interval == 0.1
    assert config.timing.default_animation_duration == 2.0
    assert config.api.port == 8000
    assert config.api.admin_token is None
    assert config.logging.level == LogLevel.INFO


def test_relative_paths_resolve_against_src(tmp_path):
    path = write(tmp_path / "config.yaml", "plugin:\n  role_store: state/roles.json\n  scene: ''\n")

    config = ConfigManager(path, tmp_path / "missing.yaml").load()

    assert config.role_store_path == str(SRC_DIR / "state" / "roles.json")
    assert config.scene_path is None


def test_shipped_config_loads():
    config = ConfigManager().load()

    assert config.plugin_id == "assetlink"
    assert config.api.admin_token is None
    assert config.scene_path == str(SRC_DIR / "config" / "scene.yaml")
