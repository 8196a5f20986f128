"""
Plugin runtime configuration models

Immutable configuration parsed from config.yaml by ConfigManager.
Component settings (per object) are NOT here - see managers.settings_manager.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.enums import LogLevel


@dataclass(frozen=True)
class TimingConfig:
    """Poll periods and fallbacks (seconds)"""
    proximity_poll_interval: float = 0.1
    trigger_settings_poll_interval: float = 0.5
    receiver_settings_poll_interval: float = 1.0
    # When the host pushes settings-changed notifications the fallback polls are not started
    settings_push_supported: bool = True
    default_animation_duration: float = 2.0


@dataclass(frozen=True)
class ApiConfig:
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    admin_token: Optional[str] = None   # None = admin API open (development)


@dataclass(frozen=True)
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True


@dataclass(frozen=True)
class PluginConfig:
    """Top-level plugin configuration"""
    plugin_id: str = "assetlink"
    role_store_path: Optional[str] = None   # None = roles kept in memory only
    scene_path: Optional[str] = None        # Simulated host scene (runner only)
    timing: TimingConfig = field(default_factory=TimingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
