"""
Managers for configuration and component settings
"""

from .config_manager import ConfigManager
from .settings_manager import SettingsManager

__all__ = ['ConfigManager', 'SettingsManager']
