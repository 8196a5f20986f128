"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files and builds the typed PluginConfig.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from models.config import PluginConfig, TimingConfig, ApiConfig, LoggingConfig
from models.enums import LogLevel
from utils.field_parser import FieldParser
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).resolve().parent.parent


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes include: directive to load modular YAML files.
    Falls back to factory defaults when the main file is missing or broken.

    Example:
        config = ConfigManager()
        plugin_config = config.load()

        plugin_config.timing.proximity_poll_interval  # 0.1
        plugin_config.api.port                        # 8000
    """

    def __init__(
        self,
        config_path: Union[str, Path] = "config/config.yaml",
        defaults_path: Union[str, Path] = "config/factory_defaults.yaml",
    ):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml (relative paths resolve against src/)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict[str, Any] = {}
        self.plugin_config: PluginConfig = PluginConfig()

    @staticmethod
    def _resolve(path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else SRC_DIR / path

    def load(self) -> PluginConfig:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults on failure (or built-in defaults
           if that fails too)
        5. Build PluginConfig

        Returns:
            Parsed PluginConfig
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if 'include' in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config['include'], self.config_path.parent)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._load_factory_defaults()

        self.plugin_config = self._build_plugin_config(self.data)
        return self.plugin_config

    def _load_factory_defaults(self) -> Dict[str, Any]:
        try:
            with open(self.factory_defaults_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load factory defaults, using built-in defaults", error=str(ex))
            return {}

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["timing.yaml", "api.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict
        """
        merged = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    file_data = yaml.safe_load(f)
                    if file_data:
                        merged.update(file_data)
                        log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except Exception as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    # ===== Typed config =====

    def _build_plugin_config(self, data: Dict[str, Any]) -> PluginConfig:
        plugin = data.get("plugin") or {}
        timing = data.get("timing") or {}
        api = data.get("api") or {}
        logging_cfg = data.get("logging") or {}

        defaults = TimingConfig()
        timing_config = TimingConfig(
            proximity_poll_interval=FieldParser.to_float(
                timing.get("proximity_poll_interval"), defaults.proximity_poll_interval, minimum=0.01),
            trigger_settings_poll_interval=FieldParser.to_float(
                timing.get("trigger_settings_poll_interval"), defaults.trigger_settings_poll_interval, minimum=0.01),
            receiver_settings_poll_interval=FieldParser.to_float(
                timing.get("receiver_settings_poll_interval"), defaults.receiver_settings_poll_interval, minimum=0.01),
            settings_push_supported=FieldParser.to_bool(
                timing.get("settings_push_supported"), defaults.settings_push_supported),
            default_animation_duration=FieldParser.to_float(
                timing.get("default_animation_duration"), defaults.default_animation_duration, minimum=0),
        )

        api_defaults = ApiConfig()
        api_config = ApiConfig(
            enabled=FieldParser.to_bool(api.get("enabled"), api_defaults.enabled),
            host=FieldParser.to_str(api.get("host"), api_defaults.host),
            port=FieldParser.to_int(api.get("port"), api_defaults.port, minimum=1),
            admin_token=FieldParser.to_str(api.get("admin_token")) or None,
        )

        logging_config = LoggingConfig(
            level=self._parse_level(logging_cfg.get("level")),
            use_colors=FieldParser.to_bool(logging_cfg.get("use_colors"), True),
        )

        config = PluginConfig(
            plugin_id=FieldParser.to_str(plugin.get("id"), "assetlink"),
            role_store_path=self._optional_path(plugin.get("role_store")),
            scene_path=self._optional_path(plugin.get("scene")),
            timing=timing_config,
            api=api_config,
            logging=logging_config,
        )

        log.info(
            "Plugin config loaded",
            plugin_id=config.plugin_id,
            proximity_poll=f"{timing_config.proximity_poll_interval}s",
            settings_push=timing_config.settings_push_supported,
            api=f"{api_config.host}:{api_config.port}" if api_config.enabled else "disabled",
        )
        return config

    @staticmethod
    def _parse_level(value: Any) -> LogLevel:
        if isinstance(value, str):
            try:
                return LogLevel[value.strip().upper()]
            except KeyError:
                log.warn(f"Unknown log level '{value}', using INFO")
        return LogLevel.INFO

    def _optional_path(self, value: Any) -> Optional[str]:
        text = FieldParser.to_str(value)
        if not text:
            return None
        return str(self._resolve(text))
