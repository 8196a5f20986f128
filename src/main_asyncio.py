"""
main_asyncio.py - Application entry point for Asset Link
--------------------------------------------------------

Runs the plugin against the simulated host:
- loads config and the scene
- wires the plugin, its components and the admin API
- waits for Ctrl+C / SIGTERM and shuts down gracefully
"""

import sys

# Set UTF-8 encoding for output before the logger writes anything
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from api.dependencies import set_service_container
from api.main import create_app
from host.simulated_host import SimulatedHost
from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import (
    AllTasksCancellationHandler,
    APIServerShutdownHandler,
    PluginShutdownHandler,
)
from lifecycle.shutdown_coordinator import ShutdownCoordinator
from lifecycle.task_registry import TaskCategory, create_tracked_task
from managers.config_manager import ConfigManager
from models.config import PluginConfig
from plugin.asset_link import AssetLinkPlugin
from services.service_container import ServiceContainer
from utils.logger import get_logger, configure_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# Scene
# ---------------------------------------------------------------------------

def read_scene(path: Optional[str]) -> Dict[str, Any]:
    """Read the simulated scene YAML (empty scene if missing or broken)"""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as ex:
        log.error("Failed to load scene, starting with an empty one", path=path, error=str(ex))
        return {}


async def load_scene_components(plugin: AssetLinkPlugin, scene: Dict[str, Any]) -> int:
    """Attach the components declared in the scene; returns how many loaded"""
    loaded = 0
    for object_id, obj in (scene.get("objects") or {}).items():
        component = (obj or {}).get("component")
        if not component:
            continue
        try:
            await plugin.load_component(component.get("kind"), object_id, component.get("fields") or {})
            loaded += 1
        except ValueError as ex:
            log.error("Skipping scene object with unknown component kind", object=object_id, error=str(ex))
    return loaded


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main(config: Optional[PluginConfig] = None):
    """Main async entry point (dependency injection and event loop startup)."""

    # ========================================================================
    # 1. CONFIG + LOGGING
    # ========================================================================

    if config is None:
        config = ConfigManager().load()
    configure_logger(config.logging.level, config.logging.use_colors)

    log.info("Starting Asset Link...")

    # ========================================================================
    # 2. HOST + PLUGIN
    # ========================================================================

    scene = read_scene(config.scene_path)
    host = SimulatedHost.from_scene(scene, settings_push=config.timing.settings_push_supported)
    plugin = AssetLinkPlugin(host, config)
    host.attach(plugin.on_message)

    await plugin.on_load()
    count = await load_scene_components(plugin, scene)
    log.info(f"Scene loaded: {count} component(s)", user=plugin.user_id)

    # ========================================================================
    # 3. SHUTDOWN COORDINATOR + API
    # ========================================================================

    coordinator = ShutdownCoordinator()
    set_service_container(ServiceContainer.for_plugin(plugin, coordinator))

    coordinator.register(PluginShutdownHandler(plugin))

    exclude = []
    if config.api.enabled:
        api_server = APIServerWrapper(create_app(), host=config.api.host, port=config.api.port)
        api_task = create_tracked_task(
            api_server.start(),
            category=TaskCategory.API,
            description="FastAPI/Uvicorn Server"
        )
        coordinator.register(APIServerShutdownHandler(api_server))
        exclude.append(api_task)
    else:
        log.info("Admin API disabled")

    coordinator.register(AllTasksCancellationHandler(exclude_tasks=exclude))

    loop = asyncio.get_running_loop()
    coordinator.setup_signal_handlers(loop)

    log.info("Asset Link running. Waiting for exit signal...")

    await coordinator.wait_for_shutdown()

    await coordinator.shutdown_all()
    set_service_container(None)
    log.info("Asset Link shut down cleanly", reason=coordinator.shutdown_reason)


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}", exception=e)
        sys.exit(1)
