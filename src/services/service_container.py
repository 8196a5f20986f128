"""Service Container - Dependency injection container for the admin API"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from lifecycle.task_registry import TaskRegistry
from models.config import PluginConfig
from services.event_bus import EventBus
from services.role_registry import RoleRegistry

if TYPE_CHECKING:
    from lifecycle.shutdown_coordinator import ShutdownCoordinator
    from plugin.asset_link import AssetLinkPlugin


@dataclass
class ServiceContainer:
    """
    Aggregates the plugin and its shared services for API endpoints.

    Usage:
        services = ServiceContainer.for_plugin(plugin)
        set_service_container(services)

        @router.get("/roles")
        async def get_roles(services: ServiceContainer = Depends(get_service_container)):
            return services.roles.assignments()
    """

    plugin: "AssetLinkPlugin"
    event_bus: EventBus
    roles: RoleRegistry
    config: PluginConfig
    task_registry: TaskRegistry
    shutdown: Optional["ShutdownCoordinator"] = None

    @classmethod
    def for_plugin(cls, plugin: "AssetLinkPlugin",
                   shutdown: Optional["ShutdownCoordinator"] = None) -> "ServiceContainer":
        return cls(
            plugin=plugin,
            event_bus=plugin.event_bus,
            roles=plugin.roles,
            config=plugin.config,
            task_registry=TaskRegistry.instance(),
            shutdown=shutdown,
        )
