"""
Asset Link Plugin - Top-level plugin instance

Owns the shared services (event bus, role registry, settings parsing) and
the table of live components. The host drives it through:

    on_load()                                   plugin start
    load_component(kind, object_id, fields)     object gains a component
    update_component_fields(object_id, fields)  settings edited
    click(object_id)                            object clicked
    on_menu_action(field_id, value)             role panel edited
    on_message(payload)                         broadcast received
    unload_component(object_id)                 object removed
    unload()                                    plugin stop
"""

import uuid
from typing import Any, Dict, List, Optional, Type, Union

from components import BaseComponent, ComponentContext, TriggerComponent, ReceiverComponent, RelayComponent
from host.host_interface import IHost
from managers.settings_manager import SettingsManager
from models.config import PluginConfig
from models.enums import ComponentKind
from models.events import (
    EventType,
    ComponentLoadedEvent,
    ComponentUnloadedEvent,
    TriggerReceivedEvent,
    RelaySoundReceivedEvent,
)
from models.messages import MessageDecodeError, TriggerMessage, decode_message
from models.settings_schema import COMPONENT_DEFINITIONS, role_panel_definition
from services.animation_timing import AnimationTiming
from services.event_bus import EventBus
from services.middleware import log_middleware
from services.role_registry import RoleRegistry
from services.role_store import RoleStore
from services.sound_emitter import SoundEmitter
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

COMPONENT_CLASSES: Dict[ComponentKind, Type[BaseComponent]] = {
    ComponentKind.TRIGGER: TriggerComponent,
    ComponentKind.RECEIVER: ReceiverComponent,
    ComponentKind.RELAY: RelayComponent,
}


class AssetLinkPlugin:
    """
    Asset Link plugin

    Example:
        plugin = AssetLinkPlugin(host, config)
        await plugin.on_load()
        await plugin.load_component("asset-link-trigger", "button-01", {"actionID": "door"})
        await plugin.click("button-01")
    """

    def __init__(
        self,
        host: IHost,
        config: Optional[PluginConfig] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.host = host
        self.config = config or PluginConfig()
        self.event_bus = event_bus or EventBus()
        self.event_bus.add_middleware(log_middleware)

        store = RoleStore(self.config.role_store_path) if self.config.role_store_path else None
        self.roles = RoleRegistry(self.event_bus, store)
        self.settings = SettingsManager()
        self.instance_id = uuid.uuid4().hex[:12]

        self.context = ComponentContext(
            host=host,
            event_bus=self.event_bus,
            roles=self.roles,
            settings=self.settings,
            timing=self.config.timing,
            animation_timing=AnimationTiming(host, self.config.timing.default_animation_duration),
            sound=SoundEmitter(host),
            instance_id=self.instance_id,
        )

        self.components: Dict[str, BaseComponent] = {}
        self.user_id: Optional[str] = None
        self.is_admin = False
        self.loaded = False
        self.roles_draft = ""

    # -------------------------------
    # Plugin lifecycle
    # -------------------------------

    async def on_load(self) -> None:
        for object_id in list(self.components):
            await self.unload_component(object_id)
        await self.roles.restore()
        self.roles_draft = self.roles.available_roles_text

        self.user_id = await self.host.get_user_id()
        self.is_admin = await self.host.is_admin()

        if self.is_admin:
            await self._register_role_menu()
            self.event_bus.unsubscribe(EventType.ROLES_CHANGED, self._on_roles_changed)
            self.event_bus.subscribe(EventType.ROLES_CHANGED, self._on_roles_changed, priority=-10)

        for definition in COMPONENT_DEFINITIONS.values():
            await self.host.register_component(definition.to_dict())

        self.loaded = True
        log.info("Asset Link loaded", instance=self.instance_id, user=self.user_id, admin=self.is_admin)

    async def unload(self) -> None:
        for object_id in list(self.components):
            await self.unload_component(object_id)
        self.loaded = False
        log.info("Asset Link unloaded", instance=self.instance_id)

    # -------------------------------
    # Component lifecycle
    # -------------------------------

    async def load_component(
        self,
        kind: Union[ComponentKind, str],
        object_id: str,
        fields: Dict[str, Any],
    ) -> BaseComponent:
        """
        Attach a component to a host object (replaces any existing one)

        Raises:
            ValueError: unknown component kind
        """
        kind = kind if isinstance(kind, ComponentKind) else ComponentKind(kind)

        if object_id in self.components:
            await self.unload_component(object_id)

        component = COMPONENT_CLASSES[kind](object_id, fields, self.context)
        self.components[object_id] = component
        await component.load()

        await self.event_bus.publish(ComponentLoadedEvent(object_id, kind))
        return component

    async def update_component_fields(self, object_id: str, fields: Dict[str, Any]) -> bool:
        component = self.components.get(object_id)
        if component is None:
            log.warn("Settings update for unknown object", object=object_id)
            return False
        await component.update_fields(fields)
        return True

    async def click(self, object_id: str) -> bool:
        component = self.components.get(object_id)
        if component is None:
            log.warn("Click on unknown object", object=object_id)
            return False
        await component.click()
        return True

    async def unload_component(self, object_id: str) -> bool:
        """Detach a component (idempotent)"""
        component = self.components.pop(object_id, None)
        if component is None:
            return False

        await component.unload()
        await self.event_bus.publish(ComponentUnloadedEvent(object_id, component.kind))
        return True

    def get_component(self, object_id: str) -> Optional[BaseComponent]:
        return self.components.get(object_id)

    def describe_components(self, kind: Optional[ComponentKind] = None) -> List[Dict[str, Any]]:
        return [
            c.describe() for c in self.components.values()
            if kind is None or c.kind == kind
        ]

    # -------------------------------
    # Messages
    # -------------------------------

    async def on_message(self, payload: Any) -> None:
        """Decode a broadcast payload and route it through the event bus"""
        try:
            message = decode_message(payload)
        except MessageDecodeError as e:
            log.debug("Ignoring broadcast payload", reason=str(e))
            return

        if isinstance(message, TriggerMessage):
            await self.event_bus.publish(TriggerReceivedEvent(message))
        else:
            await self.event_bus.publish(RelaySoundReceivedEvent(message))

    # -------------------------------
    # Admin actions
    # -------------------------------

    async def define_roles(self, text: str) -> None:
        """Save the role allow-list and notify components"""
        await self.roles.set_available_roles(text)
        self.roles_draft = self.roles.available_roles_text

    async def clear_all_roles(self) -> None:
        """Wipe every assignment and the allow-list"""
        await self.roles.clear(reset_allow_list=True)

    async def on_menu_action(self, field_id: str, value: Any = None) -> bool:
        """
        Role panel callbacks from the host

        "roles" edits the draft text, "saveRoles" saves the draft and
        "clearRoles" wipes everything. Returns False for unknown fields.
        """
        if field_id == "roles":
            self.roles_draft = "" if value is None else str(value)
        elif field_id == "saveRoles":
            await self.define_roles(self.roles_draft)
        elif field_id == "clearRoles":
            await self.clear_all_roles()
            self.roles_draft = ""
        else:
            log.debug("Ignoring menu action", field=field_id)
            return False
        return True

    async def _on_roles_changed(self, event) -> None:
        await self._register_role_menu()

    async def _register_role_menu(self) -> None:
        menu = role_panel_definition(self.roles.available_roles_text, self.roles.display())
        menu["icon"] = self.host.absolute_path("role-icon.png")
        await self.host.register_menu(menu)
