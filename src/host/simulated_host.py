import itertools
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from host.host_interface import IHost
from models.domain import Position, NearbyUser
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HOST)

MessageListener = Callable[[Dict[str, Any]], Awaitable[None]]


@dataclass
class PlayedSound:
    """One play_sound() call recorded by the simulated host"""
    audio_id: str
    url: str
    volume: float
    position: Position
    stopped: bool = False


@dataclass
class SimulatedUser:
    user_id: str = "local-user"
    is_admin: bool = False
    position: Position = field(default_factory=Position)


class SimulatedHost(IHost):
    """
    In-memory host used by the local runner and the test-suite.

    Records every effect (object updates, sounds, broadcast messages,
    registrations) and delivers broadcasts to every attached listener,
    sender included.
    """

    def __init__(
        self,
        user: Optional[SimulatedUser] = None,
        base_url: str = "https://assets.local/assetlink",
        supports_settings_push: bool = True,
    ):
        self.user = user or SimulatedUser()
        self.base_url = base_url.rstrip("/")
        self._supports_settings_push = supports_settings_push

        self.nearby_users: List[NearbyUser] = []
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.animations: Dict[str, Union[str, List[Dict[str, Any]]]] = {}

        self.updates: List[tuple] = []                 # (object_id, properties)
        self.sounds: List[PlayedSound] = []
        self.messages: List[Dict[str, Any]] = []
        self.components: List[Dict[str, Any]] = []
        self.menus: List[Dict[str, Any]] = []

        self._listeners: List[MessageListener] = []
        self._audio_ids = itertools.count(1)
        log.info("Simulated host initialized", user=self.user.user_id, admin=self.user.is_admin)

    # -------------------------------
    # Scene setup
    # -------------------------------

    @classmethod
    def from_scene(cls, scene: Dict[str, Any], settings_push: bool = True) -> "SimulatedHost":
        """
        Build a host from a scene document (see config/scene.yaml)

        `settings_push` is used when the scene has no settings_push key.

        Keys: user {id, admin, position}, nearby_users [{id, distance}],
        base_url, settings_push, objects {id: {properties, animations}}
        """
        user_data = scene.get("user") or {}
        pos = user_data.get("position") or {}
        user = SimulatedUser(
            user_id=str(user_data.get("id", "local-user")),
            is_admin=bool(user_data.get("admin", False)),
            position=Position(float(pos.get("x", 0)), float(pos.get("y", 0)), float(pos.get("z", 0))),
        )
        host = cls(
            user=user,
            base_url=scene.get("base_url", "https://assets.local/assetlink"),
            supports_settings_push=bool(scene.get("settings_push", settings_push)),
        )
        for entry in scene.get("nearby_users") or []:
            host.nearby_users.append(NearbyUser(str(entry.get("id")), entry.get("distance")))
        for object_id, obj in (scene.get("objects") or {}).items():
            host.add_object(object_id, obj.get("properties"), obj.get("animations"))
        return host

    def add_object(
        self,
        object_id: str,
        properties: Optional[Dict[str, Any]] = None,
        animations: Optional[Union[str, List[Dict[str, Any]]]] = None,
    ) -> None:
        self.objects[object_id] = dict(properties or {})
        if animations is not None:
            self.animations[object_id] = animations

    def attach(self, listener: MessageListener) -> None:
        """Subscribe a plugin instance to broadcast delivery"""
        self._listeners.append(listener)

    def detach(self, listener: MessageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def move_user(self, x: float, y: float, z: float) -> None:
        self.user.position = Position(x, y, z)

    # -------------------------------
    # Users
    # -------------------------------

    async def get_user_id(self) -> str:
        return self.user.user_id

    async def is_admin(self) -> bool:
        return self.user.is_admin

    async def get_user_position(self) -> Position:
        return self.user.position

    async def get_nearby_users(self) -> List[NearbyUser]:
        return list(self.nearby_users)

    # -------------------------------
    # Objects
    # -------------------------------

    async def get_object_properties(self, object_id: str) -> Dict[str, Any]:
        return dict(self.objects.get(object_id, {}))

    async def update_object(self, object_id: str, properties: Dict[str, Any]) -> None:
        self.objects.setdefault(object_id, {}).update(properties)
        self.updates.append((object_id, dict(properties)))
        log.debug(f"Object updated: {object_id}", properties=properties)

    async def get_animations(self, object_id: str) -> str:
        animations = self.animations.get(object_id, [])
        if isinstance(animations, str):
            return animations
        return json.dumps(animations)

    # -------------------------------
    # Audio
    # -------------------------------

    async def play_sound(self, url: str, volume: float, position: Position) -> str:
        audio_id = f"audio-{next(self._audio_ids)}"
        self.sounds.append(PlayedSound(audio_id, url, volume, position))
        log.debug("Sound started", audio_id=audio_id, url=url, volume=volume)
        return audio_id

    async def stop_sound(self, audio_id: str) -> None:
        for sound in self.sounds:
            if sound.audio_id == audio_id:
                sound.stopped = True
        log.debug("Sound stopped", audio_id=audio_id)

    # -------------------------------
    # Messaging / registration
    # -------------------------------

    async def send_message(self, payload: Dict[str, Any]) -> None:
        self.messages.append(dict(payload))
        log.debug("Broadcast", action=payload.get("action"), listeners=len(self._listeners))
        for listener in list(self._listeners):
            await listener(dict(payload))

    async def register_component(self, definition: Dict[str, Any]) -> None:
        self.components.append(definition)

    async def register_menu(self, menu: Dict[str, Any]) -> None:
        # Re-registering a menu id replaces it
        self.menus = [m for m in self.menus if m.get("id") != menu.get("id")]
        self.menus.append(menu)

    def absolute_path(self, path: str) -> str:
        if "://" in path:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    @property
    def supports_settings_push(self) -> bool:
        return self._supports_settings_push

    # -------------------------------
    # Inspection helpers
    # -------------------------------

    def messages_with_action(self, action: str) -> List[Dict[str, Any]]:
        return [m for m in self.messages if m.get("action") == action]

    def animation_history(self, object_id: str) -> List[str]:
        """Animation names set on an object, in order"""
        names = []
        for oid, props in self.updates:
            if oid == object_id and props.get("animation"):
                names.append(props["animation"][0]["name"])
        return names
