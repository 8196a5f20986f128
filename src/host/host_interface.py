from typing import Any, Dict, List, Protocol

from models.domain import Position, NearbyUser


class IHost(Protocol):
    """
    Services the hosting platform exposes to the plugin.

    Every call that reaches the platform is awaitable; a failing call raises
    and abandons the action that made it.
    """

    # -------------------------------
    # Users
    # -------------------------------

    async def get_user_id(self) -> str:
        ...

    async def is_admin(self) -> bool:
        ...

    async def get_user_position(self) -> Position:
        """Current user position"""
        ...

    async def get_nearby_users(self) -> List[NearbyUser]:
        """Other users with their distance to the current user"""
        ...

    # -------------------------------
    # Objects
    # -------------------------------

    async def get_object_properties(self, object_id: str) -> Dict[str, Any]:
        ...

    async def update_object(self, object_id: str, properties: Dict[str, Any]) -> None:
        """Merge properties into the object's persisted store"""
        ...

    async def get_animations(self, object_id: str) -> str:
        """Animation metadata as JSON text: [{"name": ..., "duration": seconds}, ...]"""
        ...

    # -------------------------------
    # Audio
    # -------------------------------

    async def play_sound(self, url: str, volume: float, position: Position) -> str:
        """Start playback, returns an audio id for stop_sound()"""
        ...

    async def stop_sound(self, audio_id: str) -> None:
        ...

    # -------------------------------
    # Messaging / registration
    # -------------------------------

    async def send_message(self, payload: Dict[str, Any]) -> None:
        """Broadcast a payload to every plugin instance in the space"""
        ...

    async def register_component(self, definition: Dict[str, Any]) -> None:
        ...

    async def register_menu(self, menu: Dict[str, Any]) -> None:
        ...

    def absolute_path(self, path: str) -> str:
        """Resolve a plugin-relative asset path"""
        ...

    @property
    def supports_settings_push(self) -> bool:
        """True when the host notifies field edits (no polling needed)"""
        ...
