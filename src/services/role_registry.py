"""
Role Registry - Process-lifetime user → roles mapping

One registry is owned by the plugin and injected into every trigger and
receiver. Every mutation is published as a RolesChangedEvent so components
can re-read their settings.
"""

from typing import Dict, FrozenSet, List, Optional, Tuple

from models.enums import RoleChangeReason
from models.events import RolesChangedEvent
from services.event_bus import EventBus
from services.role_store import RoleStore
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ROLES)


def normalize_roles(text: str) -> Tuple[str, ...]:
    """Split a comma-separated allow-list into trimmed, non-empty, unique roles"""
    roles: List[str] = []
    for part in (text or "").split(","):
        role = part.strip()
        if role and role not in roles:
            roles.append(role)
    return tuple(roles)


class RoleRegistry:
    """
    Role registry with an admin-defined allow-list

    Example:
        registry = RoleRegistry(event_bus)
        await registry.set_available_roles("level01, level02")
        await registry.assign("user-1", "level01")
        registry.get("user-1")          # frozenset({"level01"})
        registry.is_valid("level03")    # False
    """

    def __init__(self, event_bus: Optional[EventBus] = None, store: Optional[RoleStore] = None):
        self._event_bus = event_bus
        self._store = store
        self._assignments: Dict[str, List[str]] = {}
        self._available: Tuple[str, ...] = ()

    # ===== Queries =====

    @property
    def available_roles(self) -> Tuple[str, ...]:
        return self._available

    @property
    def available_roles_text(self) -> str:
        return ",".join(self._available)

    def get(self, user_id: str) -> FrozenSet[str]:
        return frozenset(self._assignments.get(user_id, ()))

    def has_role(self, user_id: str, role: str) -> bool:
        return role in self._assignments.get(user_id, ())

    def is_valid(self, role: str) -> bool:
        return bool(role) and role in self._available

    def assignments(self) -> Dict[str, List[str]]:
        """Copy of user → roles (in assignment order)"""
        return {user: list(roles) for user, roles in self._assignments.items()}

    def display(self) -> str:
        """One "user: role, role" line per user"""
        return "\n".join(f"{user}: {', '.join(roles)}" for user, roles in self._assignments.items())

    # ===== Mutations =====

    async def restore(self) -> None:
        """Load the allow-list from the store (no broadcast)"""
        if self._store is None:
            return
        stored = await self._store.load()
        if stored:
            self._available = normalize_roles(stored)
            log.info("Restored available roles", roles=self.available_roles_text)

    async def assign(self, user_id: str, role: str) -> bool:
        """
        Grant a role (idempotent)

        Returns:
            True if the role was newly granted
        """
        roles = self._assignments.setdefault(user_id, [])
        if role in roles:
            return False

        roles.append(role)
        log.info(f"Assigned role '{role}'", user=user_id, roles=", ".join(roles))
        await self._publish(RolesChangedEvent(RoleChangeReason.ASSIGNED, user_id=user_id, role=role))
        return True

    async def set_available_roles(self, text: str) -> None:
        """Define the allow-list, persist it and broadcast"""
        self._available = normalize_roles(text)
        if self._store is not None:
            await self._store.save(self.available_roles_text)

        log.info("Available roles defined", roles=self.available_roles_text or "(none)")
        await self._publish(RolesChangedEvent(RoleChangeReason.ROLES_DEFINED))

    async def clear(self, reset_allow_list: bool = False) -> None:
        """
        Wipe every user assignment

        Args:
            reset_allow_list: Also empty the allow-list and remove it from the store
        """
        self._assignments.clear()
        if reset_allow_list:
            self._available = ()
            if self._store is not None:
                await self._store.clear()

        log.info("Cleared all user roles", allow_list_reset=reset_allow_list)
        await self._publish(RolesChangedEvent(RoleChangeReason.CLEARED))

    async def _publish(self, event: RolesChangedEvent) -> None:
        if self._event_bus is not None:
            await self._event_bus.publish(event)
