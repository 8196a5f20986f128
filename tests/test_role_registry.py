import pytest

from models.enums import RoleChangeReason
from models.events import EventType
from services.event_bus import EventBus
from services.role_registry import RoleRegistry, normalize_roles
from services.role_store import RoleStore


def test_normalize_roles():
    assert normalize_roles(" level01, level02 ,,level01 ") == ("level01", "level02")
    assert normalize_roles("") == ()


@pytest.mark.asyncio
async def test_assign_is_idempotent_and_published():
    bus = EventBus()
    events = []
    bus.subscribe(EventType.ROLES_CHANGED, events.append)
    registry = RoleRegistry(bus)

    assert await registry.assign("user-1", "guard")
    assert not await registry.assign("user-1", "guard")
    await registry.assign("user-1", "visitor")

    assert registry.get("user-1") == frozenset({"guard", "visitor"})
    assert registry.get("nobody") == frozenset()
    assert [e.reason for e in events] == [RoleChangeReason.ASSIGNED, RoleChangeReason.ASSIGNED]
    assert events[0].user_id == "user-1"


@pytest.mark.asyncio
async def test_is_valid_uses_allow_list():
    registry = RoleRegistry()
    await registry.set_available_roles("level01, level02")

    assert registry.is_valid("level01")
    assert not registry.is_valid("level03")
    assert not registry.is_valid("")
    assert registry.available_roles_text == "level01,level02"


@pytest.mark.asyncio
async def test_clear_keeps_allow_list_unless_reset():
    registry = RoleRegistry()
    await registry.set_available_roles("guard")
    await registry.assign("user-1", "guard")

    await registry.clear()
    assert registry.assignments() == {}
    assert registry.available_roles == ("guard",)

    await registry.clear(reset_allow_list=True)
    assert registry.available_roles == ()


@pytest.mark.asyncio
async def test_display_lists_users():
    registry = RoleRegistry()
    await registry.assign("alice", "a")
    await registry.assign("alice", "b")
    await registry.assign("bob", "c")

    assert registry.display() == "alice: a, b\nbob: c"


@pytest.mark.asyncio
async def test_allow_list_survives_restart(tmp_path):
    store = RoleStore(tmp_path / "roles.json")
    registry = RoleRegistry(store=store)
    await registry.set_available_roles("guard, visitor")
    await registry.assign("user-1", "guard")

    restored = RoleRegistry(store=RoleStore(tmp_path / "roles.json"))
    await restored.restore()

    assert restored.available_roles == ("guard", "visitor")
    assert restored.assignments() == {}
