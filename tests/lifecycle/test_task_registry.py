"""
Tests for TaskRegistry: ownership, status tracking and shutdown helpers.
"""

import asyncio

import pytest

from lifecycle.task_registry import TaskCategory, TaskRegistry, create_tracked_task


async def sleeper():
    await asyncio.sleep(10)


async def failing():
    raise RuntimeError("boom")


async def finished():
    return 42


async def settle():
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_register_captures_metadata(task_registry):
    task = create_tracked_task(sleeper(), category=TaskCategory.RECEIVER,
                               description="door flow", owner="door-01")

    record = task_registry.list_all()[0]
    assert record.task is task
    assert record.info.category == TaskCategory.RECEIVER
    assert record.info.description == "door flow"
    assert record.info.owner == "door-01"
    assert record.status == "running"
    assert task_registry.get(record.info.id) is record

    task.cancel()
    await settle()


@pytest.mark.asyncio
async def test_status_transitions(task_registry):
    ok = create_tracked_task(finished(), category=TaskCategory.GENERAL, description="ok")
    bad = create_tracked_task(failing(), category=TaskCategory.GENERAL, description="bad")
    slow = create_tracked_task(sleeper(), category=TaskCategory.GENERAL, description="slow")
    await settle()
    slow.cancel()
    await settle()

    statuses = {r.info.description: r.status for r in task_registry.list_all()}
    assert statuses == {"ok": "done", "bad": "failed", "slow": "cancelled"}

    failed = task_registry.failed()
    assert len(failed) == 1
    assert isinstance(failed[0].finished_with_error, RuntimeError)
    assert task_registry.get(1).finished_return == 42
    assert ok.done() and bad.done()


@pytest.mark.asyncio
async def test_cancel_owner_only_touches_owned_tasks(task_registry):
    mine = [
        create_tracked_task(sleeper(), category=TaskCategory.AUDIO, description="a", owner="lamp"),
        create_tracked_task(sleeper(), category=TaskCategory.AUDIO, description="b", owner="lamp"),
    ]
    other = create_tracked_task(sleeper(), category=TaskCategory.AUDIO, description="c", owner="door")

    assert task_registry.cancel_owner("lamp") == 2
    await settle()

    assert all(t.cancelled() for t in mine)
    assert not other.done()
    assert task_registry.owned_by("lamp") == []
    assert len(task_registry.owned_by("lamp", active_only=False)) == 2
    # idempotent
    assert task_registry.cancel_owner("lamp") == 0

    other.cancel()
    await settle()


@pytest.mark.asyncio
async def test_stats_and_summary(task_registry):
    create_tracked_task(failing(), category=TaskCategory.GENERAL, description="bad")
    running = create_tracked_task(sleeper(), category=TaskCategory.GENERAL, description="slow")
    await settle()

    assert task_registry.stats() == {"total": 2, "running": 1, "failed": 1, "cancelled": 0}
    assert task_registry.summary() == "Tasks: total=2, running=1, failed=1, cancelled=0"

    running.cancel()
    await settle()


@pytest.mark.asyncio
async def test_history_limit_prunes_finished_records():
    registry = TaskRegistry(history_limit=2)
    loop = asyncio.get_running_loop()

    done_tasks = [loop.create_task(finished()) for _ in range(2)]
    await settle()
    for t in done_tasks:
        registry.register(t, TaskCategory.GENERAL, "finished")

    running = loop.create_task(sleeper())
    registry.register(running, TaskCategory.GENERAL, "running")

    records = registry.list_all()
    assert len(records) == 2
    assert [r.info.id for r in records] == [2, 3]

    running.cancel()
    await settle()


@pytest.mark.asyncio
async def test_get_tasks_for_shutdown_honours_exclude(task_registry):
    api = create_tracked_task(sleeper(), category=TaskCategory.API, description="api")
    flow = create_tracked_task(sleeper(), category=TaskCategory.RECEIVER, description="flow")

    assert task_registry.get_tasks_for_shutdown(exclude=[api]) == [flow]
    assert set(task_registry.get_tasks_for_shutdown()) == {api, flow}

    api.cancel()
    flow.cancel()
    await settle()


def test_reset_replaces_singleton():
    first = TaskRegistry.instance()
    fresh = TaskRegistry.reset()

    assert fresh is not first
    assert TaskRegistry.instance() is fresh
