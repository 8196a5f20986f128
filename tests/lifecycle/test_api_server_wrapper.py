import asyncio
import socket

import pytest
import pytest_asyncio
from fastapi import FastAPI

from lifecycle.api_server_wrapper import APIServerWrapper


def free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest_asyncio.fixture
async def api_wrapper():
    wrapper = APIServerWrapper(FastAPI(), host="127.0.0.1", port=free_port())
    yield wrapper
    await wrapper.stop()


@pytest.mark.asyncio
async def test_start_and_stop(api_wrapper, wait_until):
    task = asyncio.create_task(api_wrapper.start())
    await wait_until(lambda: api_wrapper.server is not None and api_wrapper.server.started, timeout=5.0)
    assert api_wrapper.is_running

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    assert api_wrapper.server is None
    assert not api_wrapper.is_running


@pytest.mark.asyncio
async def test_stop_without_start(api_wrapper):
    # Should not crash
    await api_wrapper.stop()


@pytest.mark.asyncio
async def test_stop_releases_port(api_wrapper, wait_until):
    task = asyncio.create_task(api_wrapper.start())
    await wait_until(lambda: api_wrapper.server is not None and api_wrapper.server.started, timeout=5.0)

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    # port must be free now
    s = socket.socket()
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind(("127.0.0.1", api_wrapper.port))
    s.close()


@pytest.mark.asyncio
async def test_start_cancelled_externally(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await asyncio.sleep(0.05)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert api_wrapper.server is None


@pytest.mark.asyncio
async def test_double_start_rejected(api_wrapper, wait_until):
    task = asyncio.create_task(api_wrapper.start())
    await wait_until(lambda: api_wrapper.is_running)

    with pytest.raises(RuntimeError):
        await api_wrapper.start()

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)
