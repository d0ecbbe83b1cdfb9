"""
MemorySessionStore tests
"""
import asyncio
from datetime import datetime, timedelta

import pytest

from app.services.interview import InterviewSession, MemorySessionStore


def _expire_all(store: MemorySessionStore) -> None:
    for entry in store._data.values():
        entry.expires_at = datetime.now() - timedelta(seconds=1)


@pytest.mark.asyncio
async def test_get_drops_expired_session():
    store = MemorySessionStore(ttl_seconds=60)
    session = InterviewSession()
    await store.set(session)
    assert await store.get(session.session_id) is session

    _expire_all(store)
    assert await store.get(session.session_id) is None
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_purge_expired_keeps_live_sessions():
    store = MemorySessionStore(ttl_seconds=60)
    for _ in range(100):
        await store.set(InterviewSession())
    _expire_all(store)
    live = InterviewSession()
    await store.set(live)

    assert await store.count() == 101
    assert await store.purge_expired() == 100
    assert await store.count() == 1
    assert await store.get(live.session_id) is live


@pytest.mark.asyncio
async def test_cleanup_loop_purges_in_background():
    store = MemorySessionStore(ttl_seconds=60, cleanup_interval=0.01)
    await store.start()
    assert store.is_running
    try:
        for _ in range(5):
            await store.set(InterviewSession())
        _expire_all(store)

        for _ in range(100):
            if await store.count() == 0:
                break
            await asyncio.sleep(0.01)
        assert await store.count() == 0
    finally:
        await store.close()

    assert not store.is_running


@pytest.mark.asyncio
async def test_close_clears_sessions():
    store = MemorySessionStore(ttl_seconds=60, cleanup_interval=60)
    await store.start()
    await store.set(InterviewSession())
    await store.close()
    assert await store.count() == 0
