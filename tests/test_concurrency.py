# tests/test_concurrency.py
import asyncio
from datetime import datetime, timedelta

import httpx
from fastapi.testclient import TestClient

from docstore.main import app
from perla.state import InventoryState
from perla.storeclient import DocumentStoreClient, LoadResult

client = TestClient(app)


class SlowStore:
    """First save answers slower than the second one."""

    def __init__(self, delays=(0.05, 0.01)):
        self.delays = list(delays)
        self.items = []

    async def load_all(self):
        return LoadResult()

    async def save_all(self, items):
        snapshot = list(items)
        await asyncio.sleep(self.delays.pop(0) if self.delays else 0)
        self.items = snapshot
        return True


def _clock():
    now = [datetime(2025, 3, 5, 10, 0, 0)]

    def tick():
        now[0] += timedelta(milliseconds=1)
        return now[0]
    return tick


async def _two_adds(state):
    await state.initialize()
    state.toggle_session()
    return await asyncio.gather(
        state.add_item("Mouse", "Electrónica", "3"),
        state.add_item("Desk", "Otros", "12"),
    )


def test_serialized_adds_keep_both_items_in_store():
    store = SlowStore()
    state = InventoryState(store, clock=_clock(), serialize_mutations=True)
    results = asyncio.run(_two_adds(state))
    assert all(r.ok for r in results)
    assert [i.name for i in store.items] == ["Desk", "Mouse"]


def test_unserialized_adds_race_and_later_save_wins():
    store = SlowStore()
    state = InventoryState(store, clock=_clock(), serialize_mutations=False)
    results = asyncio.run(_two_adds(state))
    assert all(r.ok for r in results)
    # memory has both, but the first save resolved last and overwrote the store
    assert [i.name for i in state.items] == ["Desk", "Mouse"]
    assert [i.name for i in store.items] == ["Mouse"]


def test_concurrent_adds_against_docstore():
    client.post("/reset")

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
            store = DocumentStoreClient(base_url="http://test", client=ac)
            state = InventoryState(store, clock=_clock())
            await _two_adds(state)
            return await store.load_all()

    loaded = asyncio.run(scenario())
    assert sorted(i.name for i in loaded.items) == ["Desk", "Mouse"]
