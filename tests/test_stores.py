"""
Testing both key-value store backends against the same contract.
"""
import asyncio

import pytest

from stores import InvalidKey, MemoryKeyValueStore, SqliteKeyValueStore, StoreClosed


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture(params=["memory", "sqlite"])
def kv(request, loop):
    if request.param == "memory":
        store = MemoryKeyValueStore()
    else:
        store = SqliteKeyValueStore(":memory:")
        loop.run_until_complete(store.init())
    yield store
    loop.run_until_complete(store.close())


def test_get_set_delete(kv):
    assert kv.get("diagone_state") is None
    kv.set("diagone_state", '{"a": 1}')
    assert kv.get("diagone_state") == '{"a": 1}'
    kv.set("diagone_state", '{"a": 2}')
    assert kv.get("diagone_state") == '{"a": 2}'
    kv.delete("diagone_state")
    assert kv.get("diagone_state") is None
    kv.delete("diagone_state")


def test_keys_by_prefix_treats_underscore_literally(kv):
    kv.set("diagone_meta_2026-10-16", "{}")
    kv.set("diagone_meta_2026-10-17", "{}")
    kv.set("diagoneXmetaX2026", "{}")
    kv.set("rhymeagrams_meta_2026-10-17", "{}")
    assert kv.keys("diagone_meta_") == ["diagone_meta_2026-10-16", "diagone_meta_2026-10-17"]
    assert len(kv.keys()) == 4


def test_flags(kv):
    assert kv.get_flag("haptics_enabled", True) is True
    kv.set_flag("haptics_enabled", False)
    assert kv.get_flag("haptics_enabled", True) is False
    kv.set("haptics_enabled", "not json")
    assert kv.get_flag("haptics_enabled", True) is True
    kv.set("haptics_enabled", '"yes"')
    assert kv.get_flag("haptics_enabled", False) is False


def test_empty_key_is_rejected(kv):
    with pytest.raises(InvalidKey):
        kv.set("", "{}")


def test_closed_store_raises(kv, loop):
    loop.run_until_complete(kv.close())
    with pytest.raises(StoreClosed) as exc_info:
        kv.get("anything")
    assert exc_info.value.retryable is False
    with pytest.raises(StoreClosed):
        kv.set("diagone_state", "{}")


def test_sqlite_requires_init():
    store = SqliteKeyValueStore(":memory:")
    with pytest.raises(StoreClosed):
        store.get("diagone_state")


def test_sqlite_writes_reach_disk_across_connections(tmp_path):
    path = str(tmp_path / "data" / "wuzzler.sqlite3")

    async def scenario():
        first = SqliteKeyValueStore(path)
        await first.init()
        first.set("tumblepuns_meta_2026-10-17", '{"started": true}')
        first.set("tumblepuns_state", "{}")
        first.set("haptics_enabled", "true")
        first.delete("tumblepuns_state")
        await first.flush()
        await first.close()

        second = SqliteKeyValueStore(path)
        await second.init()
        found = (second.get("tumblepuns_meta_2026-10-17"), second.get("tumblepuns_state"), second.keys())
        await second.close()
        return found

    meta, state, keys = asyncio.run(scenario())
    assert meta == '{"started": true}'
    assert state is None
    assert keys == ["haptics_enabled", "tumblepuns_meta_2026-10-17"]


def test_sqlite_close_commits_queued_writes(tmp_path):
    path = str(tmp_path / "wuzzler.sqlite3")

    async def scenario():
        store = SqliteKeyValueStore(path)
        await store.init()
        for day in range(1, 11):
            store.set(f"diagone_meta_2026-10-{day:02d}", "{}")
        await store.close()

        reopened = SqliteKeyValueStore(path)
        await reopened.init()
        keys = reopened.keys("diagone_meta_")
        await reopened.close()
        return keys

    assert len(asyncio.run(scenario())) == 10
