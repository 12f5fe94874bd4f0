"""Database bootstrap and inspection scripts."""
import asyncio

from scripts.init_sqlite import init_db
from scripts.verify_db import summarize
from stores import SqliteKeyValueStore


def write_keys(db_path, keys):
    async def scenario():
        store = SqliteKeyValueStore(db_path)
        await store.init()
        for key in keys:
            store.set(key, "{}")
        await store.close()

    asyncio.run(scenario())


def test_init_then_summarize(tmp_path):
    db_path = str(tmp_path / "data" / "wuzzler.sqlite3")
    init_db(db_path)
    write_keys(db_path, ["diagone_state", "diagone_meta_2026-10-16", "diagone_meta_2026-10-17", "haptics_enabled"])

    summary = summarize(db_path)
    assert summary["total_keys"] == 4
    assert summary["diagone"] == {"states": 1, "days": 2}
    assert summary["tumblepuns"] == {"states": 0, "days": 0}


def test_reset_wipes_existing_rows(tmp_path):
    db_path = str(tmp_path / "wuzzler.sqlite3")
    init_db(db_path)
    write_keys(db_path, ["rhymeagrams_meta_2026-10-17"])
    assert summarize(db_path)["total_keys"] == 1

    init_db(db_path, reset=True)
    assert summarize(db_path)["total_keys"] == 0
