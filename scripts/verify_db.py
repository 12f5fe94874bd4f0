#!/usr/bin/env python3
"""Verify the database was initialized and summarize what it holds."""
import sqlite3
import sys

GAME_PREFIXES = ("diagone", "rhymeagrams", "tumblepuns")


def summarize(db_path: str) -> dict:
    """Count saved states and daily meta records per game."""
    conn = sqlite3.connect(db_path)
    try:
        tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        if "kv_store" not in tables:
            raise RuntimeError("kv_store table missing")
        keys = [r[0] for r in conn.execute("SELECT key FROM kv_store")]
    finally:
        conn.close()

    summary = {"total_keys": len(keys)}
    for prefix in GAME_PREFIXES:
        summary[prefix] = {
            "states": sum(1 for k in keys if k.startswith(f"{prefix}_state")),
            "days": sum(1 for k in keys if k.startswith(f"{prefix}_meta_")),
        }
    return summary


if __name__ == "__main__":
    db_path = sys.argv[1] if len(sys.argv) > 1 else "./data/wuzzler.sqlite3"
    try:
        summary = summarize(db_path)
    except (sqlite3.Error, RuntimeError) as e:
        print(f"[VERIFY] ✗ Error verifying database: {e}")
        sys.exit(1)

    print(f"[VERIFY] Database at {db_path}: {summary['total_keys']} keys")
    for prefix in GAME_PREFIXES:
        print(f"[VERIFY]   - {prefix}: {summary[prefix]['days']} day(s), {summary[prefix]['states']} saved state(s)")
    print("[VERIFY] ✓ kv_store present")
