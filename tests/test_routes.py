"""
HTTP surface over a registry wired to in-memory storage and manual timers.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from main import app
from services import SessionRegistry, get_registry


@pytest.fixture
def registry(store, fallback_content, timers, clock):
    return SessionRegistry(store, fallback_content, timers, clock=clock)


@pytest.fixture
def client(registry):
    # not used as a context manager, so the startup hook (scheduler, sqlite) never runs
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_snapshot_before_start(client):
    r = client.get("/games/rhymeagrams")
    assert r.status_code == 200
    body = r.json()
    assert body["game"] == "rhymeagrams"
    assert body["displayName"] == "RhymeAGram"
    assert body["day"] == "2026-10-17"
    assert body["puzzleNumber"] == 20261017 % 5000
    assert body["phase"] == "not_started"
    assert body["elapsedTimeString"] == "00:00"
    assert body["state"]["answers"] == ["", "", "", ""]


def test_start_type_and_delete(client, timers):
    r = client.post("/games/rhymeagrams/start")
    assert r.json()["ok"] is True
    assert r.json()["session"]["phase"] == "in_progress"
    assert client.post("/games/rhymeagrams/start").json()["ok"] is False

    for ch in "BI":
        r = client.post("/games/rhymeagrams/type", json={"letter": ch})
    assert r.json()["session"]["state"]["answers"][0] == "BI"

    r = client.post("/games/rhymeagrams/delete")
    assert r.json()["session"]["state"]["answers"][0] == "B"

    timers.advance(4)
    assert client.get("/games/rhymeagrams").json()["elapsedTimeString"] == "00:04"


def test_pause_and_resume(client):
    client.post("/games/tumblepuns/start")
    r = client.post("/games/tumblepuns/pause")
    assert r.json()["session"]["paused"] is True
    r = client.post("/games/tumblepuns/resume")
    assert r.json()["session"]["paused"] is False


def test_diagone_place_and_remove(client):
    client.post("/games/diagone/start")
    r = client.post("/games/diagone/place", json={"pieceId": "p1", "targetId": "d_len1_a"})
    assert r.json()["ok"] is True
    assert r.json()["replacedPieceId"] is None

    r = client.post("/games/diagone/place", json={"pieceId": "p2", "targetId": "d_len3_a"})
    assert r.json()["ok"] is False

    r = client.post("/games/diagone/remove", json={"targetId": "d_len1_a"})
    assert r.json()["ok"] is True
    assert r.json()["removedPieceId"] == "p1"

    assert client.post("/games/diagone/remove", json={}).status_code == 400


def test_select_on_tumblepuns(client):
    client.post("/games/tumblepuns/start")
    r = client.post("/games/tumblepuns/select", json={"index": 2})
    assert r.json()["session"]["state"]["selectedWordIndex"] == 2
    r = client.post("/games/tumblepuns/select-final")
    state = r.json()["session"]["state"]
    assert state["selectedWordIndex"] is None
    assert state["isFinalAnswerSelected"] is True


def test_unknown_game_and_missing_action(client):
    assert client.get("/games/chess").status_code == 404
    r = client.post("/games/rhymeagrams/place", json={"pieceId": "p1", "targetId": "d_len1_a"})
    assert r.status_code == 404
    assert client.post("/games/rhymeagrams/undo").status_code == 404


def test_bad_and_future_days(client):
    assert client.get("/games/diagone", params={"day": "10/17/2026"}).status_code == 400
    assert client.get("/games/diagone", params={"day": "2026-10-18"}).status_code == 400
    r = client.get("/games/diagone", params={"day": "2026-10-10"})
    assert r.status_code == 200
    assert r.json()["day"] == "2026-10-10"


def test_stats_endpoints(client):
    client.post("/games/diagone/start")
    overview = client.get("/stats").json()
    assert overview["greeting"] == "Good afternoon"
    assert overview["today"]["completedCount"] == 0
    assert set(overview["streaks"]["streaks"]) == {"diagone", "rhymeagrams", "tumblepuns"}

    stats = client.get("/stats/diagone").json()
    assert stats["gamesPlayed"] == 1
    assert stats["gamesWon"] == 0

    weeks = client.get("/stats/diagone/archive").json()
    assert len(weeks) == 5
    assert weeks[-1]["days"][-1]["isToday"] is True

    r = client.get("/stats/diagone/personal-best", params={"time": 30})
    assert r.json() == {"personalBest": False}
    assert client.get("/stats/chess").status_code == 404


def test_settings_roundtrip(client, store):
    assert client.get("/settings").json() == {"hapticsEnabled": True}
    r = client.put("/settings", json={"hapticsEnabled": False})
    assert r.json() == {"hapticsEnabled": False}
    assert store.get_flag("haptics_enabled", True) is False


def test_store_failure_maps_to_server_error(client, store):
    asyncio.run(store.close())
    r = client.get("/settings")
    assert r.status_code == 500
    assert r.json() == {"detail": "Storage unavailable"}
