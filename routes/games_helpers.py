"""
Request helpers shared by the game and stats routes.

They turn path/query strings into domain values and map bad input to
HTTP errors; the routes themselves stay thin.
"""

from datetime import date
from typing import Optional

from fastapi import HTTPException

from models import ActionResponse, GameType, SessionSnapshot
from services import GameSession, SessionRegistry
from utils.time import parse_day_key


def resolve_game(game: str) -> GameType:
    try:
        return GameType(game.lower())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown game: {game}")


def resolve_day(day: Optional[str]) -> Optional[date]:
    if day is None:
        return None
    parsed = parse_day_key(day)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Invalid day; expected yyyy-MM-dd")
    return parsed


def session_for(registry: SessionRegistry, game: str, day: Optional[str] = None) -> GameSession:
    try:
        return registry.get(resolve_game(game), resolve_day(day))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def require_action(session: GameSession, action: str) -> None:
    """404 when the game has no such action (e.g. `place` on a word game)."""
    if not callable(getattr(session, action, None)):
        raise HTTPException(status_code=404, detail=f"{session.game.display_name} has no '{action}' action")


def snapshot_of(session: GameSession) -> SessionSnapshot:
    return SessionSnapshot.model_validate(session.snapshot())


def action_response(session: GameSession, ok: bool, **extra) -> ActionResponse:
    return ActionResponse(ok=ok, session=snapshot_of(session), **extra)
