"""Game session endpoints: lifecycle and the per-game user actions.

Handlers are `async def` and run on the event loop that
also runs the scheduler's timer callbacks, so a session is only ever
touched from one thread.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from models import (
    ActionResponse,
    MainDiagonalRequest,
    PlaceRequest,
    RemoveRequest,
    SelectRequest,
    SessionSnapshot,
    TypeRequest,
)
from services import SessionRegistry, get_registry
from .games_helpers import action_response, require_action, session_for, snapshot_of

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{game}", response_model=SessionSnapshot)
async def get_session(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    return snapshot_of(session_for(registry, game, day))


# --- Lifecycle ---

@router.post("/{game}/start", response_model=ActionResponse)
async def start_game(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    return action_response(session, session.start_game())


@router.post("/{game}/pause", response_model=ActionResponse)
async def pause_game(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    return action_response(session, session.pause())


@router.post("/{game}/resume", response_model=ActionResponse)
async def resume_game(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    return action_response(session, session.resume())


@router.post("/{game}/clear", response_model=ActionResponse)
async def clear_game(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    session.clear_game()
    return action_response(session, True)


# --- Input ---

@router.post("/{game}/place", response_model=ActionResponse)
async def place_piece(game: str, req: PlaceRequest, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "place")
    ok, replaced = session.place(req.piece_id, req.target_id)
    return action_response(session, ok, replaced_piece_id=replaced)


@router.post("/{game}/remove", response_model=ActionResponse)
async def remove_piece(game: str, req: RemoveRequest, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "remove_piece")
    if req.target_id is not None:
        removed = session.remove_piece(req.target_id)
    elif req.row is not None and req.col is not None:
        removed = session.remove_at(req.row, req.col)
    else:
        raise HTTPException(status_code=400, detail="Give either targetId or row and col")
    return action_response(session, removed is not None, removed_piece_id=removed)


@router.post("/{game}/type", response_model=ActionResponse)
async def type_letter(game: str, req: TypeRequest, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    return action_response(session, session.type_letter(req.letter))


@router.post("/{game}/delete", response_model=ActionResponse)
async def delete_letter(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    return action_response(session, session.delete_letter())


@router.post("/{game}/select", response_model=ActionResponse)
async def select_slot(game: str, req: SelectRequest, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "select_slot")
    return action_response(session, session.select_slot(req.index))


@router.post("/{game}/select-final", response_model=ActionResponse)
async def select_final_answer(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "select_final_answer")
    return action_response(session, session.select_final_answer())


@router.post("/{game}/main-diagonal", response_model=ActionResponse)
async def set_main_diagonal(game: str, req: MainDiagonalRequest, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "set_main_diagonal_letters")
    return action_response(session, session.set_main_diagonal_letters(req.letters))


@router.post("/{game}/undo", response_model=ActionResponse)
async def undo(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "undo")
    return action_response(session, session.undo())


@router.post("/{game}/redo", response_model=ActionResponse)
async def redo(game: str, day: Optional[str] = None, registry: SessionRegistry = Depends(get_registry)):
    session = session_for(registry, game, day)
    require_action(session, "redo")
    return action_response(session, session.redo())
