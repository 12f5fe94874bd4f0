"""Pydantic request/response models for the FastAPI endpoints.

Keep transport concerns (validation, docs) here and keep engine and
persistence types in `models.domain_models`. Responses are serialized
camelCase like the persisted blobs.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from .domain_models import CamelModel, PuzzleStatus


# --- Requests ---

class PlaceRequest(CamelModel):
    piece_id: str
    target_id: str


class RemoveRequest(CamelModel):
    target_id: Optional[str] = None
    row: Optional[int] = Field(default=None, ge=0, le=5)
    col: Optional[int] = Field(default=None, ge=0, le=5)


class TypeRequest(BaseModel):
    letter: str = Field(min_length=1, max_length=8)


class SelectRequest(BaseModel):
    index: Optional[int] = None


class MainDiagonalRequest(BaseModel):
    letters: list[str] = Field(min_length=6, max_length=6)


class SettingsRequest(CamelModel):
    haptics_enabled: bool


# --- Responses ---

class SessionSnapshot(CamelModel):
    game: str
    display_name: str
    day: str
    puzzle_number: int
    phase: str
    paused: bool
    elapsed_time: float
    finish_time: float
    elapsed_time_string: str
    completion: str
    is_solved: bool
    puzzle: dict[str, Any]
    state: dict[str, Any]


class ActionResponse(CamelModel):
    """Outcome of a user action plus the session afterwards."""
    ok: bool
    replaced_piece_id: Optional[str] = None
    removed_piece_id: Optional[str] = None
    session: SessionSnapshot


class GameStats(CamelModel):
    game: str
    games_played: int = 0
    games_won: int = 0
    win_rate: float = 0.0
    current_streak: int = 0
    max_streak: int = 0
    average_time: float = 0.0
    best_time: float = 0.0


class DailyProgress(CamelModel):
    day: str
    completed: dict[str, bool]
    completed_count: int
    all_complete: bool


class StreakInfo(CamelModel):
    streaks: dict[str, int]
    combined_streak: int
    best_combined_streak: int
    daily_sweep_count: int


class StatsOverview(CamelModel):
    greeting: str
    today: DailyProgress
    streaks: StreakInfo
    games: list[GameStats]


class ArchiveDay(CamelModel):
    day: str
    day_of_month: int
    weekday_letter: str
    is_today: bool
    is_first_of_month: bool
    has_puzzle: bool
    status: PuzzleStatus


class ArchiveWeek(CamelModel):
    index: int
    label: str
    days: list[ArchiveDay]
