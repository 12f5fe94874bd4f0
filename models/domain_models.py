"""Domain-level models used by engines, sessions and stores.

Everything that is persisted as a JSON blob is a pydantic model so a
corrupt or foreign blob fails validation instead of producing a
half-built engine. Field names are snake_case in Python and camelCase on
disk (`elapsedTime`, `pieceId`, ...).
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from utils.time import now_utc


class GameType(str, Enum):
    DIAGONE = "diagone"
    RHYMEAGRAMS = "rhymeagrams"
    TUMBLEPUNS = "tumblepuns"

    @property
    def prefix(self) -> str:
        """Persistence key prefix."""
        return self.value

    @property
    def display_name(self) -> str:
        return {
            GameType.DIAGONE: "Diagone",
            GameType.RHYMEAGRAMS: "RhymeAGram",
            GameType.TUMBLEPUNS: "TumblePun",
        }[self]


class SessionPhase(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PuzzleStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Completion(str, Enum):
    """Outcome of checking a puzzle's input."""
    FILLING = "filling"
    INCORRECT = "incorrect"
    SOLVED = "solved"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


# =========================
# Diagone
# =========================

class Cell(BaseModel):
    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0, le=5)
    col: int = Field(ge=0, le=5)


class DiagonalTarget(CamelModel):
    id: str
    cells: list[Cell]
    piece_id: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.cells)


class Piece(CamelModel):
    id: str
    letters: str
    placed_on: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.letters)


class MainDiagonal(CamelModel):
    cells: list[Cell]
    value: list[str]


class DiagoneState(CamelModel):
    targets: list[DiagonalTarget]
    pieces: list[Piece]
    main_diagonal: MainDiagonal


# =========================
# Word puzzles
# =========================

class RhymeAGramsState(CamelModel):
    answers: list[str] = Field(default_factory=lambda: ["", "", "", ""])
    selected_slot: Optional[int] = 0


class TumblePunsState(CamelModel):
    word_answers: list[str] = Field(default_factory=lambda: ["", "", "", ""])
    final_answer: str = ""
    selected_word_index: Optional[int] = 0
    is_final_answer_selected: bool = False


# =========================
# Daily summary
# =========================

class DailyMeta(CamelModel):
    started: bool = False
    finished: bool = False
    elapsed_time: float = 0.0
    finish_time: float = 0.0
    last_updated: datetime = Field(default_factory=now_utc)


__all__ = [
    "GameType",
    "SessionPhase",
    "PuzzleStatus",
    "Completion",
    "CamelModel",
    "Cell",
    "DiagonalTarget",
    "Piece",
    "MainDiagonal",
    "DiagoneState",
    "RhymeAGramsState",
    "TumblePunsState",
    "DailyMeta",
]
