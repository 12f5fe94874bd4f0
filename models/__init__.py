"""Data models used by the application.

Split into:
- `api_models`: Pydantic models used for request/response validation
- `domain_models`: engine state and persisted records (JSON blobs)
- `puzzle_models`: immutable daily puzzle definitions

Import submodules to make them available as `models.api_models`.
"""

from . import api_models, domain_models, puzzle_models

# Re-export API models (Pydantic models used for request/response)
from .api_models import (
    PlaceRequest,
    RemoveRequest,
    TypeRequest,
    SelectRequest,
    MainDiagonalRequest,
    SettingsRequest,
    SessionSnapshot,
    ActionResponse,
    GameStats,
    DailyProgress,
    StreakInfo,
    StatsOverview,
    ArchiveDay,
    ArchiveWeek,
)

# Re-export domain models
from .domain_models import (
    GameType,
    SessionPhase,
    PuzzleStatus,
    Completion,
    CamelModel,
    Cell,
    DiagonalTarget,
    Piece,
    MainDiagonal,
    DiagoneState,
    RhymeAGramsState,
    TumblePunsState,
    DailyMeta,
)

from .puzzle_models import (
    DiagonePuzzle,
    RhymeAGramsPuzzle,
    TumbleWord,
    TumblePunsPuzzle,
)

__all__ = [
    # submodules
    "api_models",
    "domain_models",
    "puzzle_models",
    # api models
    "PlaceRequest",
    "RemoveRequest",
    "TypeRequest",
    "SelectRequest",
    "MainDiagonalRequest",
    "SettingsRequest",
    "SessionSnapshot",
    "ActionResponse",
    "GameStats",
    "DailyProgress",
    "StreakInfo",
    "StatsOverview",
    "ArchiveDay",
    "ArchiveWeek",
    # domain models
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
    # puzzles
    "DiagonePuzzle",
    "RhymeAGramsPuzzle",
    "TumbleWord",
    "TumblePunsPuzzle",
]
