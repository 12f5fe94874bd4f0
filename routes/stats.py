"""Statistics endpoints: streaks, per-game stats and the archive calendar."""
from fastapi import APIRouter, Depends

from models import ArchiveWeek, GameStats, StatsOverview
from services import SessionRegistry, get_registry
from .games_helpers import resolve_game

router = APIRouter()


@router.get("", response_model=StatsOverview)
async def overview(registry: SessionRegistry = Depends(get_registry)):
    return registry.stats.overview()


@router.get("/{game}", response_model=GameStats)
async def game_stats(game: str, registry: SessionRegistry = Depends(get_registry)):
    return registry.stats.game_stats(resolve_game(game))


@router.get("/{game}/archive", response_model=list[ArchiveWeek])
async def archive(game: str, registry: SessionRegistry = Depends(get_registry)):
    return registry.stats.archive_weeks(resolve_game(game))


@router.get("/{game}/personal-best")
async def personal_best(game: str, time: float, registry: SessionRegistry = Depends(get_registry)):
    return {"personalBest": registry.stats.is_personal_best(resolve_game(game), time)}
