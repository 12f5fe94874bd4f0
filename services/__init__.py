"""Services package: content, timers, sessions and statistics.

Import submodules to make them available as `services.session`, etc.
"""

from .content_store import (
    PuzzleContentStore,
    scramble,
    FALLBACKS,
)
from .timers import (
    TimerHandle,
    Timers,
    SchedulerTimers,
    build_scheduler,
    on_loop,
)
from .session import (
    GameSession,
    SessionListener,
    HAPTICS_KEY,
    meta_key,
)
from .game_sessions import (
    DiagoneSession,
    RhymeAGramsSession,
    TumblePunsSession,
    SESSION_CLASSES,
)
from .statistics import StatisticsAggregator
from .registry import SessionRegistry, get_registry, set_registry

__all__ = [
    "PuzzleContentStore",
    "scramble",
    "FALLBACKS",
    "TimerHandle",
    "Timers",
    "SchedulerTimers",
    "build_scheduler",
    "on_loop",
    "GameSession",
    "SessionListener",
    "HAPTICS_KEY",
    "meta_key",
    "DiagoneSession",
    "RhymeAGramsSession",
    "TumblePunsSession",
    "SESSION_CLASSES",
    "StatisticsAggregator",
    "SessionRegistry",
    "get_registry",
    "set_registry",
]
