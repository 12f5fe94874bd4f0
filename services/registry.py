"""One live session per (game, day) for the HTTP surface.

Sessions hold timers, so they are kept around between requests rather
than rebuilt; the midnight job (or the first lookup after midnight) evicts
every session opened on an earlier day.
"""
from __future__ import annotations

from datetime import date
from typing import Optional
import logging

from models.domain_models import GameType
from stores import KeyValueStore
from utils.time import ClockAndCalendarProvider
from .content_store import PuzzleContentStore
from .game_sessions import SESSION_CLASSES
from .session import GameSession, SessionListener
from .statistics import StatisticsAggregator
from .timers import Timers

logger = logging.getLogger(__name__)


class LoggingListener(SessionListener):
    """Default listener for the service: feedback hooks only get logged."""

    def on_invalid_move(self, session: GameSession) -> None:
        logger.debug(f"[SESSION] {session.game.value}: invalid move")

    def on_incorrect(self, session: GameSession) -> None:
        logger.info(f"[SESSION] {session.game.value} {session.day}: complete but incorrect")

    def on_win_step(self, session: GameSession, step: int, total: int) -> None:
        if step == total:
            logger.debug(f"[SESSION] {session.game.value}: win sequence done")


class SessionRegistry:

    def __init__(
        self,
        store: KeyValueStore,
        content: PuzzleContentStore,
        timers: Timers,
        clock: Optional[ClockAndCalendarProvider] = None,
        listener: Optional[SessionListener] = None,
    ):
        self.store = store
        self.content = content
        self.timers = timers
        self.clock = clock or ClockAndCalendarProvider()
        self.listener = listener or LoggingListener()
        self.stats = StatisticsAggregator(store, content, self.clock)
        self._sessions: dict[tuple[GameType, date], GameSession] = {}

    def get(self, game: GameType, day: Optional[date] = None) -> GameSession:
        today = self.clock.today()
        if any(s.opened_on < today for s in self._sessions.values()):
            # midnight passed without the cron job; archive before serving anything
            self.roll_over()
        day = day or today
        if day > today:
            raise ValueError("no puzzle for a future day")
        key = (game, day)
        session = self._sessions.get(key)
        if session is None:
            session = SESSION_CLASSES[game](
                self.store,
                self.content,
                self.timers,
                clock=self.clock,
                day=day,
                listener=self.listener,
                meta_observer=self.stats.record,
            )
            self._sessions[key] = session
        return session

    def roll_over(self) -> int:
        """Archive and drop sessions opened before today. Returns how many were dropped."""
        today = self.clock.today()
        stale = [key for key, s in self._sessions.items() if s.opened_on < today]
        for key in stale:
            self._sessions.pop(key).archive()
        if stale:
            logger.info(f"[REGISTRY] rolled over {len(stale)} session(s) to {today}")
        return len(stale)

    def close(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()


_registry: Optional[SessionRegistry] = None


def set_registry(value: Optional[SessionRegistry]) -> None:
    global _registry
    _registry = value


def get_registry() -> SessionRegistry:
    """FastAPI dependency; `main` installs the registry at startup."""
    if _registry is None:
        raise RuntimeError("Session registry not initialized")
    return _registry
