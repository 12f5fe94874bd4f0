"""Shared game lifecycle: not started -> in progress (maybe paused) -> completed.

A `GameSession` owns one engine for one game and one UTC day. It runs the
wall-clock elapsed timer, persists the day's `DailyMeta` on every
transition and tick, debounces full-state saves, checks for completion
after every mutation, and reports what happened through a
`SessionListener`.

Persistence keys:

    {prefix}_state               full engine state for today's puzzle
    {prefix}_state_{yyyy-MM-dd}  full engine state for an archive day
    {prefix}_meta_{yyyy-MM-dd}   DailyMeta for that day
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from functools import partial
from typing import Any, Callable, Optional, Union
import logging

from pydantic import ValidationError

import config
from models.domain_models import Completion, DailyMeta, GameType, SessionPhase
from stores import KeyValueStore, StoreError
from utils.time import ClockAndCalendarProvider, day_key, format_elapsed, puzzle_number, utc_day
from .content_store import PuzzleContentStore
from .timers import TimerHandle, Timers

logger = logging.getLogger(__name__)

# called with (game, day, meta) after a DailyMeta write, meta is None after a delete
MetaObserver = Callable[[GameType, date, Optional[DailyMeta]], None]

HAPTICS_KEY = "haptics_enabled"


def meta_key(game: GameType, day: Union[date, datetime]) -> str:
    return f"{game.prefix}_meta_{day_key(day)}"


def state_key(game: GameType, day: Union[date, datetime], is_today: bool) -> str:
    return f"{game.prefix}_state" if is_today else f"{game.prefix}_state_{day_key(day)}"


class SessionListener:
    """Receives session events. Every hook is a no-op by default."""

    def on_state_changed(self, session: "GameSession") -> None:
        pass

    def on_invalid_move(self, session: "GameSession") -> None:
        pass

    def on_incorrect(self, session: "GameSession") -> None:
        pass

    def on_win_step(self, session: "GameSession", step: int, total: int) -> None:
        """Celebration step `step` of `total`; `step == total` means the sequence finished."""
        pass

    def on_haptic(self, session: "GameSession", kind: str) -> None:
        pass


class GameSession(ABC):
    game: GameType

    def __init__(
        self,
        store: KeyValueStore,
        content: PuzzleContentStore,
        timers: Timers,
        clock: Optional[ClockAndCalendarProvider] = None,
        day: Optional[Union[date, datetime]] = None,
        listener: Optional[SessionListener] = None,
        save_debounce: Optional[float] = None,
        tick_seconds: Optional[float] = None,
        meta_observer: Optional[MetaObserver] = None,
    ):
        self.store = store
        self.content = content
        self.timers = timers
        self.clock = clock or ClockAndCalendarProvider()
        self.day = utc_day(day) if day is not None else self.clock.today()
        self.listener = listener or SessionListener()
        self.save_debounce = config.SAVE_DEBOUNCE_SECONDS if save_debounce is None else save_debounce
        self.tick_seconds = config.TICK_SECONDS if tick_seconds is None else tick_seconds
        self.meta_observer = meta_observer

        self.opened_on = self.clock.today()
        self.meta_key = meta_key(self.game, self.day)

        self.puzzle = self.content.puzzle_for(self.game, self.day)
        self.engine = self.build_engine(None)

        self.started = False
        self.finished = False
        self.elapsed = 0.0
        self.finish_time = 0.0

        self._start_instant: Optional[float] = None
        self._tick: Optional[TimerHandle] = None
        self._pending_save: Optional[TimerHandle] = None
        self._win_handles: list[TimerHandle] = []

        self._load()

    @property
    def is_today(self) -> bool:
        return self.day == self.clock.today()

    @property
    def state_key(self) -> str:
        """Undated while the day is current, dated once it is over."""
        return state_key(self.game, self.day, self.is_today)

    # -------------------------------------------------
    # Per-game hooks
    # -------------------------------------------------

    @abstractmethod
    def build_engine(self, blob: Optional[str]):
        """Engine for `self.puzzle`, restored from `blob` when it is usable."""
        raise NotImplementedError

    def on_incorrect_cleanup(self) -> None:
        """Undo whatever input made the puzzle complete-but-wrong."""

    def win_gaps(self) -> list[float]:
        """Seconds between consecutive celebration steps; the last gap leads to the finish."""
        return [0.0]

    @abstractmethod
    def puzzle_view(self) -> dict[str, Any]:
        raise NotImplementedError

    def engine_view(self) -> dict[str, Any]:
        return self.engine.state.model_dump(mode="json", by_alias=True)

    # -------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------

    def _load(self) -> None:
        meta = self.load_meta()
        if meta is None or not meta.started:
            if self.store.get(self.state_key) is not None:
                logger.info(f"[SESSION] {self.game.value} {self.day}: dropping state from an unstarted day")
                self._delete(self.state_key)
            return

        self.started = True
        self.finished = meta.finished
        self.elapsed = meta.elapsed_time
        self.finish_time = meta.finish_time
        self.engine = self.build_engine(self.store.get(self.state_key))

    def load_meta(self) -> Optional[DailyMeta]:
        blob = self.store.get(self.meta_key)
        if blob is None:
            return None
        try:
            return DailyMeta.model_validate_json(blob)
        except ValidationError:
            logger.warning(f"[SESSION] corrupt meta at {self.meta_key}, ignoring")
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self.store.set(key, value)
        except StoreError as e:
            logger.error(f"[SESSION] failed to write {key}: {e}")
            return False
        return True

    def _delete(self, key: str) -> bool:
        try:
            self.store.delete(key)
        except StoreError as e:
            logger.error(f"[SESSION] failed to delete {key}: {e}")
            return False
        return True

    def _meta_changed(self, meta: Optional[DailyMeta]) -> None:
        if self.meta_observer is not None:
            self.meta_observer(self.game, self.day, meta)

    def save_meta(self) -> None:
        meta = DailyMeta(
            started=self.started,
            finished=self.finished,
            elapsed_time=self.elapsed,
            finish_time=self.finish_time,
            last_updated=self.clock.now(),
        )
        if self._write(self.meta_key, meta.to_json()):
            self._meta_changed(meta)

    def save_state(self) -> None:
        self._write(self.state_key, self.engine.to_json())

    def _schedule_save(self) -> None:
        self._cancel_save()
        self._pending_save = self.timers.call_later(self.save_debounce, self._debounced_save)

    def _debounced_save(self) -> None:
        self._pending_save = None
        self.save_state()

    def _cancel_save(self) -> None:
        if self._pending_save is not None:
            self._pending_save.cancel()
            self._pending_save = None

    def flush(self) -> None:
        """Write the full state now, dropping any pending debounced save."""
        self._cancel_save()
        self.save_state()

    # -------------------------------------------------
    # Clock
    # -------------------------------------------------

    def _start_clock(self) -> None:
        self._start_instant = self.clock.timestamp() - self.elapsed
        self._tick = self.timers.call_every(self.tick_seconds, self._on_tick)

    def _on_tick(self) -> None:
        if self._start_instant is None:
            return
        self.elapsed = self.clock.timestamp() - self._start_instant
        self.save_meta()

    def _stop_clock(self) -> None:
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None
        if self._start_instant is not None:
            self.elapsed = self.clock.timestamp() - self._start_instant
            self._start_instant = None

    @property
    def current_elapsed(self) -> float:
        if self.finished:
            return self.finish_time
        if self._start_instant is not None:
            return self.clock.timestamp() - self._start_instant
        return self.elapsed

    @property
    def elapsed_time_string(self) -> str:
        return format_elapsed(self.current_elapsed)

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        if not self.started:
            return SessionPhase.NOT_STARTED
        return SessionPhase.COMPLETED if self.finished else SessionPhase.IN_PROGRESS

    @property
    def is_running(self) -> bool:
        return self._tick is not None

    @property
    def is_paused(self) -> bool:
        return self.started and not self.finished and not self.is_running

    @property
    def can_play(self) -> bool:
        return self.started and not self.finished

    def start_game(self) -> bool:
        if self.started:
            return False
        self._cancel_win_sequence()
        self.engine.reset()
        self.started = True
        self.finished = False
        self.elapsed = 0.0
        self.finish_time = 0.0
        self.save_meta()
        self.flush()
        self._start_clock()
        logger.info(f"[SESSION] {self.game.value} {self.day} started")
        self._notify()
        return True

    def pause(self) -> bool:
        if not self.can_play:
            return False
        self._stop_clock()
        self.flush()
        self.save_meta()
        self._notify()
        return True

    def resume(self) -> bool:
        if not self.can_play:
            return False
        if not self.is_running:
            self._start_clock()
            self._notify()
        return True

    def clear_game(self) -> None:
        self._stop_clock()
        self._cancel_save()
        self._cancel_win_sequence()
        self.started = False
        self.finished = False
        self.elapsed = 0.0
        self.finish_time = 0.0
        self.engine.reset()
        self._delete(self.state_key)
        if self._delete(self.meta_key):
            self._meta_changed(None)
        logger.info(f"[SESSION] {self.game.value} {self.day} cleared")
        self._notify()

    def close(self) -> None:
        """Stop timers and persist; used when the session is evicted."""
        if self.can_play:
            self.pause()
        else:
            self._cancel_save()
        self._cancel_win_sequence()

    def archive(self) -> None:
        """Close a session whose day is over, moving its state to the dated key.

        A session opened while its day was current may have left state under
        the undated key. That key is cleared unless the new day has already
        started playing into it.
        """
        self.close()
        if self.is_today:
            return
        if self.started:
            self.save_state()
        if self.opened_on == self.day:
            today_meta = self.store.get(meta_key(self.game, self.clock.today()))
            if today_meta is None:
                self._delete(state_key(self.game, self.day, True))

    def submit_answer(self) -> Completion:
        """Check the engine and act on the outcome. Runs after every mutation."""
        if not self.can_play:
            return self.engine.completion
        completion = self.engine.completion
        if completion is Completion.SOLVED:
            self._complete()
        elif completion is Completion.INCORRECT:
            self.listener.on_incorrect(self)
            self._haptic("error")
            self.on_incorrect_cleanup()
            self._schedule_save()
        return completion

    def _complete(self) -> None:
        self._stop_clock()
        self.finished = True
        self.finish_time = self.elapsed
        self.save_meta()
        self.flush()
        logger.info(f"[SESSION] {self.game.value} {self.day} solved in {self.elapsed_time_string}")
        self.run_win_sequence()

    def _mutated(self) -> None:
        self._schedule_save()
        self.submit_answer()
        self._notify()

    # -------------------------------------------------
    # Feedback
    # -------------------------------------------------

    def run_win_sequence(self) -> None:
        self._cancel_win_sequence()
        gaps = self.win_gaps()
        total = len(gaps)
        at = 0.0
        for step, gap in enumerate(gaps):
            at += gap
            self._win_handles.append(self.timers.call_later(at, partial(self._win_step, step + 1, total)))

    def _win_step(self, step: int, total: int) -> None:
        self.listener.on_win_step(self, step, total)
        if step == total:
            self._win_handles = []
            self._haptic("success")

    def _cancel_win_sequence(self) -> None:
        for handle in self._win_handles:
            handle.cancel()
        self._win_handles = []

    def _invalid_move(self) -> None:
        self.listener.on_invalid_move(self)
        self._haptic("error")

    def _haptic(self, kind: str) -> None:
        if self.store.get_flag(HAPTICS_KEY, True):
            self.listener.on_haptic(self, kind)

    def _notify(self) -> None:
        self.listener.on_state_changed(self)

    # -------------------------------------------------
    # Presentation
    # -------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        return {
            "game": self.game.value,
            "display_name": self.game.display_name,
            "day": day_key(self.day),
            "puzzle_number": puzzle_number(self.day),
            "phase": self.phase.value,
            "paused": self.is_paused,
            "elapsed_time": self.current_elapsed,
            "finish_time": self.finish_time,
            "elapsed_time_string": self.elapsed_time_string,
            "completion": self.engine.completion.value,
            "is_solved": self.engine.is_solved,
            "puzzle": self.puzzle_view(),
            "state": self.engine_view(),
        }
