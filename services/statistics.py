"""Streaks, personal bests and archive status, computed from persisted DailyMeta records.

Nothing here writes. The `*_meta_*` keys are scanned once into a
`{game: {day: DailyMeta}}` index that is kept in memory; sessions report
each DailyMeta they write or delete through `record`, so later calls never
rescan the store. A day is always the same UTC calendar day the sessions
used when they wrote it.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional
import logging

from pydantic import ValidationError

from models.api_models import (
    ArchiveDay,
    ArchiveWeek,
    DailyProgress,
    GameStats,
    StatsOverview,
    StreakInfo,
)
from models.domain_models import DailyMeta, GameType, PuzzleStatus
from stores import KeyValueStore
from utils.time import ClockAndCalendarProvider, add_days, day_key, parse_day_key
from .content_store import PuzzleContentStore

logger = logging.getLogger(__name__)

History = dict[GameType, dict[date, DailyMeta]]

ARCHIVE_WEEKS = 5
WEEKDAY_LETTERS = ["S", "M", "T", "W", "T", "F", "S"]


def run_length_ending(days: set[date], end: date) -> int:
    """Consecutive days in `days` walking back from `end`."""
    n = 0
    d = end
    while d in days:
        n += 1
        d = add_days(d, -1)
    return n


def longest_run(days: set[date]) -> int:
    """Longest run of consecutive days, scanning from the earliest to the latest."""
    if not days:
        return 0
    best = run = 0
    d, last = min(days), max(days)
    while d <= last:
        run = run + 1 if d in days else 0
        best = max(best, run)
        d = add_days(d, 1)
    return best


def greeting(moment: datetime) -> str:
    hour = moment.hour
    if 5 <= hour < 12:
        return "Good morning"
    if 12 <= hour < 17:
        return "Good afternoon"
    if 17 <= hour < 22:
        return "Good evening"
    return "Happy puzzling"


class StatisticsAggregator:

    def __init__(
        self,
        store: KeyValueStore,
        content: Optional[PuzzleContentStore] = None,
        clock: Optional[ClockAndCalendarProvider] = None,
    ):
        self.store = store
        self.content = content
        self.clock = clock or ClockAndCalendarProvider()
        self._history: Optional[History] = None

    # -------------------------------------------------
    # History
    # -------------------------------------------------

    def history(self) -> History:
        """The indexed DailyMeta records, scanning the store on first use."""
        if self._history is None:
            self._history = self._scan()
        return self._history

    def record(self, game: GameType, day: date, meta: Optional[DailyMeta]) -> None:
        """Apply a DailyMeta write (or a delete, when `meta` is None) to the index."""
        if self._history is None:
            return
        if meta is None:
            self._history[game].pop(day, None)
        else:
            self._history[game][day] = meta

    def invalidate(self) -> None:
        """Drop the index so the next call rescans the store."""
        self._history = None

    def _scan(self) -> History:
        result: History = {game: {} for game in GameType}
        for game in GameType:
            prefix = f"{game.prefix}_meta_"
            for key in self.store.keys(prefix):
                day = parse_day_key(key[len(prefix):])
                if day is None:
                    continue
                blob = self.store.get(key)
                if blob is None:
                    continue
                try:
                    result[game][day] = DailyMeta.model_validate_json(blob)
                except ValidationError:
                    logger.warning(f"[STATS] skipping corrupt meta record {key}")
        return result

    @staticmethod
    def finished_days(history: History, game: GameType) -> set[date]:
        return {d for d, meta in history[game].items() if meta.finished}

    @classmethod
    def sweep_days(cls, history: History) -> set[date]:
        """Days on which every game was finished."""
        days = [cls.finished_days(history, game) for game in GameType]
        return set.intersection(*days)

    # -------------------------------------------------
    # Streaks
    # -------------------------------------------------

    def current_streak(self, game: GameType, history: Optional[History] = None) -> int:
        history = history if history is not None else self.history()
        return run_length_ending(self.finished_days(history, game), self.clock.today())

    def max_streak(self, game: GameType, history: Optional[History] = None) -> int:
        history = history if history is not None else self.history()
        days = self.finished_days(history, game)
        return max(longest_run(days), run_length_ending(days, self.clock.today()))

    def combined_streak(self, history: Optional[History] = None) -> int:
        history = history if history is not None else self.history()
        return run_length_ending(self.sweep_days(history), self.clock.today())

    def best_combined_streak(self, history: Optional[History] = None) -> int:
        history = history if history is not None else self.history()
        days = self.sweep_days(history)
        return max(longest_run(days), run_length_ending(days, self.clock.today()))

    def daily_sweep_count(self, history: Optional[History] = None) -> int:
        history = history if history is not None else self.history()
        return len(self.sweep_days(history))

    # -------------------------------------------------
    # Times
    # -------------------------------------------------

    def is_personal_best(self, game: GameType, time: float, history: Optional[History] = None) -> bool:
        """Whether `time` beats every earlier finish of `game`.

        Today's record is left out of the comparison since `time` is usually
        today's own finish. A first-ever finish is never a personal best.
        """
        if time <= 0:
            return False
        history = history if history is not None else self.history()
        today = self.clock.today()
        others = [m for d, m in history[game].items() if d != today and m.finished]
        if not others:
            return False
        return not any(0 < m.finish_time <= time for m in others)

    def game_stats(self, game: GameType, history: Optional[History] = None) -> GameStats:
        history = history if history is not None else self.history()
        records = history[game].values()
        played = sum(1 for m in records if m.started)
        won = sum(1 for m in records if m.finished)
        times = [m.finish_time for m in records if m.finished and m.finish_time > 0]
        return GameStats(
            game=game.value,
            games_played=played,
            games_won=won,
            win_rate=won / played if played else 0.0,
            current_streak=self.current_streak(game, history),
            max_streak=self.max_streak(game, history),
            average_time=sum(times) / len(times) if times else 0.0,
            best_time=min(times) if times else 0.0,
        )

    # -------------------------------------------------
    # Daily progress and archive
    # -------------------------------------------------

    @staticmethod
    def status_of(meta: Optional[DailyMeta]) -> PuzzleStatus:
        if meta is None or not meta.started:
            return PuzzleStatus.NOT_STARTED
        return PuzzleStatus.COMPLETED if meta.finished else PuzzleStatus.IN_PROGRESS

    def puzzle_status(self, game: GameType, day: date, history: Optional[History] = None) -> PuzzleStatus:
        history = history if history is not None else self.history()
        return self.status_of(history[game].get(day))

    def today_progress(self, history: Optional[History] = None) -> DailyProgress:
        history = history if history is not None else self.history()
        today = self.clock.today()
        completed = {
            game.value: self.status_of(history[game].get(today)) is PuzzleStatus.COMPLETED
            for game in GameType
        }
        count = sum(completed.values())
        return DailyProgress(
            day=day_key(today),
            completed=completed,
            completed_count=count,
            all_complete=count == len(completed),
        )

    def streak_info(self, history: Optional[History] = None) -> StreakInfo:
        history = history if history is not None else self.history()
        return StreakInfo(
            streaks={game.value: self.current_streak(game, history) for game in GameType},
            combined_streak=self.combined_streak(history),
            best_combined_streak=self.best_combined_streak(history),
            daily_sweep_count=self.daily_sweep_count(history),
        )

    def overview(self) -> StatsOverview:
        history = self.history()
        return StatsOverview(
            greeting=greeting(self.clock.now()),
            today=self.today_progress(history),
            streaks=self.streak_info(history),
            games=[self.game_stats(game, history) for game in GameType],
        )

    def archive_weeks(self, game: GameType, weeks: int = ARCHIVE_WEEKS) -> list[ArchiveWeek]:
        """The last `weeks` Sunday-to-Saturday weeks, oldest first, ending with this week."""
        history = self.history()
        today = self.clock.today()
        available = set(self.content.available_dates(game)) if self.content is not None else set()
        # date.weekday() is Monday=0; shift so Sunday starts the week
        this_week = today - timedelta(days=(today.weekday() + 1) % 7)

        result = []
        for index in range(weeks):
            start = add_days(this_week, -7 * (weeks - 1 - index))
            days = []
            for offset in range(7):
                d = add_days(start, offset)
                playable = d in available and d <= today
                days.append(ArchiveDay(
                    day=day_key(d),
                    day_of_month=d.day,
                    weekday_letter=WEEKDAY_LETTERS[offset],
                    is_today=d == today,
                    is_first_of_month=d.day == 1,
                    has_puzzle=playable,
                    status=self.status_of(history[game].get(d)) if playable else PuzzleStatus.NOT_STARTED,
                ))
            end = add_days(start, 6)
            label = f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}"
            result.append(ArchiveWeek(index=index, label=label, days=days))
        return result
