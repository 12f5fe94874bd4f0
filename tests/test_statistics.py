"""
Streaks, personal bests and archive status from DailyMeta records.
"""
from datetime import date

import pytest

from models import DailyMeta, GameType, PuzzleStatus
from services import PuzzleContentStore, SessionRegistry, StatisticsAggregator
from stores import MemoryKeyValueStore
import config

TODAY = date(2026, 10, 17)


def record(store, game, day, finished=True, started=True, finish_time=60.0):
    meta = DailyMeta(started=started, finished=finished, elapsed_time=finish_time, finish_time=finish_time if finished else 0)
    store.set(f"{game.prefix}_meta_{day.isoformat()}", meta.to_json())


@pytest.fixture
def stats(store, clock):
    return StatisticsAggregator(store, PuzzleContentStore(config.BASE_DIR / "content"), clock)


def test_current_streak_counts_back_from_today(store, stats):
    for day in [date(2026, 10, 15), date(2026, 10, 16), TODAY]:
        record(store, GameType.DIAGONE, day)
    assert stats.current_streak(GameType.DIAGONE) == 3


def test_gap_breaks_current_streak(store, stats):
    for day in [date(2026, 10, 15), TODAY]:
        record(store, GameType.DIAGONE, day)
    assert stats.current_streak(GameType.DIAGONE) == 1


def test_unfinished_today_means_no_current_streak(store, stats):
    record(store, GameType.DIAGONE, date(2026, 10, 16))
    record(store, GameType.DIAGONE, TODAY, finished=False)
    assert stats.current_streak(GameType.DIAGONE) == 0


def test_max_streak_finds_longest_historic_run(store, stats):
    for d in range(1, 5):
        record(store, GameType.RHYMEAGRAMS, date(2026, 9, d))
    record(store, GameType.RHYMEAGRAMS, date(2026, 9, 10))
    record(store, GameType.RHYMEAGRAMS, TODAY)
    assert stats.max_streak(GameType.RHYMEAGRAMS) == 4
    assert stats.current_streak(GameType.RHYMEAGRAMS) == 1


def test_first_finish_is_not_a_personal_best(store, stats):
    record(store, GameType.TUMBLEPUNS, TODAY, finish_time=90)
    assert not stats.is_personal_best(GameType.TUMBLEPUNS, 90)


def test_faster_second_finish_is_a_personal_best(store, stats):
    record(store, GameType.TUMBLEPUNS, date(2026, 10, 16), finish_time=100)
    record(store, GameType.TUMBLEPUNS, TODAY, finish_time=80)
    assert stats.is_personal_best(GameType.TUMBLEPUNS, 80)
    assert not stats.is_personal_best(GameType.TUMBLEPUNS, 120)
    assert not stats.is_personal_best(GameType.TUMBLEPUNS, 100)
    assert not stats.is_personal_best(GameType.TUMBLEPUNS, 0)


def test_combined_streak_and_sweeps(store, stats):
    for day in [date(2026, 10, 10), date(2026, 10, 11), date(2026, 10, 16), TODAY]:
        for game in GameType:
            record(store, game, day)
    # everything but tumblepuns on the 15th
    record(store, GameType.DIAGONE, date(2026, 10, 15))
    record(store, GameType.RHYMEAGRAMS, date(2026, 10, 15))

    assert stats.combined_streak() == 2
    assert stats.best_combined_streak() == 2
    assert stats.daily_sweep_count() == 4
    assert stats.current_streak(GameType.DIAGONE) == 3


def test_game_stats(store, stats):
    record(store, GameType.DIAGONE, date(2026, 10, 14), finish_time=30)
    record(store, GameType.DIAGONE, date(2026, 10, 15), finish_time=90)
    record(store, GameType.DIAGONE, date(2026, 10, 16), finished=False)
    result = stats.game_stats(GameType.DIAGONE)
    assert result.games_played == 3
    assert result.games_won == 2
    assert result.win_rate == pytest.approx(2 / 3)
    assert result.best_time == 30
    assert result.average_time == pytest.approx(60)
    assert result.current_streak == 0
    assert result.max_streak == 2


def test_today_progress_and_status(store, stats):
    record(store, GameType.DIAGONE, TODAY)
    record(store, GameType.RHYMEAGRAMS, TODAY, finished=False)
    progress = stats.today_progress()
    assert progress.completed == {"diagone": True, "rhymeagrams": False, "tumblepuns": False}
    assert progress.completed_count == 1
    assert not progress.all_complete
    assert stats.puzzle_status(GameType.RHYMEAGRAMS, TODAY) is PuzzleStatus.IN_PROGRESS
    assert stats.puzzle_status(GameType.TUMBLEPUNS, TODAY) is PuzzleStatus.NOT_STARTED


def test_corrupt_meta_records_are_ignored(store, stats):
    store.set("diagone_meta_2026-10-17", "garbage")
    store.set("diagone_meta_not-a-day", DailyMeta(started=True, finished=True).to_json())
    assert stats.history()[GameType.DIAGONE] == {}


def test_archive_weeks_are_sunday_first(store, stats):
    record(store, GameType.DIAGONE, date(2026, 10, 15))
    weeks = stats.archive_weeks(GameType.DIAGONE)
    assert len(weeks) == 5
    assert all(len(w.days) == 7 for w in weeks)
    assert [d.weekday_letter for d in weeks[0].days] == ["S", "M", "T", "W", "T", "F", "S"]

    this_week = weeks[-1]
    assert this_week.days[0].day == "2026-10-11"
    assert this_week.days[-1].is_today
    by_day = {d.day: d for d in this_week.days}
    assert by_day["2026-10-15"].has_puzzle
    assert by_day["2026-10-15"].status is PuzzleStatus.COMPLETED
    assert not by_day["2026-10-12"].has_puzzle
    assert weeks[0].days[0].day == "2026-09-13"


class CountingStore(MemoryKeyValueStore):

    def __init__(self):
        super().__init__()
        self.meta_scans = 0

    def keys(self, prefix=""):
        if "_meta_" in prefix:
            self.meta_scans += 1
        return super().keys(prefix)


def test_history_is_scanned_once_and_follows_session_writes(fallback_content, timers, clock):
    store = CountingStore()
    record(store, GameType.DIAGONE, date(2026, 10, 16))
    registry = SessionRegistry(store, fallback_content, timers, clock=clock)
    stats = registry.stats

    assert stats.game_stats(GameType.DIAGONE).games_played == 1
    assert store.meta_scans == len(GameType)

    session = registry.get(GameType.DIAGONE)
    session.start_game()
    assert stats.history()[GameType.DIAGONE][TODAY].started
    assert stats.game_stats(GameType.DIAGONE).games_played == 2

    session.clear_game()
    assert TODAY not in stats.history()[GameType.DIAGONE]
    assert stats.game_stats(GameType.DIAGONE).games_played == 1
    assert store.meta_scans == len(GameType)

    stats.invalidate()
    stats.history()
    assert store.meta_scans == 2 * len(GameType)
