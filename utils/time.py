"""Time utilities: the injected clock and the fixed UTC calendar.

Every "day" in the system is a Gregorian UTC calendar day. Persistence keys
use `yyyy-MM-dd`; puzzle content is keyed by `MM/dd/yyyy`. Keeping both
formats here means the day boundary is the same everywhere regardless of
the host timezone.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional


DAY_KEY_FORMAT = "%Y-%m-%d"
PUZZLE_KEY_FORMAT = "%m/%d/%Y"


def now_utc() -> datetime:
    """Return current UTC datetime with tzinfo set."""
    return datetime.now(timezone.utc)


def to_iso(dt: datetime) -> str:
    """Serialize a datetime to ISO8601 string."""
    return dt.isoformat()


def utc_day(moment: datetime | date) -> date:
    """Return the UTC calendar day for a datetime (naive values are taken as UTC)."""
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc).date()
    return moment


def day_key(moment: datetime | date) -> str:
    """`yyyy-MM-dd` key used to namespace persisted records."""
    return utc_day(moment).strftime(DAY_KEY_FORMAT)


def puzzle_key(moment: datetime | date) -> str:
    """`MM/dd/yyyy` key used by the puzzle content files."""
    return utc_day(moment).strftime(PUZZLE_KEY_FORMAT)


def parse_day_key(key: str) -> Optional[date]:
    """Parse a `yyyy-MM-dd` key, returning None for anything else."""
    try:
        return datetime.strptime(key, DAY_KEY_FORMAT).date()
    except (TypeError, ValueError):
        return None


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def puzzle_number(moment: datetime | date) -> int:
    """Display number of a day's puzzle ("No. 1234")."""
    return int(utc_day(moment).strftime("%Y%m%d")) % 5000


def format_elapsed(seconds: float) -> str:
    """Format a duration as `mm:ss`."""
    total = int(max(seconds, 0))
    return f"{total // 60:02d}:{total % 60:02d}"


class ClockAndCalendarProvider:
    """Wall clock plus the fixed UTC calendar.

    Sessions and the statistics aggregator take one of these instead of
    calling `datetime.now()` directly so tests can pin "now".
    """

    def now(self) -> datetime:
        return now_utc()

    def timestamp(self) -> float:
        """Seconds since the epoch, used for elapsed-time arithmetic."""
        return self.now().timestamp()

    def today(self) -> date:
        return utc_day(self.now())

    def day_key(self, moment: datetime | date | None = None) -> str:
        return day_key(self.now() if moment is None else moment)

    def puzzle_key(self, moment: datetime | date | None = None) -> str:
        return puzzle_key(self.now() if moment is None else moment)
