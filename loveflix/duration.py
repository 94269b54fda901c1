"""Elapsed time since the relationship start date.

The breakdown is deliberately approximate: a year is 365.25 days and a month
is 30.44 days, regardless of the calendar. 2025-12-02 to 2026-01-03 therefore
reads as 1 month and 1 day.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Callable

from loveflix.models import Duration
from loveflix.scheduling import Component, Scheduler

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25
DAYS_PER_MONTH = 30.44

DURATION_LABELS = ["ปี", "เดือน", "วัน", "ชั่วโมง", "นาที", "วินาที"]


def parse_start_date(value: str | date | datetime) -> datetime:
    """Parse a start date. Date-only values mean midnight UTC."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid start date: {value!r}") from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def calc_duration(start: str | date | datetime, now: datetime | None = None) -> Duration:
    """Break now - start into years/months/days/hours/minutes/seconds."""
    start_dt = parse_start_date(start)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    # A start date in the future shows zeros rather than negative counters.
    total_seconds = max(math.floor((now - start_dt).total_seconds()), 0)
    total_minutes = total_seconds // 60
    total_hours = total_minutes // 60
    total_days = total_hours // 24

    years = math.floor(total_days / DAYS_PER_YEAR)
    remain_days = total_days - math.floor(years * DAYS_PER_YEAR)
    months = math.floor(remain_days / DAYS_PER_MONTH)
    days = math.floor(remain_days - months * DAYS_PER_MONTH)

    return Duration(
        years=years,
        months=months,
        days=days,
        hours=total_hours % 24,
        minutes=total_minutes % 60,
        seconds=total_seconds % 60,
        total_seconds=total_seconds,
    )


class DurationTicker(Component):
    """Recomputes the duration every tick while mounted."""

    def __init__(
        self,
        scheduler: Scheduler,
        start_date: str,
        tick: float = 1.0,
        on_tick: Callable[[Duration], None] | None = None,
    ) -> None:
        super().__init__(scheduler)
        self.start_date = start_date
        self.tick = tick
        self.on_tick = on_tick
        self.duration = Duration()

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.scheduler.now(), tz=timezone.utc)

    def refresh(self) -> Duration:
        try:
            self.duration = calc_duration(self.start_date, self._now())
        except ValueError:
            logger.warning("Cannot compute duration from start date %r", self.start_date)
            self.duration = Duration()
        if self.on_tick:
            self.on_tick(self.duration)
        return self.duration

    def set_start_date(self, start_date: str) -> None:
        self.start_date = start_date
        if self.mounted:
            self.refresh()

    def mount(self) -> None:
        super().mount()
        self.refresh()
        self.every(self.tick, self.refresh)
