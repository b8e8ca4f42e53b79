from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

# Before this hour a run counts as the morning check-in
CHECK_IN_CUTOFF_HOUR = 10
CLOCK_OFFSET = timedelta(minutes=5)

ABSENCE_DURATION = "8:00"
ABSENCE_TYPE = "Thuiswerk"
DURATION_TYPE = "Duurtijd"


@dataclass
class ClockPlan:
    """What a single clock run submits for one day."""
    day: date
    check_in: bool
    clock_time: str  # HH:MM
    absence_duration: str | None = None  # e.g. "8:00", only on check-in

    @property
    def label(self) -> str:
        return "check-in" if self.check_in else "check-out"

    @property
    def cell_testid(self) -> str:
        return f"cell-{self.day.isoformat()}"


def format_hhmm(moment: datetime) -> str:
    """Format a datetime as zero-padded HH:MM."""
    return f"{moment.hour:02d}:{moment.minute:02d}"


def plan_clocking(now: datetime) -> ClockPlan:
    """Decide between check-in and check-out for the given local time.

    Before 10:00 the run is a check-in: an absence block of 8:00 is requested
    and the clock time is 5 minutes before now. Otherwise it is a check-out
    with a clock time 5 minutes after now.
    """
    check_in = now.hour < CHECK_IN_CUTOFF_HOUR
    if check_in:
        return ClockPlan(
            day=now.date(),
            check_in=True,
            clock_time=format_hhmm(now - CLOCK_OFFSET),
            absence_duration=ABSENCE_DURATION,
        )
    return ClockPlan(
        day=now.date(),
        check_in=False,
        clock_time=format_hhmm(now + CLOCK_OFFSET),
    )
