"""Due dates and alerts per category - pure functions of (category, now)."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .categories import Category

DO_CUTOFF_HOUR = 18
DO_ALERT_TIME = time(9, 0)
DEFER_ALERT_TIME = time(9, 0)
DELEGATE_ALERT_TIME = time(10, 0)
DELEGATE_FOLLOW_UP_DAYS = 3
MONDAY = 0


@dataclass(frozen=True)
class Schedule:
    """A due date (day granularity) and the alert instants derived for it."""

    due_date: date | None = None
    alerts: tuple[datetime, ...] = ()


def next_monday(now: datetime) -> date:
    """The first Monday strictly after now."""
    days_ahead = (MONDAY - now.weekday()) % 7 or 7
    return now.date() + timedelta(days=days_ahead)


def _do_schedule(now: datetime) -> Schedule:
    # Due date and alert use separate cutoffs; after 18:00 the alert lands on
    # the same morning the task falls due.
    today = now.date()
    tomorrow = today + timedelta(days=1)
    due = tomorrow if now.hour >= DO_CUTOFF_HOUR else today
    alert_day = tomorrow if now.hour >= DO_ALERT_TIME.hour else today
    return Schedule(due, (datetime.combine(alert_day, DO_ALERT_TIME),))


def _defer_schedule(now: datetime) -> Schedule:
    monday = next_monday(now)
    return Schedule(monday, (datetime.combine(monday, DEFER_ALERT_TIME),))


def _delegate_schedule(now: datetime) -> Schedule:
    follow_up = (now + timedelta(days=DELEGATE_FOLLOW_UP_DAYS)).date()
    return Schedule(follow_up, (datetime.combine(follow_up, DELEGATE_ALERT_TIME),))


def schedule_for(category: Category, now: datetime) -> Schedule:
    """
    Compute the due date and alerts a category assigns.

    Do: today (tomorrow after 18:00), alert at the next 09:00.
    Defer: next Monday, alert 09:00. Delegate: in 3 days, alert 10:00.
    Drop: nothing.
    """
    match category:
        case Category.DO:
            return _do_schedule(now)
        case Category.DEFER:
            return _defer_schedule(now)
        case Category.DELEGATE:
            return _delegate_schedule(now)
        case Category.DROP:
            return Schedule()
    raise ValueError(f"Unknown category: {category!r}")


def defer_schedule(days: int, now: datetime) -> Schedule:
    """Push a task out by N days; the alert fires at the same time of day."""
    target = now + timedelta(days=days)
    return Schedule(target.date(), (target,))
