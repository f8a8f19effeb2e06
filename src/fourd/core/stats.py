"""Aggregate statistics over a task collection - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .categories import OTHER_BUCKET, Category
from .organizer import bucket_for
from .tasks import PriorityBand, Task

WEEK = timedelta(days=7)


class DueBucket(Enum):
    OVERDUE = "overdue"
    TODAY = "due_today"
    THIS_WEEK = "due_this_week"
    LATER = "due_later"
    NONE = "no_due_date"


def due_bucket(task: Task, now: datetime) -> DueBucket:
    """
    Classify a task by due date.

    Every task falls in exactly one bucket: a task due today counts as
    "today" even though its day has started.
    """
    due = task.due_start()
    if due is None:
        return DueBucket.NONE
    today = now.date()
    if task.due_date < today:
        return DueBucket.OVERDUE
    if task.due_date == today:
        return DueBucket.TODAY
    if due <= now + WEEK:
        return DueBucket.THIS_WEEK
    return DueBucket.LATER


@dataclass(frozen=True)
class TaskStats:
    """Snapshot of counts for the statistics view."""

    total: int
    by_category: Mapping[str, int] = field(default_factory=dict)
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0
    no_priority: int = 0
    overdue: int = 0
    due_today: int = 0
    due_this_week: int = 0
    due_later: int = 0
    no_due_date: int = 0

    def __post_init__(self):
        object.__setattr__(self, "by_category", MappingProxyType(dict(self.by_category)))

    @property
    def active(self) -> int:
        return self.overdue + self.due_today + self.due_this_week + self.due_later + self.no_due_date

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "by_category": dict(self.by_category),
            "by_priority": {
                "high": self.high_priority,
                "medium": self.medium_priority,
                "low": self.low_priority,
                "none": self.no_priority,
            },
            "by_due_date": {
                "overdue": self.overdue,
                "due_today": self.due_today,
                "due_this_week": self.due_this_week,
                "due_later": self.due_later,
                "no_due_date": self.no_due_date,
            },
        }


def compute_stats(tasks: list[Task], now: datetime) -> TaskStats:
    """
    Count tasks by category, priority band and due-date bucket.

    Completed tasks count toward the total, category and priority figures
    but never toward a due bucket. Pure function - the input is not modified.
    """
    by_category = {c.bucket: 0 for c in Category}
    bands = {band: 0 for band in PriorityBand}
    due = {bucket: 0 for bucket in DueBucket}

    for task in tasks:
        label = bucket_for(task)
        if label == OTHER_BUCKET:
            by_category.setdefault(OTHER_BUCKET, 0)
        by_category[label] += 1
        bands[task.priority_band] += 1
        if not task.completed:
            due[due_bucket(task, now)] += 1

    return TaskStats(
        total=len(tasks),
        by_category=by_category,
        high_priority=bands[PriorityBand.HIGH],
        medium_priority=bands[PriorityBand.MEDIUM],
        low_priority=bands[PriorityBand.LOW],
        no_priority=bands[PriorityBand.NONE],
        overdue=due[DueBucket.OVERDUE],
        due_today=due[DueBucket.TODAY],
        due_this_week=due[DueBucket.THIS_WEEK],
        due_later=due[DueBucket.LATER],
        no_due_date=due[DueBucket.NONE],
    )
