"""Pure task organization logic - bucketing, ordering, filtering."""

from datetime import datetime

from .categories import OTHER_BUCKET, Category
from .tasks import Task

BUCKET_ORDER = [c.bucket for c in Category] + [OTHER_BUCKET]


def bucket_for(task: Task) -> str:
    """Bucket label for a task, "Other" if its category is unresolvable."""
    category = task.category
    if not isinstance(category, Category):
        category = Category.parse(str(category or ""))
    return category.bucket if category else OTHER_BUCKET


def _grouped_key(task: Task, now: datetime) -> tuple:
    due = task.due_start()
    if due is not None:
        return (0, not task.is_overdue(now), due)
    return (1, task.created_at or datetime.min)


def _merged_key(task: Task, now: datetime) -> tuple:
    due = task.due_start()
    if due is not None:
        return (0, not task.is_overdue(now), due)
    return (1,)


def sort_grouped(tasks: list[Task], now: datetime) -> list[Task]:
    """
    Sort tasks within a bucket.

    Overdue first, then by due date; tasks without a due date follow,
    oldest creation first (missing creation date sorts earliest).
    Ties keep their input order.
    """
    return sorted(tasks, key=lambda t: _grouped_key(t, now))


def sort_merged(tasks: list[Task], now: datetime) -> list[Task]:
    """
    Sort tasks merged from several lists.

    Same as sort_grouped for dated tasks, but undated tasks go to the end
    in input order regardless of creation date.
    """
    return sorted(tasks, key=lambda t: _merged_key(t, now))


def compare_grouped(a: Task, b: Task, now: datetime) -> int:
    """Three-way comparison matching sort_grouped: -1, 0 or 1."""
    ka, kb = _grouped_key(a, now), _grouped_key(b, now)
    return (ka > kb) - (ka < kb)


def compare_merged(a: Task, b: Task, now: datetime) -> int:
    """Three-way comparison matching sort_merged: -1, 0 or 1."""
    ka, kb = _merged_key(a, now), _merged_key(b, now)
    return (ka > kb) - (ka < kb)


def organize(tasks: list[Task], now: datetime) -> dict[str, list[Task]]:
    """
    Group tasks by bucket label, each bucket sorted.

    Buckets come in category order with "Other" last; empty buckets are omitted.
    Pure function - no I/O.
    """
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(bucket_for(task), []).append(task)
    return {label: sort_grouped(groups[label], now) for label in BUCKET_ORDER if label in groups}


def filter_tasks(
    tasks: list[Task],
    now: datetime,
    category: Category | None = None,
    overdue_only: bool = False,
) -> list[Task]:
    """Filter to one category and/or overdue tasks."""
    return [
        t
        for t in tasks
        if (category is None or t.category == category)
        and (not overdue_only or t.is_overdue(now))
    ]


def summary_text(tasks: list[Task]) -> str:
    """One-line summary: "3 Do, 1 Defer, 2 Delegate". Dropped tasks are not listed."""
    parts = []
    for category in (Category.DO, Category.DEFER, Category.DELEGATE):
        count = sum(1 for t in tasks if bucket_for(t) == category.bucket)
        if count:
            parts.append(f"{count} {category.display_name}")
    return ", ".join(parts) if parts else "No active tasks"
