"""Shared workflow layer between the CLI and any other front end.

TaskCoordinator turns captures and dashboard actions into single-record
writes against a TaskStore. Each operation either returns the updated task
or raises a FourDError subclass.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import Config
from .core.categories import Category
from .core.errors import ConfigurationError, FourDError, ValidationError
from .core.organizer import organize, sort_merged, summary_text
from .core.parser import MAX_TITLE_LENGTH, parse_input, validate_input
from .core.schedule import Schedule, defer_schedule, schedule_for
from .core.stats import TaskStats, compute_stats
from .core.tasks import Task
from .ports import TaskStore
from .session import ListSession

logger = logging.getLogger(__name__)

DEFAULT_DEFER_DAYS = 7


@dataclass
class BatchResult:
    """Outcome of a batch action. Failures are not rolled back."""

    succeeded: list[Task] = field(default_factory=list)
    failed: list[tuple[Task, FourDError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class Dashboard:
    """Everything the dashboard view shows, computed from one fetch."""

    tasks: list[Task]
    buckets: dict[str, list[Task]]
    stats: TaskStats
    summary: str


def _apply_schedule(task: Task, schedule: Schedule) -> None:
    task.due_date = schedule.due_date
    task.alerts = list(schedule.alerts)


class TaskCoordinator:
    """Creates tasks and applies state changes through a TaskStore."""

    def __init__(
        self,
        store: TaskStore,
        session: ListSession | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.session = session or ListSession(store)
        self.clock = clock

    def create(self, text: str, category: Category) -> Task:
        """Parse, schedule and persist a captured task."""
        if not validate_input(text):
            raise ValidationError(f"Task text must be 1-{MAX_TITLE_LENGTH} characters")
        parsed = parse_input(text)
        if not parsed.text:
            raise ValidationError("Task text is empty once priority markers are removed")

        handle = self.session.resolve(category)
        now = self.clock()
        task = Task(
            id="",
            title=parsed.text,
            category=category,
            priority=parsed.priority,
            notes=parsed.context,
            created_at=now,
            list_id=handle.id,
        )
        _apply_schedule(task, schedule_for(category, now))
        saved = self.store.save(task)
        logger.debug(f"Created {category.value} task {saved.id}: {saved.title!r}")
        return saved

    def complete(self, task: Task) -> Task:
        updated = replace(task, completed=True, completed_at=self.clock())
        return self.store.save(updated)

    def uncomplete(self, task: Task) -> Task:
        updated = replace(task, completed=False, completed_at=None)
        return self.store.save(updated)

    def defer(self, task: Task, days: int = DEFAULT_DEFER_DAYS) -> Task:
        """Push the due date out by N days, replacing all alerts with one."""
        updated = replace(task)
        _apply_schedule(updated, defer_schedule(days, self.clock()))
        return self.store.save(updated)

    def recategorize(self, task: Task, category: Category) -> Task:
        """Move a task to another category's list and reschedule it."""
        handle = self.session.resolve(category)
        updated = replace(task, category=category, list_id=handle.id, alerts=[])
        _apply_schedule(updated, schedule_for(category, self.clock()))
        saved = self.store.save(updated)
        logger.debug(f"Moved task {saved.id} to {category.value}")
        return saved

    def delete(self, task: Task) -> None:
        self.store.remove(task)
        logger.debug(f"Deleted task {task.id}")

    def complete_many(self, tasks: list[Task]) -> BatchResult:
        return self._fold(tasks, self.complete)

    def defer_many(self, tasks: list[Task], days: int = DEFAULT_DEFER_DAYS) -> BatchResult:
        return self._fold(tasks, lambda t: self.defer(t, days))

    def _fold(self, tasks: list[Task], action: Callable[[Task], Task]) -> BatchResult:
        result = BatchResult()
        for task in tasks:
            try:
                result.succeeded.append(action(task))
            except FourDError as e:
                logger.warning(f"Batch action failed for task {task.id}: {e}")
                result.failed.append((task, e))
        return result

    def fetch_active(self) -> list[Task]:
        """Incomplete tasks from every category list, overdue first."""
        tasks: list[Task] = []
        for handle in self.session.handles().values():
            tasks.extend(self.store.fetch_incomplete(handle))
        return sort_merged(tasks, self.clock())

    def dashboard(self) -> Dashboard:
        tasks = self.fetch_active()
        now = self.clock()
        return Dashboard(
            tasks=tasks,
            buckets=organize(tasks, now),
            stats=compute_stats(tasks, now),
            summary=summary_text(tasks),
        )


def get_store(config: Config) -> TaskStore:
    """Build the task store named in the config."""
    match config.store:
        case "ticktick":
            from .adapters.ticktick_api import TickTickTaskStore

            return TickTickTaskStore(config)
        case "file" | "":
            from .adapters.file_store import FileTaskStore

            return FileTaskStore(config.data_path)
    raise ConfigurationError(f"Unknown STORE {config.store!r} (expected 'file' or 'ticktick')")


def local_clock(config: Config) -> Callable[[], datetime]:
    """Clock returning naive local time, in the configured timezone if set."""
    if not config.timezone:
        return datetime.now
    try:
        tz = ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown TIMEZONE {config.timezone!r}") from e
    return lambda: datetime.now(tz).replace(tzinfo=None)


def get_coordinator(config: Config) -> TaskCoordinator:
    return TaskCoordinator(get_store(config), clock=local_clock(config))
