"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum

from .categories import Category


class AuthorizationState(Enum):
    """Access state reported by a task store."""

    NOT_DETERMINED = "not_determined"
    GRANTED = "granted"
    DENIED = "denied"


class PriorityBand(Enum):
    """Priority ranges. Lower priority values are more urgent."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @classmethod
    def of(cls, priority: int) -> "PriorityBand":
        if 1 <= priority <= 3:
            return cls.HIGH
        if 4 <= priority <= 6:
            return cls.MEDIUM
        if 7 <= priority <= 9:
            return cls.LOW
        return cls.NONE


@dataclass(frozen=True)
class ListHandle:
    """A named list in the task store."""

    id: str
    title: str


@dataclass
class Task:
    """A captured task, persisted as a reminder in its category's list.

    ``id`` is empty until the store assigns one on first save.
    """

    id: str
    title: str
    category: Category
    priority: int = 0
    due_date: date | None = None
    alerts: list[datetime] = field(default_factory=list)
    notes: str | None = None
    completed: bool = False
    completed_at: datetime | None = None
    created_at: datetime | None = None
    list_id: str = ""

    def __post_init__(self):
        if not 0 <= self.priority <= 9:
            raise ValueError(f"priority must be in [0, 9], got {self.priority}")

    @property
    def priority_band(self) -> PriorityBand:
        return PriorityBand.of(self.priority)

    def due_start(self) -> datetime | None:
        """Start of the due day (local midnight), or None."""
        if not self.due_date:
            return None
        return datetime.combine(self.due_date, time())

    def is_overdue(self, now: datetime) -> bool:
        """Due-day start is before now. A task due today counts once the day starts."""
        due = self.due_start()
        return due is not None and due < now

    def days_until_due(self, as_of: date) -> int | None:
        """Days until due date (negative if overdue)."""
        if not self.due_date:
            return None
        return (self.due_date - as_of).days

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category.value,
            "priority": self.priority,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "alerts": [a.isoformat() for a in self.alerts],
            "notes": self.notes,
            "completed": self.completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "list_id": self.list_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its stored JSON form."""

        def _dt(value: str | None) -> datetime | None:
            return datetime.fromisoformat(value) if value else None

        return cls(
            id=data["id"],
            title=data["title"],
            category=Category(data["category"]),
            priority=data.get("priority", 0),
            due_date=date.fromisoformat(data["due_date"]) if data.get("due_date") else None,
            alerts=[datetime.fromisoformat(a) for a in data.get("alerts", [])],
            notes=data.get("notes"),
            completed=data.get("completed", False),
            completed_at=_dt(data.get("completed_at")),
            created_at=_dt(data.get("created_at")),
            list_id=data.get("list_id", ""),
        )
