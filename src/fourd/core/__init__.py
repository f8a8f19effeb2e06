"""Functional core - pure business logic with no I/O."""

from .categories import Category, OTHER_BUCKET
from .tasks import Task, ListHandle, AuthorizationState, PriorityBand
from .parser import ParsedInput, parse_input, validate_input, MAX_TITLE_LENGTH
from .schedule import Schedule, schedule_for, defer_schedule
from .organizer import bucket_for, organize, sort_grouped, sort_merged, filter_tasks, summary_text
from .stats import TaskStats, DueBucket, compute_stats
from .errors import (
    FourDError,
    ValidationError,
    NotAuthorizedError,
    ListResolutionError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    # Categories
    "Category",
    "OTHER_BUCKET",
    # Tasks
    "Task",
    "ListHandle",
    "AuthorizationState",
    "PriorityBand",
    # Parsing
    "ParsedInput",
    "parse_input",
    "validate_input",
    "MAX_TITLE_LENGTH",
    # Scheduling
    "Schedule",
    "schedule_for",
    "defer_schedule",
    # Organizing
    "bucket_for",
    "organize",
    "sort_grouped",
    "sort_merged",
    "filter_tasks",
    "summary_text",
    # Statistics
    "TaskStats",
    "DueBucket",
    "compute_stats",
    # Errors
    "FourDError",
    "ValidationError",
    "NotAuthorizedError",
    "ListResolutionError",
    "PersistenceError",
    "ConfigurationError",
]
