"""Task store interface."""

from typing import Protocol

from fourd.core.tasks import AuthorizationState, ListHandle, Task


class TaskStore(Protocol):
    """Interface for persisting tasks in per-category lists on any backend."""

    def authorize(self) -> AuthorizationState:
        """Request access to the store. May prompt the user."""
        ...

    def list_lists(self) -> dict[str, ListHandle]:
        """Existing lists, keyed by list id."""
        ...

    def create_list(self, title: str) -> ListHandle:
        """Create a list. Raises PersistenceError on failure."""
        ...

    def fetch_incomplete(self, handle: ListHandle) -> list[Task]:
        """Incomplete tasks in a list."""
        ...

    def save(self, task: Task) -> Task:
        """Insert or update a task, assigning an id to new ones. Raises PersistenceError."""
        ...

    def remove(self, task: Task) -> None:
        """Delete a task permanently. Raises PersistenceError."""
        ...
