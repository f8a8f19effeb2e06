"""In-memory task store adapter."""

import uuid
from dataclasses import replace

from fourd.core.errors import PersistenceError
from fourd.core.tasks import AuthorizationState, ListHandle, Task


def _copy(task: Task) -> Task:
    return replace(task, alerts=list(task.alerts))


class MemoryTaskStore:
    """
    Task store held in memory.

    Implements TaskStore protocol. Callers get copies, so edits only take
    effect through save().
    """

    def __init__(self, authorization: AuthorizationState = AuthorizationState.GRANTED):
        self.authorization = authorization
        self._lists: dict[str, ListHandle] = {}
        self._tasks: dict[str, Task] = {}

    def authorize(self) -> AuthorizationState:
        return self.authorization

    def list_lists(self) -> dict[str, ListHandle]:
        return dict(self._lists)

    def create_list(self, title: str) -> ListHandle:
        handle = ListHandle(id=uuid.uuid4().hex, title=title)
        self._lists[handle.id] = handle
        self._commit(lambda: self._lists.pop(handle.id))
        return handle

    def fetch_incomplete(self, handle: ListHandle) -> list[Task]:
        return [
            _copy(t)
            for t in self._tasks.values()
            if t.list_id == handle.id and not t.completed
        ]

    def save(self, task: Task) -> Task:
        if task.list_id not in self._lists:
            raise PersistenceError(f"Cannot save '{task.title}'", KeyError(task.list_id))
        if task.id and task.id not in self._tasks:
            raise PersistenceError(f"Cannot save '{task.title}'", KeyError(task.id))

        previous = self._tasks.get(task.id) if task.id else None
        if not task.id:
            task.id = uuid.uuid4().hex

        def undo():
            if previous is None:
                del self._tasks[task.id]
                task.id = ""
            else:
                self._tasks[task.id] = previous

        self._tasks[task.id] = _copy(task)
        self._commit(undo)
        return task

    def remove(self, task: Task) -> None:
        if task.id not in self._tasks:
            raise PersistenceError(f"Cannot delete '{task.title}'", KeyError(task.id))
        previous = self._tasks.pop(task.id)
        self._commit(lambda: self._tasks.__setitem__(task.id, previous))

    def _commit(self, undo) -> None:
        """Persist a change, reverting it in memory if persisting fails."""
        try:
            self._changed()
        except PersistenceError:
            undo()
            raise

    def _changed(self) -> None:
        """Hook for subclasses that persist state."""
