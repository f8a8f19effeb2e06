"""File-based task store adapter."""

import json
import logging
from pathlib import Path

from fourd.core.errors import PersistenceError
from fourd.core.tasks import ListHandle, Task

from .memory_store import MemoryTaskStore

logger = logging.getLogger(__name__)


class FileTaskStore(MemoryTaskStore):
    """
    JSON file task store.

    Implements TaskStore protocol. The whole store lives in one file that is
    rewritten after every change.
    """

    def __init__(self, path: Path | str):
        super().__init__()
        self.path = Path(path).expanduser()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
            self._lists = {
                item["id"]: ListHandle(id=item["id"], title=item["title"])
                for item in data.get("lists", [])
            }
            self._tasks = {item["id"]: Task.from_dict(item) for item in data.get("tasks", [])}
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Failed to read {self.path}", e) from e
        logger.debug(f"Loaded {len(self._tasks)} tasks from {self.path}")

    def _changed(self) -> None:
        data = {
            "lists": [{"id": h.id, "title": h.title} for h in self._lists.values()],
            "tasks": [t.to_dict() for t in self._tasks.values()],
        }
        tmp = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False))
            tmp.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}", e) from e
