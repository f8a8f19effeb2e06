"""Adapters - I/O implementations of ports."""

from .memory_store import MemoryTaskStore
from .file_store import FileTaskStore
from .ticktick_api import TickTickTaskStore, AuthenticationError

__all__ = [
    "MemoryTaskStore",
    "FileTaskStore",
    "TickTickTaskStore",
    "AuthenticationError",
]
