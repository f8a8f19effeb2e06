"""Per-session cache of the lists backing each category."""

import logging

from .core.categories import Category
from .core.errors import ListResolutionError, NotAuthorizedError, PersistenceError
from .core.tasks import AuthorizationState, ListHandle
from .ports import TaskStore

logger = logging.getLogger(__name__)


class ListSession:
    """
    Resolves categories to store lists, creating missing lists once.

    The cache lives until invalidate() is called. Lists deleted in the store
    behind our back are not detected.
    """

    def __init__(self, store: TaskStore):
        self.store = store
        self._lists: dict[Category, ListHandle] = {}

    @property
    def is_initialized(self) -> bool:
        return len(self._lists) == len(Category)

    def initialize(self) -> dict[Category, ListHandle]:
        """Authorize, then find or create the list for every category."""
        state = self.store.authorize()
        if state is not AuthorizationState.GRANTED:
            raise NotAuthorizedError(f"Task store access {state.value.replace('_', ' ')}")

        by_title = {handle.title: handle for handle in self.store.list_lists().values()}
        for category in Category:
            title = category.list_title
            handle = by_title.get(title)
            if handle is None:
                try:
                    handle = self.store.create_list(title)
                except PersistenceError as e:
                    raise ListResolutionError(title, f"could not be created ({e})") from e
                logger.info(f"Created list {title!r}")
            self._lists[category] = handle
        return dict(self._lists)

    def resolve(self, category: Category) -> ListHandle:
        """The list backing a category, initializing the session if needed."""
        if not self.is_initialized:
            self.initialize()
        try:
            return self._lists[category]
        except KeyError:
            raise ListResolutionError(category.list_title) from None

    def handles(self) -> dict[Category, ListHandle]:
        if not self.is_initialized:
            self.initialize()
        return dict(self._lists)

    def invalidate(self) -> None:
        self._lists.clear()
