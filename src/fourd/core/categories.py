"""The four triage categories."""

from enum import Enum


class Category(Enum):
    """A 4D triage category: Do, Defer, Delegate or Drop."""

    DO = "do"
    DEFER = "defer"
    DELEGATE = "delegate"
    DROP = "drop"

    @property
    def list_title(self) -> str:
        """Title of the backing list in the task store."""
        return f"4D - {self.display_name}"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def shortcut(self) -> str:
        return str(list(Category).index(self) + 1)

    @property
    def icon(self) -> str:
        return f"{self.shortcut}.square"

    @property
    def bucket(self) -> str:
        """Grouping label used by the dashboard and statistics."""
        return _BUCKETS[self]

    @property
    def label_with_shortcut(self) -> str:
        return f"⌘{self.shortcut} {self.display_name}"

    @classmethod
    def from_shortcut(cls, key: str) -> "Category | None":
        for category in cls:
            if category.shortcut == key:
                return category
        return None

    @classmethod
    def from_list_title(cls, title: str) -> "Category | None":
        for category in cls:
            if category.list_title == title:
                return category
        return None

    @classmethod
    def parse(cls, value: str) -> "Category | None":
        """Lenient lookup by value, display name or shortcut."""
        value = value.strip().lower()
        for category in cls:
            if value in (category.value, category.display_name.lower(), category.shortcut):
                return category
        return None


_DISPLAY_NAMES = {
    Category.DO: "Do",
    Category.DEFER: "Defer",
    Category.DELEGATE: "Delegate",
    Category.DROP: "Drop",
}

_BUCKETS = {
    Category.DO: "🔥 Do Today",
    Category.DEFER: "📅 Deferred",
    Category.DELEGATE: "👥 Delegated",
    Category.DROP: "🗂 Dropped",
}

OTHER_BUCKET = "Other"
