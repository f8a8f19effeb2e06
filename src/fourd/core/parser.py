"""Parsing of captured text: priority markers and context tags."""

from dataclasses import dataclass

MAX_TITLE_LENGTH = 200

# Leading "!" count -> priority value (lower = more urgent)
_PRIORITY_BY_MARKS = {2: 5, 1: 9, 0: 0}
HIGH_PRIORITY = 1

CONTEXT_PREFIXES = ("#", "@")


@dataclass(frozen=True)
class ParsedInput:
    """Cleaned text plus the signals extracted from it."""

    text: str
    priority: int
    context: str | None = None


def priority_from_marks(count: int) -> int:
    """Map a run of leading exclamation marks to a priority value."""
    if count >= 3:
        return HIGH_PRIORITY
    return _PRIORITY_BY_MARKS[count]


def extract_context(text: str) -> str | None:
    """Collect #tags and @mentions into a notes line, in order of appearance."""
    tags = [word for word in text.split() if word.startswith(CONTEXT_PREFIXES)]
    return f"Context: {' '.join(tags)}" if tags else None


def parse_input(text: str) -> ParsedInput:
    """
    Parse raw capture text.

    "!!! buy milk #home" -> ParsedInput("buy milk #home", 1, "Context: #home")
    Never fails: text without markers yields priority 0 and no context.
    """
    trimmed = text.strip()
    marks = len(trimmed) - len(trimmed.lstrip("!"))
    cleaned = trimmed[marks:].strip()
    return ParsedInput(
        text=cleaned,
        priority=priority_from_marks(marks),
        context=extract_context(cleaned),
    )


def validate_input(text: str) -> bool:
    """Non-empty after trimming and at most MAX_TITLE_LENGTH characters."""
    trimmed = text.strip()
    return bool(trimmed) and len(trimmed) <= MAX_TITLE_LENGTH
