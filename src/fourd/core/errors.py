"""Error kinds raised by the task lifecycle."""


class FourDError(Exception):
    """Base class for all task lifecycle errors."""


class ValidationError(FourDError):
    """Input text is empty or too long."""


class NotAuthorizedError(FourDError):
    """Access to the task store was not granted."""

    def __init__(self, message: str = "Not authorized to access the task store"):
        super().__init__(message)


class ListResolutionError(FourDError):
    """A category's backing list is missing and could not be created."""

    def __init__(self, list_title: str, reason: str = "not found"):
        self.list_title = list_title
        super().__init__(f"List '{list_title}' {reason}")


class PersistenceError(FourDError):
    """The task store failed to read or write."""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigurationError(FourDError):
    """fourd.conf names an unknown store or timezone."""
