class HeadlinesError(Exception):
    """Base exception for all pyheadlines errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class FetchFailure(HeadlinesError):
    """Raised when listing or fetching headlines fails."""


class NotFoundFailure(HeadlinesError):
    """Raised when a headline with the requested id does not exist."""


class CreateFailure(HeadlinesError):
    """Raised when creating a headline fails."""


class UpdateFailure(HeadlinesError):
    """Raised when updating a headline fails."""


class DeleteFailure(HeadlinesError):
    """Raised when deleting a headline fails."""


class SearchFailure(HeadlinesError):
    """Raised when searching headlines fails."""


class NotConnected(HeadlinesError):
    """Raised when attempting to use a database that is not connected."""
