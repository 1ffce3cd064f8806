"""Custom exceptions for the application."""

from typing import Any


class MovieverseError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(MovieverseError):
    """Configuration-related errors."""

    pass


class MovieBackendError(MovieverseError):
    """Transport-level errors talking to the movie backend."""

    pass


class ValidationError(MovieverseError):
    """Local input validation errors, raised before any remote call."""

    pass


class FetchFailed(MovieverseError):
    """Listing a page failed; the held page and pagination are unchanged."""

    pass


class MutationFailed(MovieverseError):
    """Create, update or delete was rejected or could not be delivered."""

    pass


class RefetchFailed(FetchFailed):
    """A mutation was applied but the page could not be reloaded afterwards.

    ``result`` holds the backend acknowledgement of the mutation.
    """

    def __init__(self, message: str, result: Any = None) -> None:
        super().__init__(message)
        self.result = result


class StaleResponse(MovieverseError):
    """A fetch response was superseded by a newer request.

    Internal only: the pager discards it and never surfaces it.
    """

    def __init__(self, sequence: int, latest: int) -> None:
        super().__init__(f"Response for request #{sequence} superseded by request #{latest}")
        self.sequence = sequence
        self.latest = latest
