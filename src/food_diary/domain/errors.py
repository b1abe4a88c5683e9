"""Error taxonomy for the food diary."""


class DiaryError(Exception):
    """Base class for diary errors surfaced to callers."""


class ValidationError(DiaryError):
    """Raised when entry input violates field constraints."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class NotFoundError(DiaryError):
    """Raised when an operation references an unknown entry id."""


class InvalidRangeError(DiaryError):
    """Raised when a date range is malformed."""


class TransportError(DiaryError):
    """Raised when the entry store cannot be reached or fails."""
