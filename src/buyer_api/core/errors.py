"""Domain exception taxonomy.

The core raises these; the HTTP layer translates them into responses.
"""


class ImportRejectedError(Exception):
    """A file-level import precondition failed; nothing was processed or committed."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordValidationError(Exception):
    """A single candidate record failed validation.

    Attributes:
        field: Wire name of the offending field (e.g. ``budgetMax``).
        message: Human-readable description, prefixed with the field name.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class PersistenceError(Exception):
    """The storage layer failed while committing; the transaction was rolled back."""


class BuyerNotFoundError(LookupError):
    """No buyer exists with the requested id."""


class RateLimitExceeded(Exception):  # noqa: N818
    """A caller exhausted its allowance for the current window.

    Attributes:
        limit: Maximum requests per window for the limiter that rejected.
        remaining: Units still available in the window.
        reset_time_ms: Epoch milliseconds at which the window resets.
        message: Human-readable rejection message.
    """

    def __init__(self, *, limit: int, remaining: int, reset_time_ms: int, message: str) -> None:
        super().__init__(message)
        self.limit = limit
        self.remaining = remaining
        self.reset_time_ms = reset_time_ms
        self.message = message
