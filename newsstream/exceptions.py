import math


class NewsStreamError(Exception):
    """Base class for errors raised by newsstream."""


class RateLimited(NewsStreamError):
    """Raised when a refresh is requested before the minimum interval has passed."""

    def __init__(self, remaining: float) -> None:
        self.remaining = remaining
        super().__init__(f"Please wait {self.remaining_seconds} seconds before refreshing")

    @property
    def remaining_seconds(self) -> int:
        return int(math.ceil(self.remaining))


class AlreadyInProgress(NewsStreamError):
    """Raised when a refresh is requested while another one is still running."""


class SourceFetchFailed(NewsStreamError):
    """Raised when a feed cannot be retrieved through the relay."""


class FeedParseFailed(NewsStreamError):
    """Raised when a feed document is not a usable RSS/Atom document."""


class ItemExtractionSkipped(NewsStreamError):
    """Raised when a feed item lacks the fields needed to build an Article."""


class PreferenceError(NewsStreamError, ValueError):
    """Raised when a preference change would break a selection limit."""
