class AtsCrawlerError(Exception):
    """Base class for all errors raised by ats_crawler."""


class StoreUnavailable(AtsCrawlerError):
    """The backing store could not be opened. Nothing can run without it."""


class FetchError(AtsCrawlerError):
    """A remote page could not be fetched (timeout, DNS, refused, non-2xx)."""

    def __init__(self, url: str, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message or f"failed to fetch {url}")
        self.url = url
        self.status_code = status_code

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code in (403, 429)


class SourceParsingError(AtsCrawlerError):
    """A fetched page did not have the structure we expected."""


class PersistenceError(AtsCrawlerError):
    """A single row could not be written."""
