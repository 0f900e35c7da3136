"""Error kinds raised by the expenditure aggregation core.

All three propagate unchanged to whoever called the query layer; nothing in
the core retries, falls back to cached data, or returns partial results.
"""


class ExpenditureError(Exception):
    """Base class for every error raised by the aggregation core."""


class DataUnavailable(ExpenditureError):
    """The dataset accessor could not produce rows.

    Raised for an unreachable or missing store and for malformed source
    files.  Fatal for the request being served.
    """


class NotFound(ExpenditureError):
    """A country name or id does not resolve to any known country."""

    def __init__(self, key) -> None:
        self.key = key
        super().__init__(f"Country not found: {key!r}")


class InvalidArgument(ExpenditureError, ValueError):
    """A caller-supplied year could not be read as an integer."""
