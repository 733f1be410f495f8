"""
Error taxonomy for the rates cache.

Every failure raised by the storage, sync and query layers is a subclass
of RatesError. The ``kind`` attribute tells an outer boundary (HTTP API,
bot, CLI) which class of failure it is looking at:

    client     - bad input from the caller (malformed date, bad range)
    not_found  - a key that must exist is absent
    internal   - storage, feed or corruption problems; log it, hide details
"""


class RatesError(Exception):
    """Base class for all rates cache errors."""

    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DateParseError(RatesError):
    kind = "client"

    def __init__(self, value) -> None:
        super().__init__(f"could not parse `{value}` as a date")
        self.value = value


class DateNotFound(RatesError):
    kind = "not_found"

    def __init__(self, date) -> None:
        super().__init__(f"no currencies found for date `{date}`")
        self.date = date


class InvalidDateRange(RatesError):
    kind = "client"

    def __init__(self, message: str = "start_at must be older than end_at") -> None:
        super().__init__(message)


class EmptyDataset(RatesError):
    kind = "client"

    def __init__(self, message: str = "empty currency dataset, should have at least 1 element") -> None:
        super().__init__(message)


class FetcherError(RatesError):
    def __init__(self, cause) -> None:
        super().__init__(f"error fetching currencies from ECB, `{cause}`")
        self.cause = cause


class DatabaseError(RatesError):
    def __init__(self, cause) -> None:
        super().__init__(f"database error, `{cause}`")
        self.cause = cause
