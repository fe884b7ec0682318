"""Exceptions raised by the sales analytics service.

Every error inherits from SalesAppError so callers can catch the whole family.
"""


class SalesAppError(Exception):
    """Base exception for all sales analytics errors."""

    pass


class ConfigError(SalesAppError):
    """Raised when an environment setting cannot be parsed."""

    pass


class InvalidMonthError(SalesAppError):
    """Raised when a month name is missing or not a calendar month name."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid month {value!r}: expected a month name such as 'March'")


class StoreError(SalesAppError):
    """Raised when a query against the transaction store fails."""

    pass


class SeedFetchError(SalesAppError):
    """Raised when the external seed payload cannot be fetched.

    This exception is raised when:
    - The network request fails or times out
    - The source answers with a non-2xx status
    - The body is not a JSON array
    """

    pass


class DataQualityError(SalesAppError):
    """Raised when seed records are missing required fields or hold bad values."""

    pass
