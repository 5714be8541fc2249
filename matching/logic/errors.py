"""
Matching Engine Errors

Only the catalog boundary can fail. Everything below the ranker is total.
"""


class MatchingError(Exception):
    """Base class for matching engine errors."""


class CatalogUnavailable(MatchingError):
    """The university catalog could not be read."""

    def __init__(self, message: str = "University catalog unavailable", cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class InvalidCriteria(MatchingError):
    """The criteria payload could not be interpreted at all."""
