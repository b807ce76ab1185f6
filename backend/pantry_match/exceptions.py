"""
Domain exceptions for the recommendation engine.

Degenerate inputs (empty ingredient lists, recipes without ingredients,
empty dietary filters) are never errors; they score zero. The exceptions
below cover the cases where a ranking cannot be produced at all, so that
callers can tell a failure apart from a legitimate "no matches" result.
"""


class PantryMatchError(Exception):
    """Base class for all recommendation engine errors."""


class CatalogUnavailableError(PantryMatchError):
    """
    Raised when the recipe catalog cannot be read.

    Wraps the underlying transport error (timeout, connection failure,
    bad response) after any retries have been exhausted.
    """

    def __init__(self, message: str, operation: str = "catalog"):
        super().__init__(message)
        self.operation = operation


class RecommendationTimeoutError(PantryMatchError):
    """Raised when a ranking call exceeds its deadline and is abandoned."""


class InvalidLimitError(PantryMatchError, ValueError):
    """Raised when a caller asks for zero or a negative number of results."""
