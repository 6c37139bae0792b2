"""
Custom exceptions for the rank relay.

Provides specific exception types for better error handling and debugging.
"""

from typing import Optional


class RankRelayError(Exception):
    """Base exception for all rank relay errors."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self.message)


class QueryValidationError(RankRelayError):
    """Raised when the incoming query is missing or malformed."""
    pass


class DataUnavailableError(RankRelayError):
    """Raised when rank data cannot be fetched or parsed."""
    pass


class QueryProcessingError(RankRelayError):
    """Raised when a valid query cannot be answered."""
    pass


class AssistantError(QueryProcessingError):
    """Raised when the assistant run fails or does not finish in time."""
    pass
