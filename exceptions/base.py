"""
Base exception classes for the commerce engine.
"""

from enums.failure_kind import FailureKind


class CommerceException(Exception):
    """
    Base exception for all commerce engine errors.

    Every subclass is tagged with exactly one FailureKind, so handlers can
    dispatch exhaustively on ``exc.kind`` instead of probing attributes.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (product IDs, amounts, etc.)
    """

    kind: FailureKind

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation with context."""
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"
