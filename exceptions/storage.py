"""
Local storage exceptions.
"""

from enums.failure_kind import FailureKind
from .base import CommerceException


class StorageUnavailableException(CommerceException):
    """
    Raised by a local storage backend when a read or write fails
    (backend down, disk full, quota exceeded).

    LocalStore absorbs it: the user action still completes in memory.
    """

    kind = FailureKind.STORAGE_UNAVAILABLE

    def __init__(self, key: str, operation: str, reason: str):
        super().__init__(
            f"Local storage {operation} failed for key '{key}': {reason}",
            details={'key': key, 'operation': operation}
        )
        self.key = key
        self.operation = operation
        self.reason = reason
