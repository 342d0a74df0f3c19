"""
Remote Store exceptions.
"""

from enums.collection_kind import CollectionKind
from enums.failure_kind import FailureKind
from .base import CommerceException


class RemoteStoreException(CommerceException):
    """
    Raised when a Remote Store request fails: transport error, timeout
    or non-2xx response.

    Attributes:
        status: HTTP status code, or None for transport failures
        server_message: The ``message`` field of the error body, if any
    """

    kind = FailureKind.REMOTE_REQUEST_FAILURE

    def __init__(self, method: str, path: str, status: int | None = None, server_message: str | None = None):
        reason = server_message or (f"HTTP {status}" if status else "transport error")
        super().__init__(
            f"{method} {path} failed: {reason}",
            details={'method': method, 'path': path, 'status': status}
        )
        self.method = method
        self.path = path
        self.status = status
        self.server_message = server_message


class RemoteSyncFailureException(CommerceException):
    """Raised inside SyncCoordinator when merging a local collection fails."""

    kind = FailureKind.REMOTE_SYNC_FAILURE

    def __init__(self, collection: CollectionKind, reason: str):
        super().__init__(
            f"Failed to merge local {collection.value.lower()} into remote store: {reason}",
            details={'collection': collection.value}
        )
        self.collection = collection
        self.reason = reason
