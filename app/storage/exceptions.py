class BlobStoreError(Exception):
    """Base exception for blob store failures."""


class BlobNotFoundError(BlobStoreError):
    """Raised when no blob exists under the requested key."""


class InvalidBlobKeyError(BlobStoreError):
    """Raised when a key is empty or resolves outside the store."""
