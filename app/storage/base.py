from abc import ABC, abstractmethod
from collections.abc import Iterator


class BaseBlobStore(ABC):
    """Contract for object storage holding uploads and thumbnails."""

    @abstractmethod
    def get_stream(self, key: str) -> Iterator[bytes]:
        """Yield the blob content in chunks.

        Raises:
            BlobNotFoundError: if the key does not exist.
        """

    @abstractmethod
    def get_buffer(self, key: str) -> bytes:
        """Return the full blob content.

        Raises:
            BlobNotFoundError: if the key does not exist.
        """

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store data under key, replacing any existing blob."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True if a blob is stored under key."""
