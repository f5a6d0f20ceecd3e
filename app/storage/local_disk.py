from collections.abc import Iterator
from pathlib import Path

from app.logging.logger import Log
from app.storage.base import BaseBlobStore
from app.storage.exceptions import BlobNotFoundError, InvalidBlobKeyError

_CHUNK_SIZE = 1024 * 1024
_CONTENT_TYPE_SUFFIX = ".content-type"


class LocalDiskBlobStore(BaseBlobStore):
    """Blob store backed by a directory; keys are paths relative to the root."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    def get_stream(self, key: str) -> Iterator[bytes]:
        path = self._existing_path(key)
        return self._iter_chunks(path)

    def get_buffer(self, key: str) -> bytes:
        return self._existing_path(key).read_bytes()

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        path.with_name(path.name + _CONTENT_TYPE_SUFFIX).write_text(content_type, encoding="utf-8")
        Log.info(f"Stored blob {key} ({len(data)} bytes)")

    def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()

    def content_type(self, key: str) -> str | None:
        sidecar = self._resolve(key + _CONTENT_TYPE_SUFFIX)
        if not sidecar.is_file():
            return None
        return sidecar.read_text(encoding="utf-8")

    def _existing_path(self, key: str) -> Path:
        path = self._resolve(key)
        if not path.is_file():
            raise BlobNotFoundError(f"Blob not found: {key}")
        return path

    def _resolve(self, key: str) -> Path:
        cleaned = key.strip().lstrip("/")
        if not cleaned:
            raise InvalidBlobKeyError("Blob key must not be empty")
        path = (self._root / cleaned).resolve()
        if not path.is_relative_to(self._root):
            raise InvalidBlobKeyError(f"Blob key escapes store root: {key}")
        return path

    @staticmethod
    def _iter_chunks(path: Path) -> Iterator[bytes]:
        with path.open("rb") as fh:
            while chunk := fh.read(_CHUNK_SIZE):
                yield chunk
