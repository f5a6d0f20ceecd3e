from pathlib import Path

from app.config.settings import Settings
from app.storage.base import BaseBlobStore
from app.storage.local_disk import LocalDiskBlobStore


class BlobStoreFactory:
    """Creates the configured blob store backend."""

    BACKENDS: dict[str, type[LocalDiskBlobStore]] = {
        "local": LocalDiskBlobStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStore:
        backend = settings.blob_store_backend.lower()
        store_cls = cls.BACKENDS.get(backend)
        if store_cls is None:
            raise ValueError(
                f"Unknown blob store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return store_cls(Path(settings.blob_store_root))
