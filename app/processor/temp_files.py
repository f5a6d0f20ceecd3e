import os
import tempfile
from pathlib import Path
from types import TracebackType

from app.logging.logger import Log

TEMP_PREFIX = "docsdb-"


class TempFileScope:
    """Owns the local files created during one job run and deletes them on exit.

    Usage:
        with TempFileScope(root) as scope:
            path = scope.new_path(".pdf")
            ...
    Every registered path is removed when the block exits, whether it returns
    normally or raises.
    """

    def __init__(self, root: Path | None = None, prefix: str = TEMP_PREFIX) -> None:
        self._root = root
        self._prefix = prefix
        self._paths: list[Path] = []

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def new_path(self, suffix: str = "") -> Path:
        """Create an empty uniquely named file and register it for cleanup."""
        if self._root is not None:
            self._root.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(
            prefix=self._prefix,
            suffix=suffix,
            dir=str(self._root) if self._root is not None else None,
        )
        os.close(fd)
        path = Path(name)
        self._paths.append(path)
        return path

    def cleanup(self) -> None:
        while self._paths:
            path = self._paths.pop()
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                Log.warning(f"Could not clean up temporary file {path}: {exc}")

    def __enter__(self) -> "TempFileScope":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
