"""
Local JSON Storage Implementation

DESIGN DECISION: A directory of JSON files is used as the storage backend
because:
1. Single user, small data volumes
2. No database setup required
3. The user can open the file and read their own data

Each key maps to one file, `<data_dir>/<key>.json`. Writes go to a
temporary file in the same directory and are swapped in with
os.replace, so a crash mid-write never leaves a half-written file.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from src.config import get_settings
from src.services.storage.interface import KeyValueStorageInterface, StorageError


logger = structlog.get_logger(__name__)


class LocalJSONStorage(KeyValueStorageInterface):
    """File-per-key storage rooted at a data directory."""

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir) if data_dir else get_settings().storage.data_dir

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

        logger.debug("storage_written", key=key, bytes=len(value))

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Could not delete {path}: {e}") from e
        return True


class InMemoryStorage(KeyValueStorageInterface):
    """Dictionary-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
