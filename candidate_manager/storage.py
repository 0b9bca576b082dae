"""
Named-blob key-value persistence for the candidate collection.

A backend stores opaque strings under string keys. The store serializes the
whole collection into one JSON blob and writes it under a single key.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from .database import Blob, init_database, session_factory
from .models import Candidate
from .retry import RetryError, exponential_backoff, is_transient_error


class PersistenceError(Exception):
    """Raised when a backend read or write fails, or a blob cannot be parsed."""
    pass


class BlobStore:
    """Interface shared by every backend."""

    name = "base"

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, blob: str) -> None:
        raise NotImplementedError


class MemoryBlobStore(BlobStore):
    name = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, blob: str) -> None:
        self.data[key] = blob


class JsonFileBlobStore(BlobStore):
    """One ``<key>.json`` file per key inside ``directory``."""

    name = "json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                content = f.read().strip()
        except (IOError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e
        return content or None

    def set(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                f.write(blob)
            tmp_path.replace(path)
        except IOError as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {e}") from e


_retry_locked = exponential_backoff(
    max_retries=3,
    exceptions=(OperationalError,),
    should_retry=is_transient_error,
)


class SqliteBlobStore(BlobStore):
    """Blobs kept in the ``blobs`` table of a SQLite database."""

    name = "sqlite"

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        try:
            init_database(self.db_path)
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Failed to open database {self.db_path}: {e}") from e
        self._Session = session_factory(self.db_path)

    @_retry_locked
    def _read(self, key: str) -> Optional[str]:
        with self._Session() as session:
            row = session.get(Blob, key)
            return row.value if row is not None else None

    @_retry_locked
    def _write(self, key: str, blob: str) -> None:
        with self._Session() as session:
            row = session.get(Blob, key)
            if row is None:
                session.add(Blob(key=key, value=blob))
            else:
                row.value = blob
            session.commit()

    def get(self, key: str) -> Optional[str]:
        try:
            return self._read(key)
        except (RetryError, SQLAlchemyError) as e:
            raise PersistenceError(f"Failed to read '{key}' from {self.db_path}: {e}") from e

    def set(self, key: str, blob: str) -> None:
        try:
            self._write(key, blob)
        except (RetryError, SQLAlchemyError) as e:
            raise PersistenceError(f"Failed to write '{key}' to {self.db_path}: {e}") from e


BACKENDS = ("json", "sqlite", "memory")


def open_blob_store(backend: str, data_dir: Path) -> BlobStore:
    """
    Build the backend named in configuration.

    Args:
        backend: One of ``json``, ``sqlite``, ``memory``
        data_dir: Directory holding the JSON files or ``candidates.db``
    """
    if backend == "json":
        return JsonFileBlobStore(Path(data_dir))
    if backend == "sqlite":
        return SqliteBlobStore(Path(data_dir) / "candidates.db")
    if backend == "memory":
        return MemoryBlobStore()
    raise ValueError(f"Unknown storage backend '{backend}'. Use one of: {', '.join(BACKENDS)}")


def serialize_candidates(candidates: List[Candidate]) -> str:
    return json.dumps([c.to_dict() for c in candidates], indent=2, ensure_ascii=False)


def deserialize_candidates(blob: str) -> List[Candidate]:
    """
    Parse a serialized collection.

    Raises:
        PersistenceError: If the blob is not a JSON array of candidate objects
    """
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as e:
        raise PersistenceError(f"Stored candidates are not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise PersistenceError("Stored candidates must be a JSON array")
    try:
        return [Candidate.from_dict(entry) for entry in data]
    except ValueError as e:
        raise PersistenceError(f"Stored candidates are malformed: {e}") from e
