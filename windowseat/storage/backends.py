# windowseat/storage/backends.py
"""
Key to blob storage used for flight packs, audio and map tiles.

Keys are '/'-separated strings such as ``packs/BA115.json``. Three
implementations share the BlobStore interface: a directory tree on disk,
an embedded SQLite database, and an in-memory dictionary.
"""
import logging
import os
import sqlite3
import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..exceptions import StorageError


class BlobStore(ABC):
    """Abstract key -> bytes store."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Removes a key; removing a missing key is not an error."""
        pass

    @abstractmethod
    def list_keys(self, prefix: str = '') -> List[str]:
        pass

    @abstractmethod
    def total_size(self, prefix: str = '') -> int:
        pass

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def delete_prefix(self, prefix: str) -> int:
        keys = self.list_keys(prefix)
        for key in keys:
            self.delete(key)
        return len(keys)


class MemoryBlobStore(BlobStore):
    """Dictionary-backed store for tests and memory-only environments."""

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def put(self, key: str, data: bytes) -> None:
        with self._lock:
            self._blobs[key] = bytes(data)

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._blobs.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._blobs.pop(key, None)

    def list_keys(self, prefix: str = '') -> List[str]:
        with self._lock:
            return sorted(k for k in self._blobs if k.startswith(prefix))

    def total_size(self, prefix: str = '') -> int:
        with self._lock:
            return sum(len(v) for k, v in self._blobs.items() if k.startswith(prefix))


class FileBlobStore(BlobStore):
    """Stores each blob as a file below ``root``; key segments become directories."""

    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        os.makedirs(self.root, exist_ok=True)
        logging.info(f"FileBlobStore initialized at {self.root}")

    def _path(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, *key.split('/')))
        if path != self.root and not path.startswith(self.root + os.sep):
            raise StorageError(f"Key escapes storage root: {key}")
        return path

    def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            tmp_path = f"{path}.tmp"
            with open(tmp_path, 'wb') as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not os.path.isfile(path):
            return None
        try:
            with open(path, 'rb') as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e

    def list_keys(self, prefix: str = '') -> List[str]:
        keys = []
        for dirpath, _dirnames, filenames in os.walk(self.root):
            for filename in filenames:
                if filename.endswith('.tmp'):
                    continue
                rel = os.path.relpath(os.path.join(dirpath, filename), self.root)
                key = rel.replace(os.sep, '/')
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)

    def total_size(self, prefix: str = '') -> int:
        return sum(os.path.getsize(self._path(k)) for k in self.list_keys(prefix))


class SQLiteBlobStore(BlobStore):
    """Stores blobs as rows of a single SQLite table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        if db_path != ':memory:' and os.path.dirname(db_path):
            os.makedirs(os.path.dirname(db_path), exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS blobs ("
                "key TEXT PRIMARY KEY, data BLOB NOT NULL, size INTEGER NOT NULL, stored_at REAL NOT NULL)"
            )
        logging.info(f"SQLiteBlobStore initialized at {db_path}")

    def put(self, key: str, data: bytes) -> None:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT OR REPLACE INTO blobs (key, data, size, stored_at) VALUES (?, ?, ?, ?)",
                    (key, sqlite3.Binary(data), len(data), time.time()),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            row = self._conn.execute("SELECT data FROM blobs WHERE key = ?", (key,)).fetchone()
        return bytes(row[0]) if row else None

    def delete(self, key: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM blobs WHERE key = ?", (key,))

    def list_keys(self, prefix: str = '') -> List[str]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT key FROM blobs WHERE substr(key, 1, ?) = ? ORDER BY key", (len(prefix), prefix)
            ).fetchall()
        return [r[0] for r in rows]

    def total_size(self, prefix: str = '') -> int:
        with self._lock:
            row = self._conn.execute(
                "SELECT COALESCE(SUM(size), 0) FROM blobs WHERE substr(key, 1, ?) = ?", (len(prefix), prefix)
            ).fetchone()
        return int(row[0])

    def delete_prefix(self, prefix: str) -> int:
        with self._lock, self._conn:
            cursor = self._conn.execute("DELETE FROM blobs WHERE substr(key, 1, ?) = ?", (len(prefix), prefix))
        return cursor.rowcount

    def close(self) -> None:
        self._conn.close()


def create_blob_store(backend: str, cache_dir: str) -> BlobStore:
    """Builds the store named by ``backend`` ('file', 'sqlite' or 'memory')."""
    if backend == 'memory':
        return MemoryBlobStore()
    if backend == 'sqlite':
        return SQLiteBlobStore(os.path.join(cache_dir, 'windowseat.db'))
    if backend == 'file':
        return FileBlobStore(os.path.join(cache_dir, 'blobs'))
    raise ValueError(f"Unknown storage backend: {backend}")
