# dripdesk_api/storage/sqlite_store.py
import contextlib
import datetime
import json
import logging
import os
import sqlite3
import threading
import uuid

from ..core.config import settings

logger = logging.getLogger(__name__)

# Fields owned by the store. Values sent by clients for these are ignored.
SERVER_FIELDS = ("id", "created_at", "updated_at")

MEMORY_PATH = ":memory:"


class RecordNotFound(LookupError):
    """Raised when no record exists for a (collection, id) pair."""


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class RecordStore:
    """
    Thread-safe SQLite store for schemaless records, grouped by collection.
    Table layout (records):
    {
        "collection": TEXT,
        "id": TEXT,
        "data": TEXT (JSON object),
        "created_at": TEXT (UTC ISO-8601),
        "updated_at": TEXT (UTC ISO-8601)
    }
    A ':memory:' store lives on one shared connection for the life of the store.
    """
    def __init__(self, db_path: str):
        self._db_path = db_path
        self._lock = threading.RLock()
        self._shared_conn = None
        if db_path == MEMORY_PATH:
            self._shared_conn = self._get_connection()
        else:
            directory = os.path.dirname(db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
        self._init_db()

    def _get_connection(self):
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextlib.contextmanager
    def _connection(self):
        """Yields a connection: a fresh one per call for files, the shared one (under the lock) for memory."""
        if self._shared_conn is not None:
            with self._lock:
                yield self._shared_conn
            return
        conn = self._get_connection()
        try:
            yield conn
        finally:
            conn.close()

    def close(self):
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None

    def _init_db(self):
        with self._lock, self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS records (
                    collection TEXT NOT NULL,
                    id TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (collection, id)
                )
            """)
            conn.commit()
        logger.info(f"Record store ready at {self._db_path}")

    @staticmethod
    def _to_record(row) -> dict:
        record = json.loads(row["data"])
        record.update({"id": row["id"], "created_at": row["created_at"], "updated_at": row["updated_at"]})
        return record

    @staticmethod
    def _matches(record: dict, filters: dict) -> bool:
        return all(str(record.get(field)) == str(value) for field, value in filters.items())

    def list(self, collection: str, filters: dict = None) -> list[dict]:
        """All records of a collection, most recently updated first."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM records WHERE collection = ? ORDER BY updated_at DESC, rowid DESC",
                (collection,)
            ).fetchall()
        records = [self._to_record(row) for row in rows]
        if filters:
            records = [r for r in records if self._matches(r, filters)]
        return records

    def get(self, collection: str, record_id: str) -> dict:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM records WHERE collection = ? AND id = ?", (collection, record_id)
            ).fetchone()
        if row is None:
            raise RecordNotFound(f"No record '{record_id}' in '{collection}'.")
        return self._to_record(row)

    def create(self, collection: str, payload: dict) -> dict:
        data = {k: v for k, v in payload.items() if k not in SERVER_FIELDS}
        record_id = str(uuid.uuid4())
        stamp = _now()
        with self._lock, self._connection() as conn:
            conn.execute(
                "INSERT INTO records (collection, id, data, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (collection, record_id, json.dumps(data, ensure_ascii=False), stamp, stamp)
            )
            conn.commit()
        logger.info(f"Created {collection}/{record_id}")
        return {**data, "id": record_id, "created_at": stamp, "updated_at": stamp}

    def update(self, collection: str, record_id: str, payload: dict) -> dict:
        """Merges `payload` into the stored record and bumps updated_at."""
        with self._lock, self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM records WHERE collection = ? AND id = ?", (collection, record_id)
            ).fetchone()
            if row is None:
                raise RecordNotFound(f"No record '{record_id}' in '{collection}'.")
            data = json.loads(row["data"])
            data.update({k: v for k, v in payload.items() if k not in SERVER_FIELDS})
            stamp = _now()
            conn.execute(
                "UPDATE records SET data = ?, updated_at = ? WHERE collection = ? AND id = ?",
                (json.dumps(data, ensure_ascii=False), stamp, collection, record_id)
            )
            conn.commit()
        logger.info(f"Updated {collection}/{record_id}")
        return {**data, "id": record_id, "created_at": row["created_at"], "updated_at": stamp}

    def delete(self, collection: str, record_id: str) -> None:
        with self._lock, self._connection() as conn:
            cursor = conn.execute("DELETE FROM records WHERE collection = ? AND id = ?", (collection, record_id))
            conn.commit()
            deleted = cursor.rowcount
        if not deleted:
            raise RecordNotFound(f"No record '{record_id}' in '{collection}'.")
        logger.info(f"Deleted {collection}/{record_id}")

    def delete_where(self, collection: str, filters: dict) -> int:
        """Deletes every record matching the equality filters and returns how many went."""
        if not filters:
            raise ValueError("delete_where needs at least one filter.")
        with self._lock:
            ids = [r["id"] for r in self.list(collection, filters)]
            if not ids:
                return 0
            with self._connection() as conn:
                conn.executemany(
                    "DELETE FROM records WHERE collection = ? AND id = ?", [(collection, i) for i in ids]
                )
                conn.commit()
        logger.info(f"Deleted {len(ids)} record(s) from {collection} matching {filters}")
        return len(ids)


_store = None
_store_lock = threading.Lock()


def get_store() -> RecordStore:
    """Process-wide store, created once on first use from settings.DATABASE_URL."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = RecordStore(settings.database_path)
    return _store
