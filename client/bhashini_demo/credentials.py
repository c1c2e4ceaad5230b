"""
Bearer-token store shared by every outbound call.

The store keeps one token in memory and writes every change through to a
key-value storage backend. Storage failures are logged and never raised, so
the in-memory state is always authoritative for the running session.
"""
import sqlite3
from pathlib import Path
from typing import Optional, Union

from .config import AUTH_TOKEN_KEY, DB_PATH, logger
from .db import get_db_connection, init_database


class TokenStorage:
    """Base class for key-value token persistence."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def put(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class SqliteTokenStorage(TokenStorage):
    """Keeps settings in the `settings` table of the application database."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH
        self._initialized = False

    def _ensure_schema(self) -> None:
        if self._initialized:
            return
        init_database(self.db_path)
        self._initialized = True

    def get(self, key: str) -> Optional[str]:
        self._ensure_schema()
        conn = get_db_connection(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def put(self, key: str, value: str) -> None:
        self._ensure_schema()
        conn = get_db_connection(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
                (key, value),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        self._ensure_schema()
        conn = get_db_connection(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()


class CredentialStore:
    """Holds the single bearer token of the running client."""

    def __init__(self, storage: TokenStorage, key: str = AUTH_TOKEN_KEY):
        self.storage = storage
        self.key = key
        self._value = ""

    @property
    def value(self) -> str:
        return self._value

    @property
    def is_set(self) -> bool:
        return bool(self._value)

    def load(self) -> None:
        """Read the persisted token, if any, into memory."""
        try:
            saved = self.storage.get(self.key)
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Could not read saved auth token: {e}")
            saved = None
        self._value = saved or ""
        logger.info(f"Auth token {'loaded' if self._value else 'not found'} in storage")

    def set(self, token: str) -> None:
        token = (token or "").strip()
        if not token:
            logger.warning("Ignoring empty auth token")
            return
        self._value = token
        try:
            self.storage.put(self.key, token)
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Auth token updated in memory only, persistence failed: {e}")

    def clear(self) -> None:
        self._value = ""
        try:
            self.storage.delete(self.key)
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Auth token cleared in memory only, persistence failed: {e}")

    def masked(self) -> str:
        """Token with everything but the last four characters hidden."""
        if not self._value:
            return ""
        if len(self._value) <= 4:
            return "*" * len(self._value)
        return "*" * (len(self._value) - 4) + self._value[-4:]


def create_credential_store(db_path: Optional[Union[str, Path]] = None) -> CredentialStore:
    """Build a sqlite-backed store and load the saved token."""
    store = CredentialStore(SqliteTokenStorage(db_path))
    store.load()
    return store
