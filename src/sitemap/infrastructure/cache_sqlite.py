from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from time import time

from src.sitemap.application.ports import CacheServicePort
from src.sitemap.domain.errors import CacheServiceError
from src.sitemap.domain.models import CacheRecord


class SQLiteCacheStore(CacheServicePort):
    """Namespaced key/value cache with per-key expiry.

    Expired rows are invisible to ``get`` and are purged lazily.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        try:
            self._ensure_schema()
        except Exception:
            self._conn.close()
            raise

    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS cache_entries (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                payload BLOB NOT NULL,
                created_at TEXT NOT NULL,
                expires_at REAL,
                PRIMARY KEY (namespace, key)
            )
            """
        )
        self._conn.commit()

    async def get(self, namespace: str, key: str) -> CacheRecord | None:
        try:
            cur = self._conn.cursor()
            cur.execute(
                """
                SELECT key, payload, created_at, expires_at
                FROM cache_entries
                WHERE namespace = ? AND key = ?
                """,
                (namespace, key),
            )
            row = cur.fetchone()
            if not row:
                return None
            if row[3] is not None and float(row[3]) <= time():
                cur.execute("DELETE FROM cache_entries WHERE namespace = ? AND key = ?", (namespace, key))
                self._conn.commit()
                return None
        except sqlite3.Error as exc:
            raise CacheServiceError(f"Cache get failed for {namespace}/{key}: {exc}") from exc
        return CacheRecord(
            key=str(row[0]),
            payload=bytes(row[1]),
            created_at=datetime.fromisoformat(str(row[2])),
        )

    async def set(self, namespace: str, key: str, value: bytes, ttl_seconds: int) -> None:
        expires_at = time() + ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        try:
            cur = self._conn.cursor()
            cur.execute(
                """
                INSERT INTO cache_entries (namespace, key, payload, created_at, expires_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(namespace, key) DO UPDATE SET
                    payload = excluded.payload,
                    created_at = excluded.created_at,
                    expires_at = excluded.expires_at
                """,
                (namespace, key, sqlite3.Binary(value), datetime.now(timezone.utc).isoformat(), expires_at),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise CacheServiceError(f"Cache set failed for {namespace}/{key}: {exc}") from exc

    async def clear(self, namespace: str) -> None:
        try:
            self._conn.execute("DELETE FROM cache_entries WHERE namespace = ?", (namespace,))
            self._conn.commit()
        except sqlite3.Error as exc:
            self._conn.rollback()
            raise CacheServiceError(f"Cache clear failed for {namespace}: {exc}") from exc

    def close(self) -> None:
        self._conn.close()
