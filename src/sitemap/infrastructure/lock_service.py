import asyncio
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from src.config.logger_config import logger
from src.sitemap.application.ports import LockServicePort
from src.sitemap.domain.errors import LockServiceError


@dataclass(frozen=True)
class LockHandle:
    name: str
    owner: str


class LocalLockService(LockServicePort):
    """Named asyncio locks shared by every task of this process."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    async def acquire(self, name: str) -> LockHandle:
        lock = self._locks.setdefault(name, asyncio.Lock())
        await lock.acquire()
        return LockHandle(name=name, owner="local")

    async def release(self, handle: LockHandle) -> None:
        lock = self._locks.get(handle.name)
        if lock is None or not lock.locked():
            raise LockServiceError(f"Lock {handle.name!r} is not held.")
        lock.release()

    def locked(self, name: str) -> bool:
        lock = self._locks.get(name)
        return lock is not None and lock.locked()


class SQLiteLockService(LockServicePort):
    """Cross-process named lock backed by a shared SQLite file.

    No expiry: a process that dies while holding the lock leaves the row behind.
    """

    def __init__(self, db_path: str | Path, poll_interval: float = 0.5) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.poll_interval = poll_interval
        self.conn = sqlite3.connect(self.db_path)
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS locks (
                name TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                acquired_at TEXT NOT NULL
            )
            """
        )
        self.conn.commit()

    async def acquire(self, name: str) -> LockHandle:
        owner = uuid.uuid4().hex
        waited = False
        while True:
            try:
                self.conn.execute(
                    "INSERT INTO locks (name, owner, acquired_at) VALUES (?, ?, ?)",
                    (name, owner, datetime.now(timezone.utc).isoformat()),
                )
                self.conn.commit()
                return LockHandle(name=name, owner=owner)
            except sqlite3.IntegrityError:
                self.conn.rollback()
                if not waited:
                    logger.info("Waiting for lock {!r} held by another build", name)
                    waited = True
                await asyncio.sleep(self.poll_interval)
            except sqlite3.Error as exc:
                self.conn.rollback()
                raise LockServiceError(f"Failed to acquire lock {name!r}: {exc}") from exc

    async def release(self, handle: LockHandle) -> None:
        try:
            cursor = self.conn.execute(
                "DELETE FROM locks WHERE name = ? AND owner = ?",
                (handle.name, handle.owner),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise LockServiceError(f"Failed to release lock {handle.name!r}: {exc}") from exc
        if cursor.rowcount == 0:
            logger.warning("Lock {!r} was not held by owner {}", handle.name, handle.owner)

    def close(self) -> None:
        self.conn.close()
