import sqlite3
from datetime import date
from pathlib import Path

from src.sitemap.application.ports import ContentRepositoryPort
from src.sitemap.domain.errors import RepositoryReadError
from src.sitemap.domain.models import SourceDocument


class SQLiteContentRepository(ContentRepositoryPort):
    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path)
        self.init_schema()

    def init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS pages (
                doc_id TEXT PRIMARY KEY,
                type TEXT NOT NULL,
                locale TEXT NOT NULL,
                url TEXT,
                depth INTEGER NOT NULL DEFAULT 0,
                rank INTEGER NOT NULL DEFAULT 0,
                group_key TEXT,
                priority_override REAL,
                published INTEGER NOT NULL DEFAULT 1
            )
            """
        )
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS items (
                doc_id TEXT PRIMARY KEY,
                type TEXT NOT NULL,
                locale TEXT NOT NULL,
                url TEXT,
                group_key TEXT,
                priority_override REAL,
                start_date TEXT,
                published INTEGER NOT NULL DEFAULT 1
            )
            """
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_pages_locale_order ON pages(locale, depth, rank)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_items_type_locale ON items(type, locale)")
        self.conn.commit()

    async def list_pages(self, locale: str, offset: int, limit: int) -> list[SourceDocument]:
        rows = self._query(
            """
            SELECT doc_id, type, locale, url, depth, rank, group_key, priority_override
            FROM pages
            WHERE locale = ? AND published = 1
            ORDER BY depth ASC, rank ASC, doc_id ASC
            LIMIT ? OFFSET ?
            """,
            (locale, limit, offset),
        )
        return [
            SourceDocument(
                doc_id=str(doc_id),
                type_name=str(type_name),
                locale=str(row_locale),
                url=url,
                depth=int(depth),
                rank=int(rank),
                group_key=group_key,
                priority_override=float(priority) if priority is not None else None,
            )
            for doc_id, type_name, row_locale, url, depth, rank, group_key, priority in rows
        ]

    async def list_items(self, type_name: str, locale: str, offset: int, limit: int) -> list[SourceDocument]:
        rows = self._query(
            """
            SELECT doc_id, type, locale, url, group_key, priority_override, start_date
            FROM items
            WHERE type = ? AND locale = ? AND published = 1
            ORDER BY rowid ASC
            LIMIT ? OFFSET ?
            """,
            (type_name, locale, limit, offset),
        )
        return [
            SourceDocument(
                doc_id=str(doc_id),
                type_name=str(row_type),
                locale=str(row_locale),
                url=url,
                group_key=group_key,
                priority_override=float(priority) if priority is not None else None,
                start_date=self._parse_date(start_date),
            )
            for doc_id, row_type, row_locale, url, group_key, priority, start_date in rows
        ]

    def upsert_page(self, doc: SourceDocument, published: bool = True) -> None:
        self._execute(
            """
            INSERT INTO pages (doc_id, type, locale, url, depth, rank, group_key, priority_override, published)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(doc_id) DO UPDATE SET
                type = excluded.type,
                locale = excluded.locale,
                url = excluded.url,
                depth = excluded.depth,
                rank = excluded.rank,
                group_key = excluded.group_key,
                priority_override = excluded.priority_override,
                published = excluded.published
            """,
            (
                doc.doc_id,
                doc.type_name,
                doc.locale,
                doc.url,
                doc.depth,
                doc.rank,
                doc.group_key,
                doc.priority_override,
                int(published),
            ),
        )

    def upsert_item(self, doc: SourceDocument, published: bool = True) -> None:
        self._execute(
            """
            INSERT INTO items (doc_id, type, locale, url, group_key, priority_override, start_date, published)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(doc_id) DO UPDATE SET
                type = excluded.type,
                locale = excluded.locale,
                url = excluded.url,
                group_key = excluded.group_key,
                priority_override = excluded.priority_override,
                start_date = excluded.start_date,
                published = excluded.published
            """,
            (
                doc.doc_id,
                doc.type_name,
                doc.locale,
                doc.url,
                doc.group_key,
                doc.priority_override,
                doc.start_date.isoformat() if doc.start_date else None,
                int(published),
            ),
        )

    def close(self) -> None:
        self.conn.close()

    def _query(self, sql: str, params: tuple) -> list[tuple]:
        try:
            cursor = self.conn.cursor()
            cursor.execute(sql, params)
            return cursor.fetchall()
        except sqlite3.Error as exc:
            raise RepositoryReadError(f"Content query failed on {self.db_path}: {exc}") from exc

    def _execute(self, sql: str, params: tuple) -> None:
        cursor = self.conn.cursor()
        try:
            cursor.execute(sql, params)
            self.conn.commit()
        except sqlite3.Error:
            self.conn.rollback()
            raise

    @staticmethod
    def _parse_date(raw: str | None) -> date | None:
        if not raw:
            return None
        return date.fromisoformat(str(raw)[:10])
