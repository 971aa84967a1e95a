import sqlite3
import unittest
from unittest.mock import patch

from src.sitemap.domain.errors import CacheServiceError
from src.sitemap.infrastructure.cache_sqlite import SQLiteCacheStore
from tests.utils.tempdir import managed_temp_dir


class SQLiteCacheStoreTests(unittest.IsolatedAsyncioTestCase):
    async def test_set_get_and_clear_by_namespace(self):
        with managed_temp_dir("cache_basic") as tmp:
            cache = SQLiteCacheStore(tmp / "cache.db")
            try:
                self.assertIsNone(await cache.get("sitemap", "sitemap.xml"))
                await cache.set("sitemap", "sitemap.xml", b"<urlset/>", 3600)
                await cache.set("other", "sitemap.xml", b"keep", 3600)

                record = await cache.get("sitemap", "sitemap.xml")
                self.assertEqual(record.key, "sitemap.xml")
                self.assertEqual(record.payload, b"<urlset/>")

                await cache.clear("sitemap")
                self.assertIsNone(await cache.get("sitemap", "sitemap.xml"))
                self.assertEqual((await cache.get("other", "sitemap.xml")).payload, b"keep")
            finally:
                cache.close()

    async def test_expired_entries_are_invisible(self):
        with managed_temp_dir("cache_ttl") as tmp:
            cache = SQLiteCacheStore(tmp / "cache.db")
            try:
                with patch("src.sitemap.infrastructure.cache_sqlite.time", return_value=1000.0):
                    await cache.set("sitemap", "sitemap.xml", b"old", 60)
                with patch("src.sitemap.infrastructure.cache_sqlite.time", return_value=1059.0):
                    self.assertIsNotNone(await cache.get("sitemap", "sitemap.xml"))
                with patch("src.sitemap.infrastructure.cache_sqlite.time", return_value=1061.0):
                    self.assertIsNone(await cache.get("sitemap", "sitemap.xml"))
            finally:
                cache.close()

    async def test_sqlite_failures_become_cache_errors(self):
        with managed_temp_dir("cache_error") as tmp:
            cache = SQLiteCacheStore(tmp / "cache.db")
            cache.close()
            with self.assertRaises(CacheServiceError) as ctx:
                await cache.get("sitemap", "sitemap.xml")
            self.assertIsInstance(ctx.exception.__cause__, sqlite3.Error)
