import unittest
from datetime import datetime, timezone
from unittest.mock import patch

from src.sitemap.domain.models import Artifact
from src.sitemap.infrastructure.artifact_sinks import CacheArtifactSink, FileArtifactSink
from tests.utils.fakes import FakeCache
from tests.utils.tempdir import managed_temp_dir

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


class CacheArtifactSinkTests(unittest.IsolatedAsyncioTestCase):
    async def test_clears_then_stores_every_artifact_with_ttl(self):
        cache = FakeCache()
        cache.store[("sitemap", "sitemaps/stale.xml")] = b"stale"
        sink = CacheArtifactSink(cache, "sitemap", ttl_seconds=900)

        await sink.write_artifacts(
            [
                Artifact(name="sitemaps/en.xml", data=b"en", created_at=NOW),
                Artifact(name="sitemaps/index.xml", data=b"index", created_at=NOW),
            ]
        )

        self.assertEqual(cache.clear_calls, 1)
        self.assertNotIn(("sitemap", "sitemaps/stale.xml"), cache.store)
        self.assertEqual(cache.set_calls, [("sitemaps/en.xml", 900), ("sitemaps/index.xml", 900)])


class FileArtifactSinkTests(unittest.IsolatedAsyncioTestCase):
    async def test_writes_nested_paths_under_output_dir(self):
        with managed_temp_dir("file_sink") as tmp:
            sink = FileArtifactSink(tmp / "public")
            await sink.write_artifacts(
                [
                    Artifact(name="sitemaps/en.xml", data=b"<urlset/>", created_at=NOW),
                    Artifact(name="sitemaps/index.xml", data=b"<sitemapindex/>", created_at=NOW),
                ]
            )
            self.assertEqual((tmp / "public" / "sitemaps" / "en.xml").read_bytes(), b"<urlset/>")
            self.assertTrue((tmp / "public" / "sitemaps" / "index.xml").exists())

    def test_stdout_target_uses_raw_write(self):
        sink = FileArtifactSink("public")
        with patch("src.sitemap.infrastructure.artifact_sinks.os.write") as raw_write:
            result = sink.write_artifact(Artifact(name="/dev/stdout", data=b"/\n", created_at=NOW))
        self.assertIsNone(result)
        raw_write.assert_called_once_with(1, b"/\n")
