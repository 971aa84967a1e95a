import unittest
from datetime import date

from src.sitemap.application.harvester import SitemapHarvester
from src.sitemap.domain.errors import RepositoryReadError
from src.sitemap.domain.models import BuildConfig, Entry
from src.sitemap.domain.registry import ContentTypeRegistry
from tests.utils.fakes import FakeContentRepository, item, page

TODAY = date(2024, 5, 1)


class StaticSource:
    def __init__(self, docs) -> None:
        self.docs = docs

    async def documents(self, locale: str):
        return [doc for doc in self.docs if doc.locale == locale]


def make_harvester(repo, types=(), custom_sources=()) -> SitemapHarvester:
    return SitemapHarvester(repo, ContentTypeRegistry(types), custom_sources=custom_sources, today=TODAY)


class HarvesterPageTests(unittest.IsolatedAsyncioTestCase):
    async def test_pages_follow_depth_then_rank(self):
        repo = FakeContentRepository(
            pages={
                "en": [
                    page("b", "/tab-two", 1, rank=2),
                    page("b1", "/tab-two/child", 2, rank=0),
                    page("home", "/", 0),
                    page("a", "/tab-one", 1, rank=1),
                ]
            }
        )
        harvester = make_harvester(repo)
        for _ in range(2):
            entries = await harvester.harvest("en", BuildConfig())
            self.assertEqual([e.url for e in entries], ["/", "/tab-one", "/tab-two", "/tab-two/child"])

    async def test_page_priority_and_override(self):
        repo = FakeContentRepository(
            pages={
                "en": [
                    page("home", "/", 0),
                    page("deep", "/deep", 12),
                    page("pinned", "/pinned", 12, priority_override=0.95),
                ]
            }
        )
        entries = await make_harvester(repo).harvest("en", BuildConfig())
        self.assertEqual([e.priority for e in entries], [1.0, 0.1, 0.95])
        self.assertTrue(all(isinstance(e, Entry) and e.change_frequency == "daily" for e in entries))
        self.assertTrue(all(e.locale == "en" and e.alternates == [] for e in entries))

    async def test_documents_without_url_are_dropped(self):
        repo = FakeContentRepository(
            pages={"en": [page("home", "/", 0), page("orphan", None, 1)]},
            items={("product", "en"): [item("p1", "product", ""), item("p2", "product", "/products/p2")]},
        )
        entries = await make_harvester(repo, types=("product",)).harvest("en", BuildConfig())
        self.assertEqual([e.url for e in entries], ["/", "/products/p2"])

    async def test_repository_failure_is_wrapped(self):
        repo = FakeContentRepository(fail_on="pages")
        with self.assertRaises(RepositoryReadError):
            await make_harvester(repo).harvest("en", BuildConfig())


class HarvesterItemTests(unittest.IsolatedAsyncioTestCase):
    async def test_full_batch_triggers_one_more_fetch(self):
        docs = [item(f"p{i}", "product", f"/products/{i}") for i in range(3)]
        repo = FakeContentRepository(items={("product", "en"): docs})
        entries = await make_harvester(repo, types=("product",)).harvest("en", BuildConfig(batch_size=3))
        self.assertEqual(len(entries), 3)
        self.assertEqual(repo.item_calls, [("product", "en", 0, 3), ("product", "en", 3, 3)])

    async def test_short_batch_stops_after_one_fetch(self):
        docs = [item(f"p{i}", "product", f"/products/{i}") for i in range(2)]
        repo = FakeContentRepository(items={("product", "en"): docs})
        await make_harvester(repo, types=("product",)).harvest("en", BuildConfig(batch_size=3))
        self.assertEqual(repo.item_calls, [("product", "en", 0, 3)])

    async def test_pagination_keeps_collection_order(self):
        docs = [item(f"p{i}", "product", f"/products/{i}") for i in range(7)]
        repo = FakeContentRepository(items={("product", "en"): docs})
        entries = await make_harvester(repo, types=("product",)).harvest("en", BuildConfig(batch_size=3))
        self.assertEqual([e.url for e in entries], [f"/products/{i}" for i in range(7)])
        self.assertEqual([call[2] for call in repo.item_calls], [0, 3, 6])

    async def test_start_date_adjusts_item_priority(self):
        repo = FakeContentRepository(
            items={
                ("event", "en"): [
                    item("future", "event", "/events/future", start_date=date(2024, 6, 1)),
                    item("past", "event", "/events/past", start_date=date(2024, 4, 1)),
                    item("undated", "event", "/events/undated"),
                    item("pinned", "event", "/events/pinned", start_date=date(2024, 4, 1), priority_override=1.0),
                ]
            }
        )
        entries = await make_harvester(repo, types=("event",)).harvest("en", BuildConfig())
        self.assertEqual([e.priority for e in entries], [0.8, 0.6, 0.7, 1.0])
        self.assertEqual([e.depth for e in entries], [2, 4, 3, 4])

    async def test_excluded_types_are_skipped(self):
        repo = FakeContentRepository(
            pages={"en": [page("home", "/", 0), page("shop", "/shop", 1, type_name="product")]},
            items={
                ("product", "en"): [item("p1", "product", "/products/p1")],
                ("article", "en"): [item("a1", "article", "/articles/a1")],
            },
        )
        entries = await make_harvester(repo, types=("product", "article")).harvest(
            "en", BuildConfig(exclude_types=("product",))
        )
        self.assertEqual([e.source_type for e in entries], ["default-page", "article"])
        self.assertFalse(any(call[0] == "product" for call in repo.item_calls))

    async def test_custom_sources_follow_pages_and_items(self):
        repo = FakeContentRepository(pages={"en": [page("home", "/", 0)]})
        source = StaticSource([page("feed", "/feed", 1, type_name="feed"), page("fr-feed", "/fr/feed", 1, locale="fr")])
        entries = await make_harvester(repo, custom_sources=[source]).harvest("en", BuildConfig())
        self.assertEqual([e.url for e in entries], ["/", "/feed"])


class HarvesterTextTests(unittest.IsolatedAsyncioTestCase):
    async def test_text_mode_emits_indented_lines(self):
        repo = FakeContentRepository(
            pages={"en": [page("home", "/", 0), page("a", "/a", 1), page("ab", "/a/b", 2)]},
            items={("product", "en"): [item("p1", "product", "/products/p1")]},
        )
        lines = await make_harvester(repo, types=("product",)).harvest("en", BuildConfig(format="text", indent=True))
        self.assertEqual(lines, ["/\n", "  /a\n", "    /a/b\n", "      /products/p1\n"])

    async def test_text_mode_without_indent_emits_flat_lines(self):
        repo = FakeContentRepository(pages={"en": [page("home", "/", 0), page("a", "/a", 1)]})
        lines = await make_harvester(repo).harvest("en", BuildConfig(format="text", indent=False))
        self.assertEqual(lines, ["/\n", "/a\n"])
