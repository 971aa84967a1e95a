import asyncio
import unittest

from src.sitemap.domain.errors import LockServiceError
from src.sitemap.infrastructure.lock_service import LocalLockService, LockHandle, SQLiteLockService
from tests.utils.tempdir import managed_temp_dir


class LocalLockServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_second_acquire_waits_for_release(self):
        locks = LocalLockService()
        order: list[str] = []

        async def worker(label: str) -> None:
            handle = await locks.acquire("sitemap build")
            order.append(f"{label}:in")
            await asyncio.sleep(0.01)
            order.append(f"{label}:out")
            await locks.release(handle)

        await asyncio.gather(worker("a"), worker("b"))
        self.assertEqual(order, ["a:in", "a:out", "b:in", "b:out"])
        self.assertFalse(locks.locked("sitemap build"))

    async def test_release_without_acquire_fails(self):
        with self.assertRaises(LockServiceError):
            await LocalLockService().release(LockHandle(name="sitemap build", owner="local"))


class SQLiteLockServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_lock_is_exclusive_across_services(self):
        with managed_temp_dir("sqlite_lock") as tmp:
            first = SQLiteLockService(tmp / "lock.db", poll_interval=0.01)
            second = SQLiteLockService(tmp / "lock.db", poll_interval=0.01)
            try:
                handle = await first.acquire("sitemap build")
                waiter = asyncio.create_task(second.acquire("sitemap build"))
                await asyncio.sleep(0.05)
                self.assertFalse(waiter.done())

                await first.release(handle)
                second_handle = await asyncio.wait_for(waiter, timeout=2)
                self.assertNotEqual(second_handle.owner, handle.owner)
                await second.release(second_handle)
            finally:
                first.close()
                second.close()
