# tests/test_debouncer.py

"""Tests for the asyncio Debouncer."""

import asyncio
import unittest
from unittest.mock import MagicMock

from listing_engine.config.settings import Settings
from listing_engine.services.debouncer import Debouncer


class TestDebouncer(unittest.IsolatedAsyncioTestCase):
    """Debouncer timing and lifecycle."""

    async def test_typing_burst_commits_last_value_once(self) -> None:
        """Only the value that stays unchanged for the delay commits."""
        on_commit = MagicMock()
        debouncer: Debouncer[str] = Debouncer(
            "", delay=0.3, on_commit=on_commit
        )

        debouncer.push("a")
        await asyncio.sleep(0.1)
        debouncer.push("ab")
        await asyncio.sleep(0.15)
        debouncer.push("abc")

        await asyncio.sleep(0.2)
        self.assertEqual(debouncer.value, "")
        self.assertTrue(debouncer.pending)

        await asyncio.sleep(0.25)
        self.assertEqual(debouncer.value, "abc")
        self.assertFalse(debouncer.pending)
        on_commit.assert_called_once_with("abc")

    async def test_default_delay(self) -> None:
        """Without an explicit delay the configured one is used."""
        debouncer: Debouncer[int] = Debouncer(0)
        self.assertEqual(debouncer._delay, Settings.DEBOUNCE_DELAY)

    async def test_wait_returns_committed_value(self) -> None:
        """wait() resolves with the next committed value."""
        debouncer: Debouncer[str] = Debouncer("", delay=0.01)
        waiter = asyncio.create_task(debouncer.wait())
        await asyncio.sleep(0)
        debouncer.push("chair")
        self.assertEqual(await waiter, "chair")

    async def test_cancel_keeps_value(self) -> None:
        """cancel() drops the pending commit."""
        debouncer: Debouncer[str] = Debouncer("old", delay=0.05)
        debouncer.push("new")
        self.assertTrue(debouncer.cancel())
        self.assertFalse(debouncer.cancel())
        await asyncio.sleep(0.1)
        self.assertEqual(debouncer.value, "old")

    async def test_close_cancels_pending_commit(self) -> None:
        """Nothing fires after close()."""
        on_commit = MagicMock()
        debouncer: Debouncer[str] = Debouncer(
            "", delay=0.05, on_commit=on_commit
        )
        debouncer.push("late")
        debouncer.close()
        await asyncio.sleep(0.1)
        on_commit.assert_not_called()
        self.assertEqual(debouncer.value, "")
        self.assertTrue(debouncer.closed)

    async def test_close_cancels_waiters(self) -> None:
        """Pending waiters are cancelled on close()."""
        debouncer: Debouncer[str] = Debouncer("", delay=0.05)
        waiter = asyncio.create_task(debouncer.wait())
        await asyncio.sleep(0)
        debouncer.close()
        with self.assertRaises(asyncio.CancelledError):
            await waiter

    async def test_push_after_close_rejected(self) -> None:
        """A closed debouncer refuses input."""
        debouncer: Debouncer[str] = Debouncer("")
        debouncer.close()
        with self.assertRaises(RuntimeError):
            debouncer.push("x")
        with self.assertRaises(RuntimeError):
            await debouncer.wait()


if __name__ == "__main__":
    unittest.main()
