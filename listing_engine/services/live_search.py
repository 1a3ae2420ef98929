# listing_engine/services/live_search.py

"""Search-as-you-type: debounced input driving the comparison pipeline."""

import asyncio
import logging

from listing_engine.models.comparison import ComparisonReport
from listing_engine.services.comparison_orchestrator import (
    ComparisonOrchestrator,
)
from listing_engine.services.debouncer import Debouncer

logger = logging.getLogger("listing_engine.live_search")


class LiveSearchSession:
    """Feed keystrokes in; get at most one comparison per settled query.

    A newly committed query cancels any comparison still in flight, so
    a stale result can never overwrite a fresher one.
    """

    def __init__(
        self,
        orchestrator: ComparisonOrchestrator,
        delay: float | None = None,
        category: str | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._category = category
        self._debouncer: Debouncer[str] = Debouncer(
            "", delay, on_commit=self._on_commit
        )
        self._task: asyncio.Task[ComparisonReport] | None = None
        self.latest: ComparisonReport | None = None

    @property
    def query(self) -> str:
        """The last committed (settled) query."""
        return self._debouncer.value

    @property
    def task(self) -> asyncio.Task[ComparisonReport] | None:
        """The comparison currently in flight, if any."""
        return self._task

    def update(self, text: str) -> None:
        """Accept the current contents of the search box."""
        self._debouncer.push(text)

    def _on_commit(self, query: str) -> None:
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling stale search for a newer query")
            self._task.cancel()
            self._task = None
        if not query.strip():
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(query)
        )

    async def _run(self, query: str) -> ComparisonReport:
        report = await self._orchestrator.run(query, self._category)
        self.latest = report
        return report

    async def settled(self) -> ComparisonReport | None:
        """Wait for the newest comparison to finish and return it.

        A comparison cancelled by a newer query is followed to its
        replacement.  Returns :attr:`latest` once nothing is in flight.
        """
        while self._task is not None:
            task = self._task
            try:
                return await asyncio.shield(task)
            except asyncio.CancelledError:
                # Caller cancelled, or nothing replaced the task
                if not task.cancelled() or self._task is task:
                    raise
        return self.latest

    def close(self) -> None:
        """Cancel the pending debounce timer and any in-flight search."""
        self._debouncer.close()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
