import asyncio
import dataclasses
import logging
from typing import List, Optional, Set

from motor.motor_asyncio import AsyncIOMotorDatabase

from tripsplit.core.config import settings
from tripsplit.db.changes import subscribe
from tripsplit.models.expense import ExpenseRecord
from tripsplit.models.member import Member
from tripsplit.models.settlement import SettlementReport
from tripsplit.models.trip_settings import TripSettings, SETTINGS_DOC_ID
from tripsplit.services.currency import Currency
from tripsplit.services.ledger_service import LedgerService
from tripsplit.services.snapshot import TripSnapshot

logger = logging.getLogger(__name__)

TRIP_COLLECTIONS = ("members", "expenses", "config")


class SettlementFeed:
    """
    Recomputes the settlement report whenever a collection snapshot arrives
    and hands the newest report to every subscriber queue.

    Queues hold a single report; a slow consumer only ever sees the latest one.
    Once the feed is closed, queues receive `None` instead.
    """

    def __init__(self, settlement_currency: Currency = Currency(settings.SETTLEMENT_CURRENCY)):
        self.settlement_currency = settlement_currency
        self.snapshot = TripSnapshot()
        self.latest: Optional[SettlementReport] = None
        self.closed = False
        self._queues: Set[asyncio.Queue] = set()

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        if self.closed:
            queue.put_nowait(None)
        elif self.latest is not None:
            queue.put_nowait(self.latest)
        self._queues.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._queues.discard(queue)

    async def on_members(self, docs: List[dict]) -> None:
        self._replace(members=[Member.from_doc(doc) for doc in docs])

    async def on_expenses(self, docs: List[dict]) -> None:
        self._replace(expenses=[ExpenseRecord.from_doc(doc) for doc in docs])

    async def on_settings(self, docs: List[dict]) -> None:
        trip_settings = TripSettings()
        for doc in docs:
            if str(doc.get("_id")) == SETTINGS_DOC_ID:
                trip_settings = TripSettings.from_doc(doc)
        self._replace(settings=trip_settings)

    def _replace(self, **changes) -> None:
        self.snapshot = dataclasses.replace(self.snapshot, **changes)
        self.publish()

    def _push(self, item: Optional[SettlementReport]) -> None:
        for queue in self._queues:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(item)

    def publish(self) -> SettlementReport:
        """Recompute from the current snapshot and push to subscribers."""
        report = LedgerService.compute_settlement(
            self.snapshot.members,
            self.snapshot.expenses,
            self.snapshot.settings.exchange_rate,
            self.settlement_currency
        )
        self.latest = report
        if not self.closed:
            self._push(report)
        return report

    def close(self) -> None:
        """Stop feeding subscribers; each queue gets a final `None`."""
        if self.closed:
            return
        self.closed = True
        self._push(None)

    async def _follow(self, db: AsyncIOMotorDatabase) -> None:
        handlers = {
            "members": self.on_members,
            "expenses": self.on_expenses,
            "config": self.on_settings,
        }
        tasks = [asyncio.ensure_future(subscribe(db, name, handlers[name])) for name in TRIP_COLLECTIONS]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in done:
            task.result()

    async def run(
        self,
        db: AsyncIOMotorDatabase,
        retry_delay: float = settings.LIVE_UPDATES_RETRY_DELAY,
        max_retry_delay: float = settings.LIVE_UPDATES_MAX_RETRY_DELAY,
        max_retries: int = settings.LIVE_UPDATES_MAX_RETRIES
    ) -> None:
        """
        Follow the members, expenses and config collections until cancelled.

        A failed change stream restarts every subscription with exponential
        backoff. A run that lasted longer than `max_retry_delay` resets the
        failure count; after `max_retries` consecutive failures the last
        error is raised.
        """
        loop = asyncio.get_running_loop()
        failures = 0
        delay = retry_delay

        logger.info("Settlement feed started")
        while True:
            started = loop.time()
            try:
                await self._follow(db)
                return
            except Exception:
                if loop.time() - started > max_retry_delay:
                    failures = 0
                    delay = retry_delay
                failures += 1
                if failures > max_retries:
                    raise
                logger.exception(
                    "Settlement feed lost its change streams (attempt %d/%d); retrying in %.1fs",
                    failures, max_retries, delay
                )

            await asyncio.sleep(delay)
            delay = min(delay * 2, max_retry_delay)

    def _on_task_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Settlement feed stopped", exc_info=task.exception())
        self.close()

    def start(self, db: AsyncIOMotorDatabase) -> asyncio.Task:
        """Run the feed in the background; subscribers are closed when it ends."""
        task = asyncio.create_task(self.run(db))
        task.add_done_callback(self._on_task_done)
        return task
