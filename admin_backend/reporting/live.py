import asyncio
import logging
from threading import Lock

from admin_backend.database import BOOKINGS_COLLECTION, USERS_COLLECTION, snapshot_to_dict
from admin_backend.reporting.aggregator import DashboardSummary, build_dashboard_summary

logger = logging.getLogger(__name__)


class DashboardFeed:
    """Live dashboard summaries built from store snapshot listeners.

    Snapshot callbacks run on the store client's listener threads. Each
    snapshot replaces the cached collection outright, and once both
    collections have been seen a new summary is handed to ``loop``,
    replacing any summary the reader has not taken yet.
    """

    def __init__(self, db, loop: asyncio.AbstractEventLoop, year: int | None = None) -> None:
        self._db = db
        self._loop = loop
        self._year = year
        self._lock = Lock()
        self._accounts: list[dict] | None = None
        self._bookings: list[dict] | None = None
        self._watches = []
        self.summaries: asyncio.Queue[DashboardSummary] = asyncio.Queue(maxsize=1)

    def start(self) -> None:
        logger.debug('Starting dashboard feed (year=%s)', self._year)
        self._watches = [
            self._db.collection(USERS_COLLECTION).on_snapshot(self._on_accounts),
            self._db.collection(BOOKINGS_COLLECTION).on_snapshot(self._on_bookings),
        ]

    def stop(self) -> None:
        logger.debug('Stopping dashboard feed')
        for watch in self._watches:
            watch.unsubscribe()
        self._watches = []

    def _on_accounts(self, snapshots, changes, read_time) -> None:
        accounts = [snapshot_to_dict(snapshot, 'uid') for snapshot in snapshots]
        with self._lock:
            self._accounts = accounts
        self._publish()

    def _on_bookings(self, snapshots, changes, read_time) -> None:
        bookings = [snapshot_to_dict(snapshot) for snapshot in snapshots]
        with self._lock:
            self._bookings = bookings
        self._publish()

    def _publish(self) -> None:
        with self._lock:
            if self._accounts is None or self._bookings is None:
                return
            summary = build_dashboard_summary(self._accounts, self._bookings, year=self._year)
        self._loop.call_soon_threadsafe(self._replace_pending, summary)

    def _replace_pending(self, summary: DashboardSummary) -> None:
        # Only the newest summary matters to a slow reader.
        if self.summaries.full():
            self.summaries.get_nowait()
        self.summaries.put_nowait(summary)

    async def __aiter__(self):
        while True:
            yield await self.summaries.get()
