"""MarketplaceViewSynchronizer — keeps one viewer's marketplace projection fresh.

There is no push channel. Each viewer polls the listing API every
``interval`` seconds, and refetches at once when invalidate() is called
(the local actor just changed something). Passive viewers are therefore at
most one interval behind; the acting viewer sees its own change after one
request round trip.

Fetches are serialized, so a slow earlier response can never overwrite a
newer snapshot. A failed poll keeps the last good snapshot, flags it stale
and polling carries on.
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from types import TracebackType

from config.settings import settings
from src.ns_common.datetime_utils import utc_now
from src.ns_common.errors import AppError
from src.ns_listing.domain.models import Listing
from src.ns_marketplace.projection import purchasable

logger = logging.getLogger(__name__)

FetchListings = Callable[[], Awaitable[list[Listing]]]
UpdateListener = Callable[[list[Listing]], None]


class MarketplaceViewSynchronizer:
    def __init__(
        self,
        fetch: FetchListings,
        interval: float = settings.POLL_INTERVAL_SECONDS,
        name: str = "marketplace",
    ) -> None:
        if interval <= 0:
            raise ValueError("poll interval must be positive")
        self._fetch = fetch
        self._interval = interval
        self._name = name
        self._listings: list[Listing] = []
        self._version = 0
        self._stale = True
        self._last_error: Exception | None = None
        self._refreshed_at: datetime | None = None
        self._wake = asyncio.Event()
        self._updated = asyncio.Condition()
        self._fetch_lock = asyncio.Lock()
        self._listeners: list[UpdateListener] = []
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def listings(self) -> list[Listing]:
        """Last fetched snapshot of every listing."""
        return list(self._listings)

    @property
    def open_listings(self) -> list[Listing]:
        """Purchasable projection of the last snapshot."""
        return purchasable(self._listings)

    @property
    def version(self) -> int:
        return self._version

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def refreshed_at(self) -> datetime | None:
        return self._refreshed_at

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_update(self, listener: UpdateListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Freshness
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Request an immediate out-of-band refetch."""
        self._stale = True
        self._wake.set()

    async def refresh(self) -> bool:
        """Fetch now. Returns False if the fetch failed and the old snapshot was kept."""
        async with self._fetch_lock:
            try:
                listings = await self._fetch()
            except AppError as e:
                self._stale = True
                self._last_error = e
                logger.warning("%s poll failed: %s", self._name, e.message)
                return False
            self._listings = listings
            self._stale = False
            self._last_error = None
            self._refreshed_at = utc_now()
            self._version += 1

        for listener in list(self._listeners):
            try:
                listener(self.open_listings)
            except Exception:
                logger.exception("%s update listener %r failed", self._name, listener)
        async with self._updated:
            self._updated.notify_all()
        return True

    async def wait_for_update(self, after_version: int, timeout: float | None = None) -> int:
        """Block until a snapshot newer than ``after_version`` is applied."""
        async with self._updated:
            await asyncio.wait_for(
                self._updated.wait_for(lambda: self._version > after_version),
                timeout,
            )
        return self._version

    # ------------------------------------------------------------------
    # Polling loop
    # ------------------------------------------------------------------

    async def _poll_once(self) -> None:
        try:
            await self.refresh()
        except Exception as e:
            self._stale = True
            self._last_error = e
            logger.exception("%s poll crashed; keeping last snapshot", self._name)

    async def _run(self) -> None:
        await self._poll_once()
        while True:
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self._interval)
            self._wake.clear()
            await self._poll_once()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=f"{self._name}-poller")
        logger.info("%s polling every %.1fs", self._name, self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def __aenter__(self) -> "MarketplaceViewSynchronizer":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
