"""Decides when the background photo is reused, prefetched or refreshed."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from idleview.domain.photos import Photo, PhotoCacheEntry, PrefetchedPhoto
from idleview.domain.settings import UserSettings
from idleview.services.cache import PhotoCacheStore
from idleview.services.context import ContextProvider
from idleview.services.photos import PhotoFetcher
from idleview.services.presenter import Presenter
from idleview.services.query import QueryBuilder
from idleview.services.timers import now_ms
from idleview.services.validity import ValidityOracle

PREFETCH_LEAD_MS = 60_000

_logger = logging.getLogger(__name__)


@dataclass
class PhotoOrchestrator:
    """Owns the prefetch buffer and serializes commits of the cached photo.

    All work runs on one event loop. Overlapping refresh triggers are dropped
    while a refresh is in flight, and at most one prefetched photo is held
    until the next commit consumes it.
    """

    cache_store: PhotoCacheStore
    context_provider: ContextProvider
    query_builder: QueryBuilder
    fetcher: PhotoFetcher
    validity: ValidityOracle
    presenter: Presenter
    settings_provider: Callable[[], UserSettings]
    clock: Callable[[], int] = now_ms
    prefetch_lead_ms: int = PREFETCH_LEAD_MS
    on_presented: Callable[[], None] | None = None
    prefetched: PrefetchedPhoto | None = None
    last_error: str | None = None
    last_cache_valid: bool | None = None
    last_photo_fetch: int | None = None
    _refresh_in_flight: bool = field(default=False, init=False, repr=False)
    _prefetch_task: asyncio.Task[PrefetchedPhoto | None] | None = field(
        default=None, init=False, repr=False
    )

    @property
    def refresh_in_flight(self) -> bool:
        """Return True while a refresh holds the commit guard."""
        return self._refresh_in_flight

    @property
    def prefetch_in_flight(self) -> bool:
        """Return True while a background prefetch is still fetching."""
        return self._prefetch_task is not None and not self._prefetch_task.done()

    async def check_photo_context(self) -> None:
        """Run one scheduler decision: nothing, prefetch, or forced refresh."""
        cached = self.cache_store.read()
        if cached is None:
            _logger.info("No cached photo yet")
            return

        age = self.clock() - cached.timestamp
        ttl = self.settings_provider().refresh_interval_ms
        prefetch_threshold = ttl - self.prefetch_lead_ms
        _logger.debug("Cache age: %smin", age // 60_000)

        if (
            prefetch_threshold <= age < ttl
            and self.prefetched is None
            and not self.prefetch_in_flight
        ):
            loop = asyncio.get_running_loop()
            self._prefetch_task = loop.create_task(self.prefetch(), name="prefetch")

        if not await self._check_validity(cached.timestamp):
            _logger.info(
                "Cache expired (%smin), refreshing",
                self.settings_provider().photos.refresh_interval,
            )
            await self.refresh(force=True)

    async def prefetch(self) -> PrefetchedPhoto | None:
        """Fetch the next photo into the prefetch buffer without showing it."""
        if self.prefetched is not None:
            return self.prefetched
        context = await self.context_provider.snapshot()
        if context is None:
            return None
        started_from = self._cache_timestamp()
        try:
            query = await self.query_builder.build_query(context)
            width, height = self.presenter.surface.viewport()
            photo = await self.fetcher.fetch_photo(query, width, height)
        except Exception as exc:
            _logger.warning("Failed to prefetch photo: %s", exc)
            return None
        if self._cache_timestamp() != started_from:
            _logger.info("Cache changed during prefetch, discarding result")
            return None
        if self.prefetched is None:
            self.prefetched = PrefetchedPhoto(photo=photo, query=query)
            _logger.info("Photo prefetched: query=%r", query)
        return self.prefetched

    async def refresh(
        self, *, force: bool = False, bypass_prefetch: bool = False
    ) -> bool:
        """Reuse, consume the prefetch, or fetch a new photo.

        ``force`` skips reuse of a still-valid cache; ``bypass_prefetch``
        also ignores any prefetched photo. Returns True when a photo was
        committed or re-presented.
        """
        if self._refresh_in_flight:
            _logger.info("Refresh already in flight, dropping trigger")
            return False
        self._refresh_in_flight = True
        try:
            return await self._refresh(force=force, bypass_prefetch=bypass_prefetch)
        finally:
            self._refresh_in_flight = False

    def cancel_background(self) -> None:
        """Cancel an in-flight prefetch."""
        if self._prefetch_task is not None:
            self._prefetch_task.cancel()
            self._prefetch_task = None

    async def _refresh(self, *, force: bool, bypass_prefetch: bool) -> bool:
        cached = self.cache_store.read()
        if not force and cached is not None:
            if await self._check_validity(cached.timestamp):
                await self._present(cached.photo)
                return True

        if not bypass_prefetch:
            if self.prefetch_in_flight and self._prefetch_task is not None:
                await asyncio.wait({self._prefetch_task})
            if self.prefetched is not None:
                pending, self.prefetched = self.prefetched, None
                _logger.info("Using prefetched photo")
                return await self._commit(
                    pending.photo, pending.query, cached, consumed=pending
                )

        context = await self.context_provider.snapshot()
        if context is None:
            _logger.info("Waiting for weather data before fetching photo")
            if cached is not None and self.presenter.current_url is None:
                await self._present(cached.photo)
            return False

        try:
            query = await self.query_builder.build_query(context)
            width, height = self.presenter.surface.viewport()
            _logger.info("Fetching photo: query=%r size=%sx%s", query, width, height)
            photo = await self.fetcher.fetch_photo(query, width, height)
        except Exception as exc:
            self.last_error = str(exc) or type(exc).__name__
            _logger.warning("Failed to fetch photo: %s", exc)
            fallback = self.cache_store.read()
            if fallback is not None:
                await self._present(fallback.photo)
            return False

        return await self._commit(photo, query, cached)

    async def _commit(
        self,
        photo: Photo,
        query: str,
        previous: PhotoCacheEntry | None,
        *,
        consumed: PrefetchedPhoto | None = None,
    ) -> bool:
        current = self.cache_store.read()
        if current is not None and (
            previous is None or current.timestamp != previous.timestamp
        ):
            _logger.info("Cache changed during fetch, discarding stale result")
            return False

        timestamp = self.clock()
        if current is not None:
            timestamp = max(timestamp, current.timestamp)
        try:
            await self.presenter.commit(photo, query, timestamp)
        except Exception as exc:
            self.last_error = str(exc) or type(exc).__name__
            _logger.warning("Failed to commit photo: %s", exc)
            if consumed is not None and self.prefetched is None:
                self.prefetched = consumed
            if current is not None:
                await self._present(current.photo)
            return False

        # A committed photo supersedes anything fetched ahead of it.
        self.prefetched = None
        self.cancel_background()
        self.last_photo_fetch = timestamp
        self._notify_presented()
        return True

    def _cache_timestamp(self) -> int | None:
        cached = self.cache_store.read()
        return cached.timestamp if cached is not None else None

    async def _present(self, photo: Photo) -> None:
        await self.presenter.present(photo)
        self._notify_presented()

    async def _check_validity(self, timestamp_ms: int) -> bool:
        try:
            valid = await self.validity.is_cache_valid(timestamp_ms)
        except Exception as exc:
            _logger.warning("Cache validity check failed: %s", exc)
            valid = False
        self.last_cache_valid = valid
        return valid

    def _notify_presented(self) -> None:
        if self.on_presented is not None:
            self.on_presented()
