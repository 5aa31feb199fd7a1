"""Tests for the runtime that drives the orchestrator."""

import asyncio

from idleview.containers import AppContainer
from idleview.domain.photos import PhotoCacheEntry
from idleview.domain.settings import PhotosSettings, UserSettings
from idleview.services.timers import now_ms
from tests.conftest import FakeFetcher, make_photo


def _fetcher(container: AppContainer) -> FakeFetcher:
    return container.orchestrator.fetcher  # type: ignore[return-value]


def test_start_and_stop_manage_subscriptions(container: AppContainer) -> None:
    runtime = container.runtime

    async def run() -> None:
        runtime.start()
        runtime.start()
        assert runtime.started
        assert container.events.refresh_photo.subscriber_count == 1
        assert container.events.settings_updated.subscriber_count == 1
        await asyncio.sleep(0)
        runtime.stop()

    asyncio.run(run())

    assert not runtime.started
    assert container.events.refresh_photo.subscriber_count == 0
    assert container.events.settings_updated.subscriber_count == 0
    assert container.context_service.weather is not None
    cached = container.cache_store.read()
    assert cached is not None
    assert cached.photo.url.endswith("fetched-1.jpg")


def test_manual_refresh_fetches_weather_then_photo(container: AppContainer) -> None:
    runtime = container.runtime

    async def run() -> None:
        await runtime.on_refresh_photo(None)
        await runtime.drain()

    asyncio.run(run())

    assert container.context_service.weather is not None
    assert len(_fetcher(container).calls) == 1
    assert container.cache_store.read() is not None


def test_manual_refresh_replaces_valid_cache(container: AppContainer) -> None:
    container.cache_store.write(
        PhotoCacheEntry(photo=make_photo("cached"), query="x", timestamp=now_ms())
    )

    async def run() -> None:
        await container.runtime.on_refresh_photo(None)
        await container.runtime.drain()

    asyncio.run(run())

    cached = container.cache_store.read()
    assert cached is not None
    assert cached.photo.url.endswith("fetched-1.jpg")


def test_weather_update_reuses_valid_cache(container: AppContainer) -> None:
    container.cache_store.write(
        PhotoCacheEntry(photo=make_photo("cached"), query="x", timestamp=now_ms())
    )

    asyncio.run(container.runtime.update_weather())

    assert container.context_service.weather is not None
    assert _fetcher(container).calls == []
    assert container.orchestrator.presenter.current_url == make_photo("cached").url


def test_settings_update_toggles_debug_overlay(container: AppContainer) -> None:
    runtime = container.runtime

    async def run() -> tuple[bool, bool]:
        runtime.start()
        await container.settings_service.update_partial(
            {"display": {"show_debug": True}}
        )
        enabled = container.debug_reporter.running
        await runtime.drain()
        await container.settings_service.update_partial(
            {"display": {"show_debug": False}}
        )
        disabled = not container.debug_reporter.running
        await runtime.drain()
        runtime.stop()
        return enabled, disabled

    enabled, disabled = asyncio.run(run())

    assert enabled
    assert disabled


def test_stop_cancels_pending_refresh(container: AppContainer) -> None:
    gate = asyncio.Event()
    _fetcher(container).gate = gate

    async def run() -> None:
        await container.runtime.on_refresh_photo(None)
        await asyncio.sleep(0)
        container.runtime.stop()
        await container.runtime.drain()
        gate.set()
        await asyncio.sleep(0)

    asyncio.run(run())

    assert container.cache_store.read() is None
    assert not container.orchestrator.refresh_in_flight


def test_settings_event_reloads_from_storage(container: AppContainer) -> None:
    container.settings_service.get()
    container.settings_service.repository.save(
        UserSettings(photos=PhotosSettings(refresh_interval=7))
    )

    async def run() -> None:
        await container.runtime.on_settings_updated(None)
        await container.runtime.drain()

    asyncio.run(run())

    assert container.settings_service.get().photos.refresh_interval == 7
    interval_ms = container.orchestrator.settings_provider().refresh_interval_ms
    assert interval_ms == 7 * 60_000
