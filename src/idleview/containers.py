"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from idleview.adapters.companion_client import HttpxCompanionClient
from idleview.adapters.headless_surface import HeadlessDisplaySurface
from idleview.adapters.ip_api_client import HttpxIpApiClient
from idleview.adapters.json_photo_cache_store import JsonFilePhotoCacheStore
from idleview.adapters.json_settings_repository import JsonFileSettingsRepository
from idleview.adapters.open_meteo_client import HttpxOpenMeteoClient
from idleview.adapters.unsplash_client import HttpxUnsplashClient
from idleview.config import Settings
from idleview.services.cache import PhotoCacheStore
from idleview.services.companion import CurrentPhotoRegistry
from idleview.services.context import ContextService
from idleview.services.debug import ContextDebugInfoProvider, DebugReporter
from idleview.services.events import EventBus
from idleview.services.orchestrator import PhotoOrchestrator
from idleview.services.photos import PhotoService
from idleview.services.presenter import Presenter
from idleview.services.query import WeatherQueryBuilder
from idleview.services.runtime import IdleviewRuntime
from idleview.services.user_settings import SettingsService
from idleview.services.validity import RefreshIntervalPolicy


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    events: EventBus
    settings_service: SettingsService
    cache_store: PhotoCacheStore
    context_service: ContextService
    orchestrator: PhotoOrchestrator
    debug_reporter: DebugReporter
    runtime: IdleviewRuntime
    current_photo: CurrentPhotoRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    events = EventBus()
    settings_service = SettingsService(
        repository=JsonFileSettingsRepository(resolved_settings.settings_path),
        updates=events.settings_updated,
    )
    cache_store = JsonFilePhotoCacheStore(resolved_settings.photo_cache_path)

    location_client = HttpxIpApiClient.create(resolved_settings.ip_api_url)
    weather_client = HttpxOpenMeteoClient.create(resolved_settings.open_meteo_base_url)
    unsplash_client = HttpxUnsplashClient.create(
        access_key=resolved_settings.unsplash_access_key,
        base_url=resolved_settings.unsplash_base_url,
    )
    companion_client = HttpxCompanionClient.create(resolved_settings.companion_url)
    surface = HeadlessDisplaySurface.create(
        width=resolved_settings.viewport_width,
        height=resolved_settings.viewport_height,
    )

    context_service = ContextService(
        location_client=location_client,
        weather_client=weather_client,
        settings_provider=settings_service.get,
        retry_attempts=resolved_settings.context_retry_attempts,
        retry_delay_seconds=resolved_settings.context_retry_delay_seconds,
    )
    photo_service = PhotoService(
        client=unsplash_client, settings_provider=settings_service.get
    )
    presenter = Presenter(
        surface=surface,
        cache_store=cache_store,
        companion=companion_client,
        downloads=photo_service,
        credit_hide_seconds=resolved_settings.credit_hide_seconds,
    )
    orchestrator = PhotoOrchestrator(
        cache_store=cache_store,
        context_provider=context_service,
        query_builder=WeatherQueryBuilder(),
        fetcher=photo_service,
        validity=RefreshIntervalPolicy(
            settings_provider=settings_service.get,
            slack_ms=resolved_settings.validity_slack_seconds * 1000,
        ),
        presenter=presenter,
        settings_provider=settings_service.get,
        prefetch_lead_ms=resolved_settings.prefetch_lead_seconds * 1000,
    )
    debug_reporter = DebugReporter(
        orchestrator=orchestrator,
        info_provider=ContextDebugInfoProvider(
            settings_provider=settings_service.get,
            access_key=resolved_settings.unsplash_access_key,
        ),
        surface=surface,
        settings_provider=settings_service.get,
        weather_provider=lambda: context_service.weather,
        interval_seconds=resolved_settings.debug_interval_seconds,
    )
    runtime = IdleviewRuntime(
        orchestrator=orchestrator,
        context_service=context_service,
        settings_service=settings_service,
        debug_reporter=debug_reporter,
        events=events,
        check_interval_seconds=resolved_settings.context_check_seconds,
        weather_interval_seconds=resolved_settings.weather_refresh_seconds,
    )

    async def close_resources() -> None:
        runtime.stop()
        await location_client.close()
        await weather_client.close()
        await unsplash_client.close()
        await companion_client.close()
        await surface.close()

    return AppContainer(
        settings=resolved_settings,
        events=events,
        settings_service=settings_service,
        cache_store=cache_store,
        context_service=context_service,
        orchestrator=orchestrator,
        debug_reporter=debug_reporter,
        runtime=runtime,
        current_photo=CurrentPhotoRegistry(),
        close_resources=close_resources,
    )
