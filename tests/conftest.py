"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from idleview.config import Settings
from idleview.containers import AppContainer
from idleview.domain.photos import CurrentPhoto, Photo
from idleview.domain.settings import UserSettings
from idleview.domain.weather import ContextSnapshot, Location, WeatherSnapshot
from idleview.services.cache import InMemoryPhotoCacheStore
from idleview.services.companion import CurrentPhotoRegistry
from idleview.services.context import ContextService, LocationClient, WeatherClient
from idleview.services.debug import ContextDebugInfoProvider, DebugReporter
from idleview.services.events import EventBus
from idleview.services.orchestrator import PhotoOrchestrator
from idleview.services.photos import PhotoFetcher
from idleview.services.presenter import CompanionNotifier, DisplaySurface, Presenter
from idleview.services.query import QueryBuilder
from idleview.services.runtime import IdleviewRuntime
from idleview.services.user_settings import SettingsRepository, SettingsService
from idleview.services.validity import ValidityOracle

BASE_TS = 1_700_000_000_000
MINUTE_MS = 60_000


def make_photo(name: str = "first") -> Photo:
    return Photo(
        url=f"https://images.test/{name}.jpg",
        author=f"Author {name}",
        author_url=f"https://unsplash.test/@{name}",
        download_location=f"https://api.unsplash.test/photos/{name}/download",
    )


def make_weather(**overrides: object) -> WeatherSnapshot:
    values: dict[str, object] = {
        "temperature": 12.5,
        "humidity": 60.0,
        "wind_speed": 10.0,
        "cloudcover": 20.0,
        "rain": 0.0,
        "snowfall": 0.0,
        "sunrise": "2025-06-15T05:00",
        "sunset": "2025-06-15T21:00",
        "timezone": "Europe/Berlin",
    }
    values.update(overrides)
    return WeatherSnapshot.model_validate(values)


@dataclass
class FakeClock:
    """Settable epoch-millisecond clock."""

    now: int = BASE_TS

    def __call__(self) -> int:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += milliseconds


@dataclass
class FakeSurface(DisplaySurface):
    """Display surface that records what it was asked to show."""

    size: tuple[int, int] = (1280, 720)
    backgrounds: list[str] = field(default_factory=list)
    credits: list[str] = field(default_factory=list)
    loaded: list[str] = field(default_factory=list)
    credit_visible: bool = False
    hide_count: int = 0
    debug_lines: list[str] = field(default_factory=list)
    debug_hidden: int = 0
    load_error: Exception | None = None

    def viewport(self) -> tuple[int, int]:
        return self.size

    async def load_image(self, url: str) -> None:
        self.loaded.append(url)
        if self.load_error is not None:
            raise self.load_error

    def set_background(self, photo: Photo) -> None:
        self.backgrounds.append(photo.url)

    def show_credit(self, photo: Photo) -> None:
        self.credits.append(photo.author)
        self.credit_visible = True

    def hide_credit(self) -> None:
        self.credit_visible = False
        self.hide_count += 1

    def show_debug(self, lines: list[str]) -> None:
        self.debug_lines = list(lines)

    def hide_debug(self) -> None:
        self.debug_lines = []
        self.debug_hidden += 1


@dataclass
class FakeCompanion(CompanionNotifier):
    """Companion side channel that records notifications."""

    notified: list[CurrentPhoto] = field(default_factory=list)
    error: Exception | None = None

    async def notify(self, photo: CurrentPhoto) -> None:
        if self.error is not None:
            raise self.error
        self.notified.append(photo)


@dataclass
class FakeDownloads:
    """Records download pings."""

    triggered: list[str] = field(default_factory=list)

    async def trigger_download(self, photo: Photo) -> None:
        self.triggered.append(photo.url)


@dataclass
class FakeFetcher(PhotoFetcher):
    """Photo fetcher returning numbered photos, optionally gated or failing."""

    calls: list[tuple[str, int, int]] = field(default_factory=list)
    error: Exception | None = None
    gate: asyncio.Event | None = None

    async def fetch_photo(self, query: str, width: int, height: int) -> Photo:
        self.calls.append((query, width, height))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return make_photo(f"fetched-{len(self.calls)}")


@dataclass
class FakeQueryBuilder(QueryBuilder):
    """Query builder returning a fixed query."""

    query: str = "summer"
    calls: int = 0

    async def build_query(self, context: ContextSnapshot) -> str:
        self.calls += 1
        return self.query


@dataclass
class FakeValidity(ValidityOracle):
    """Validity oracle with a settable answer."""

    valid: bool = True
    error: Exception | None = None
    checked: list[int] = field(default_factory=list)

    async def is_cache_valid(self, timestamp_ms: int) -> bool:
        self.checked.append(timestamp_ms)
        if self.error is not None:
            raise self.error
        return self.valid


@dataclass
class StaticContextProvider:
    """Context provider returning a fixed snapshot or nothing."""

    weather: WeatherSnapshot | None = field(default_factory=make_weather)
    settings: UserSettings = field(default_factory=UserSettings)

    async def snapshot(self) -> ContextSnapshot | None:
        if self.weather is None:
            return None
        return ContextSnapshot(weather=self.weather, settings=self.settings)


@dataclass
class InMemorySettingsRepository(SettingsRepository):
    """In-memory settings repository for tests."""

    stored: UserSettings | None = None
    saves: int = 0

    def load(self) -> UserSettings | None:
        return self.stored

    def save(self, settings: UserSettings) -> None:
        self.stored = settings
        self.saves += 1


@dataclass
class FakeLocationClient(LocationClient):
    """Location client that fails a set number of times first."""

    failures: int = 0
    calls: int = 0

    async def get_location(self) -> Location:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("location lookup failed")
        return Location(latitude=52.52, longitude=13.4, city="Berlin")


@dataclass
class FakeWeatherClient(WeatherClient):
    """Weather client that fails a set number of times first."""

    failures: int = 0
    calls: int = 0
    weather: WeatherSnapshot = field(default_factory=make_weather)

    async def get_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError("weather lookup failed")
        return self.weather


@dataclass
class OrchestratorHarness:
    """Orchestrator wired to fakes, with handles on each collaborator."""

    orchestrator: PhotoOrchestrator
    cache_store: InMemoryPhotoCacheStore
    surface: FakeSurface
    companion: FakeCompanion
    fetcher: FakeFetcher
    validity: FakeValidity
    context: StaticContextProvider
    clock: FakeClock
    user_settings: UserSettings


def build_harness(user_settings: UserSettings | None = None) -> OrchestratorHarness:
    resolved = user_settings or UserSettings()
    cache_store = InMemoryPhotoCacheStore()
    surface = FakeSurface()
    companion = FakeCompanion()
    fetcher = FakeFetcher()
    validity = FakeValidity()
    context = StaticContextProvider(settings=resolved)
    clock = FakeClock()
    presenter = Presenter(
        surface=surface,
        cache_store=cache_store,
        companion=companion,
        downloads=FakeDownloads(),
        credit_hide_seconds=60.0,
    )
    orchestrator = PhotoOrchestrator(
        cache_store=cache_store,
        context_provider=context,
        query_builder=FakeQueryBuilder(),
        fetcher=fetcher,
        validity=validity,
        presenter=presenter,
        settings_provider=lambda: resolved,
        clock=clock,
    )
    return OrchestratorHarness(
        orchestrator=orchestrator,
        cache_store=cache_store,
        surface=surface,
        companion=companion,
        fetcher=fetcher,
        validity=validity,
        context=context,
        clock=clock,
        user_settings=resolved,
    )


@pytest.fixture
def harness() -> OrchestratorHarness:
    return build_harness()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        unsplash_access_key="test-access-key-123",
        data_dir=tmp_path,
        context_retry_attempts=0,
        context_retry_delay_seconds=0.0,
    )


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    events = EventBus()
    settings_service = SettingsService(
        repository=InMemorySettingsRepository(), updates=events.settings_updated
    )
    cache_store = InMemoryPhotoCacheStore()
    surface = FakeSurface()
    context_service = ContextService(
        location_client=FakeLocationClient(),
        weather_client=FakeWeatherClient(),
        settings_provider=settings_service.get,
        retry_attempts=0,
        retry_delay_seconds=0.0,
    )
    presenter = Presenter(
        surface=surface,
        cache_store=cache_store,
        companion=FakeCompanion(),
        credit_hide_seconds=60.0,
    )
    orchestrator = PhotoOrchestrator(
        cache_store=cache_store,
        context_provider=context_service,
        query_builder=FakeQueryBuilder(),
        fetcher=FakeFetcher(),
        validity=FakeValidity(),
        presenter=presenter,
        settings_provider=settings_service.get,
    )
    debug_reporter = DebugReporter(
        orchestrator=orchestrator,
        info_provider=ContextDebugInfoProvider(
            settings_provider=settings_service.get,
            access_key=settings.unsplash_access_key,
        ),
        surface=surface,
        settings_provider=settings_service.get,
        weather_provider=lambda: context_service.weather,
    )
    runtime = IdleviewRuntime(
        orchestrator=orchestrator,
        context_service=context_service,
        settings_service=settings_service,
        debug_reporter=debug_reporter,
        events=events,
    )

    async def close_resources() -> None:
        runtime.stop()

    return AppContainer(
        settings=settings,
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
