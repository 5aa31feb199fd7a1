"""Remote control endpoints for settings and the current photo."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from idleview.domain.errors import SettingsError
from idleview.domain.photos import CurrentPhoto
from idleview.domain.settings import UserSettings

if TYPE_CHECKING:
    from idleview.containers import AppContainer

router = APIRouter(prefix="/api", tags=["control"])

_logger = logging.getLogger(__name__)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy", "service": "idleview-api"}


@router.get("/settings")
async def get_settings(request: Request) -> UserSettings:
    """Return the current settings."""
    return _container(request).settings_service.get()


@router.put("/settings", response_model=None)
async def put_settings(
    settings: UserSettings, request: Request
) -> UserSettings | JSONResponse:
    """Replace all settings."""
    try:
        return await _container(request).settings_service.update_all(settings)
    except OSError as exc:
        return _error(exc, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.patch("/settings", response_model=None)
async def patch_settings(
    updates: dict[str, Any], request: Request
) -> UserSettings | JSONResponse:
    """Merge a partial settings document."""
    try:
        return await _container(request).settings_service.update_partial(updates)
    except SettingsError as exc:
        return _error(exc, status.HTTP_400_BAD_REQUEST)
    except OSError as exc:
        return _error(exc, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("/settings/reset", response_model=None)
async def reset_settings(request: Request) -> UserSettings | JSONResponse:
    """Restore default settings."""
    try:
        return await _container(request).settings_service.reset()
    except OSError as exc:
        return _error(exc, status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/photo/current")
async def get_current_photo(request: Request) -> CurrentPhoto | None:
    """Return the photo last announced by the display."""
    return _container(request).current_photo.get()


@router.post("/photo/current")
async def update_current_photo(photo: CurrentPhoto, request: Request) -> CurrentPhoto:
    """Record the photo the display is now showing."""
    return _container(request).current_photo.set(photo)


@router.post("/photo/refresh")
async def refresh_photo(request: Request) -> dict[str, str]:
    """Ask the display for a brand-new photo."""
    await _container(request).events.refresh_photo.publish()
    return {"status": "ok"}


def _error(exc: Exception, status_code: int) -> JSONResponse:
    _logger.error("Settings request failed: %s", exc)
    return JSONResponse(status_code=status_code, content={"error": str(exc)})
