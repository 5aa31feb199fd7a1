"""Error types raised across the photo refresh pipeline."""


class IdleviewError(Exception):
    """Base error for the application."""


class ContextUnavailableError(IdleviewError):
    """Raised when location or weather context cannot be acquired."""


class PhotoFetchError(IdleviewError):
    """Raised when the photo provider returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ImageDecodeError(IdleviewError):
    """Raised when a photo cannot be retrieved or recognised as an image."""


class SettingsError(IdleviewError):
    """Raised when a settings payload fails validation."""
