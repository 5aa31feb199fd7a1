"""Photo artifacts and their cached form."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class Photo(BaseModel):
    """Background photo with attribution metadata."""

    model_config = ConfigDict(frozen=True)

    url: str
    author: str
    author_url: str
    download_location: str | None = None


class PhotoCacheEntry(BaseModel):
    """Persisted record for the single cached photo."""

    model_config = ConfigDict(frozen=True)

    photo: Photo
    query: str
    timestamp: int


@dataclass(frozen=True)
class PrefetchedPhoto:
    """Photo fetched ahead of expiry, not yet committed to the cache."""

    photo: Photo
    query: str


class CurrentPhoto(BaseModel):
    """Photo summary shared with companion consumers."""

    url: str
    author: str
    author_url: str

    @classmethod
    def from_photo(cls, photo: Photo) -> "CurrentPhoto":
        """Build a companion summary from a full photo."""
        return cls(url=photo.url, author=photo.author, author_url=photo.author_url)
