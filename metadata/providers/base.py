from typing import Protocol

from metadata.types import AlbumLookup


class AlbumLookupError(RuntimeError):
    """Remote album lookup failed (transport error, bad status or malformed payload)."""


class AlbumLookupProvider(Protocol):
    async def search(self, artist: str, album: str) -> AlbumLookup:
        raise NotImplementedError


class NullAlbumLookup:
    """Lookup provider that never finds anything; used when remote lookups are disabled."""

    async def search(self, artist: str, album: str) -> AlbumLookup:
        return AlbumLookup()
