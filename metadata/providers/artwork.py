import base64
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from metadata.providers.base import AlbumLookupProvider
from metadata.tags import read_embedded_artwork
from metadata.types import AlbumLookup, ArtworkResolution, EmbeddedArtwork

logger = logging.getLogger(__name__)

TagReader = Callable[[str], Union[EmbeddedArtwork, None, Awaitable[EmbeddedArtwork | None]]]

_MIME_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
}


def image_type_for_mime(mime: str | None) -> str | None:
    """Map an embedded picture MIME type to the data URI subtype, or None if unrecognized."""
    if not mime:
        return None
    return _MIME_IMAGE_TYPES.get(mime)


def build_data_uri(data: bytes, mime: str | None) -> str | None:
    image_type = image_type_for_mime(mime)
    if not data or not image_type:
        return None
    encoded = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:image/{image_type};base64,{encoded}"


class ArtworkResolver:
    """Resolve album artwork from the remote lookup first, then embedded file tags.

    ``AlbumLookupError`` raised by the lookup propagates to the caller. The
    tag reader reports unreadable files as None; anything else it raises
    propagates as well.
    """

    def __init__(self, lookup: AlbumLookupProvider, tag_reader: TagReader = read_embedded_artwork) -> None:
        self._lookup = lookup
        self._tag_reader = tag_reader

    async def resolve(self, artist: str, album: str, path: str | None = None) -> ArtworkResolution:
        remote = await self._lookup.search(artist, album)
        sources = (
            ("remote", self._from_remote),
            ("embedded", self._from_embedded),
        )
        for name, source in sources:
            reference = await source(remote, path)
            if reference:
                logger.debug("Artwork resolved from %s source for %s / %s", name, artist, album)
                return ArtworkResolution(listing_url=remote.url, artwork=reference)
        return ArtworkResolution(listing_url=remote.url)

    async def _from_remote(self, remote: AlbumLookup, path: str | None) -> str | None:
        return remote.artwork or None

    async def _from_embedded(self, remote: AlbumLookup, path: str | None) -> str | None:
        if not path:
            return None
        embedded: Any = self._tag_reader(path)
        if inspect.isawaitable(embedded):
            embedded = await embedded
        if embedded is None or not embedded.data:
            return None
        reference = build_data_uri(embedded.data, embedded.mime)
        if reference is None:
            logger.debug("Embedded artwork ignored: unsupported mime %r in %s", embedded.mime, path)
        return reference
