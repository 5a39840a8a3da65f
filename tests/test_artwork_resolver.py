from __future__ import annotations

import asyncio
import base64

import pytest

from metadata.providers.artwork import ArtworkResolver, build_data_uri, image_type_for_mime
from metadata.providers.base import AlbumLookupError
from metadata.types import AlbumLookup, EmbeddedArtwork

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


class _FakeLookup:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self._result = result or AlbumLookup()
        self._error = error
        self.calls = []

    async def search(self, artist: str, album: str) -> AlbumLookup:
        self.calls.append((artist, album))
        if self._error is not None:
            raise self._error
        return self._result


class _FakeTagReader:
    def __init__(self, artwork: EmbeddedArtwork | None) -> None:
        self._artwork = artwork
        self.paths = []

    def __call__(self, path: str) -> EmbeddedArtwork | None:
        self.paths.append(path)
        return self._artwork


def test_remote_artwork_wins_over_embedded_tags() -> None:
    lookup = _FakeLookup(AlbumLookup(url="https://music.apple.com/a", artwork="https://img/a.jpg"))
    reader = _FakeTagReader(EmbeddedArtwork(data=PNG_BYTES, mime="image/png"))
    resolver = ArtworkResolver(lookup, reader)

    resolution = asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3"))

    assert resolution.artwork == "https://img/a.jpg"
    assert resolution.listing_url == "https://music.apple.com/a"
    assert lookup.calls == [("Artist", "Album")]
    assert reader.paths == []


def test_remote_miss_falls_back_to_embedded_png() -> None:
    reader = _FakeTagReader(EmbeddedArtwork(data=PNG_BYTES, mime="image/png"))
    resolver = ArtworkResolver(_FakeLookup(), reader)

    resolution = asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3"))

    expected = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")
    assert resolution.artwork == expected
    assert resolution.listing_url is None
    assert reader.paths == ["/music/a.mp3"]


@pytest.mark.parametrize("mime", ["image/jpeg", "image/jpg"])
def test_remote_miss_embeds_jpeg_variants(mime: str) -> None:
    reader = _FakeTagReader(EmbeddedArtwork(data=b"\xff\xd8\xff\xe0", mime=mime))
    resolver = ArtworkResolver(_FakeLookup(AlbumLookup(url="https://music.apple.com/x")), reader)

    resolution = asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3"))

    assert resolution.artwork == "data:image/jpeg;base64,/9j/4A=="
    assert resolution.listing_url == "https://music.apple.com/x"


def test_unrecognized_mime_yields_no_artwork() -> None:
    reader = _FakeTagReader(EmbeddedArtwork(data=b"GIF89a", mime="image/gif"))
    resolver = ArtworkResolver(_FakeLookup(), reader)

    resolution = asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3"))

    assert resolution.artwork is None


def test_embedded_lookup_skipped_without_path() -> None:
    reader = _FakeTagReader(EmbeddedArtwork(data=PNG_BYTES, mime="image/png"))
    resolver = ArtworkResolver(_FakeLookup(), reader)

    resolution = asyncio.run(resolver.resolve("Artist", "Album", None))

    assert resolution.artwork is None
    assert reader.paths == []


def test_missing_embedded_data_yields_no_artwork() -> None:
    for artwork in (None, EmbeddedArtwork(), EmbeddedArtwork(data=b"", mime="image/png")):
        resolver = ArtworkResolver(_FakeLookup(), _FakeTagReader(artwork))
        assert asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3")).artwork is None


def test_async_tag_reader_is_awaited() -> None:
    async def _reader(path: str) -> EmbeddedArtwork:
        return EmbeddedArtwork(data=b"abc", mime="image/png")

    resolver = ArtworkResolver(_FakeLookup(), _reader)

    resolution = asyncio.run(resolver.resolve("Artist", "Album", "/music/a.flac"))

    assert resolution.artwork == "data:image/png;base64,YWJj"


def test_lookup_failure_propagates() -> None:
    reader = _FakeTagReader(EmbeddedArtwork(data=PNG_BYTES, mime="image/png"))
    resolver = ArtworkResolver(_FakeLookup(error=AlbumLookupError("boom")), reader)

    with pytest.raises(AlbumLookupError):
        asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3"))
    assert reader.paths == []


def test_hard_tag_reader_error_propagates() -> None:
    def _reader(path: str):
        raise PermissionError(path)

    resolver = ArtworkResolver(_FakeLookup(), _reader)

    with pytest.raises(PermissionError):
        asyncio.run(resolver.resolve("Artist", "Album", "/music/a.mp3"))


def test_build_data_uri_uses_padded_standard_base64() -> None:
    data = bytes([0xFB, 0xFF, 0xFE, 0x00])

    assert build_data_uri(data, "image/png") == "data:image/png;base64,+//+AA=="
    assert build_data_uri(data, "image/webp") is None
    assert build_data_uri(b"", "image/png") is None


def test_image_type_for_mime() -> None:
    assert image_type_for_mime("image/png") == "png"
    assert image_type_for_mime("IMAGE/PNG") is None
    assert image_type_for_mime(" image/jpeg ") is None
    assert image_type_for_mime("image/jpg") == "jpeg"
    assert image_type_for_mime("image/bmp") is None
    assert image_type_for_mime(None) is None
