"""Structured track and artwork types for presence resolution."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TrackMetadata:
    """Now-playing track metadata as reported by the player."""

    title: str
    artist: str = ""
    album: str = ""
    duration: float = 0.0
    path: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str):
            raise TypeError("title must be a string")
        if not isinstance(self.artist, str):
            raise TypeError("artist must be a string")
        if not isinstance(self.album, str):
            raise TypeError("album must be a string")
        if not math.isfinite(self.duration) or self.duration < 0:
            raise ValueError("duration must be a finite number >= 0")


@dataclass(frozen=True)
class TrackEvent:
    info: TrackMetadata
    position: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.position) or self.position < 0:
            raise ValueError("position must be a finite number >= 0")


@dataclass(frozen=True)
class PlayerTrack:
    info: TrackMetadata
    hash: str
    # Absolute end of playback, milliseconds since epoch.
    end: int


@dataclass(frozen=True)
class AlbumLookup:
    """Result of a remote album search; both fields are optional."""

    url: str | None = None
    artwork: str | None = None


@dataclass(frozen=True)
class EmbeddedArtwork:
    data: bytes | None = None
    mime: str | None = None

    def __repr__(self) -> str:
        return (
            "EmbeddedArtwork("
            f"data={'<bytes>' if self.data is not None else None}, mime={self.mime!r})"
        )


@dataclass(frozen=True)
class ArtworkResolution:
    listing_url: str | None = None
    artwork: str | None = None


__all__ = [
    "AlbumLookup",
    "ArtworkResolution",
    "EmbeddedArtwork",
    "PlayerTrack",
    "TrackEvent",
    "TrackMetadata",
]
