"""Track metadata types, embedded tags and artwork providers."""

from metadata.types import AlbumLookup, ArtworkResolution, EmbeddedArtwork, PlayerTrack, TrackEvent, TrackMetadata

__all__ = [
    "AlbumLookup",
    "ArtworkResolution",
    "EmbeddedArtwork",
    "PlayerTrack",
    "TrackEvent",
    "TrackMetadata",
]
