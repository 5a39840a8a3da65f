"""Embedded artwork reading for local music files."""

from __future__ import annotations

import logging
import os
from typing import Any

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Cover

from metadata.types import EmbeddedArtwork

_LOG = logging.getLogger(__name__)

_FRONT_COVER = 3
_MP4_FORMAT_MIME = {
    MP4Cover.FORMAT_JPEG: "image/jpeg",
    MP4Cover.FORMAT_PNG: "image/png",
}


def read_embedded_artwork(path: str | None) -> EmbeddedArtwork | None:
    """Return the embedded cover image of a music file, or None.

    Unreadable files and files without picture tags are not errors here;
    they just have no artwork.
    """
    if not path:
        return None
    if not os.path.isfile(path):
        _LOG.debug("Embedded artwork skipped: missing file %s", path)
        return None
    ext = os.path.splitext(path)[1].lower()
    try:
        if ext == ".mp3":
            return _read_id3_artwork(path)
        return _read_generic_artwork(path)
    except (MutagenError, OSError):
        _LOG.debug("Embedded artwork read failed for %s", path, exc_info=True)
        return None


def _read_id3_artwork(path: str) -> EmbeddedArtwork | None:
    audio = ID3(path)
    return _pick_picture(audio.getall("APIC"))


def _read_generic_artwork(path: str) -> EmbeddedArtwork | None:
    audio = MutagenFile(path)
    if audio is None:
        _LOG.debug("Embedded artwork skipped: unsupported file %s", path)
        return None
    pictures = getattr(audio, "pictures", None)
    if pictures:
        return _pick_picture(pictures)
    tags = audio.tags
    if tags is None:
        return None
    if hasattr(tags, "getall"):
        return _pick_picture(tags.getall("APIC"))
    covers = tags.get("covr") if hasattr(tags, "get") else None
    if covers:
        cover = covers[0]
        return EmbeddedArtwork(
            data=bytes(cover),
            mime=_MP4_FORMAT_MIME.get(getattr(cover, "imageformat", None)),
        )
    return None


def _pick_picture(pictures: list[Any]) -> EmbeddedArtwork | None:
    candidates = [picture for picture in pictures or [] if getattr(picture, "data", None)]
    if not candidates:
        return None
    chosen = next((picture for picture in candidates if getattr(picture, "type", None) == _FRONT_COVER), candidates[0])
    return EmbeddedArtwork(data=bytes(chosen.data), mime=getattr(chosen, "mime", None) or None)
