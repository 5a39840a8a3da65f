from __future__ import annotations

import hashlib
import json

from metadata.types import TrackMetadata


def fingerprint_track(metadata: TrackMetadata) -> str:
    """Build a deterministic identity token for track metadata, used only for equality."""
    canonical = {
        "title": metadata.title,
        "artist": metadata.artist,
        "album": metadata.album,
        "duration": float(metadata.duration),
        "path": metadata.path,
    }
    encoded = json.dumps(canonical, ensure_ascii=True, sort_keys=True, separators=(",", ":"))
    return hashlib.sha1(encoded.encode("utf-8")).hexdigest()
