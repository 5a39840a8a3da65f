from __future__ import annotations

import time


def _now_ms() -> float:
    return time.time() * 1000


def end_timestamp(duration_seconds: float, position_seconds: float = 0) -> int:
    """Return the absolute end of playback in milliseconds since epoch."""
    end = _now_ms() + duration_seconds * 1000
    if position_seconds > 0:
        # Offset by the part of the track that already played.
        end -= position_seconds * 1000
    return int(end)
