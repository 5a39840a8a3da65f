"""Wire schema for track events produced by the player bridge."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from metadata.types import TrackEvent, TrackMetadata


class TrackPayload(BaseModel):
    title: str
    artist: str = ""
    album: str = ""
    duration: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    path: str | None = None


class TickEventPayload(BaseModel):
    track: TrackPayload
    position: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    def to_event(self) -> TrackEvent:
        return TrackEvent(
            info=TrackMetadata(
                title=self.track.title,
                artist=self.track.artist,
                album=self.track.album,
                duration=self.track.duration,
                path=self.track.path or None,
            ),
            position=self.position,
        )


def event_from_record(record: Any) -> TrackEvent:
    """Validate a parsed record against the tick event schema.

    Raises ``pydantic.ValidationError`` for records that do not match.
    """
    return TickEventPayload.model_validate(record).to_event()
