"""Presence record assembly for the currently playing track."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from config import settings
from engine.fingerprint import fingerprint_track
from engine.text import format_text
from engine.timing import end_timestamp
from metadata.providers.artwork import ArtworkResolver
from metadata.types import PlayerTrack, TrackEvent

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresenceButton:
    label: str
    url: str


@dataclass(frozen=True)
class PresenceRecord:
    """Status payload handed to the presence sink."""

    details: str
    end_timestamp: int
    large_image_key: str = settings.PLACEHOLDER_ICON
    large_image_text: str | None = None
    state: str | None = None
    buttons: tuple[PresenceButton, ...] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render the camelCase presence dict, leaving out unset fields."""
        payload: dict[str, Any] = {
            "details": self.details,
            "endTimestamp": self.end_timestamp,
            "largeImageKey": self.large_image_key,
        }
        if self.large_image_text is not None:
            payload["largeImageText"] = self.large_image_text
        if self.state is not None:
            payload["state"] = self.state
        if self.buttons:
            payload["buttons"] = [{"label": button.label, "url": button.url} for button in self.buttons]
        return payload


def create_track(event: TrackEvent) -> PlayerTrack:
    return PlayerTrack(
        info=event.info,
        hash=fingerprint_track(event.info),
        end=end_timestamp(event.info.duration, event.position),
    )


class PresenceBuilder:
    def __init__(
        self,
        resolver: ArtworkResolver,
        *,
        placeholder_icon: str = settings.PLACEHOLDER_ICON,
        button_label: str = settings.LISTEN_BUTTON_LABEL,
        min_length: int = settings.DETAILS_MIN_LENGTH,
        max_length: int = settings.DETAILS_MAX_LENGTH,
    ) -> None:
        self._resolver = resolver
        self.placeholder_icon = placeholder_icon
        self.button_label = button_label
        self.min_length = min_length
        self.max_length = max_length

    def base_record(self, track: PlayerTrack) -> PresenceRecord:
        """Build the record without any artwork lookup."""
        info = track.info
        record = PresenceRecord(
            details=format_text(info.title, self.min_length, self.max_length),
            end_timestamp=track.end,
            large_image_key=self.placeholder_icon,
        )
        if len(info.album) >= 2:
            record = replace(record, large_image_text=info.album)
        if len(info.artist) > 0:
            record = replace(record, state=format_text(f"by {info.artist}", self.min_length, self.max_length))
        return record

    async def build(self, track: PlayerTrack) -> PresenceRecord:
        record = self.base_record(track)
        info = track.info
        resolution = await self._resolver.resolve(info.artist, info.album, info.path)
        if resolution.listing_url:
            record = replace(record, buttons=(PresenceButton(label=self.button_label, url=resolution.listing_url),))
        if resolution.artwork:
            record = replace(record, large_image_key=resolution.artwork)
        _LOG.debug(
            "[PRESENCE] built hash=%s artwork=%s button=%s",
            track.hash,
            "placeholder" if record.large_image_key == self.placeholder_icon else "resolved",
            bool(record.buttons),
        )
        return record
