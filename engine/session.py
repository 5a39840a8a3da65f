"""Presence session: turns a stream of track events into sink updates."""

from __future__ import annotations

import json
import logging
import sys
from typing import AsyncIterable, Protocol, TextIO

from engine.fingerprint import fingerprint_track
from engine.presence import PresenceBuilder, PresenceRecord, create_track
from metadata.providers.base import AlbumLookupError
from metadata.types import PlayerTrack, TrackEvent

logger = logging.getLogger(__name__)


class PresenceSink(Protocol):
    def publish(self, record: PresenceRecord) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class JsonLinesPresenceSink:
    """Write each presence payload as one JSON line; ``null`` clears the presence."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def publish(self, record: PresenceRecord) -> None:
        self._write(json.dumps(record.to_payload(), ensure_ascii=False, separators=(",", ":")))

    def clear(self) -> None:
        self._write("null")

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()


class PresenceSession:
    """Publish a presence record once per distinct track.

    Events whose fingerprint matches the current track are ignored, so the
    end timestamp is computed once per track. A failed album lookup falls
    back to the placeholder record instead of dropping the update.
    """

    def __init__(self, builder: PresenceBuilder, sink: PresenceSink) -> None:
        self._builder = builder
        self._sink = sink
        self.current: PlayerTrack | None = None

    async def handle(self, event: TrackEvent) -> PresenceRecord | None:
        if self.current is not None and self.current.hash == fingerprint_track(event.info):
            return None
        track = create_track(event)
        try:
            record = await self._builder.build(track)
        except AlbumLookupError as exc:
            logger.warning(
                "[PRESENCE] album lookup failed for %s / %s: %s",
                track.info.artist,
                track.info.album,
                exc,
            )
            record = self._builder.base_record(track)
        # Current only once a record exists.
        self.current = track
        logger.info("[PRESENCE] publish hash=%s title=%r", track.hash, track.info.title)
        self._sink.publish(record)
        return record

    async def run(self, events: AsyncIterable[TrackEvent]) -> int:
        published = 0
        async for event in events:
            if await self.handle(event) is not None:
                published += 1
        return published

    def finish(self) -> None:
        if self.current is not None:
            self.current = None
            self._sink.clear()
