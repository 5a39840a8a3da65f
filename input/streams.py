"""Streaming decode/parse stages for percent-encoded, line-delimited JSON events.

Each stage is an async generator that pulls one chunk from upstream only
when its consumer asks for the next item, so no stage buffers more than a
single chunk. Stages hold no state between chunks.
"""

from __future__ import annotations

import json
import re
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterable, AsyncIterator
from urllib.parse import quote, unquote_to_bytes

from pydantic import ValidationError

from input.events import event_from_record
from metadata.types import TrackEvent

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~".
_URI_COMPONENT_SAFE = "!*'()~"
_MALFORMED_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_BLANK_RE = re.compile(r"[ \t\r\n]*")


class RecordDecodeError(ValueError):
    """A chunk carried malformed percent-encoding."""


class RecordParseError(ValueError):
    """A chunk was not a valid JSON record."""


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def decode_uri_component(text: str) -> str:
    """Decode ``%XX`` escapes as UTF-8; ``+`` is not treated as a space."""
    match = _MALFORMED_PERCENT_RE.search(text)
    if match:
        raise RecordDecodeError(f"malformed percent-encoding at offset {match.start()}")
    try:
        return unquote_to_bytes(text).decode("utf-8")
    except UnicodeError as exc:
        raise RecordDecodeError(f"percent-encoded bytes are not valid UTF-8: {exc}") from exc


def is_blank(chunk: str) -> bool:
    """True for empty chunks and chunks made only of space, tab, CR and LF."""
    return _BLANK_RE.fullmatch(chunk) is not None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def parse_record(chunk: str) -> Any:
    try:
        return json.loads(chunk, parse_constant=_reject_constant)
    except ValueError as exc:
        raise RecordParseError(f"invalid JSON record: {exc}") from exc


@asynccontextmanager
async def _upstream(chunks: AsyncIterable[Any]) -> AsyncIterator[AsyncIterable[Any]]:
    # Stages own their upstream: closing a stage closes its source too.
    try:
        yield chunks
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()


async def decode_uri_chunks(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    async with _upstream(chunks) as source:
        async for chunk in source:
            yield decode_uri_component(chunk)


async def parse_record_chunks(chunks: AsyncIterable[str]) -> AsyncIterator[Any]:
    async with _upstream(chunks) as source:
        async for chunk in source:
            if is_blank(chunk):
                continue
            yield parse_record(chunk)


async def read_track_events(lines: AsyncIterable[str]) -> AsyncIterator[TrackEvent]:
    """Turn raw encoded lines into validated track events.

    Closing this generator closes every upstream stage and ``lines`` itself.
    """
    async with aclosing(parse_record_chunks(decode_uri_chunks(lines))) as records:
        async for record in records:
            try:
                event = event_from_record(record)
            except (ValidationError, ValueError) as exc:
                raise RecordParseError(f"record does not match the track event schema: {exc}") from exc
            yield event
