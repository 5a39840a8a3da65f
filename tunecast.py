#!/usr/bin/env python3
"""
Now-playing presence bridge.
- Reads percent-encoded JSON track events, one per line, from stdin or a file.
- Resolves album artwork via the iTunes Search API with an embedded-tag fallback.
- Writes one presence payload per distinct track as a JSON line on stdout.
"""

import argparse
import logging
import sys

import anyio

from config import settings
from engine.presence import PresenceBuilder
from engine.session import JsonLinesPresenceSink, PresenceSession
from input.streams import RecordDecodeError, RecordParseError, read_track_events
from metadata.providers.artwork import ArtworkResolver
from metadata.providers.base import NullAlbumLookup
from metadata.providers.itunes import ITunesSearchClient


async def _iter_lines(path):
    try:
        if path:
            async with await anyio.open_file(path, "r", encoding="utf-8") as handle:
                async for line in handle:
                    yield line
            return
        async for line in anyio.wrap_file(sys.stdin):
            yield line
    except UnicodeDecodeError as exc:
        raise RecordDecodeError(f"event input is not valid UTF-8: {exc}") from exc


async def run(args):
    lookup = NullAlbumLookup() if args.no_lookup else ITunesSearchClient()
    builder = PresenceBuilder(ArtworkResolver(lookup))
    session = PresenceSession(builder, JsonLinesPresenceSink())
    try:
        published = await session.run(read_track_events(_iter_lines(args.input)))
    except (RecordDecodeError, RecordParseError) as exc:
        logging.error("Event stream failed: %s", exc)
        return 1
    finally:
        session.finish()
    logging.info("Event stream ended; published=%s", published)
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Publish now-playing presence records from a track event stream.")
    parser.add_argument("--input", help="Read events from this file instead of stdin")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (default: %(default)s)")
    parser.add_argument("--no-lookup", action="store_true", help="Skip the remote album lookup")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return anyio.run(run, args)


if __name__ == "__main__":
    sys.exit(main())
