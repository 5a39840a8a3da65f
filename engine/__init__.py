from .fingerprint import fingerprint_track
from .presence import PresenceBuilder, PresenceButton, PresenceRecord, create_track
from .session import JsonLinesPresenceSink, PresenceSession
from .text import FormatConfigError, format_text
from .timing import end_timestamp

__all__ = [
    "FormatConfigError",
    "JsonLinesPresenceSink",
    "PresenceBuilder",
    "PresenceButton",
    "PresenceRecord",
    "PresenceSession",
    "create_track",
    "end_timestamp",
    "fingerprint_track",
    "format_text",
]
