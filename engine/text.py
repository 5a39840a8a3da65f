from __future__ import annotations

ELLIPSIS = "..."


class FormatConfigError(ValueError):
    """Formatting bounds that cannot produce a valid string."""


def format_text(text: str, min_length: int = 2, max_length: int = 128) -> str:
    """Pad ``text`` to ``min_length`` or cut it to ``max_length`` with a trailing ellipsis."""
    if max_length < len(ELLIPSIS):
        raise FormatConfigError(f"max_length must be >= {len(ELLIPSIS)}, got {max_length}")
    if len(text) <= max_length:
        return text.ljust(min_length)
    return f"{text[: max_length - len(ELLIPSIS)]}{ELLIPSIS}"
