"""Application settings constants."""

from __future__ import annotations

import os

# Remote album lookup (iTunes Search API).
ITUNES_SEARCH_URL = os.getenv("ITUNES_SEARCH_URL", "https://itunes.apple.com/search")
ITUNES_COUNTRY = os.getenv("ITUNES_COUNTRY", "us")
ITUNES_TIMEOUT_SECONDS = float(os.getenv("ITUNES_TIMEOUT_SECONDS", "10"))
ITUNES_CACHE_TTL_SECONDS = int(os.getenv("ITUNES_CACHE_TTL_SECONDS", str(60 * 60)))
# Edge length requested when rewriting the 100x100 artwork URL.
ITUNES_ARTWORK_SIZE = int(os.getenv("ITUNES_ARTWORK_SIZE", "512"))
USER_AGENT = os.getenv("TUNECAST_USER_AGENT", "tunecast/0.1 (+https://github.com/tunecast/tunecast)")

# Presence record defaults.
PLACEHOLDER_ICON = os.getenv("TUNECAST_PLACEHOLDER_ICON", "ico")
LISTEN_BUTTON_LABEL = os.getenv("TUNECAST_BUTTON_LABEL", "Listen on Apple Music")
DETAILS_MIN_LENGTH = 2
DETAILS_MAX_LENGTH = 128

LOG_LEVEL = os.getenv("TUNECAST_LOG_LEVEL", "INFO")
