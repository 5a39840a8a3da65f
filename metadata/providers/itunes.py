import logging
import re
import threading
import time
from typing import Any

import anyio
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config import settings
from metadata.providers.base import AlbumLookupError
from metadata.types import AlbumLookup

logger = logging.getLogger(__name__)

_ARTWORK_SIZE_RE = re.compile(r"/\d+x\d+bb\.")


def _normalize(value: str | None) -> str:
    return " ".join(str(value or "").split()).casefold()


def _resize_artwork_url(url: str | None, size: int) -> str | None:
    text = str(url or "").strip()
    if not text:
        return None
    if size <= 0:
        return text
    return _ARTWORK_SIZE_RE.sub(f"/{size}x{size}bb.", text, count=1)


class ITunesSearchClient:
    """Album search against the iTunes Search API.

    Every search result (misses included) is cached in memory for
    ``cache_ttl_seconds``. Transport errors, non-200 responses and malformed
    payloads raise ``AlbumLookupError``.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        country: str | None = None,
        timeout_seconds: float | None = None,
        cache_ttl_seconds: int | None = None,
        artwork_size: int | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url or settings.ITUNES_SEARCH_URL
        self.country = country or settings.ITUNES_COUNTRY
        self.timeout_seconds = settings.ITUNES_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self.cache_ttl_seconds = (
            settings.ITUNES_CACHE_TTL_SECONDS if cache_ttl_seconds is None else max(0, int(cache_ttl_seconds))
        )
        self.artwork_size = settings.ITUNES_ARTWORK_SIZE if artwork_size is None else artwork_size
        self._cache: dict[str, tuple[float, AlbumLookup]] = {}
        self._cache_lock = threading.Lock()
        if session is None:
            session = requests.Session()
            retry = Retry(
                total=3,
                backoff_factor=0.4,
                status_forcelist=(429, 500, 502, 503, 504),
                allowed_methods=frozenset({"GET"}),
                respect_retry_after_header=True,
            )
            adapter = HTTPAdapter(max_retries=retry)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._session = session

    async def search(self, artist: str, album: str) -> AlbumLookup:
        return await anyio.to_thread.run_sync(self.search_blocking, artist, album)

    def search_blocking(self, artist: str, album: str) -> AlbumLookup:
        term = " ".join(part for part in ((artist or "").strip(), (album or "").strip()) if part)
        if not term:
            return AlbumLookup()

        cache_key = f"{_normalize(artist)}\x1f{_normalize(album)}"
        cached = self._cache_get(cache_key)
        if cached is not None:
            logger.debug("[ITUNES] search term=%r status=200 cache=hit", term)
            return cached

        params = {
            "term": term,
            "entity": "album",
            "media": "music",
            "country": self.country,
            "limit": 10,
        }
        try:
            resp = self._session.get(
                self.base_url,
                params=params,
                headers={"User-Agent": settings.USER_AGENT},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.info("[ITUNES] search term=%r status=error cache=miss", term)
            raise AlbumLookupError(f"iTunes search request failed: {exc}") from exc

        status = int(resp.status_code)
        logger.info("[ITUNES] search term=%r status=%s cache=miss", term, status)
        if status != 200:
            raise AlbumLookupError(f"iTunes search failed ({status})")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise AlbumLookupError("iTunes search returned invalid JSON") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("results", []), list):
            raise AlbumLookupError("iTunes search returned an unexpected payload")

        result = self._pick_result(payload.get("results") or [], album)
        self._cache_set(cache_key, result)
        return result

    def _pick_result(self, results: list[Any], album: str) -> AlbumLookup:
        entries = [entry for entry in results if isinstance(entry, dict)]
        if not entries:
            return AlbumLookup()
        expected = _normalize(album)
        best = entries[0]
        if expected:
            for entry in entries:
                if _normalize(entry.get("collectionName")) == expected:
                    best = entry
                    break
        url = str(best.get("collectionViewUrl") or "").strip() or None
        artwork = _resize_artwork_url(best.get("artworkUrl100"), self.artwork_size)
        return AlbumLookup(url=url, artwork=artwork)

    def _cache_get(self, key: str) -> AlbumLookup | None:
        now = time.monotonic()
        with self._cache_lock:
            row = self._cache.get(key)
            if row is None:
                return None
            expires_at, value = row
            if expires_at <= now:
                self._cache.pop(key, None)
                return None
            return value

    def _cache_set(self, key: str, value: AlbumLookup) -> None:
        if self.cache_ttl_seconds <= 0:
            return
        now = time.monotonic()
        with self._cache_lock:
            expired = [cached_key for cached_key, (expires_at, _) in self._cache.items() if expires_at <= now]
            for cached_key in expired:
                del self._cache[cached_key]
            self._cache[key] = (now + self.cache_ttl_seconds, value)
