"""In-memory LRU cache for analysis results, keyed by a hash of the input content.

The cache is owned by the application and handed to the pipeline explicitly;
the pipeline itself holds no state between runs.
"""

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Any

logger = logging.getLogger("ledgerscope.cache")


def content_hash(text: str) -> str:
    """SHA-256 hex digest of the document text."""
    return hashlib.sha256((text or "").encode("utf-8")).hexdigest()


def cache_key(text: str, *params: str | None) -> str:
    """Hash of the text plus every request parameter that influences scoring.

    Parts are serialized as a JSON array so no two different inputs share a key.
    """
    parts = [text or "", *(param or "" for param in params)]
    encoded = json.dumps(parts, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class ResultCache:
    """Thread-safe LRU mapping of cache key -> analysis result."""

    def __init__(self, max_size: int = 256):
        self.max_size = max(0, int(max_size))
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def enabled(self) -> bool:
        return self.max_size > 0

    def get(self, key: str) -> Any | None:
        if not self.enabled:
            return None
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return self._entries[key]
            self.misses += 1
            return None

    def put(self, key: str, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cached result %s", evicted[:12])

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self.hits,
                "misses": self.misses,
            }
