"""On-disk suggestion cache keyed by content hash."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path

from ..schemas import Suggestion

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_KIND = "optimization"


class SuggestionCache:
    """File-per-entry JSON cache with a time-to-live.

    Each entry is stored as <cache_dir>/<sha256>.json holding a timestamp and
    the serialized suggestions. Read and write errors are logged and treated
    as cache misses; they never propagate.
    """

    def __init__(
        self,
        cache_dir: Path | str,
        ttl: float = 24 * 60 * 60,
        enabled: bool = True,
    ):
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl
        self.enabled = enabled

    @staticmethod
    def key(text: str, prompt_kind: str = DEFAULT_PROMPT_KIND) -> str:
        """Content hash of (prompt kind, function text)."""
        return hashlib.sha256(f"{prompt_kind}:{text}".encode("utf-8")).hexdigest()

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def get(self, text: str, prompt_kind: str = DEFAULT_PROMPT_KIND) -> list[Suggestion] | None:
        """Return cached suggestions, or None on miss or expiry."""
        if not self.enabled:
            return None

        path = self._path(self.key(text, prompt_kind))
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if time.time() - float(data["timestamp"]) >= self.ttl:
                logger.debug(f"Cache entry expired: {path.name}")
                return None
            return [Suggestion.from_dict(s) for s in data["suggestions"]]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Cache read error for {path.name}: {e}")
            return None

    def put(
        self,
        text: str,
        suggestions: list[Suggestion],
        prompt_kind: str = DEFAULT_PROMPT_KIND,
    ) -> None:
        """Store suggestions for a function text."""
        if not self.enabled:
            return

        path = self._path(self.key(text, prompt_kind))
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump({
                    "timestamp": time.time(),
                    "suggestions": [s.to_dict() for s in suggestions],
                }, f, indent=2)
        except OSError as e:
            logger.warning(f"Cache write error for {path.name}: {e}")
