"""
Performance and caching utilities for versocorpus.

Classes:
    AnnotationCache: Caller-owned bounded cache for POS annotations
    ProgressTracker: Progress logging for long-running corpus passes
    PerformanceMonitor: Timing of analysis operations

Example:
    Caching annotations produced by an external tagger::

        from versocorpus.performance import AnnotationCache

        cache = AnnotationCache(max_size=5000)
        annotation = cache.get("tchê", "bah", "que")
        if annotation is None:
            annotation = tagger.annotate("tchê", "bah", "que")
            cache.set("tchê", annotation, "bah", "que")

    Performance monitoring::

        from versocorpus.performance import PerformanceMonitor

        with PerformanceMonitor("My analysis") as monitor:
            result = expensive_operation()

        print(f"Operation took {monitor.elapsed_time:.2f} seconds")
"""

import hashlib
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from loguru import logger

from .config import CONFIG


@dataclass
class CachedAnnotation:
    """A cached annotation and its bookkeeping."""

    word: str
    annotation: Any
    cached_at: float
    hit_count: int = 0


class AnnotationCache:
    """
    Bounded in-memory cache for part-of-speech annotations.

    Annotations come from an external tagger and are keyed by the word and
    the hash of its surrounding context, so the same word form in different
    contexts is cached separately. When the cache is full the entry inserted
    first is evicted. Entries older than ``ttl_seconds`` are dropped when read.

    The cache is an explicit object owned by the caller: the analyzers in this
    package never read from or write to it.

    Attributes:
        max_size: Maximum number of entries
        ttl_seconds: Entry lifetime in seconds, or None for no expiry

    Example:
        Custom size and a test clock::

            cache = AnnotationCache(max_size=2, ttl_seconds=None)
            cache.set("a", {"pos": "DET"})
            cache.set("b", {"pos": "NOUN"})
            cache.set("c", {"pos": "VERB"})  # evicts "a"
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        ttl_seconds: Optional[float] = CONFIG.CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_size = max_size if max_size is not None else CONFIG.CACHE_MAX_SIZE
        if self.max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, CachedAnnotation]" = OrderedDict()

    @staticmethod
    def make_key(word: str, left_context: str = "", right_context: str = "") -> str:
        """Generate a cache key from a word and its context."""
        combined = f"{left_context}|{right_context}".lower()
        context_hash = hashlib.md5(combined.encode("utf-8")).hexdigest()[:12]
        return f"{word.lower()}:{context_hash}"

    def _expired(self, entry: CachedAnnotation) -> bool:
        if self.ttl_seconds is None:
            return False
        return self._clock() - entry.cached_at > self.ttl_seconds

    def get(
        self, word: str, left_context: str = "", right_context: str = ""
    ) -> Optional[Any]:
        """Return the cached annotation, or None if absent or expired."""
        key = self.make_key(word, left_context, right_context)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._expired(entry):
            del self._entries[key]
            return None

        entry.hit_count += 1
        return entry.annotation

    def set(
        self,
        word: str,
        annotation: Any,
        left_context: str = "",
        right_context: str = "",
    ) -> None:
        """Cache an annotation, evicting the oldest entries when full."""
        key = self.make_key(word, left_context, right_context)
        self._entries.pop(key, None)

        while len(self._entries) >= self.max_size:
            evicted_key, _ = self._entries.popitem(last=False)
            logger.debug("Evicted annotation cache entry {}", evicted_key)

        self._entries[key] = CachedAnnotation(word.lower(), annotation, self._clock())

    def __contains__(self, word: str) -> bool:
        # context-free lookup; does not count as a hit
        entry = self._entries.get(self.make_key(word))
        return entry is not None and not self._expired(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def statistics(self) -> Dict[str, Any]:
        """Summary of cache usage."""
        entries = list(self._entries.values())
        total_hits = sum(e.hit_count for e in entries)
        return {
            "total_entries": len(entries),
            "total_hits": total_hits,
            "hit_rate": total_hits / len(entries) if entries else 0.0,
            "oldest_entry": min((e.cached_at for e in entries), default=None),
        }

    def export(self) -> List[Dict[str, Any]]:
        """Entries as plain dicts, oldest first, for external persistence."""
        return [
            {
                "key": key,
                "word": e.word,
                "annotation": e.annotation,
                "cached_at": e.cached_at,
                "hit_count": e.hit_count,
            }
            for key, e in self._entries.items()
        ]

    def load(self, entries: Iterable[Dict[str, Any]]) -> None:
        """Replace the cache contents with previously exported entries."""
        self._entries.clear()
        for item in sorted(entries, key=lambda e: e["cached_at"]):
            while len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[item["key"]] = CachedAnnotation(
                item["word"],
                item["annotation"],
                item["cached_at"],
                item.get("hit_count", 0),
            )


class ProgressTracker:
    """Lightweight progress logging for passes over many documents."""

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.description = description
        self.current = 0
        self.start_time = time.time()
        self.show_progress = total > CONFIG.PROGRESS_THRESHOLD

        if self.show_progress:
            logger.info("Starting {} ({:,} documents)...", description, total)

    def update(self, increment: int = 1):
        """Update progress counter."""
        self.current += increment

        if self.show_progress and self.current % CONFIG.PROGRESS_LOG_EVERY == 0:
            elapsed = time.time() - self.start_time
            rate = self.current / elapsed if elapsed > 0 else 0
            logger.debug(
                "{}: {:,}/{:,} documents [{:.1f} docs/sec]",
                self.description,
                self.current,
                self.total,
                rate,
            )

    def finish(self):
        """Mark progress as complete."""
        if self.show_progress:
            elapsed = time.time() - self.start_time
            logger.info(
                "{} completed in {:.2f}s ({:,} documents processed)",
                self.description,
                elapsed,
                self.current,
            )


class PerformanceMonitor:
    """Time an operation and log it when it is slow."""

    def __init__(self, operation: str):
        self.operation = operation
        self.start_time = None
        self.end_time = None

    @property
    def elapsed_time(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.time()
        elapsed = self.elapsed_time

        if elapsed > CONFIG.SLOW_OPERATION_SECONDS:
            logger.info(
                "Performance: {} completed in {:.2f}s", self.operation, elapsed
            )
        else:
            logger.debug("{} completed in {:.3f}s", self.operation, elapsed)
