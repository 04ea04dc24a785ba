"""
Tests for the annotation cache, performance utilities and logging setup.
"""

import io

import pytest

import versocorpus as vc
from versocorpus import AnnotationCache, PerformanceMonitor, ProgressTracker
from versocorpus.logging_config import disable_logging, enable_logging


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def annotation_cache(clock):
    return AnnotationCache(max_size=3, ttl_seconds=60, clock=clock)


class TestAnnotationCache:
    """Bounded, caller-owned annotation cache."""

    def test_set_and_get(self, annotation_cache):
        annotation_cache.set("Tchê", {"pos": "INTJ"}, "bah", "que")
        assert annotation_cache.get("tchê", "bah", "que") == {"pos": "INTJ"}
        assert len(annotation_cache) == 1

    def test_context_is_part_of_the_key(self, annotation_cache):
        annotation_cache.set("canto", {"pos": "VERB"}, "eu", "alto")
        annotation_cache.set("canto", {"pos": "NOUN"}, "o", "do")
        assert annotation_cache.get("canto", "eu", "alto") == {"pos": "VERB"}
        assert annotation_cache.get("canto", "o", "do") == {"pos": "NOUN"}
        assert annotation_cache.get("canto") is None

    def test_oldest_entry_is_evicted(self, annotation_cache):
        for word in ["a", "b", "c", "d"]:
            annotation_cache.set(word, word.upper())
        assert len(annotation_cache) == 3
        assert annotation_cache.get("a") is None
        assert annotation_cache.get("d") == "D"

    def test_reinsert_moves_entry_to_the_end(self, annotation_cache):
        for word in ["a", "b", "c"]:
            annotation_cache.set(word, 1)
        annotation_cache.set("a", 2)
        annotation_cache.set("d", 1)
        assert annotation_cache.get("a") == 2
        assert annotation_cache.get("b") is None

    def test_expired_entries_are_dropped_on_read(self, annotation_cache, clock):
        annotation_cache.set("mate", "NOUN")
        clock.now += 61
        assert "mate" not in annotation_cache
        assert annotation_cache.get("mate") is None
        assert len(annotation_cache) == 0

    def test_no_expiry(self, clock):
        cache = AnnotationCache(max_size=2, ttl_seconds=None, clock=clock)
        cache.set("mate", "NOUN")
        clock.now += 10**9
        assert cache.get("mate") == "NOUN"

    def test_contains_does_not_count_hits(self, annotation_cache):
        annotation_cache.set("pampa", "NOUN")
        assert "pampa" in annotation_cache
        assert annotation_cache.statistics()["total_hits"] == 0

    def test_statistics(self, annotation_cache, clock):
        annotation_cache.set("a", 1)
        clock.now += 5
        annotation_cache.set("b", 2)
        annotation_cache.get("a")
        annotation_cache.get("a")
        stats = annotation_cache.statistics()
        assert stats == {
            "total_entries": 2,
            "total_hits": 2,
            "hit_rate": 1.0,
            "oldest_entry": 1000.0,
        }

    def test_empty_statistics(self):
        assert AnnotationCache().statistics()["hit_rate"] == 0.0

    def test_export_and_load(self, annotation_cache, clock):
        annotation_cache.set("a", 1)
        clock.now += 1
        annotation_cache.set("b", 2, "x", "y")
        exported = annotation_cache.export()

        restored = AnnotationCache(max_size=3, ttl_seconds=60, clock=clock)
        restored.load(reversed(exported))
        assert restored.get("b", "x", "y") == 2
        assert [e["word"] for e in restored.export()] == ["a", "b"]

    def test_clear(self, annotation_cache):
        annotation_cache.set("a", 1)
        annotation_cache.clear()
        assert len(annotation_cache) == 0

    def test_defaults(self):
        cache = AnnotationCache()
        assert cache.max_size == 10000
        assert cache.ttl_seconds == 7 * 24 * 60 * 60

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            AnnotationCache(max_size=0)

    def test_key_format(self):
        key = AnnotationCache.make_key("Tchê", "bah", "que")
        word, context_hash = key.split(":")
        assert word == "tchê"
        assert len(context_hash) == 12
        assert key == AnnotationCache.make_key("tchê", "BAH", "Que")


class TestPerformanceUtilities:
    def test_monitor_measures_time(self):
        with PerformanceMonitor("test operation") as monitor:
            sum(range(1000))
        assert monitor.elapsed_time >= 0.0
        assert monitor.end_time is not None

    def test_monitor_before_start(self):
        assert PerformanceMonitor("idle").elapsed_time == 0.0

    def test_progress_tracker_counts(self):
        tracker = ProgressTracker(5, "small pass")
        for _ in range(5):
            tracker.update()
        tracker.finish()
        assert tracker.current == 5
        assert tracker.show_progress is False


class TestLogging:
    """Package logging is silent until enabled."""

    def test_enable_and_disable(self, simple_corpus):
        sink = io.StringIO()
        try:
            enable_logging("DEBUG", sink=sink)
            vc.concordance(simple_corpus, "pampa")
            assert "occurrences of 'pampa'" in sink.getvalue()
        finally:
            disable_logging()

        before = sink.getvalue()
        vc.concordance(simple_corpus, "pampa")
        assert sink.getvalue() == before

    def test_silent_by_default(self, simple_corpus, capsys):
        vc.ngrams(simple_corpus)
        captured = capsys.readouterr()
        assert "gram extraction" not in captured.err
