"""
Configuration constants for versocorpus.

``ProcessingConfig`` holds tunable defaults. ``StatisticalConstants`` holds
values that define the statistics themselves and is frozen.
"""

from dataclasses import dataclass
import re


@dataclass
class ProcessingConfig:
    """Configuration defaults for corpus processing."""

    # KWIC defaults
    KWIC_WINDOW: int = 5

    # Tokenization
    TOKENIZER_LANGUAGE: str = "pt"
    TOKENIZER_BATCH_SIZE: int = 50

    # N-gram defaults
    NGRAM_MIN_FREQUENCY: int = 2
    NGRAM_MAX_RESULTS: int = 500
    NGRAM_CONTEXT_SIZE: int = 3

    # Normalization factors
    FREQUENCY_NORMALIZATION_FACTOR: int = 1000000

    # Subcorpus comparison
    SUBCORPUS_MIN_LL: float = 3.84  # p < 0.05
    SUBCORPUS_TOP_KEYWORDS: int = 30

    # Annotation cache
    CACHE_MAX_SIZE: int = 10000
    CACHE_TTL_SECONDS: float = 7 * 24 * 60 * 60

    # Performance
    PROGRESS_THRESHOLD: int = 1000  # documents
    PROGRESS_LOG_EVERY: int = 100  # documents
    LARGE_CORPUS_THRESHOLD: int = 50000  # documents
    SLOW_OPERATION_SECONDS: float = 5.0
    DEFAULT_N_WORKERS: int = 1


@dataclass(frozen=True)
class StatisticalConstants:
    """Fixed thresholds of the corpus statistics."""

    # chi-square critical values, 1 d.f.
    LL_HIGH: float = 15.13  # p < 0.0001
    LL_MEDIUM: float = 6.63  # p < 0.01

    # Juilland's D density bands
    DENSITY_HIGH: float = 0.7
    DENSITY_MEDIUM: float = 0.4

    NGRAM_MIN_N: int = 2
    NGRAM_MAX_N: int = 5
    NGRAM_SAMPLE_LIMIT: int = 10


@dataclass
class RegexPatterns:
    """Compiled regex patterns for lyric corpus parsing."""

    BLOCK_SEPARATOR = re.compile(r"-{10,}")
    COMPOSER = re.compile(r"\(Compositor:\s*([^)]+)\)")
    COMPOSER_STRIP = re.compile(r"\s*\(Compositor:[^)]+\)\s*")
    ARTIST_ALBUM_SEPARATOR = " - "
    TITLE_YEAR_SEPARATOR = "_"


# Global configuration instances
CONFIG = ProcessingConfig()
STATS = StatisticalConstants()
PATTERNS = RegexPatterns()
