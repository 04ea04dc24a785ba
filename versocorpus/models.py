"""
Result types returned by the analyzers.

All results are frozen dataclasses. Fields that hold several values use
tuples so that results can be shared between threads.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

import polars as pl

from .corpus import SongMetadata

Significance = Literal["High", "Medium", "Low"]
Density = Literal["High", "Medium", "Low"]


@dataclass(frozen=True)
class FrequencyEntry:
    """One row of a frequency table.

    Attributes:
        headword: Normalized token
        rank: 1-based frequency rank within its table
        frequency: Raw occurrence count (always >= 1)
        range: Number of texts containing the headword, from the source table
        norm_frequency: Normalized frequency, carried through from the source
        norm_range: Normalized range, carried through from the source
    """

    headword: str
    rank: int
    frequency: int
    range: int = 0
    norm_frequency: float = 0.0
    norm_range: float = 0.0


@dataclass(frozen=True)
class KeywordResult:
    """Keyness statistics for one study-corpus word."""

    word: str
    study_frequency: int
    reference_frequency: int
    log_likelihood: float
    mutual_information: float
    significance: Significance


@dataclass(frozen=True)
class ConcordanceLine:
    """One KWIC hit with its left and right context."""

    keyword: str
    left_context: str
    right_context: str
    source_document: SongMetadata
    position_in_document: int

    @property
    def line(self) -> str:
        """The full line: left context, keyword and right context."""
        return " ".join(
            part for part in (self.left_context, self.keyword, self.right_context) if part
        )


@dataclass(frozen=True)
class NGramOccurrence:
    """A retained sample occurrence of an n-gram."""

    context: str
    source_document: SongMetadata
    position: int


@dataclass(frozen=True)
class NGramEntry:
    """An aggregated n-gram with up to ten sample occurrences."""

    tokens: Tuple[str, ...]
    frequency: int
    occurrences: Tuple[NGramOccurrence, ...] = ()

    @property
    def ngram(self) -> str:
        return " ".join(self.tokens)


@dataclass(frozen=True)
class NGramAnalysis:
    """Filtered n-grams plus the unfiltered totals.

    Attributes:
        n: N-gram length
        total_ngrams: Number of windows processed
        unique_ngrams: Number of distinct n-grams before filtering
        ngrams: Filtered, sorted and truncated entries
    """

    n: int
    total_ngrams: int
    unique_ngrams: int
    ngrams: Tuple[NGramEntry, ...] = ()


@dataclass(frozen=True)
class DispersionPoint:
    """One occurrence of a word, located in the corpus."""

    normalized_position: float
    absolute_position: int
    source_document: SongMetadata
    document_index: int


@dataclass(frozen=True)
class DispersionResult:
    """How evenly a word is spread across the documents of a corpus."""

    word: str
    total_occurrences: int
    occurrence_points: Tuple[DispersionPoint, ...]
    dispersion_coefficient: float
    documents_containing_word: int
    density_class: Density


@dataclass(frozen=True)
class SubcorpusProfile:
    """Summary statistics for the songs of one artist (or a remainder)."""

    artist: str
    total_songs: int
    total_tokens: int
    unique_tokens: int
    lexical_richness: float
    year_start: Optional[int] = None
    year_end: Optional[int] = None
    albums: Tuple[str, ...] = ()


@dataclass(frozen=True, eq=False)
class SubcorpusComparison:
    """Vocabulary and keyness comparison of two subcorpora.

    ``keywords_a`` holds the words key in A against B; ``keywords_b`` the
    reverse. Both are keyness tables as returned by ``keyness_table``.
    """

    subcorpus_a: SubcorpusProfile
    subcorpus_b: SubcorpusProfile
    only_a: Tuple[str, ...]
    only_b: Tuple[str, ...]
    shared: Tuple[str, ...]
    keywords_a: pl.DataFrame
    keywords_b: pl.DataFrame
