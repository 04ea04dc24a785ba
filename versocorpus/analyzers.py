"""
Analyzer classes for corpus linguistic analysis.

Each analyzer is stateless and reads an immutable :class:`~versocorpus.corpus.Corpus`
(or frequency tables), so one corpus can be analyzed by several analyzers
at once, in threads if needed.

Classes:
    KeywordAnalyzer: Log-likelihood and mutual information keyness
    KWICAnalyzer: Keywords-in-context concordance lines
    NGramAnalyzer: N-gram extraction and aggregation
    DispersionAnalyzer: Juilland's D and Gries's DP across documents
    SubcorpusAnalyzer: Artist subcorpus profiles and comparisons

Example:
    Using analyzers together::

        from versocorpus.analyzers import KWICAnalyzer, NGramAnalyzer

        lines = KWICAnalyzer().concordance(corpus, "saudade", left_window=4)
        bigrams = NGramAnalyzer().ngrams(corpus, n=2)
        for entry in bigrams.ngrams[:10]:
            print(entry.ngram, entry.frequency)
"""

import math
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

import numpy as np
import polars as pl
from loguru import logger
from scipy.stats import chi2

from .config import CONFIG, STATS
from .corpus import Corpus, Document, normalize_token
from .frequency import (
    entries_to_frame,
    frequency_table_from_corpus,
    total_tokens,
    unique_entries,
)
from .models import (
    ConcordanceLine,
    DispersionPoint,
    DispersionResult,
    FrequencyEntry,
    KeywordResult,
    NGramAnalysis,
    NGramEntry,
    NGramOccurrence,
    SubcorpusComparison,
    SubcorpusProfile,
)
from .performance import PerformanceMonitor, ProgressTracker
from .validation import (
    CorpusValidationError,
    suggest_alternatives_for_empty_results,
    validate_corpus_totals,
    validate_ngram_size,
    validate_positive_int,
    validate_search_word,
    validate_window,
    warn_about_corpus_size,
)


def log_likelihood(o1: float, n1: float, o2: float, n2: float) -> float:
    """
    Log-likelihood (G2) of a word's frequencies in two corpora.

    Expected frequencies assume equal relative frequency in both corpora.
    A term with zero observed frequency contributes 0.

    :param o1: Observed frequency in the study corpus
    :param n1: Total tokens in the study corpus
    :param o2: Observed frequency in the reference corpus
    :param n2: Total tokens in the reference corpus
    :return: LL, never negative
    """
    e1 = n1 * (o1 + o2) / (n1 + n2)
    e2 = n2 * (o1 + o2) / (n1 + n2)

    ll = 2 * (
        (o1 * math.log(o1 / e1) if o1 > 0 else 0.0)
        + (o2 * math.log(o2 / e2) if o2 > 0 else 0.0)
    )
    # rounding can push an exact zero slightly negative
    return max(ll, 0.0)


def mutual_information(o1: float, n1: float, o2: float, n2: float) -> float:
    """
    Mutual information of a word with the study corpus.

    ``log2(p1 / p_total)`` with ``p1 = o1 / n1`` and
    ``p_total = (o1 + o2) / (n1 + n2)``; 0 when either probability is 0.
    """
    p1 = o1 / n1
    p_total = (o1 + o2) / (n1 + n2)

    if p1 == 0 or p_total == 0:
        return 0.0

    return math.log2(p1 / p_total)


def classify_significance(ll: float) -> str:
    """Band an LL value by the chi-square critical values at 1 d.f."""
    if ll > STATS.LL_HIGH:
        return "High"  # p < 0.0001
    if ll > STATS.LL_MEDIUM:
        return "Medium"  # p < 0.01
    return "Low"


def classify_density(d: float) -> str:
    """Band a dispersion coefficient."""
    if d > STATS.DENSITY_HIGH:
        return "High"
    if d > STATS.DENSITY_MEDIUM:
        return "Medium"
    return "Low"


class KeywordAnalyzer:
    """
    Compares a study frequency table against a reference table.

    Only words of the study table are scored: a word that appears in the
    reference table alone is never reported as a keyword.

    Example:
        Scoring a study corpus::

            analyzer = KeywordAnalyzer()
            results = analyzer.compute_keywords(study_entries, reference_entries)
            high = [r for r in results if r.significance == "High"]

        Ranked table with p-values::

            table = analyzer.keyness_table(study_entries, reference_entries,
                                           min_ll=6.63)
    """

    @staticmethod
    def _resolve_totals(
        study: List[FrequencyEntry],
        reference: List[FrequencyEntry],
        study_total: Optional[int],
        reference_total: Optional[int],
    ):
        n1 = total_tokens(study) if study_total is None else study_total
        n2 = total_tokens(reference) if reference_total is None else reference_total
        validate_corpus_totals(n1, n2, "in KeywordAnalyzer")
        return float(n1), float(n2)

    def _keyword_frame(
        self,
        study: List[FrequencyEntry],
        reference: List[FrequencyEntry],
        n1: float,
        n2: float,
    ) -> pl.DataFrame:
        """Frequencies, LL, MI and significance for every study word."""
        study_df = entries_to_frame(study).select(
            pl.col("headword").alias("word"),
            pl.col("frequency").alias("study_frequency"),
        )
        reference_df = entries_to_frame(reference).select(
            pl.col("headword").alias("word"),
            pl.col("frequency").alias("reference_frequency"),
        )

        o1 = pl.col("study_frequency").cast(pl.Float64)
        o2 = pl.col("reference_frequency").cast(pl.Float64)
        e1 = (o1 + o2).mul(n1).truediv(n1 + n2)
        e2 = (o1 + o2).mul(n2).truediv(n1 + n2)

        return (
            study_df.join(reference_df, on="word", how="left", maintain_order="left")
            .with_columns(pl.col("reference_frequency").fill_null(0))
            .with_columns(
                (
                    pl.when(o1 > 0).then(o1.mul(o1.truediv(e1).log())).otherwise(0.0)
                    + pl.when(o2 > 0)
                    .then(o2.mul(o2.truediv(e2).log()))
                    .otherwise(0.0)
                )
                .mul(2)
                .clip(lower_bound=0.0)
                .alias("log_likelihood"),
                pl.when((o1 > 0) & ((o1 + o2) > 0))
                .then(
                    o1.truediv(n1)
                    .truediv((o1 + o2).truediv(n1 + n2))
                    .log(base=2)
                )
                .otherwise(0.0)
                .alias("mutual_information"),
            )
            .with_columns(
                pl.when(pl.col("log_likelihood") > STATS.LL_HIGH)
                .then(pl.lit("High"))
                .when(pl.col("log_likelihood") > STATS.LL_MEDIUM)
                .then(pl.lit("Medium"))
                .otherwise(pl.lit("Low"))
                .alias("significance")
            )
        )

    def compute_keywords(
        self,
        study: List[FrequencyEntry],
        reference: List[FrequencyEntry],
        study_total: Optional[int] = None,
        reference_total: Optional[int] = None,
    ) -> List[KeywordResult]:
        """
        Score every study word against the reference corpus.

        A headword listed more than once in either table counts once, with
        its last entry.

        :param study: Study corpus frequency entries
        :param reference: Reference corpus frequency entries
        :param study_total: Study corpus size; defaults to the table total
        :param reference_total: Reference corpus size; defaults to the
            table total
        :return: One KeywordResult per study headword, in study-table order
        """
        study, reference = unique_entries(study), unique_entries(reference)
        n1, n2 = self._resolve_totals(study, reference, study_total, reference_total)

        with PerformanceMonitor("Keyword statistics"):
            df = self._keyword_frame(study, reference, n1, n2)

        logger.debug(
            "Scored {} study words against {} reference words", df.height, len(reference)
        )
        return [
            KeywordResult(**row)
            for row in df.select(
                [
                    "word",
                    "study_frequency",
                    "reference_frequency",
                    "log_likelihood",
                    "mutual_information",
                    "significance",
                ]
            ).iter_rows(named=True)
        ]

    def keyness_table(
        self,
        study: List[FrequencyEntry],
        reference: List[FrequencyEntry],
        study_total: Optional[int] = None,
        reference_total: Optional[int] = None,
        min_ll: float = 0.0,
        sort: bool = True,
    ) -> pl.DataFrame:
        """
        Generate a keyness table with normalized frequencies and p-values.

        :param study: Study corpus frequency entries
        :param reference: Reference corpus frequency entries
        :param study_total: Study corpus size; defaults to the table total
        :param reference_total: Reference corpus size; defaults to the
            table total
        :param min_ll: Keep rows with at least this log-likelihood
        :param sort: Sort by descending log-likelihood (ties keep table order)
        :return: A polars DataFrame with columns word, study_frequency,
            reference_frequency, study_norm_frequency,
            reference_norm_frequency, log_likelihood, mutual_information,
            p_value, effect and significance
        """
        study, reference = unique_entries(study), unique_entries(reference)
        n1, n2 = self._resolve_totals(study, reference, study_total, reference_total)
        nf = CONFIG.FREQUENCY_NORMALIZATION_FACTOR

        df = (
            self._keyword_frame(study, reference, n1, n2)
            .with_columns(
                pl.col("study_frequency").truediv(n1).mul(nf).alias(
                    "study_norm_frequency"
                ),
                pl.col("reference_frequency")
                .truediv(n2)
                .mul(nf)
                .alias("reference_norm_frequency"),
            )
            .with_columns(
                pl.when(
                    pl.col("study_norm_frequency") >= pl.col("reference_norm_frequency")
                )
                .then(pl.lit("over"))
                .otherwise(pl.lit("under"))
                .alias("effect")
            )
            .filter(pl.col("log_likelihood") >= min_ll)
        )
        df = df.with_columns(
            pl.Series(
                "p_value",
                chi2.sf(df.get_column("log_likelihood").to_numpy(), 1),
                dtype=pl.Float64,
            )
        )

        if sort:
            df = df.sort("log_likelihood", descending=True, maintain_order=True)

        if df.height == 0:
            suggest_alternatives_for_empty_results("keywords", min_ll=min_ll)

        return df.select(
            [
                "word",
                "study_frequency",
                "reference_frequency",
                "study_norm_frequency",
                "reference_norm_frequency",
                "log_likelihood",
                "mutual_information",
                "p_value",
                "effect",
                "significance",
            ]
        )


class KWICAnalyzer:
    """Handles Keywords in Context (KWIC) analysis."""

    def concordance(
        self,
        corpus: Corpus,
        keyword: str,
        left_window: int = None,
        right_window: int = None,
    ) -> List[ConcordanceLine]:
        """
        Generate concordance lines for a keyword.

        Matching is exact on normalized tokens. Lines follow document order,
        then position within the document.

        :param corpus: A tokenized corpus
        :param keyword: The word of interest
        :param left_window: Tokens of left context (default 5)
        :param right_window: Tokens of right context; defaults to left_window
        :return: Concordance lines, empty when the keyword does not occur
        """
        validate_search_word(keyword, "in concordance")
        if left_window is None:
            left_window = CONFIG.KWIC_WINDOW
        if right_window is None:
            right_window = left_window
        validate_window(left_window, "left_window", "in concordance")
        validate_window(right_window, "right_window", "in concordance")

        target = normalize_token(keyword)
        lines = []

        with PerformanceMonitor(f"Concordance for '{target}'"):
            for document in corpus.documents:
                tokens = document.tokens
                for i, token in enumerate(tokens):
                    if token != target:
                        continue
                    start = max(0, i - left_window)
                    end = min(len(tokens), i + 1 + right_window)
                    lines.append(
                        ConcordanceLine(
                            keyword=target,
                            left_context=" ".join(tokens[start:i]),
                            right_context=" ".join(tokens[i + 1: end]),
                            source_document=document.metadata,
                            position_in_document=i,
                        )
                    )

        logger.debug("Found {} occurrences of '{}'", len(lines), target)
        if not lines and corpus.total_tokens > 0:
            suggest_alternatives_for_empty_results("concordance", word=target)
        return lines


class NGramAnalyzer:
    """Handles n-gram extraction and aggregation."""

    @staticmethod
    def _context(tokens: Sequence[str], start: int, n: int) -> str:
        size = CONFIG.NGRAM_CONTEXT_SIZE
        return " ".join(tokens[max(0, start - size): min(len(tokens), start + n + size)])

    def ngrams(
        self,
        corpus: Corpus,
        n: int = 2,
        min_frequency: int = None,
        max_results: int = None,
    ) -> NGramAnalysis:
        """
        Extract n-grams of length ``n`` from every document.

        Windows never span two documents. At most ten sample occurrences
        (the first ones in corpus order) are kept per n-gram.

        :param corpus: A tokenized corpus
        :param n: N-gram length, between 2 and 5
        :param min_frequency: Minimum frequency of returned n-grams (default 2)
        :param max_results: Maximum number of returned n-grams (default 500)
        :return: An NGramAnalysis with the filtered n-grams and the totals
        """
        if min_frequency is None:
            min_frequency = CONFIG.NGRAM_MIN_FREQUENCY
        if max_results is None:
            max_results = CONFIG.NGRAM_MAX_RESULTS
        validate_ngram_size(n, "in ngrams")
        validate_positive_int(min_frequency, "min_frequency", 1, "in ngrams")
        validate_positive_int(max_results, "max_results", 0, "in ngrams")
        warn_about_corpus_size(len(corpus), "in ngrams")

        frequencies: Dict[str, int] = {}
        samples: Dict[str, List[NGramOccurrence]] = {}
        token_tuples: Dict[str, tuple] = {}
        total_ngrams = 0

        tracker = ProgressTracker(len(corpus), f"{n}-gram extraction")
        with PerformanceMonitor(f"{n}-gram extraction"):
            for document in corpus.documents:
                tokens = document.tokens
                for i in range(len(tokens) - n + 1):
                    window = tokens[i: i + n]
                    key = " ".join(window)
                    total_ngrams += 1

                    if key not in frequencies:
                        frequencies[key] = 0
                        samples[key] = []
                        token_tuples[key] = window
                    frequencies[key] += 1

                    if len(samples[key]) < STATS.NGRAM_SAMPLE_LIMIT:
                        samples[key].append(
                            NGramOccurrence(
                                context=self._context(tokens, i, n),
                                source_document=document.metadata,
                                position=document.corpus_offset + i,
                            )
                        )
                tracker.update()
        tracker.finish()

        # sorted() is stable: equal frequencies keep first-seen order
        kept = sorted(
            (key for key, freq in frequencies.items() if freq >= min_frequency),
            key=lambda key: frequencies[key],
            reverse=True,
        )[:max_results]

        entries = tuple(
            NGramEntry(token_tuples[key], frequencies[key], tuple(samples[key]))
            for key in kept
        )

        logger.debug(
            "{} {}-grams kept of {} unique ({} processed)",
            len(entries),
            n,
            len(frequencies),
            total_ngrams,
        )
        if not entries and total_ngrams > 0:
            suggest_alternatives_for_empty_results(
                "ngrams", min_frequency=min_frequency, n=n
            )

        return NGramAnalysis(
            n=n,
            total_ngrams=total_ngrams,
            unique_ngrams=len(frequencies),
            ngrams=entries,
        )


class DispersionAnalyzer:
    """Handles dispersion analysis and related calculations."""

    @staticmethod
    def _juillands_d(frequencies: np.ndarray) -> float:
        """
        Juilland's D for per-document frequencies, clamped to [0, 1].

        A word that does not occur has D = 0. With a single document the
        ``sqrt(k - 1)`` denominator vanishes, and a word that occurs at all
        has D = 1.
        """
        k = len(frequencies)
        total = frequencies.sum()
        if k == 0 or total == 0:
            return 0.0
        if k == 1:
            return 1.0

        expected = total / k
        # np.std is the population standard deviation
        cv = np.std(frequencies) / expected
        d = 1 - cv / np.sqrt(k - 1)
        return float(np.clip(d, 0.0, 1.0))

    @staticmethod
    def _gries_dp(frequencies: np.ndarray, sizes: np.ndarray) -> Optional[float]:
        """Deviation of proportions using document sizes as expected shares."""
        total = frequencies.sum()
        corpus_size = sizes.sum()
        if total == 0 or corpus_size == 0:
            return None
        s = sizes / corpus_size
        return float(np.sum(np.abs(frequencies / total - s)) / 2)

    @staticmethod
    def _count_in(document: Document, target: str) -> int:
        return sum(1 for token in document.tokens if token == target)

    def dispersion(self, corpus: Corpus, word: str) -> DispersionResult:
        """
        Measure how evenly a word is spread across the corpus documents.

        :param corpus: A tokenized corpus
        :param word: The word of interest
        :return: A DispersionResult; a word that does not occur gives
            D = 0, no points and "Low" density
        """
        validate_search_word(word, "in dispersion")
        target = normalize_token(word)

        points = []
        frequencies = np.zeros(len(corpus), dtype=np.int64)

        with PerformanceMonitor(f"Dispersion for '{target}'"):
            for doc_index, document in enumerate(corpus.documents):
                for i, token in enumerate(document.tokens):
                    if token != target:
                        continue
                    position = document.corpus_offset + i
                    points.append(
                        DispersionPoint(
                            normalized_position=position / corpus.total_tokens,
                            absolute_position=position,
                            source_document=document.metadata,
                            document_index=doc_index,
                        )
                    )
                    frequencies[doc_index] += 1

            coefficient = self._juillands_d(frequencies)

        density = classify_density(coefficient)
        documents_with_word = int(np.count_nonzero(frequencies))
        logger.debug(
            "'{}': {} occurrences in {} documents, D = {:.3f} ({})",
            target,
            len(points),
            documents_with_word,
            coefficient,
            density,
        )
        if not points and corpus.total_tokens > 0:
            suggest_alternatives_for_empty_results("dispersion", word=target)

        return DispersionResult(
            word=target,
            total_occurrences=len(points),
            occurrence_points=tuple(points),
            dispersion_coefficient=coefficient,
            documents_containing_word=documents_with_word,
            density_class=density,
        )

    def _table_row(self, corpus: Corpus, sizes: np.ndarray, word: str) -> dict:
        validate_search_word(word, "in dispersions_table")
        target = normalize_token(word)
        frequencies = np.array(
            [self._count_in(doc, target) for doc in corpus.documents], dtype=np.int64
        )
        d = self._juillands_d(frequencies)
        documents_with_word = int(np.count_nonzero(frequencies))
        return {
            "word": target,
            "total_occurrences": int(frequencies.sum()),
            "documents_containing_word": documents_with_word,
            "range": documents_with_word / len(corpus) * 100 if len(corpus) else 0.0,
            "juillands_d": d,
            "dp": self._gries_dp(frequencies, sizes),
            "density_class": classify_density(d),
        }

    def dispersions_table(
        self, corpus: Corpus, words: Sequence[str], n_workers: int = None
    ) -> pl.DataFrame:
        """
        Generate a table of dispersion measures for several words.

        :param corpus: A tokenized corpus
        :param words: Words to measure; row order follows this sequence
        :param n_workers: Number of worker threads (default 1)
        :return: A polars DataFrame with columns word, total_occurrences,
            documents_containing_word, range, juillands_d, dp, density_class
        """
        if n_workers is None:
            n_workers = CONFIG.DEFAULT_N_WORKERS
        validate_positive_int(n_workers, "n_workers", 1, "in dispersions_table")

        sizes = np.array([doc.token_count for doc in corpus.documents], dtype=np.int64)

        with PerformanceMonitor(f"Dispersion table ({len(words)} words)"):
            if n_workers == 1:
                rows = [self._table_row(corpus, sizes, w) for w in words]
            else:
                with ThreadPoolExecutor(max_workers=n_workers) as executor:
                    rows = list(
                        executor.map(lambda w: self._table_row(corpus, sizes, w), words)
                    )

        return pl.DataFrame(
            rows,
            schema={
                "word": pl.String,
                "total_occurrences": pl.Int64,
                "documents_containing_word": pl.Int64,
                "range": pl.Float64,
                "juillands_d": pl.Float64,
                "dp": pl.Float64,
                "density_class": pl.String,
            },
        )


class SubcorpusAnalyzer:
    """Profiles and compares the songs of individual artists."""

    def __init__(self, keyword_analyzer: KeywordAnalyzer = None):
        self._keywords = keyword_analyzer or KeywordAnalyzer()

    @staticmethod
    def _profile(artist: str, documents: Sequence[Document]) -> SubcorpusProfile:
        tokens = [t for doc in documents for t in doc.tokens]
        unique = set(tokens)
        years = [
            doc.metadata.year_number
            for doc in documents
            if doc.metadata.year_number is not None and doc.metadata.year_number > 0
        ]
        albums = OrderedDict.fromkeys(
            doc.metadata.album for doc in documents if doc.metadata.album
        )
        return SubcorpusProfile(
            artist=artist,
            total_songs=len(documents),
            total_tokens=len(tokens),
            unique_tokens=len(unique),
            lexical_richness=len(unique) / len(tokens) if tokens else 0.0,
            year_start=min(years) if years else None,
            year_end=max(years) if years else None,
            albums=tuple(albums),
        )

    @staticmethod
    def _group_by_artist(corpus: Corpus) -> "OrderedDict[str, List[Document]]":
        groups: "OrderedDict[str, List[Document]]" = OrderedDict()
        for document in corpus.documents:
            groups.setdefault(document.metadata.artist, []).append(document)
        return groups

    def subcorpus_profiles(self, corpus: Corpus) -> List[SubcorpusProfile]:
        """
        One profile per artist.

        :param corpus: A tokenized corpus
        :return: Profiles sorted by total tokens, largest first
        """
        profiles = [
            self._profile(artist, docs)
            for artist, docs in self._group_by_artist(corpus).items()
        ]
        return sorted(profiles, key=lambda p: p.total_tokens, reverse=True)

    def compare_subcorpora(
        self,
        corpus: Corpus,
        artist_a: str,
        artist_b: str = None,
        top_n: int = None,
        min_ll: float = None,
    ) -> SubcorpusComparison:
        """
        Compare one artist's songs with another artist or the rest of the corpus.

        :param corpus: A tokenized corpus
        :param artist_a: The artist under study
        :param artist_b: The comparison artist; None compares with every
            other artist
        :param top_n: Number of keywords kept for each side (default 30)
        :param min_ll: Minimum log-likelihood of keywords (default 3.84)
        :return: A SubcorpusComparison
        """
        if top_n is None:
            top_n = CONFIG.SUBCORPUS_TOP_KEYWORDS
        if min_ll is None:
            min_ll = CONFIG.SUBCORPUS_MIN_LL
        validate_positive_int(top_n, "top_n", 0, "in compare_subcorpora")

        docs_a = [d for d in corpus.documents if d.metadata.artist == artist_a]
        if artist_b is None:
            label_b = "Rest of corpus"
            docs_b = [d for d in corpus.documents if d.metadata.artist != artist_a]
        else:
            label_b = artist_b
            docs_b = [d for d in corpus.documents if d.metadata.artist == artist_b]

        if not docs_a:
            raise CorpusValidationError(f"No documents found for artist '{artist_a}'.")
        if not docs_b:
            raise CorpusValidationError(
                f"No documents found for comparison subcorpus '{label_b}'."
            )

        corpus_a = Corpus.from_documents((d.tokens, d.metadata) for d in docs_a)
        corpus_b = Corpus.from_documents((d.tokens, d.metadata) for d in docs_b)
        table_a = frequency_table_from_corpus(corpus_a)
        table_b = frequency_table_from_corpus(corpus_b)

        vocabulary_a = {e.headword for e in table_a}
        vocabulary_b = {e.headword for e in table_b}

        keywords_a = self._keywords.keyness_table(table_a, table_b, min_ll=min_ll)
        keywords_b = self._keywords.keyness_table(table_b, table_a, min_ll=min_ll)

        return SubcorpusComparison(
            subcorpus_a=self._profile(artist_a, docs_a),
            subcorpus_b=self._profile(label_b, docs_b),
            only_a=tuple(sorted(vocabulary_a - vocabulary_b)),
            only_b=tuple(sorted(vocabulary_b - vocabulary_a)),
            shared=tuple(sorted(vocabulary_a & vocabulary_b)),
            keywords_a=keywords_a.head(top_n),
            keywords_b=keywords_b.head(top_n),
        )
