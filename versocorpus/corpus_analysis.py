"""
Functions for analyzing tokenized lyric corpora.

This module provides the main API functions for corpus analysis, serving as
convenient wrappers around the analyzer classes in
:mod:`versocorpus.analyzers`.

Main Functions:
    frequency_table: Build a ranked frequency table from a corpus
    compute_keywords: Log-likelihood and mutual information keyness
    keyness_table: Ranked keyness table with p-values
    concordance: Keywords-in-context lines for one word
    batch_concordance: Concordances for several words at once
    ngrams: Extract and count n-grams
    dispersion: Juilland's D and occurrence points for one word
    dispersions_table: Dispersion measures for several words
    subcorpus_profiles: Per-artist corpus profiles
    compare_subcorpora: Compare two artist subcorpora

Example:
    Basic corpus analysis workflow::

        import versocorpus as vc

        corpus = vc.corpus_from_folder("lyrics/")

        # Study table from the corpus, reference table from disk
        study = vc.frequency_table(corpus)
        reference = vc.read_frequency_table("reference.tsv")
        keywords = vc.compute_keywords(study, reference)

        lines = vc.concordance(corpus, "querência", left_window=4)
        bigrams = vc.ngrams(corpus, n=2)
        spread = vc.dispersion(corpus, "pampa")
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Sequence

import polars as pl
from loguru import logger

from .analyzers import (
    DispersionAnalyzer,
    KeywordAnalyzer,
    KWICAnalyzer,
    NGramAnalyzer,
    SubcorpusAnalyzer,
)
from .config import CONFIG
from .corpus import Corpus
from .frequency import frequency_table_from_corpus
from .models import (
    ConcordanceLine,
    DispersionResult,
    FrequencyEntry,
    KeywordResult,
    NGramAnalysis,
    SubcorpusComparison,
    SubcorpusProfile,
)
from .performance import PerformanceMonitor
from .validation import validate_positive_int

# Initialize analyzer instances for use in wrapper functions
_keyword_analyzer = KeywordAnalyzer()
_kwic_analyzer = KWICAnalyzer()
_ngram_analyzer = NGramAnalyzer()
_disp_analyzer = DispersionAnalyzer()
_subcorpus_analyzer = SubcorpusAnalyzer(_keyword_analyzer)


def frequency_table(corpus: Corpus) -> List[FrequencyEntry]:
    """
    Generate a ranked frequency table from a corpus.

    :param corpus: A tokenized corpus
    :return: Frequency entries by descending frequency, with document ranges
        and frequencies per million tokens
    """
    return frequency_table_from_corpus(corpus)


def compute_keywords(
    study: List[FrequencyEntry],
    reference: List[FrequencyEntry],
    study_total: int = None,
    reference_total: int = None,
) -> List[KeywordResult]:
    """
    Score every word of a study table against a reference table.

    :param study: Study corpus frequency entries
    :param reference: Reference corpus frequency entries
    :param study_total: Study corpus size; defaults to the sum of the
        study frequencies
    :param reference_total: Reference corpus size; defaults to the sum of
        the reference frequencies
    :return: One KeywordResult per study word, in study-table order
    """
    return _keyword_analyzer.compute_keywords(
        study, reference, study_total, reference_total
    )


def keyness_table(
    study: List[FrequencyEntry],
    reference: List[FrequencyEntry],
    study_total: int = None,
    reference_total: int = None,
    min_ll: float = 0.0,
    sort: bool = True,
) -> pl.DataFrame:
    """
    Generate a keyness table comparing a study and a reference table.

    :param study: Study corpus frequency entries
    :param reference: Reference corpus frequency entries
    :param study_total: Study corpus size
    :param reference_total: Reference corpus size
    :param min_ll: Minimum log-likelihood of returned rows
    :param sort: Sort by descending log-likelihood
    :return: a polars DataFrame of frequencies, normalized frequencies, \
        log-likelihood, mutual information, p-values, effect direction \
            and significance bands
    """
    return _keyword_analyzer.keyness_table(
        study, reference, study_total, reference_total, min_ll, sort
    )


def concordance(
    corpus: Corpus, keyword: str, left_window: int = None, right_window: int = None
) -> List[ConcordanceLine]:
    """
    Generate a KWIC table with the keyword in the center.

    :param corpus: A tokenized corpus
    :param keyword: The word of interest
    :param left_window: Tokens of left context (default 5)
    :param right_window: Tokens of right context; defaults to left_window
    :return: Concordance lines in corpus order
    """
    return _kwic_analyzer.concordance(corpus, keyword, left_window, right_window)


def batch_concordance(
    corpus: Corpus,
    keywords: Sequence[str],
    left_window: int = None,
    right_window: int = None,
    n_workers: int = None,
) -> Dict[str, List[ConcordanceLine]]:
    """
    Generate concordances for several keywords.

    :param corpus: A tokenized corpus
    :param keywords: Words of interest
    :param left_window: Tokens of left context (default 5)
    :param right_window: Tokens of right context; defaults to left_window
    :param n_workers: Number of worker threads (default 1)
    :return: A dict from each keyword, as given, to its concordance lines, \
        in the order of ``keywords``
    """
    if n_workers is None:
        n_workers = CONFIG.DEFAULT_N_WORKERS
    validate_positive_int(n_workers, "n_workers", 1, "in batch_concordance")

    def run(keyword):
        return _kwic_analyzer.concordance(corpus, keyword, left_window, right_window)

    with PerformanceMonitor(f"Batch concordance ({len(keywords)} keywords)"):
        if n_workers == 1:
            results = [run(k) for k in keywords]
        else:
            with ThreadPoolExecutor(max_workers=n_workers) as executor:
                results = list(executor.map(run, keywords))

    logger.debug(
        "Batch concordance: {} lines for {} keywords",
        sum(len(r) for r in results),
        len(keywords),
    )
    return dict(zip(keywords, results))


def ngrams(
    corpus: Corpus, n: int = 2, min_frequency: int = None, max_results: int = None
) -> NGramAnalysis:
    """
    Generate n-gram frequencies of a specified length.

    :param corpus: A tokenized corpus
    :param n: An integer between 2 and 5 representing the size of the ngrams
    :param min_frequency: The minimum count of the ngrams returned (default 2)
    :param max_results: The maximum number of ngrams returned (default 500)
    :return: An NGramAnalysis with totals and the n-grams by descending \
        frequency
    """
    return _ngram_analyzer.ngrams(corpus, n, min_frequency, max_results)


def dispersion(corpus: Corpus, word: str) -> DispersionResult:
    """
    Measure the dispersion of a word across the corpus documents.

    :param corpus: A tokenized corpus
    :param word: The word of interest
    :return: A DispersionResult with Juilland's D, occurrence points \
        and a density band
    """
    return _disp_analyzer.dispersion(corpus, word)


def dispersions_table(
    corpus: Corpus, words: Sequence[str], n_workers: int = None
) -> pl.DataFrame:
    """
    Generate a table of dispersion measures for several words.

    :param corpus: A tokenized corpus
    :param words: Words to measure
    :param n_workers: Number of worker threads (default 1)
    :return: a polars DataFrame with absolute frequencies, document counts, \
        ranges, Juilland's D, Gries's DP and density bands
    """
    return _disp_analyzer.dispersions_table(corpus, words, n_workers)


def subcorpus_profiles(corpus: Corpus) -> List[SubcorpusProfile]:
    """
    Profile the songs of each artist.

    :param corpus: A tokenized corpus
    :return: One SubcorpusProfile per artist, largest first
    """
    return _subcorpus_analyzer.subcorpus_profiles(corpus)


def compare_subcorpora(
    corpus: Corpus,
    artist_a: str,
    artist_b: str = None,
    top_n: int = None,
    min_ll: float = None,
) -> SubcorpusComparison:
    """
    Compare an artist with another artist or with the rest of the corpus.

    :param corpus: A tokenized corpus
    :param artist_a: The artist under study
    :param artist_b: The comparison artist; None for the rest of the corpus
    :param top_n: Keywords kept for each side (default 30)
    :param min_ll: Minimum log-likelihood of keywords (default 3.84)
    :return: A SubcorpusComparison with profiles, exclusive and shared \
        vocabulary and the keywords of each side
    """
    return _subcorpus_analyzer.compare_subcorpora(
        corpus, artist_a, artist_b, top_n, min_ll
    )
