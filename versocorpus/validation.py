"""
Error handling and validation utilities for versocorpus.

This module provides the package's exception classes, warning categories and
the parameter validators shared by the analyzers. Validation errors are raised
before any computation starts; data-quality problems in the corpus itself are
never raised but filtered where they are found.

Exception Classes:
    VersoCorpusError: Base exception for all versocorpus errors
    CorpusValidationError: Corpus or frequency-table level problems
    DataFormatError: Input that cannot be interpreted at all
    ParameterValidationError: Function parameter validation
    FileSystemError: File and directory access validation
    ValidationWarning: Non-fatal validation warnings
    PerformanceWarning: Performance-related warnings

Validation Functions:
    validate_search_word: Validate a keyword or node word
    validate_window: Validate KWIC window sizes
    validate_ngram_size: Validate the n of an n-gram analysis
    validate_positive_int: Validate count-like parameters
    validate_corpus_totals: Validate LL/MI denominators
    validate_directory_path: Validate directory existence and access
    validate_text_files_in_directory: Validate text file availability
    warn_about_corpus_size: Warn for very large corpora
    suggest_alternatives_for_empty_results: Alternative suggestions

Example:
    Catching all package errors::

        import versocorpus as vc
        from versocorpus.validation import VersoCorpusError

        try:
            vc.ngrams(corpus, n=7)
        except VersoCorpusError as e:
            print(f"Analysis failed: {e}")
"""

import warnings
from typing import List, Union
from pathlib import Path

from .config import CONFIG, STATS


class VersoCorpusError(Exception):
    """
    Base exception class for all versocorpus errors.

    Catching this class handles every error raised deliberately by the
    package, leaving unrelated exceptions to propagate.
    """

    pass


class CorpusValidationError(VersoCorpusError):
    """
    Raised when a corpus or frequency table cannot support an analysis.

    Common causes:
        - Study or reference corpus with zero tokens
        - A subcorpus (artist) with no documents
    """

    pass


class DataFormatError(VersoCorpusError):
    """Raised when data format is incorrect."""

    pass


class ParameterValidationError(VersoCorpusError, ValueError):
    """Raised when function parameters are invalid."""

    pass


class FileSystemError(VersoCorpusError):
    """Raised when file system operations fail."""

    pass


class ValidationWarning(UserWarning):
    """Warning for potentially problematic but non-fatal issues."""

    pass


class PerformanceWarning(UserWarning):
    """Warning for performance-related issues."""

    pass


def validate_search_word(word: str, context: str = "") -> None:
    """
    Validate a keyword or node word before searching.

    :param word: The word to validate
    :param context: Context for error messages (e.g., "in concordance")
    """
    if not isinstance(word, str):
        raise ParameterValidationError(
            f"Search word must be a string {context}, "
            f"got {type(word).__name__}: {word!r}"
        )

    if word.strip() == "":
        raise ParameterValidationError(
            f"Search word is empty {context}. "
            "Please provide a non-blank word to search for."
        )


def validate_window(window: int, name: str = "window", context: str = "") -> None:
    """
    Validate a context window size.

    :param window: Number of tokens of context
    :param name: Parameter name for error messages
    :param context: Context for error messages
    """
    if isinstance(window, bool) or not isinstance(window, int):
        raise ParameterValidationError(
            f"{name} must be an integer {context}, "
            f"got {type(window).__name__}: {window!r}"
        )

    if window < 0:
        raise ParameterValidationError(
            f"{name} must be zero or positive {context}, got {window}."
        )


def validate_ngram_size(n: int, context: str = "") -> None:
    """
    Validate the n of an n-gram analysis.

    Values outside the supported range are rejected, never clamped.
    Single tokens are handled by frequency tables.

    :param n: N-gram length
    :param context: Context for error messages
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ParameterValidationError(
            f"n must be an integer {context}, got {type(n).__name__}: {n!r}"
        )

    if n < STATS.NGRAM_MIN_N or n > STATS.NGRAM_MAX_N:
        raise ParameterValidationError(
            f"n must be between {STATS.NGRAM_MIN_N} and {STATS.NGRAM_MAX_N} "
            f"{context}, got {n}. "
            "Use n=2 for bigrams, n=3 for trigrams, etc. "
            "For single words use a frequency table."
        )


def validate_positive_int(
    value: int, name: str, minimum: int = 1, context: str = ""
) -> None:
    """
    Validate an integer parameter with a lower bound.

    :param value: Parameter value
    :param name: Parameter name for error messages
    :param minimum: Smallest accepted value
    :param context: Context for error messages
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParameterValidationError(
            f"{name} must be an integer {context}, "
            f"got {type(value).__name__}: {value!r}"
        )

    if value < minimum:
        raise ParameterValidationError(
            f"{name} must be at least {minimum} {context}, got {value}."
        )


def validate_corpus_totals(
    study_total: Union[int, float],
    reference_total: Union[int, float],
    context: str = "",
) -> None:
    """
    Validate the corpus sizes used as LL/MI denominators.

    :param study_total: Total tokens in the study corpus
    :param reference_total: Total tokens in the reference corpus
    :param context: Context for error messages
    """
    if study_total <= 0:
        raise CorpusValidationError(
            f"Study corpus has no tokens {context} (total = {study_total}). "
            "Keyword statistics need a non-empty study corpus."
        )

    if reference_total <= 0:
        raise CorpusValidationError(
            f"Reference corpus has no tokens {context} "
            f"(total = {reference_total}). "
            "Keyword statistics need a non-empty reference corpus."
        )


def validate_directory_path(directory: Union[str, Path], context: str = "") -> Path:
    """
    Validate directory path and provide helpful error messages.

    :param directory: Directory path to validate
    :param context: Context for error messages
    :return: Validated Path object
    """
    if directory is None:
        raise FileSystemError(
            f"Directory path is None {context}. "
            "Please provide a valid directory path."
        )

    if isinstance(directory, str) and directory.strip() == "":
        raise FileSystemError(
            f"Directory path is empty {context}. "
            "Please provide a valid directory path."
        )

    path = Path(directory)

    if not path.exists():
        raise FileSystemError(
            f"Directory does not exist {context}: {path}\n"
            "Please check the path and ensure the directory exists."
        )

    if not path.is_dir():
        raise FileSystemError(
            f"Path is not a directory {context}: {path}\n"
            "Please provide a path to a directory, not a file."
        )

    return path


def validate_text_files_in_directory(directory: Path, context: str = "") -> List[Path]:
    """
    Validate that directory contains text files.

    :param directory: Directory to check
    :param context: Context for error messages
    :return: Sorted list of text file paths
    """
    text_files = sorted(directory.glob("*.txt"))

    if len(text_files) == 0:
        other_files = list(directory.glob("*"))
        error_msg = f"No .txt files found in directory {context}: {directory}\n"

        if len(other_files) == 0:
            error_msg += "The directory is empty."
        else:
            error_msg += (
                f"Found {len(other_files)} files, but none with .txt extension.\n"
                "Only .txt files are supported."
            )

        raise FileSystemError(error_msg)

    return text_files


def warn_about_corpus_size(document_count: int, context: str = "") -> None:
    """Warn when a corpus is large enough to make analyses slow."""
    if document_count > CONFIG.LARGE_CORPUS_THRESHOLD:
        warnings.warn(
            f"Large corpus detected ({document_count:,} documents) {context}. "
            "Consider filtering the corpus or running analyses in parallel.",
            PerformanceWarning,
        )


def suggest_alternatives_for_empty_results(operation: str, **kwargs):
    """Provide suggestions when operations return empty results."""
    suggestions = []

    if operation == "ngrams":
        min_freq = kwargs.get("min_frequency", CONFIG.NGRAM_MIN_FREQUENCY)
        if min_freq > 1:
            suggestions.append(f"Try reducing min_frequency (currently {min_freq})")

        n = kwargs.get("n", 2)
        if n > 2:
            suggestions.append(f"Try using a smaller n (currently {n})")

    elif operation in ("concordance", "dispersion"):
        word = kwargs.get("word", "")
        if word:
            suggestions.append(f"Check if '{word}' exists in your corpus")
            suggestions.append(
                "Matching is exact on lower-cased tokens; "
                "try another inflected form"
            )

    elif operation == "keywords":
        min_ll = kwargs.get("min_ll", 0.0)
        if min_ll > 0:
            suggestions.append(f"Try reducing min_ll (currently {min_ll})")

    if suggestions:
        warning_msg = f"No results found for {operation}. Suggestions:\n"
        warning_msg += "\n".join(f"- {s}" for s in suggestions)
        warnings.warn(warning_msg, ValidationWarning)
