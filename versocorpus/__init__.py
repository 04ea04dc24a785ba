"""
versocorpus: Corpus linguistics tools for song lyric collections.

This package parses full-text lyric corpora into tokenized documents with
song metadata and provides keyword (log-likelihood and mutual information),
concordance, n-gram, dispersion and artist subcorpus analyses, with CSV
export of the results.

Logging goes through loguru and is disabled by default; call
:func:`enable_logging` to see it.
"""

from loguru import logger

# Core analysis functions
from .corpus_analysis import (
    frequency_table,
    compute_keywords,
    keyness_table,
    concordance,
    batch_concordance,
    ngrams,
    dispersion,
    dispersions_table,
    subcorpus_profiles,
    compare_subcorpora,
)

# Corpus model
from .corpus import Corpus, Document, SongMetadata, normalize_token

# Result types
from .models import (
    FrequencyEntry,
    KeywordResult,
    ConcordanceLine,
    NGramOccurrence,
    NGramEntry,
    NGramAnalysis,
    DispersionPoint,
    DispersionResult,
    SubcorpusProfile,
    SubcorpusComparison,
)

# Frequency tables
from .frequency import (
    parse_frequency_table,
    read_frequency_table,
    total_tokens,
    unique_entries,
)

# Utility functions
from .corpus_utils import (
    get_text_paths,
    readtext,
    read_lyrics_files,
    corpus_from_folder,
)

# Export
from .exports import (
    keywords_to_frame,
    concordance_to_frame,
    ngrams_to_frame,
    dispersion_to_frame,
    export_keywords_csv,
    export_concordance_csv,
    export_ngrams_csv,
    export_dispersion_csv,
)

# Modular analyzers and processors
from .analyzers import (
    KeywordAnalyzer,
    KWICAnalyzer,
    NGramAnalyzer,
    DispersionAnalyzer,
    SubcorpusAnalyzer,
    log_likelihood,
    mutual_information,
    classify_significance,
    classify_density,
)

from .processors import (
    TextPreprocessor,
    LyricsTokenizer,
    SongBlockParser,
)

# Configuration
from .config import ProcessingConfig, StatisticalConstants, RegexPatterns
from .logging_config import enable_logging, disable_logging

# Performance utilities
from .performance import (
    AnnotationCache,
    ProgressTracker,
    PerformanceMonitor,
)

# Validation and error handling
from .validation import (
    # Exception classes
    VersoCorpusError,
    CorpusValidationError,
    DataFormatError,
    ParameterValidationError,
    FileSystemError,
    ValidationWarning,
    PerformanceWarning,
)

# Package metadata
__version__ = "0.1.0"
__author__ = "David Brown"
__email__ = "dwb2@andrew.cmu.edu"

# Library logging is silent until enable_logging() is called
logger.disable("versocorpus")

# Public API - define what gets imported with "from versocorpus import *"
__all__ = [
    # Core analysis functions
    "frequency_table",
    "compute_keywords",
    "keyness_table",
    "concordance",
    "batch_concordance",
    "ngrams",
    "dispersion",
    "dispersions_table",
    "subcorpus_profiles",
    "compare_subcorpora",
    # Corpus model
    "Corpus",
    "Document",
    "SongMetadata",
    "normalize_token",
    # Result types
    "FrequencyEntry",
    "KeywordResult",
    "ConcordanceLine",
    "NGramOccurrence",
    "NGramEntry",
    "NGramAnalysis",
    "DispersionPoint",
    "DispersionResult",
    "SubcorpusProfile",
    "SubcorpusComparison",
    # Frequency tables
    "parse_frequency_table",
    "read_frequency_table",
    "total_tokens",
    "unique_entries",
    # Utility functions
    "get_text_paths",
    "readtext",
    "read_lyrics_files",
    "corpus_from_folder",
    # Export
    "keywords_to_frame",
    "concordance_to_frame",
    "ngrams_to_frame",
    "dispersion_to_frame",
    "export_keywords_csv",
    "export_concordance_csv",
    "export_ngrams_csv",
    "export_dispersion_csv",
    # Analyzers and processors
    "KeywordAnalyzer",
    "KWICAnalyzer",
    "NGramAnalyzer",
    "DispersionAnalyzer",
    "SubcorpusAnalyzer",
    "log_likelihood",
    "mutual_information",
    "classify_significance",
    "classify_density",
    "TextPreprocessor",
    "LyricsTokenizer",
    "SongBlockParser",
    # Configuration
    "ProcessingConfig",
    "StatisticalConstants",
    "RegexPatterns",
    "enable_logging",
    "disable_logging",
    # Performance utilities
    "AnnotationCache",
    "ProgressTracker",
    "PerformanceMonitor",
    # Validation and error handling
    "VersoCorpusError",
    "CorpusValidationError",
    "DataFormatError",
    "ParameterValidationError",
    "FileSystemError",
    "ValidationWarning",
    "PerformanceWarning",
]
