"""
Frequency table builder.

Frequency tables arrive as tab-separated exports with the columns::

    Type  POS  Headword  Rank  Freq  Range  NormFreq  NormRange

Real exports contain malformed rows. Rows without a headword or with a
non-positive frequency are dropped. Numeric fields are read from their
leading digits, so "12abc" is 12, and fields with no leading number
become 0. The builder never raises on row-level problems.

Example:
    Parsing a table::

        from versocorpus.frequency import parse_frequency_table, total_tokens

        entries = parse_frequency_table(tsv_text)
        n1 = total_tokens(entries)
"""

from pathlib import Path
from typing import List, Union

import polars as pl

from .config import CONFIG
from .corpus import Corpus
from .models import FrequencyEntry
from .performance import PerformanceMonitor
from .validation import DataFormatError, FileSystemError

TABLE_COLUMNS = [
    "type",
    "pos",
    "headword",
    "rank",
    "frequency",
    "range",
    "norm_frequency",
    "norm_range",
]

ENTRY_SCHEMA = {
    "headword": pl.String,
    "rank": pl.Int64,
    "frequency": pl.Int64,
    "range": pl.Int64,
    "norm_frequency": pl.Float64,
    "norm_range": pl.Float64,
}


def _leading_number(column: str, pattern: str) -> pl.Expr:
    return (
        pl.col(column)
        .str.extract(pattern, 1)
        .cast(pl.Float64, strict=False)
        .fill_nan(None)
    )


def _read_int(column: str) -> pl.Expr:
    # "3.7" -> 3, "12abc" -> 12, "abc" -> 0
    return (
        _leading_number(column, r"^\s*(-?\d+)")
        .cast(pl.Int64, strict=False)
        .fill_null(0)
    )


def _read_float(column: str) -> pl.Expr:
    return _leading_number(
        column, r"^\s*(-?\d*\.?\d+(?:[eE][+-]?\d+)?)"
    ).fill_null(0.0)


def _assign_ranks(df: pl.DataFrame) -> pl.DataFrame:
    """Rank by descending frequency; equal frequencies keep input order."""
    return (
        df.with_row_index("_order")
        .sort(["frequency", "_order"], descending=[True, False])
        .with_row_index("_rank", offset=1)
        .sort("_order")
        .with_columns(pl.col("_rank").cast(pl.Int64).alias("rank"))
        .drop(["_order", "_rank"])
    )


def _frame_to_entries(df: pl.DataFrame) -> List[FrequencyEntry]:
    return [FrequencyEntry(**row) for row in df.iter_rows(named=True)]


def parse_frequency_table(text: str, rerank: bool = False) -> List[FrequencyEntry]:
    """
    Parse a tab-separated frequency table into entries.

    The first line is a header and is skipped. Headwords are lower-cased and
    stripped. When a headword appears more than once the last row wins and
    keeps that row's position.

    Source ranks are kept as they are. They are recomputed when ``rerank`` is
    True or when any kept row has no positive rank; recomputed ranks follow
    descending frequency, with ties in input order.

    :param text: Table contents
    :param rerank: Recompute ranks from frequencies
    :return: Entries in file order
    """
    if not isinstance(text, str):
        raise DataFormatError(
            f"Frequency table must be text, got {type(text).__name__}."
        )

    rows = []
    for line in text.splitlines()[1:]:
        if not line.strip():
            continue
        fields = line.split("\t")[: len(TABLE_COLUMNS)]
        fields += [None] * (len(TABLE_COLUMNS) - len(fields))
        rows.append(fields)

    with PerformanceMonitor("Frequency table parsing"):
        df = (
            pl.DataFrame(
                rows,
                schema=[(name, pl.String) for name in TABLE_COLUMNS],
                orient="row",
            )
            .with_columns(
                pl.col("headword").str.strip_chars().str.to_lowercase(),
                _read_int("rank"),
                _read_int("frequency"),
                _read_int("range"),
                _read_float("norm_frequency"),
                _read_float("norm_range"),
            )
            .filter(
                pl.col("headword").is_not_null()
                & (pl.col("headword") != "")
                & (pl.col("frequency") > 0)
            )
            .unique(subset="headword", keep="last", maintain_order=True)
            .select(list(ENTRY_SCHEMA))
        )

        if rerank or (df.height > 0 and (df.get_column("rank") <= 0).any()):
            df = _assign_ranks(df)

    return _frame_to_entries(df)


def read_frequency_table(
    path: Union[str, Path], rerank: bool = False
) -> List[FrequencyEntry]:
    """
    Read a frequency table file.

    :param path: Path to a UTF-8 tab-separated file
    :param rerank: Recompute ranks from frequencies
    :return: Entries in file order
    """
    path = Path(path)
    if not path.is_file():
        raise FileSystemError(f"Frequency table file not found: {path}")
    return parse_frequency_table(path.read_text(encoding="utf-8"), rerank=rerank)


def total_tokens(entries: List[FrequencyEntry]) -> int:
    """Corpus size of a frequency table: the sum of its frequencies."""
    return sum(entry.frequency for entry in entries)


def unique_entries(entries: List[FrequencyEntry]) -> List[FrequencyEntry]:
    """Keep the last entry for each headword, at that entry's position."""
    last = {entry.headword: i for i, entry in enumerate(entries)}
    return [entry for i, entry in enumerate(entries) if last[entry.headword] == i]


def entries_to_frame(entries: List[FrequencyEntry]) -> pl.DataFrame:
    """Frequency entries as a polars DataFrame."""
    return pl.DataFrame(
        {
            "headword": [e.headword for e in entries],
            "rank": [e.rank for e in entries],
            "frequency": [e.frequency for e in entries],
            "range": [e.range for e in entries],
            "norm_frequency": [e.norm_frequency for e in entries],
            "norm_range": [e.norm_range for e in entries],
        },
        schema=ENTRY_SCHEMA,
    )


def frequency_table_from_corpus(corpus: Corpus) -> List[FrequencyEntry]:
    """
    Derive a frequency table from a tokenized corpus.

    ``range`` is the number of documents containing the word,
    ``norm_frequency`` is per million tokens and ``norm_range`` is the
    percentage of documents. Entries are ranked by descending frequency;
    equal frequencies keep first-seen order.

    :param corpus: A tokenized corpus
    :return: Ranked entries
    """
    if corpus.total_tokens == 0:
        return []

    with PerformanceMonitor("Corpus frequency table"):
        df = (
            corpus.to_frame()
            .group_by("token", maintain_order=True)
            .agg(
                pl.len().cast(pl.Int64).alias("frequency"),
                pl.col("doc_index").n_unique().cast(pl.Int64).alias("range"),
            )
            .rename({"token": "headword"})
            .with_columns(
                pl.col("frequency")
                .truediv(corpus.total_tokens)
                .mul(CONFIG.FREQUENCY_NORMALIZATION_FACTOR)
                .alias("norm_frequency"),
                pl.col("range").truediv(len(corpus)).mul(100).alias("norm_range"),
                pl.lit(0, dtype=pl.Int64).alias("rank"),
            )
        )
        df = _assign_ranks(df).sort("rank").select(list(ENTRY_SCHEMA))

    return _frame_to_entries(df)
