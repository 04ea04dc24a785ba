"""
Tabular export of analysis results.

Each result type converts to a polars DataFrame whose columns follow the
fields of the result, with song metadata flattened into ``artist``,
``title`` and ``album``. CSV output is written by polars: a header row, one
row per result, and RFC 4180 quoting of fields that contain the separator,
quotes or line breaks.

Example:
    Exporting concordance lines::

        from versocorpus.exports import export_concordance_csv

        csv_text = export_concordance_csv(lines)
        export_concordance_csv(lines, "saudade_kwic.csv")
"""

from pathlib import Path
from typing import List, Optional, Union

import polars as pl

from .models import ConcordanceLine, DispersionResult, KeywordResult, NGramAnalysis

KEYWORD_SCHEMA = {
    "word": pl.String,
    "study_frequency": pl.Int64,
    "reference_frequency": pl.Int64,
    "log_likelihood": pl.Float64,
    "mutual_information": pl.Float64,
    "significance": pl.String,
}

CONCORDANCE_SCHEMA = {
    "keyword": pl.String,
    "left_context": pl.String,
    "right_context": pl.String,
    "artist": pl.String,
    "title": pl.String,
    "album": pl.String,
    "position_in_document": pl.Int64,
}

NGRAM_SCHEMA = {
    "ngram": pl.String,
    "frequency": pl.Int64,
    "sample_context": pl.String,
    "sample_artist": pl.String,
    "sample_title": pl.String,
    "sample_position": pl.Int64,
}

DISPERSION_SCHEMA = {
    "word": pl.String,
    "normalized_position": pl.Float64,
    "absolute_position": pl.Int64,
    "artist": pl.String,
    "title": pl.String,
    "album": pl.String,
}


def keywords_to_frame(results: List[KeywordResult]) -> pl.DataFrame:
    """Keyword results, one row each."""
    return pl.DataFrame(
        [
            (
                r.word,
                r.study_frequency,
                r.reference_frequency,
                r.log_likelihood,
                r.mutual_information,
                r.significance,
            )
            for r in results
        ],
        schema=KEYWORD_SCHEMA,
        orient="row",
    )


def concordance_to_frame(lines: List[ConcordanceLine]) -> pl.DataFrame:
    """Concordance lines, one row each."""
    return pl.DataFrame(
        [
            (
                line.keyword,
                line.left_context,
                line.right_context,
                line.source_document.artist,
                line.source_document.title,
                line.source_document.album,
                line.position_in_document,
            )
            for line in lines
        ],
        schema=CONCORDANCE_SCHEMA,
        orient="row",
    )


def ngrams_to_frame(analysis: NGramAnalysis) -> pl.DataFrame:
    """N-grams, one row each, with their first retained sample."""
    rows = []
    for entry in analysis.ngrams:
        sample = entry.occurrences[0] if entry.occurrences else None
        rows.append(
            (
                entry.ngram,
                entry.frequency,
                sample.context if sample else None,
                sample.source_document.artist if sample else None,
                sample.source_document.title if sample else None,
                sample.position if sample else None,
            )
        )
    return pl.DataFrame(rows, schema=NGRAM_SCHEMA, orient="row")


def dispersion_to_frame(result: DispersionResult) -> pl.DataFrame:
    """Occurrence points of a dispersion result, one row each."""
    return pl.DataFrame(
        [
            (
                result.word,
                point.normalized_position,
                point.absolute_position,
                point.source_document.artist,
                point.source_document.title,
                point.source_document.album,
            )
            for point in result.occurrence_points
        ],
        schema=DISPERSION_SCHEMA,
        orient="row",
    )


def _write_csv(df: pl.DataFrame, path: Optional[Union[str, Path]]) -> Optional[str]:
    if path is None:
        return df.write_csv(quote_style="necessary")
    df.write_csv(Path(path), quote_style="necessary")
    return None


def export_keywords_csv(
    results: List[KeywordResult], path: Union[str, Path] = None
) -> Optional[str]:
    """
    Serialize keyword results as CSV.

    :param results: Keyword results
    :param path: Output file; when None the CSV text is returned
    :return: The CSV text, or None when written to ``path``
    """
    return _write_csv(keywords_to_frame(results), path)


def export_concordance_csv(
    lines: List[ConcordanceLine], path: Union[str, Path] = None
) -> Optional[str]:
    """Serialize concordance lines as CSV (see :func:`export_keywords_csv`)."""
    return _write_csv(concordance_to_frame(lines), path)


def export_ngrams_csv(
    analysis: NGramAnalysis, path: Union[str, Path] = None
) -> Optional[str]:
    """Serialize an n-gram analysis as CSV (see :func:`export_keywords_csv`)."""
    return _write_csv(ngrams_to_frame(analysis), path)


def export_dispersion_csv(
    result: DispersionResult, path: Union[str, Path] = None
) -> Optional[str]:
    """Serialize dispersion points as CSV (see :func:`export_keywords_csv`)."""
    return _write_csv(dispersion_to_frame(result), path)
