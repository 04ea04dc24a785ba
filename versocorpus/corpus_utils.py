"""
Misc. utility functions for reading corpora from disk.
"""

import os
from typing import List, Union
from pathlib import Path

import polars as pl

from .corpus import Corpus
from .frequency import read_frequency_table
from .processors import SongBlockParser
from .validation import (
    FileSystemError,
    validate_directory_path,
    validate_text_files_in_directory,
)

__all__ = [
    "get_text_paths",
    "readtext",
    "read_lyrics_files",
    "corpus_from_folder",
    "read_frequency_table",
]

# joins the contents of several lyric files
FILE_SEPARATOR = "\n" + "-" * 15 + "\n"


def get_text_paths(directory: Union[str, Path],
                   recursive=False) -> List[str]:
    """
    Gets a sorted list of full paths for all \
        text (TXT) files in the given directory.

    :param directory: A string represting a path to directory.
    :param recursive: Whether or not to \
        recursively search through subdirectories.
    :return: A list of paths to plain text (TXT) files.
    """
    path = validate_directory_path(directory, "in get_text_paths")
    full_paths = []
    if recursive is True:
        for root, dirs, files in os.walk(path):
            for file in files:
                if file.endswith('.txt'):
                    full_paths.append(os.path.join(root, file))
    else:
        for file in path.glob("*.txt"):
            full_paths.append(str(file))
    return sorted(full_paths)


def readtext(paths: List[Union[str, Path]]) -> pl.DataFrame:
    """
    Read in text (TXT) files from a list of paths \
        into a polars DataFrame with 'doc_id' and 'text' columns.

    :param paths: A list of paths to plain text (TXT) files.
    :return: A polars DataFrame with 'doc_id' and 'text' columns, \
        in the order of ``paths``.
    """
    doc_ids = []
    texts = []
    for path in paths:
        path = Path(path)
        if not path.is_file():
            raise FileSystemError(f"Text file not found: {path}")
        doc_ids.append(path.name)
        texts.append(path.read_text(encoding="utf-8"))
    return pl.DataFrame(
        {"doc_id": doc_ids, "text": texts},
        schema={"doc_id": pl.String, "text": pl.String},
    )


def read_lyrics_files(paths: List[Union[str, Path]],
                      parser: SongBlockParser = None) -> Corpus:
    """
    Read one or more lyric files into a single corpus.

    Files are concatenated in the given order, each one ending a song block.

    :param paths: Paths to UTF-8 lyric files.
    :param parser: The parser to use; a default SongBlockParser if None.
    :return: A Corpus.
    """
    parser = parser or SongBlockParser()
    texts = readtext(paths).get_column("text").to_list()
    return parser.parse(FILE_SEPARATOR.join(texts))


def corpus_from_folder(directory: Union[str, Path],
                       parser: SongBlockParser = None) -> Corpus:
    """
    A convenience function combining get_text_paths and \
        read_lyrics_files to build a corpus from a directory.

    :param directory: Path to a directory of lyric (TXT) files.
    :param parser: The parser to use; a default SongBlockParser if None.
    :return: A Corpus, with files read in name order.
    """
    path = validate_directory_path(directory, "in corpus_from_folder")
    text_files = validate_text_files_in_directory(path, "in corpus_from_folder")
    return read_lyrics_files(text_files, parser)
