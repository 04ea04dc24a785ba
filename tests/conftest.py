"""
Pytest configuration and shared fixtures for versocorpus tests.

This module provides shared test fixtures, utilities, and hypothesis
strategies for the versocorpus test suite.
"""

import shutil
import tempfile
from pathlib import Path

import polars as pl
import pytest
from hypothesis import strategies as st

from versocorpus import Corpus, FrequencyEntry, SongMetadata
from versocorpus.data import load_sample_corpus, load_sample_tables


# Test data paths
DATA_DIR = Path(__file__).parent.parent / "versocorpus" / "data"
SAMPLE_LYRICS = DATA_DIR / "sample_lyrics.txt"


@pytest.fixture(scope="session")
def simple_corpus():
    """Three short songs by two artists, already tokenized."""
    return Corpus.from_documents(
        [
            (
                ["Tchê", "que", "saudade", "do", "pampa"],
                SongMetadata("Os Serranos", "Querência Amada", "Tchê Guri", year="1985"),
            ),
            (
                ["o", "pampa", "e", "o", "mate", "tchê"],
                SongMetadata("Os Serranos", "Galpão Crioulo", "Tchê Guri", year="1987"),
            ),
            (
                ["saudade", "saudade", "do", "galpão"],
                SongMetadata("Gaúcho da Fronteira", "Fole Largo", "Gaiteiro", year="1991"),
            ),
        ]
    )


@pytest.fixture(scope="session")
def kwic_corpus():
    """Two documents: ["a","b","c"] and ["d","a","e"]."""
    return Corpus.from_documents(
        [
            (["a", "b", "c"], SongMetadata("Artist One", "First")),
            (["d", "a", "e"], SongMetadata("Artist Two", "Second")),
        ]
    )


@pytest.fixture(scope="session")
def empty_corpus():
    return Corpus.from_documents([])


@pytest.fixture(scope="session")
def sample_corpus():
    """The bundled sample lyrics, parsed with the spaCy tokenizer."""
    return load_sample_corpus()


@pytest.fixture(scope="session")
def sample_tables():
    """The bundled (study, reference) frequency tables."""
    return load_sample_tables()


@pytest.fixture
def tche_tables():
    """Study {"tchê": 5} and an empty reference, both of size 100."""
    return [FrequencyEntry("tchê", 1, 5)], []


@pytest.fixture
def temp_dir():
    """Create a temporary directory for file-based tests."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def lyrics_dir(temp_dir):
    """A directory with two lyric files and one unrelated file."""
    (temp_dir / "a_serranos.txt").write_text(
        "Os Serranos (Compositor: Edson Dutra) - Tchê Guri\n"
        "Querência Amada_1985\n"
        "Tchê que saudade da querência\n",
        encoding="utf-8",
    )
    (temp_dir / "b_fronteira.txt").write_text(
        "Gaúcho da Fronteira - Gaiteiro\n"
        "Fole Largo_1991\n"
        "O fole largo chora no galpão\n",
        encoding="utf-8",
    )
    (temp_dir / "notes.md").write_text("not lyrics", encoding="utf-8")
    return temp_dir


def assert_dataframe_structure(df: pl.DataFrame, expected_columns: list):
    """Assert that a DataFrame has exactly the expected columns, in order."""
    assert isinstance(df, pl.DataFrame)
    assert df.columns == expected_columns


# Hypothesis strategies

words = st.sampled_from(
    ["tchê", "pampa", "saudade", "mate", "galpão", "o", "a", "de", "querência"]
)

token_lists = st.lists(words, min_size=0, max_size=25)


@st.composite
def corpora(draw, min_documents=0, max_documents=6):
    """Random corpora over a small vocabulary."""
    documents = draw(
        st.lists(token_lists, min_size=min_documents, max_size=max_documents)
    )
    return Corpus.from_documents(
        (tokens, SongMetadata(f"Artist {i % 2}", f"Song {i}"))
        for i, tokens in enumerate(documents)
    )
