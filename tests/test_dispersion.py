"""
Tests for dispersion measures.
"""

import numpy as np
import pytest

import versocorpus as vc
from versocorpus import (
    Corpus,
    DispersionAnalyzer,
    ParameterValidationError,
    SongMetadata,
    classify_density,
)


def corpus_of(*documents):
    return Corpus.from_documents(
        (tokens, SongMetadata("Artist", f"Song {i}")) for i, tokens in enumerate(documents)
    )


class TestDispersion:
    """DispersionAnalyzer.dispersion via the functional API."""

    def test_single_document_with_word(self):
        result = vc.dispersion(corpus_of(["tchê", "bah", "tchê"]), "tchê")
        assert result.dispersion_coefficient == 1.0
        assert result.total_occurrences == 2
        assert result.documents_containing_word == 1
        assert result.density_class == "High"

    def test_absent_word(self, simple_corpus):
        with pytest.warns(vc.ValidationWarning):
            result = vc.dispersion(simple_corpus, "cidade")
        assert result.dispersion_coefficient == 0.0
        assert result.total_occurrences == 0
        assert result.occurrence_points == ()
        assert result.documents_containing_word == 0
        assert result.density_class == "Low"

    def test_empty_corpus(self, empty_corpus):
        result = vc.dispersion(empty_corpus, "tchê")
        assert result.dispersion_coefficient == 0.0
        assert result.total_occurrences == 0

    def test_perfectly_even_spread(self):
        result = vc.dispersion(corpus_of(["a", "x"], ["x", "a"], ["a", "y"]), "a")
        assert result.dispersion_coefficient == pytest.approx(1.0)

    def test_concentrated_word(self):
        result = vc.dispersion(corpus_of(["a", "a", "a", "a"], ["b"], ["c"], ["d"]), "a")
        # v = [4, 0, 0, 0]: mean 1, population std sqrt(3), k - 1 = 3
        assert result.dispersion_coefficient == pytest.approx(0.0)
        assert result.density_class == "Low"

    def test_juillands_d_value(self):
        result = vc.dispersion(corpus_of(["a", "a", "a"], ["a", "z"]), "a")
        v = np.array([3, 1])
        expected = 1 - (np.std(v) / v.mean()) / np.sqrt(len(v) - 1)
        assert result.dispersion_coefficient == pytest.approx(expected)
        assert result.dispersion_coefficient == pytest.approx(0.5)
        assert result.density_class == "Medium"

    def test_occurrence_points(self, simple_corpus):
        result = vc.dispersion(simple_corpus, "Pampa")
        assert result.word == "pampa"
        assert [p.absolute_position for p in result.occurrence_points] == [4, 6]
        assert [p.document_index for p in result.occurrence_points] == [0, 1]
        assert [p.normalized_position for p in result.occurrence_points] == [
            pytest.approx(4 / 15),
            pytest.approx(6 / 15),
        ]
        assert result.occurrence_points[1].source_document.title == "Galpão Crioulo"

    def test_points_are_within_unit_interval(self, sample_corpus):
        result = vc.dispersion(sample_corpus, "o")
        assert all(0.0 <= p.normalized_position < 1.0 for p in result.occurrence_points)

    @pytest.mark.parametrize("word", ["", "  ", None])
    def test_invalid_word(self, simple_corpus, word):
        with pytest.raises(ParameterValidationError):
            vc.dispersion(simple_corpus, word)

    @pytest.mark.parametrize(
        "d, expected",
        [(1.0, "High"), (0.71, "High"), (0.7, "Medium"), (0.41, "Medium"), (0.4, "Low"), (0.0, "Low")],
    )
    def test_density_bands(self, d, expected):
        assert classify_density(d) == expected


class TestDispersionsTable:
    """Dispersion measures for several words."""

    def test_structure_and_order(self, simple_corpus):
        df = vc.dispersions_table(simple_corpus, ["saudade", "tchê", "cidade"])
        assert df.columns == [
            "word",
            "total_occurrences",
            "documents_containing_word",
            "range",
            "juillands_d",
            "dp",
            "density_class",
        ]
        assert df.get_column("word").to_list() == ["saudade", "tchê", "cidade"]

    def test_values_agree_with_dispersion(self, simple_corpus):
        df = vc.dispersions_table(simple_corpus, ["saudade", "do"])
        for row in df.iter_rows(named=True):
            result = vc.dispersion(simple_corpus, row["word"])
            assert row["juillands_d"] == pytest.approx(result.dispersion_coefficient)
            assert row["total_occurrences"] == result.total_occurrences
            assert row["density_class"] == result.density_class

    def test_range_and_dp(self, simple_corpus):
        df = vc.dispersions_table(simple_corpus, ["galpão", "cidade"])
        galpao, cidade = df.iter_rows(named=True)
        assert galpao["range"] == pytest.approx(100 / 3)
        # sizes 5, 6, 4 of 15 tokens; all occurrences in the last document
        assert galpao["dp"] == pytest.approx((5 / 15 + 6 / 15 + (1 - 4 / 15)) / 2)
        assert cidade["dp"] is None
        assert cidade["juillands_d"] == 0.0

    def test_threaded_table_matches_serial(self, sample_corpus):
        words = ["tchê", "saudade", "pampa", "coração", "mate", "fole", "bailanta"]
        analyzer = DispersionAnalyzer()
        serial = analyzer.dispersions_table(sample_corpus, words)
        threaded = analyzer.dispersions_table(sample_corpus, words, n_workers=3)
        assert serial.equals(threaded)

    def test_invalid_worker_count(self, simple_corpus):
        with pytest.raises(ParameterValidationError):
            vc.dispersions_table(simple_corpus, ["tchê"], n_workers=0)
