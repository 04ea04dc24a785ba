"""
Property-based tests for versocorpus using hypothesis.

This module contains property-based tests that generate random inputs
to check the statistical and structural invariants of the analyzers.
"""

import warnings

from hypothesis import given, settings, strategies as st

import versocorpus as vc
from versocorpus import FrequencyEntry, log_likelihood, mutual_information

from conftest import corpora, words

counts = st.integers(min_value=0, max_value=10**6)
sizes = st.integers(min_value=1, max_value=10**7)


def quietly(func, *args, **kwargs):
    # empty-result suggestions are irrelevant here
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", vc.ValidationWarning)
        return func(*args, **kwargs)


class TestKeywordProperties:
    @given(o1=counts, n1=sizes, o2=counts, n2=sizes)
    def test_log_likelihood_is_never_negative(self, o1, n1, o2, n2):
        assert log_likelihood(o1, n1, o2, n2) >= 0.0

    @given(o1=counts, n1=sizes, o2=counts, n2=sizes)
    def test_log_likelihood_is_symmetric_in_the_corpora(self, o1, n1, o2, n2):
        forward = log_likelihood(o1, n1, o2, n2)
        backward = log_likelihood(o2, n2, o1, n1)
        assert abs(forward - backward) <= 1e-9 * max(1.0, forward)

    @given(
        o1=st.integers(min_value=1, max_value=1000),
        o2=st.integers(min_value=1, max_value=1000),
        n1=st.integers(min_value=1000, max_value=10**6),
        n2=st.integers(min_value=1000, max_value=10**6),
    )
    def test_mutual_information_sign_follows_relative_frequency(self, o1, n1, o2, n2):
        mi = mutual_information(o1, n1, o2, n2)
        if o1 / n1 > o2 / n2:
            assert mi > 0
        elif o1 / n1 < o2 / n2:
            assert mi < 0

    @given(
        study=st.dictionaries(words, st.integers(min_value=1, max_value=500), min_size=1),
        reference=st.dictionaries(words, st.integers(min_value=1, max_value=500), min_size=1),
    )
    def test_one_result_per_study_word(self, study, reference):
        study_entries = [FrequencyEntry(w, i + 1, f) for i, (w, f) in enumerate(study.items())]
        reference_entries = [
            FrequencyEntry(w, i + 1, f) for i, (w, f) in enumerate(reference.items())
        ]
        results = vc.compute_keywords(study_entries, reference_entries)

        assert [r.word for r in results] == list(study)
        assert all(r.log_likelihood >= 0 for r in results)
        assert all(r.reference_frequency == reference.get(r.word, 0) for r in results)


class TestConcordanceProperties:
    @given(corpus=corpora(min_documents=1), word=words, left=st.integers(0, 8), right=st.integers(0, 8))
    @settings(max_examples=50)
    def test_window_lengths(self, corpus, word, left, right):
        lines = quietly(vc.concordance, corpus, word, left_window=left, right_window=right)

        expected = [
            (doc.token_count, i)
            for doc in corpus
            for i, token in enumerate(doc.tokens)
            if token == word
        ]
        assert len(lines) == len(expected)
        for line, (length, i) in zip(lines, expected):
            assert line.position_in_document == i
            assert len(line.left_context.split()) == min(i, left)
            assert len(line.right_context.split()) == min(length - i - 1, right)


class TestNGramProperties:
    @given(corpus=corpora(), n=st.integers(2, 5))
    @settings(max_examples=50)
    def test_coverage(self, corpus, n):
        analysis = quietly(vc.ngrams, corpus, n=n, min_frequency=1, max_results=10**6)

        assert analysis.total_ngrams == sum(max(0, d.token_count - n + 1) for d in corpus)
        assert sum(e.frequency for e in analysis.ngrams) == analysis.total_ngrams
        assert analysis.unique_ngrams == len(analysis.ngrams)

    @given(corpus=corpora(), min_frequency=st.integers(1, 4), max_results=st.integers(0, 5))
    @settings(max_examples=50)
    def test_filter_sort_and_samples(self, corpus, min_frequency, max_results):
        analysis = quietly(
            vc.ngrams, corpus, n=2, min_frequency=min_frequency, max_results=max_results
        )
        frequencies = [e.frequency for e in analysis.ngrams]

        assert len(frequencies) <= max_results
        assert all(f >= min_frequency for f in frequencies)
        assert frequencies == sorted(frequencies, reverse=True)
        assert all(len(e.occurrences) == min(e.frequency, 10) for e in analysis.ngrams)


class TestDispersionProperties:
    @given(corpus=corpora(), word=words)
    @settings(max_examples=50)
    def test_bounds(self, corpus, word):
        result = quietly(vc.dispersion, corpus, word)

        assert 0.0 <= result.dispersion_coefficient <= 1.0
        assert result.total_occurrences == len(result.occurrence_points)
        assert all(0.0 <= p.normalized_position < 1.0 for p in result.occurrence_points)
        if result.total_occurrences == 0:
            assert result.dispersion_coefficient == 0.0
        elif len(corpus) == 1:
            assert result.dispersion_coefficient == 1.0
