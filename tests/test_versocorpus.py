# This code is a test suite for the versocorpus library,
# running the public API end to end on the bundled sample data.

import unittest
import polars as pl
import versocorpus as vc
from versocorpus.data import load_sample_corpus, load_sample_tables


class TestCorpusAnalysis(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        # Parse the sample lyrics once for all tests
        cls.corpus = load_sample_corpus()
        cls.study, cls.reference = load_sample_tables()

    def test_sample_corpus(self):
        self.assertIsInstance(self.corpus, vc.Corpus)
        self.assertEqual(len(self.corpus), 4)
        self.assertGreater(self.corpus.total_tokens, 0)

    def test_frequency_table(self):
        freq = vc.frequency_table(self.corpus)
        self.assertEqual(vc.total_tokens(freq), self.corpus.total_tokens)
        self.assertEqual(freq[0].rank, 1)
        self.assertGreaterEqual(freq[0].frequency, freq[-1].frequency)

    def test_compute_keywords(self):
        results = vc.compute_keywords(self.study, self.reference)
        self.assertEqual(len(results), len(self.study))
        by_word = {r.word: r for r in results}
        self.assertEqual(by_word["tchê"].significance, "High")
        self.assertGreater(by_word["tchê"].mutual_information, 0)
        self.assertLess(by_word["casa"].mutual_information, 0)

    def test_keywords_from_corpus_table(self):
        # corpus-derived study table against the bundled reference table
        results = vc.compute_keywords(vc.frequency_table(self.corpus), self.reference)
        self.assertTrue(all(r.log_likelihood >= 0 for r in results))

    def test_concordance(self):
        lines = vc.concordance(self.corpus, "saudade", left_window=2)
        self.assertEqual(len(lines), 3)
        for line in lines:
            self.assertEqual(line.keyword, "saudade")
            self.assertIn("saudade", line.line)

    def test_ngrams(self):
        trigrams = vc.ngrams(self.corpus, n=3, min_frequency=1)
        self.assertEqual(trigrams.n, 3)
        self.assertEqual(trigrams.unique_ngrams, len(trigrams.ngrams))
        self.assertTrue(all(len(e.tokens) == 3 for e in trigrams.ngrams))

    def test_dispersion(self):
        result = vc.dispersion(self.corpus, "pampa")
        self.assertEqual(result.documents_containing_word, 4)
        self.assertEqual(result.density_class, "High")

    def test_dispersions_table(self):
        df = vc.dispersions_table(self.corpus, ["pampa", "bailanta"])
        self.assertIsInstance(df, pl.DataFrame)
        self.assertEqual(df.height, 2)
        self.assertIn("juillands_d", df.columns)

    def test_subcorpus_profiles(self):
        profiles = vc.subcorpus_profiles(self.corpus)
        self.assertEqual(
            {p.artist for p in profiles}, {"Os Serranos", "Gaúcho da Fronteira"}
        )
        self.assertEqual(sum(p.total_songs for p in profiles), 4)

    def test_exports(self):
        csv_text = vc.export_concordance_csv(vc.concordance(self.corpus, "galpão"))
        self.assertTrue(csv_text.startswith("keyword,left_context,right_context"))
        self.assertEqual(len(csv_text.strip().splitlines()), 3)

    def test_direct_import_sample_data(self):
        from versocorpus.data import sample_lyrics, study_frequencies

        self.assertIsInstance(sample_lyrics, vc.Corpus)
        self.assertIsInstance(study_frequencies, list)
        self.assertIsInstance(study_frequencies[0], vc.FrequencyEntry)

    def test_unknown_sample_attribute(self):
        import versocorpus.data as data

        with self.assertRaises(AttributeError):
            data.not_a_dataset


if __name__ == "__main__":
    unittest.main()
