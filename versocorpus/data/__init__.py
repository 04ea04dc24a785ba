from importlib_resources import files as _files

sources = {
    "sample_lyrics": _files("versocorpus") / "data/sample_lyrics.txt",
    "study_frequencies": _files("versocorpus") / "data/study_frequencies.tsv",
    "reference_frequencies": _files("versocorpus") / "data/reference_frequencies.tsv",
}


def load_sample_corpus():
    """Parse the bundled sample lyrics into a Corpus."""
    from ..processors import SongBlockParser

    text = sources["sample_lyrics"].read_text(encoding="utf-8")
    return SongBlockParser().parse(text)


def load_sample_tables():
    """The bundled study and reference frequency tables."""
    from ..frequency import parse_frequency_table

    return tuple(
        parse_frequency_table(sources[k].read_text(encoding="utf-8"))
        for k in ("study_frequencies", "reference_frequencies")
    )


def __dir__():
    return list(sources)


def __getattr__(k):
    if k == "sample_lyrics":
        return load_sample_corpus()
    if k in sources:
        from ..frequency import parse_frequency_table

        return parse_frequency_table(sources[k].read_text(encoding="utf-8"))
    raise AttributeError(f"module {__name__!r} has no attribute {k!r}")
