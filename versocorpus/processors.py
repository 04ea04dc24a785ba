"""
Text processing classes for lyric corpora.

These classes turn raw lyric files into a tokenized
:class:`~versocorpus.corpus.Corpus`. They are a convenience layer: the
analyzers accept any corpus built with ``Corpus.from_documents``, whatever
tokenizer produced it.

Classes:
    TextPreprocessor: Whitespace and quote normalization
    LyricsTokenizer: Word tokenization with a blank spaCy pipeline
    SongBlockParser: Parser for the full-text lyric corpus format

Example:
    Parsing a lyric file::

        from versocorpus.processors import SongBlockParser

        with open("corpus.txt", encoding="utf-8") as f:
            corpus = SongBlockParser().parse(f.read())

        print(len(corpus), corpus.total_tokens)
"""

import warnings
from typing import Iterable, List, Optional, Tuple

import spacy
from spacy.language import Language
from loguru import logger

from .config import CONFIG, PATTERNS
from .corpus import Corpus, SongMetadata
from .performance import PerformanceMonitor
from .validation import DataFormatError, ValidationWarning

UNKNOWN_ARTIST = "Unknown"
UNTITLED = "Untitled"


class TextPreprocessor:
    """
    Handles text cleaning before tokenization.

    Accented characters are preserved: unlike ASCII folding, the lyric
    vocabulary depends on them ("tchê", "querência").

    Example:
        >>> TextPreprocessor.squish_whitespace("Hello    world\\n\\ttest")
        'Hello world test'
    """

    @staticmethod
    def squish_whitespace(text: str) -> str:
        """Normalize all whitespace runs to single spaces and strip."""
        return " ".join(text.split())

    @staticmethod
    def replace_curly_quotes(text: str) -> str:
        """
        Replace curly/smart quotes with straight ASCII quotes.

        Example:
            >>> TextPreprocessor.replace_curly_quotes("d’água")
            "d'água"
        """
        replacements = {
            "‘": "'",  # Left single quote
            "’": "'",  # Right single quote
            "“": '"',  # Left double quote
            "”": '"',  # Right double quote
        }

        for old, new in replacements.items():
            text = text.replace(old, new)
        return text

    def preprocess(self, text: str) -> str:
        """Apply all preprocessing steps to a text."""
        return self.squish_whitespace(self.replace_curly_quotes(text))


class LyricsTokenizer:
    """
    Splits lyric text into lower-cased word tokens.

    Uses the rule-based tokenizer of a blank spaCy pipeline, so no trained
    model has to be installed. Punctuation, whitespace and other tokens
    without a letter or digit are dropped.

    Attributes:
        language: spaCy language code (default "pt")
        batch_size: Texts per batch in :meth:`tokenize_many`
    """

    def __init__(self, language: str = None, batch_size: int = None):
        self.language = language or CONFIG.TOKENIZER_LANGUAGE
        self.batch_size = batch_size or CONFIG.TOKENIZER_BATCH_SIZE
        self.preprocessor = TextPreprocessor()
        self._nlp: Optional[Language] = None

    @property
    def nlp(self) -> Language:
        if self._nlp is None:
            self._nlp = spacy.blank(self.language)
        return self._nlp

    @staticmethod
    def _keep(text: str) -> bool:
        return any(ch.isalnum() for ch in text)

    def tokenize(self, text: str) -> List[str]:
        """Tokenize one text."""
        doc = self.nlp.make_doc(self.preprocessor.preprocess(text))
        return [tok.lower_ for tok in doc if self._keep(tok.text)]

    def tokenize_many(self, texts: Iterable[str]) -> List[List[str]]:
        """Tokenize several texts in batches."""
        cleaned = (self.preprocessor.preprocess(t) for t in texts)
        return [
            [tok.lower_ for tok in doc if self._keep(tok.text)]
            for doc in self.nlp.pipe(cleaned, batch_size=self.batch_size)
        ]


class SongBlockParser:
    """
    Parser for full-text lyric corpora.

    Songs are separated by lines of ten or more dashes. Each song block
    starts with a header in one of two layouts::

        Artist (Compositor: Name) - Album
        Title_Year
        lyrics...

    or, for collections without artist information::

        Title_Year
        lyrics...

    The composer part and the album are optional, as is the ``_Year``
    suffix. Blocks that are too short or have no words are skipped with a
    :class:`~versocorpus.validation.ValidationWarning`.
    """

    def __init__(self, tokenizer: LyricsTokenizer = None):
        self.tokenizer = tokenizer or LyricsTokenizer()

    @staticmethod
    def split_title_year(line: str) -> Tuple[str, Optional[str]]:
        """
        Split a ``Title_Year`` header line.

        Only a trailing all-digit part counts as a year, so underscores
        inside titles are kept.
        """
        title, separator, year = line.strip().rpartition(
            PATTERNS.TITLE_YEAR_SEPARATOR
        )
        if separator and year.strip().isdigit():
            return title.strip() or UNTITLED, year.strip()
        return line.strip() or UNTITLED, None

    @classmethod
    def parse_header(cls, lines: List[str]) -> Tuple[SongMetadata, List[str]]:
        """
        Read the metadata of a song block.

        :param lines: Non-empty, stripped lines of the block
        :return: The metadata and the remaining lyric lines
        """
        first = lines[0]
        if PATTERNS.ARTIST_ALBUM_SEPARATOR not in first and not PATTERNS.COMPOSER.search(
            first
        ):
            title, year = cls.split_title_year(first)
            return SongMetadata(artist=UNKNOWN_ARTIST, title=title, year=year), lines[1:]

        composer_match = PATTERNS.COMPOSER.search(first)
        composer = composer_match.group(1).strip() if composer_match else None

        artist_album = PATTERNS.COMPOSER_STRIP.sub(" ", first).strip()
        artist, _, album = artist_album.partition(PATTERNS.ARTIST_ALBUM_SEPARATOR)
        title, year = cls.split_title_year(lines[1])

        metadata = SongMetadata(
            artist=artist.strip() or UNKNOWN_ARTIST,
            title=title,
            album=album.strip() or None,
            composer=composer,
            year=year,
        )
        return metadata, lines[2:]

    def parse(self, text: str) -> Corpus:
        """
        Parse a full-text lyric corpus.

        :param text: Contents of one or more lyric files
        :return: A Corpus in file order
        """
        if not isinstance(text, str):
            raise DataFormatError(f"Lyric corpus must be text, got {type(text).__name__}.")

        blocks = [
            b.strip() for b in PATTERNS.BLOCK_SEPARATOR.split(text) if b.strip()
        ]
        logger.debug("Parsing lyric corpus: {} blocks found", len(blocks))

        headers = []
        lyrics = []
        for index, block in enumerate(blocks):
            lines = [line.strip() for line in block.splitlines() if line.strip()]
            if len(lines) < 2:
                warnings.warn(
                    f"Block {index} is too short to be a song and was skipped.",
                    ValidationWarning,
                )
                continue
            metadata, lyric_lines = self.parse_header(lines)
            headers.append(metadata)
            lyrics.append("\n".join(lyric_lines))

        with PerformanceMonitor("Lyric tokenization"):
            token_lists = self.tokenizer.tokenize_many(lyrics)

        pairs = []
        for metadata, tokens in zip(headers, token_lists):
            if not tokens:
                warnings.warn(
                    f"Song '{metadata.title}' has no words and was skipped.",
                    ValidationWarning,
                )
                continue
            pairs.append((tokens, metadata))

        corpus = Corpus.from_documents(pairs)
        logger.info(
            "Parsed {} songs, {} tokens", len(corpus), corpus.total_tokens
        )
        return corpus
