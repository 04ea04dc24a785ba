"""
Tokenized corpus model.

A :class:`Corpus` is an ordered, immutable sequence of :class:`Document`
objects. Each document stores its normalized tokens, the song metadata it
came from, and ``corpus_offset``: the number of tokens in all preceding
documents. Offsets let the analyzers compute corpus-wide positions without
flattening the token stream.

Example:
    Building a corpus::

        from versocorpus.corpus import Corpus, SongMetadata

        corpus = Corpus.from_documents([
            (["Tchê", "que", "saudade"], SongMetadata("Artist", "Song")),
            (["a", "querência"], {"artist": "Other", "title": "Another"}),
        ])
        corpus.total_tokens                # 5
        corpus.global_position(1, 1)       # 4
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, Union

import polars as pl

from .performance import ProgressTracker

MetadataLike = Union["SongMetadata", Mapping[str, Any], None]


def normalize_token(text: str) -> str:
    """Lower-case and strip a token or search word."""
    return text.strip().lower()


@dataclass(frozen=True)
class SongMetadata:
    """Attribution for one song. Opaque to the analyzers."""

    artist: str = ""
    title: str = ""
    album: Optional[str] = None
    composer: Optional[str] = None
    year: Optional[str] = None

    @classmethod
    def coerce(cls, value: MetadataLike) -> "SongMetadata":
        """Build metadata from an instance, a mapping or ``None``."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls(
            artist=value.get("artist") or "",
            title=value.get("title") or "",
            album=value.get("album"),
            composer=value.get("composer"),
            year=value.get("year"),
        )

    @property
    def year_number(self) -> Optional[int]:
        """The year as an integer, or None if absent or not numeric."""
        if self.year is None:
            return None
        try:
            return int(self.year)
        except ValueError:
            return None


@dataclass(frozen=True)
class Document:
    """One song: its tokens, metadata and position in the corpus."""

    tokens: Tuple[str, ...]
    metadata: SongMetadata = field(default_factory=SongMetadata)
    corpus_offset: int = 0

    @property
    def token_count(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class Corpus:
    """
    An immutable, ordered collection of documents.

    Use :meth:`from_documents` rather than the constructor; it normalizes
    tokens and computes every document's offset in one pass.

    Attributes:
        documents: Documents in insertion order
        total_tokens: Sum of all document token counts
    """

    documents: Tuple[Document, ...] = ()
    total_tokens: int = 0

    @classmethod
    def from_documents(
        cls, pairs: Iterable[Tuple[Optional[Sequence[str]], MetadataLike]]
    ) -> "Corpus":
        """
        Build a corpus from ``(tokens, metadata)`` pairs.

        Tokens are lower-cased and stripped; tokens that are empty afterwards
        are dropped, as are entries that are not strings. A ``None`` token list
        is treated as an empty document.

        :param pairs: Iterable of (token sequence, metadata) pairs
        :return: A new Corpus
        """
        documents = []
        offset = 0
        for tokens, metadata in pairs:
            normalized = tuple(
                t
                for t in (
                    normalize_token(tok) for tok in tokens or () if isinstance(tok, str)
                )
                if t
            )
            documents.append(
                Document(normalized, SongMetadata.coerce(metadata), offset)
            )
            offset += len(normalized)
        return cls(tuple(documents), offset)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def document_at(self, index: int) -> Document:
        """Return the document at ``index`` (IndexError when out of range)."""
        return self.documents[index]

    def global_position(self, document_index: int, local_index: int) -> int:
        """
        Corpus-wide position of a token.

        :param document_index: Index of the document
        :param local_index: Index of the token within the document
        :return: ``corpus_offset[document_index] + local_index``
        """
        if document_index < 0 or document_index >= len(self.documents):
            raise IndexError(
                f"Document index {document_index} out of range for corpus "
                f"with {len(self.documents)} documents"
            )
        document = self.documents[document_index]
        if local_index < 0 or local_index >= document.token_count:
            raise IndexError(
                f"Token index {local_index} out of range for document "
                f"{document_index} with {document.token_count} tokens"
            )
        return document.corpus_offset + local_index

    def filter(
        self,
        artists: Optional[Sequence[str]] = None,
        albums: Optional[Sequence[str]] = None,
        year_start: Optional[int] = None,
        year_end: Optional[int] = None,
    ) -> "Corpus":
        """
        Return a new corpus restricted by metadata.

        Empty filter lists are ignored. Documents without a usable year
        pass the year filters.

        :param artists: Keep only these artists
        :param albums: Keep only these albums
        :param year_start: Drop songs released before this year
        :param year_end: Drop songs released after this year
        :return: A new Corpus with recomputed offsets
        """

        def keep(document: Document) -> bool:
            meta = document.metadata
            if artists and meta.artist not in artists:
                return False
            if albums and meta.album not in albums:
                return False
            year = meta.year_number
            if year_start is not None and year is not None and year < year_start:
                return False
            if year_end is not None and year is not None and year > year_end:
                return False
            return True

        return Corpus.from_documents(
            (doc.tokens, doc.metadata) for doc in self.documents if keep(doc)
        )

    def to_frame(self) -> pl.DataFrame:
        """
        One row per token.

        :return: A polars DataFrame with columns ``doc_index``, ``artist``,
            ``title``, ``position`` (global) and ``token``
        """
        doc_index, artists, titles, positions, tokens = [], [], [], [], []
        tracker = ProgressTracker(len(self.documents), "Building token table")
        for i, document in enumerate(self.documents):
            count = document.token_count
            doc_index.extend([i] * count)
            artists.extend([document.metadata.artist] * count)
            titles.extend([document.metadata.title] * count)
            positions.extend(
                range(document.corpus_offset, document.corpus_offset + count)
            )
            tokens.extend(document.tokens)
            tracker.update()
        tracker.finish()

        return pl.DataFrame(
            {
                "doc_index": doc_index,
                "artist": artists,
                "title": titles,
                "position": positions,
                "token": tokens,
            },
            schema={
                "doc_index": pl.UInt32,
                "artist": pl.String,
                "title": pl.String,
                "position": pl.UInt64,
                "token": pl.String,
            },
        )
