from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

from linker.ql_normalize import normalize_text

# === Token Types ===

WORD = "word"
PUNCTUATION = "punctuation"
TEXT = "text"

TOKEN_TYPES = frozenset({WORD, PUNCTUATION, TEXT})


# === Token Nodes ===


@dataclass(frozen=True)
class TokenPosition:
    """Character offsets into the verse-local reconstructed text."""

    start: int = 0
    end: int = 0
    word_index: int = 0


@dataclass(frozen=True)
class TokenAlignment:
    """A token's claimed correspondence to an original-language token."""

    source_word_id: Optional[str] = None
    source_content: Optional[str] = None
    source_occurrence: Optional[int] = None
    strong: Optional[str] = None
    lemma: Optional[str] = None
    morph: Optional[str] = None


@dataclass(frozen=True)
class WordToken:
    """One lexical unit in a verse."""

    unique_id: str
    content: str
    type: str = WORD
    occurrence: int = 1
    total_occurrences: int = 1
    position: TokenPosition = field(default_factory=TokenPosition)
    alignment: Optional[TokenAlignment] = None
    verse_ref: str = ""

    @property
    def is_highlightable(self) -> bool:
        return self.type == WORD

    @property
    def strong(self) -> Optional[str]:
        return self.alignment.strong if self.alignment else None

    @property
    def lemma(self) -> Optional[str]:
        return self.alignment.lemma if self.alignment else None

    @property
    def owning_verse_ref(self) -> str:
        """
        Reference of the verse this token belongs to.

        Falls back to the prefix of ``unique_id`` (``"<verse>:<content>:<n>"``)
        when ingestion did not record ``verse_ref``.
        """
        if self.verse_ref:
            return self.verse_ref
        parts = self.unique_id.rsplit(":", 2)
        return parts[0] if len(parts) == 3 else ""


# === Verse Structure ===


@dataclass(frozen=True)
class ProcessedVerse:
    """A tokenized verse as produced by ingestion."""

    reference: str
    number: int
    text: str = ""
    word_tokens: Tuple[WordToken, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProcessedChapter:
    """A chapter of tokenized verses."""

    number: int
    verses: Tuple[ProcessedVerse, ...] = field(default_factory=tuple)


# === References ===


@dataclass(frozen=True)
class VerseKey:
    """A parsed single-verse reference such as ``3JN 1:1``."""

    book: str
    chapter: int
    verse: int

    def same_position(self, other: "VerseKey") -> bool:
        """Chapter and verse agree; the book is not compared."""
        return self.chapter == other.chapter and self.verse == other.verse

    def same_verse(self, other: "VerseKey") -> bool:
        return self.book.lower() == other.book.lower() and self.same_position(other)


@dataclass(frozen=True)
class QuoteReference:
    """An inclusive verse range. Missing end fields default to the start."""

    book: str
    start_chapter: int
    start_verse: int
    end_chapter: Optional[int] = None
    end_verse: Optional[int] = None

    @property
    def last_chapter(self) -> int:
        return self.end_chapter if self.end_chapter is not None else self.start_chapter

    @property
    def last_verse(self) -> int:
        return self.end_verse if self.end_verse is not None else self.start_verse

    @property
    def is_single_chapter(self) -> bool:
        return self.start_chapter == self.last_chapter


# === Construction helpers ===


def make_unique_id(verse_ref: str, content: str, occurrence: int) -> str:
    """Stable token identifier: verse reference, normalized content, occurrence."""
    return f"{verse_ref}:{normalize_text(content)}:{occurrence}"


def assign_occurrences(tokens: Iterable[WordToken]) -> List[WordToken]:
    """
    Return copies of ``tokens`` with occurrence counters filled in.

    Word tokens sharing normalized content are numbered 1..n in order and all
    carry ``total_occurrences == n``. Non-word tokens get 0/0.
    """
    tokens = list(tokens)
    totals: Dict[str, int] = {}
    for token in tokens:
        if token.is_highlightable:
            key = normalize_text(token.content)
            totals[key] = totals.get(key, 0) + 1

    seen: Dict[str, int] = {}
    result = []
    for token in tokens:
        if not token.is_highlightable:
            result.append(replace(token, occurrence=0, total_occurrences=0))
            continue
        key = normalize_text(token.content)
        seen[key] = seen.get(key, 0) + 1
        result.append(
            replace(token, occurrence=seen[key], total_occurrences=totals[key])
        )
    return result


def build_verse(
    reference: str,
    number: int,
    words: Iterable[str],
    alignments: Optional[Dict[int, TokenAlignment]] = None,
) -> ProcessedVerse:
    """
    Build a verse of word tokens from surface strings.

    Positions, occurrences and unique ids are derived the way ingestion
    derives them. ``alignments`` maps a word index to its alignment block.
    """
    alignments = alignments or {}
    tokens = []
    offset = 0
    for index, word in enumerate(words):
        tokens.append(
            WordToken(
                unique_id="",
                content=word,
                position=TokenPosition(
                    start=offset, end=offset + len(word), word_index=index
                ),
                alignment=alignments.get(index),
                verse_ref=reference,
            )
        )
        offset += len(word) + 1

    tokens = [
        replace(t, unique_id=make_unique_id(reference, t.content, t.occurrence))
        for t in assign_occurrences(tokens)
    ]
    return ProcessedVerse(
        reference=reference,
        number=number,
        text=" ".join(t.content for t in tokens),
        word_tokens=tuple(tokens),
    )
