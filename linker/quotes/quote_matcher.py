"""
Quote matching for original-language texts.

Locates an occurrence of a (possibly multi-part) quoted phrase inside the
word tokens of a verse range and maps the matched text back to tokens.

Matching works on a per-verse search string: the normalized content of each
word token, joined by single spaces. Character offsets into that string are
what the search cursor and QuoteMatch positions refer to.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from linker.ql_model import ProcessedChapter, ProcessedVerse, QuoteReference, WordToken
from linker.ql_normalize import normalize_text
from linker.ql_reference import format_reference

from .core import (
    QUOTE_DELIMITER,
    QuoteMatch,
    QuoteMatchResult,
    QuoteNotFoundError,
    SearchCursor,
    internal_error,
    no_verses_error,
)
from .verse_range import verses_in_range

logger = logging.getLogger(__name__)


def word_tokens(verse: ProcessedVerse) -> List[WordToken]:
    """The verse's matchable tokens, in order."""
    return [t for t in verse.word_tokens if t.is_highlightable]


def build_search_text(verse: ProcessedVerse) -> str:
    """Normalized word-token contents joined by single spaces."""
    return " ".join(normalize_text(t.content) for t in word_tokens(verse))


def find_occurrences(text: str, quote: str) -> List[Tuple[int, int]]:
    """
    Find every ``[start, end)`` span of ``quote`` in ``text``.

    The search advances one character past each hit, so overlapping
    occurrences are all reported.
    """
    spans = []
    if not quote:
        return spans
    start = 0
    while True:
        index = text.find(quote, start)
        if index == -1:
            break
        spans.append((index, index + len(quote)))
        start = index + 1
    return spans


def extract_tokens(verse: ProcessedVerse, start: int, end: int) -> List[WordToken]:
    """
    Map a ``[start, end)`` span of the verse search text back to tokens.

    A token is included when its reconstructed span overlaps the match, so a
    quote covering part of a token still resolves to that token.
    """
    tokens = []
    position = 0
    for token in word_tokens(verse):
        token_start = position
        token_end = position + len(normalize_text(token.content))
        if token_end > start and token_start < end:
            tokens.append(token)
        position = token_end + 1  # joining space
    return tokens


def split_quote(quote: str, delimiter: str = QUOTE_DELIMITER) -> List[str]:
    """Split a multi-part quote into its ordered, trimmed sub-quotes."""
    return [part.strip() for part in quote.split(delimiter)]


class QuoteMatcher:
    """
    Finds original-language tokens for translation-note style quotes.

    A quote may hold several phrases separated by ``&``; they are matched in
    order, each one searching strictly after the previous match.
    """

    def __init__(self, delimiter: str = QUOTE_DELIMITER):
        self.delimiter = delimiter

    def find_original_tokens(
        self,
        chapters: Iterable[ProcessedChapter],
        quote: str,
        occurrence: int,
        reference: QuoteReference,
    ) -> QuoteMatchResult:
        """
        Find the original-language tokens matching ``quote``.

        Args:
            chapters: Processed chapters of the original-language text
            quote: Quote string, parts separated by ``&``
            occurrence: Which occurrence of the first part to use (1-based)
            reference: Verse range to search in

        Returns:
            QuoteMatchResult; on failure ``success`` is False and ``error`` says why
        """
        try:
            formatted = format_reference(reference)
            verses = verses_in_range(chapters, reference)
            if not verses:
                logger.info("No verses in range %s", formatted)
                return QuoteMatchResult.failure(no_verses_error(formatted))

            sub_quotes = split_quote(quote, self.delimiter)
            cursor = SearchCursor()
            matches: List[QuoteMatch] = []

            for i, sub_quote in enumerate(sub_quotes):
                target_occurrence = occurrence if i == 0 else 1
                match, verse_index = self._find_single_quote(
                    verses, sub_quote, target_occurrence, cursor
                )
                if match is None:
                    raise QuoteNotFoundError(sub_quote, target_occurrence, formatted)
                matches.append(match)
                cursor = self._advance(cursor, verse_index, match)

            total_tokens = [token for m in matches for token in m.tokens]
            logger.info(
                "Quote %r matched %s part(s), %s tokens in %s",
                quote,
                len(matches),
                len(total_tokens),
                formatted,
            )
            return QuoteMatchResult(
                success=True, matches=matches, total_tokens=total_tokens
            )

        except QuoteNotFoundError as e:
            logger.info("%s", e)
            return QuoteMatchResult.failure(e.to_error())
        except Exception as e:  # pylint: disable=broad-except
            logger.warning("Error processing quote %r: %s", quote, e)
            return QuoteMatchResult.failure(internal_error("Error processing quote", e))

    def _find_single_quote(
        self,
        verses: Sequence[ProcessedVerse],
        quote: str,
        occurrence: int,
        cursor: SearchCursor,
    ) -> Tuple[Optional[QuoteMatch], int]:
        """
        Find the ``occurrence``-th hit of one sub-quote at or after ``cursor``.

        Returns:
            (match, verse index) or (None, -1) if the range is exhausted
        """
        normalized_quote = normalize_text(quote)
        found = 0

        for i in range(cursor.verse_index, len(verses)):
            verse = verses[i]
            if not verse.word_tokens:
                continue

            for start, end in find_occurrences(build_search_text(verse), normalized_quote):
                if i == cursor.verse_index and start < cursor.char_position:
                    continue
                found += 1
                if found == occurrence:
                    tokens = extract_tokens(verse, start, end)
                    logger.debug(
                        "Sub-quote %r (occurrence %s) at %s [%s, %s): %s tokens",
                        quote,
                        occurrence,
                        verse.reference,
                        start,
                        end,
                        len(tokens),
                    )
                    return (
                        QuoteMatch(
                            quote=quote,
                            occurrence=occurrence,
                            tokens=tokens,
                            verse_ref=verse.reference,
                            start_position=start,
                            end_position=end,
                        ),
                        i,
                    )

        return None, -1

    @staticmethod
    def _advance(cursor: SearchCursor, verse_index: int, match: QuoteMatch) -> SearchCursor:
        if verse_index == cursor.verse_index:
            # Same verse: continue after this match
            return SearchCursor(cursor.verse_index, match.end_position)
        return SearchCursor(verse_index + 1, 0)


_default_matcher = QuoteMatcher()


def find_original_tokens(
    chapters: Iterable[ProcessedChapter],
    quote: str,
    occurrence: int,
    reference: QuoteReference,
) -> QuoteMatchResult:
    """Module-level convenience around a shared QuoteMatcher."""
    return _default_matcher.find_original_tokens(chapters, quote, occurrence, reference)
