"""
Verse selection for quote references.

Resolves a QuoteReference to the ordered list of verses it covers, and
pairs a verse reference with its counterpart in another token stream.
"""

import logging
from typing import Iterable, List, Optional

from linker.ql_model import ProcessedChapter, ProcessedVerse, QuoteReference
from linker.ql_reference import parse_verse_ref

logger = logging.getLogger(__name__)


def _verse_in_range(
    chapter_number: int, verse_number: int, reference: QuoteReference
) -> bool:
    if reference.is_single_chapter:
        return reference.start_verse <= verse_number <= reference.last_verse
    if chapter_number == reference.start_chapter:
        return verse_number >= reference.start_verse
    if chapter_number == reference.last_chapter:
        return verse_number <= reference.last_verse
    # Interior chapters contribute every verse
    return True


def verses_in_range(
    chapters: Iterable[ProcessedChapter], reference: QuoteReference
) -> List[ProcessedVerse]:
    """
    Select the verses covered by ``reference``, in chapter then verse order.

    Args:
        chapters: Chapters of a tokenized book
        reference: Inclusive verse range

    Returns:
        Verses in range (possibly empty)
    """
    verses = []
    for chapter in chapters:
        if not reference.start_chapter <= chapter.number <= reference.last_chapter:
            continue
        for verse in chapter.verses:
            if _verse_in_range(chapter.number, verse.number, reference):
                verses.append(verse)

    logger.debug(
        "Reference %s %s:%s resolved to %s verses",
        reference.book,
        reference.start_chapter,
        reference.start_verse,
        len(verses),
    )
    return verses


def find_corresponding_verse(
    verses: Iterable[ProcessedVerse], verse_ref: str
) -> Optional[ProcessedVerse]:
    """
    Find the verse whose chapter and verse numbers match ``verse_ref``.

    Numbers are compared numerically; the book code is not compared, since
    translations of the same book may spell it differently.

    Raises:
        ReferenceSyntaxError: if either reference is malformed
    """
    wanted = parse_verse_ref(verse_ref)
    for verse in verses:
        if parse_verse_ref(verse.reference).same_position(wanted):
            return verse
    return None
