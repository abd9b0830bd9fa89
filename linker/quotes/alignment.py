"""
Alignment resolution between original-language and target-language tokens.

Given original-language tokens (usually the output of the quote matcher),
finds the tokens of a differently tokenized translation that are aligned to
them. A target token is aligned when, in priority order:

1. its ``source_word_id`` is the original token's ``unique_id`` (exact link)
2. both carry the same Strong's number and belong to the same verse
3. its normalized ``source_content`` and ``source_occurrence`` equal the
   original token's normalized content and occurrence (same verse)
"""

import logging
from enum import IntEnum
from typing import Iterable, List, Optional

from linker.ql_model import ProcessedChapter, ProcessedVerse, QuoteReference, WordToken
from linker.ql_normalize import same_normalized
from linker.ql_reference import parse_verse_ref

from .core import AlignedTokenMatch, AlignmentMatchResult, internal_error
from .verse_range import find_corresponding_verse, verses_in_range

logger = logging.getLogger(__name__)


class AlignmentTier(IntEnum):
    """Which rule linked a target token to an original token."""

    EXACT_LINK = 1
    STRONG_IN_VERSE = 2
    CONTENT_OCCURRENCE = 3


def same_verse(left: WordToken, right: WordToken) -> bool:
    """Both tokens belong to the same verse (book compared case-insensitively)."""
    left_ref = left.owning_verse_ref
    right_ref = right.owning_verse_ref
    if not left_ref or not right_ref:
        return False
    if left_ref == right_ref:
        return True
    return parse_verse_ref(left_ref).same_verse(parse_verse_ref(right_ref))


def alignment_tier(original: WordToken, target: WordToken) -> Optional[AlignmentTier]:
    """
    Decide whether ``target`` is aligned to ``original``.

    Returns:
        The first tier that links them, or None
    """
    alignment = target.alignment
    if alignment is None:
        return None

    if alignment.source_word_id and alignment.source_word_id == original.unique_id:
        return AlignmentTier.EXACT_LINK

    if original.strong and alignment.strong == original.strong and same_verse(
        original, target
    ):
        return AlignmentTier.STRONG_IN_VERSE

    if (
        alignment.source_content
        and alignment.source_occurrence
        and alignment.source_occurrence == original.occurrence
        and same_normalized(alignment.source_content, original.content)
        and same_verse(original, target)
    ):
        return AlignmentTier.CONTENT_OCCURRENCE

    return None


class AlignmentResolver:
    """Maps original-language tokens to their aligned target-language tokens."""

    def find_aligned_tokens_in_verse(
        self, original: WordToken, target_verse: ProcessedVerse
    ) -> List[WordToken]:
        """All tokens of ``target_verse`` aligned to ``original``, in verse order."""
        aligned = []
        for target in target_verse.word_tokens:
            tier = alignment_tier(original, target)
            if tier is not None:
                logger.debug(
                    "%s -> %s via %s", original.unique_id, target.unique_id, tier.name
                )
                aligned.append(target)
        return aligned

    def find_aligned_tokens(
        self,
        original_tokens: Iterable[WordToken],
        target_chapters: Iterable[ProcessedChapter],
        reference: QuoteReference,
    ) -> AlignmentMatchResult:
        """
        Find target tokens aligned to each original-language token.

        Original tokens with no corresponding target verse, or with no aligned
        tokens, contribute nothing; that is not an error.

        Args:
            original_tokens: Tokens from the original-language text
            target_chapters: Processed chapters of an aligned translation
            reference: Verse range to search in

        Returns:
            AlignmentMatchResult; only unexpected failures (such as malformed
            verse references) produce ``success == False``
        """
        try:
            original_tokens = list(original_tokens)
            target_verses = verses_in_range(target_chapters, reference)
            aligned_matches: List[AlignedTokenMatch] = []

            for original in original_tokens:
                target_verse = find_corresponding_verse(
                    target_verses, original.owning_verse_ref
                )
                if target_verse is None or not target_verse.word_tokens:
                    logger.debug("No target verse for %s", original.unique_id)
                    continue

                aligned = self.find_aligned_tokens_in_verse(original, target_verse)
                if aligned:
                    aligned_matches.append(
                        AlignedTokenMatch(
                            original_token=original,
                            aligned_tokens=aligned,
                            verse_ref=target_verse.reference,
                        )
                    )

            total = [token for m in aligned_matches for token in m.aligned_tokens]
            logger.info(
                "Aligned %s of %s original tokens to %s target tokens",
                len(aligned_matches),
                len(original_tokens),
                len(total),
            )
            return AlignmentMatchResult(
                success=True, aligned_matches=aligned_matches, total_aligned_tokens=total
            )

        except Exception as e:  # pylint: disable=broad-except
            logger.warning("Error finding aligned tokens: %s", e)
            return AlignmentMatchResult.failure(
                internal_error("Error finding aligned tokens", e)
            )


_default_resolver = AlignmentResolver()


def find_aligned_tokens(
    original_tokens: Iterable[WordToken],
    target_chapters: Iterable[ProcessedChapter],
    reference: QuoteReference,
) -> AlignmentMatchResult:
    """Module-level convenience around a shared AlignmentResolver."""
    return _default_resolver.find_aligned_tokens(
        original_tokens, target_chapters, reference
    )
