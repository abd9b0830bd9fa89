"""
Quote matching package - locating quotes and their aligned translations.

- core: Result types, error taxonomy, search cursor
- loader: Raw chapter loading, validation and JSON rendering
- verse_range: Verse selection for quote references
- quote_matcher: Multi-part quote search and token extraction
- alignment: Tiered original-to-target alignment resolution
"""

from .alignment import AlignmentResolver, AlignmentTier, alignment_tier, find_aligned_tokens
from .core import (
    QUOTE_DELIMITER,
    AlignedTokenMatch,
    AlignmentMatchResult,
    ErrorKind,
    MatchError,
    QuoteMatch,
    QuoteMatchResult,
    QuoteNotFoundError,
)
from .loader import chapters_to_dicts, load_chapters, load_chapters_file, token_to_dict
from .quote_matcher import QuoteMatcher, find_original_tokens
from .verse_range import find_corresponding_verse, verses_in_range

__all__ = [
    "QUOTE_DELIMITER",
    "AlignedTokenMatch",
    "AlignmentMatchResult",
    "AlignmentResolver",
    "AlignmentTier",
    "ErrorKind",
    "MatchError",
    "QuoteMatch",
    "QuoteMatchResult",
    "QuoteMatcher",
    "QuoteNotFoundError",
    "alignment_tier",
    "chapters_to_dicts",
    "find_aligned_tokens",
    "find_corresponding_verse",
    "find_original_tokens",
    "load_chapters",
    "load_chapters_file",
    "token_to_dict",
    "verses_in_range",
]
