"""
Public API for quote matching, alignment resolution and panel broadcasting.

This module gathers the entry points spread over the quotes/ and panels/
subpackages so callers can import them from one place.
"""

from linker.ql_model import (
    ProcessedChapter,
    ProcessedVerse,
    QuoteReference,
    TokenAlignment,
    TokenPosition,
    VerseKey,
    WordToken,
    assign_occurrences,
    build_verse,
    make_unique_id,
)
from linker.ql_normalize import normalize_text
from linker.ql_reference import (
    ReferenceSyntaxError,
    format_reference,
    parse_quote_reference,
    parse_verse_ref,
)
from linker.panels import (
    CrossPanelService,
    HighlightMessage,
    MessageBus,
    PanelRegistration,
    PanelRegistry,
    TokenGroupBook,
)
from linker.quotes import (
    AlignmentMatchResult,
    AlignmentResolver,
    ErrorKind,
    QuoteMatcher,
    QuoteMatchResult,
    find_aligned_tokens,
    find_original_tokens,
    load_chapters,
    load_chapters_file,
)

__all__ = [
    "AlignmentMatchResult",
    "AlignmentResolver",
    "CrossPanelService",
    "ErrorKind",
    "HighlightMessage",
    "MessageBus",
    "PanelRegistration",
    "PanelRegistry",
    "ProcessedChapter",
    "ProcessedVerse",
    "QuoteMatchResult",
    "QuoteMatcher",
    "QuoteReference",
    "ReferenceSyntaxError",
    "TokenAlignment",
    "TokenGroupBook",
    "TokenPosition",
    "VerseKey",
    "WordToken",
    "assign_occurrences",
    "build_verse",
    "find_aligned_tokens",
    "find_original_tokens",
    "format_reference",
    "load_chapters",
    "load_chapters_file",
    "make_unique_id",
    "normalize_text",
    "parse_quote_reference",
    "parse_verse_ref",
]
