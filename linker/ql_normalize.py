"""
Text normalization shared by quote search and alignment comparison.

The same canonical form is applied to verse search text and to incoming
quotes, so punctuation and case never block a match. Script-specific
letters (Greek, Hebrew) are preserved.
"""

import re
from functools import lru_cache

# Anything that is not a letter, digit or whitespace. \w admits "_", which is
# punctuation for our purposes.
_RE_NON_WORD = re.compile(r"[^\w\s]|_")
_RE_WHITESPACE = re.compile(r"\s+")


@lru_cache(maxsize=65536)
def normalize_text(text: str) -> str:
    """
    Canonicalize text for cross-script comparison.

    Lowercases, strips every character that is neither a Unicode letter,
    digit nor whitespace, collapses whitespace runs to one space and trims.

    Args:
        text: Raw surface text

    Returns:
        Normalized text (possibly empty)
    """
    if not text:
        return ""
    normalized = _RE_NON_WORD.sub("", text.lower())
    return _RE_WHITESPACE.sub(" ", normalized).strip()


def same_normalized(left: str, right: str) -> bool:
    """True when both strings normalize to the same non-empty form."""
    normalized = normalize_text(left or "")
    return bool(normalized) and normalized == normalize_text(right or "")
