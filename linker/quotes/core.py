"""
Core data structures for quote matching and alignment resolution.

Contains the result types returned by the public matching API, the error
taxonomy carried inside failed results, and the search cursor used for
sequential multi-part quote matching.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from linker.ql_model import WordToken

from .loader import token_to_dict

# Separates the parts of a multi-part (non-contiguous) quote.
QUOTE_DELIMITER = "&"


class ErrorKind(Enum):
    """Why a matching operation failed."""

    NOT_FOUND = "NotFound"
    NO_VERSES_IN_RANGE = "NoVersesInRange"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class MatchError:
    """Failure description returned inside a result, never raised."""

    kind: ErrorKind
    message: str
    quote: Optional[str] = None
    occurrence: Optional[int] = None
    reference: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.quote is not None:
            data["quote"] = self.quote
        if self.occurrence is not None:
            data["occurrence"] = self.occurrence
        if self.reference is not None:
            data["reference"] = self.reference
        return data


class QuoteNotFoundError(LookupError):
    """Raised internally when a sub-quote occurrence is absent from the range."""

    def __init__(self, quote: str, occurrence: int, reference: str):
        self.quote = quote
        self.occurrence = occurrence
        self.reference = reference
        super().__init__(
            f'Quote "{quote}" (occurrence {occurrence}) not found in {reference}'
        )

    def to_error(self) -> MatchError:
        return MatchError(
            kind=ErrorKind.NOT_FOUND,
            message=str(self),
            quote=self.quote,
            occurrence=self.occurrence,
            reference=self.reference,
        )


@dataclass
class SearchCursor:
    """Where the next sub-quote search starts."""

    verse_index: int = 0
    char_position: int = 0


@dataclass
class QuoteMatch:
    """One resolved sub-quote."""

    quote: str
    occurrence: int
    tokens: List[WordToken]
    verse_ref: str
    start_position: int
    end_position: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quote": self.quote,
            "occurrence": self.occurrence,
            "tokens": [token_to_dict(t) for t in self.tokens],
            "verseRef": self.verse_ref,
            "startPosition": self.start_position,
            "endPosition": self.end_position,
        }


@dataclass
class QuoteMatchResult:
    """Result of ``find_original_tokens``."""

    success: bool
    matches: List[QuoteMatch] = field(default_factory=list)
    total_tokens: List[WordToken] = field(default_factory=list)
    error: Optional[MatchError] = None

    @classmethod
    def failure(cls, error: MatchError) -> "QuoteMatchResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "matches": [m.to_dict() for m in self.matches],
            "totalTokens": [token_to_dict(t) for t in self.total_tokens],
        }
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass
class AlignedTokenMatch:
    """The target tokens aligned to one original-language token."""

    original_token: WordToken
    aligned_tokens: List[WordToken]
    verse_ref: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalToken": token_to_dict(self.original_token),
            "alignedTokens": [token_to_dict(t) for t in self.aligned_tokens],
            "verseRef": self.verse_ref,
        }


@dataclass
class AlignmentMatchResult:
    """Result of ``find_aligned_tokens``."""

    success: bool
    aligned_matches: List[AlignedTokenMatch] = field(default_factory=list)
    total_aligned_tokens: List[WordToken] = field(default_factory=list)
    error: Optional[MatchError] = None

    @classmethod
    def failure(cls, error: MatchError) -> "AlignmentMatchResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "alignedMatches": [m.to_dict() for m in self.aligned_matches],
            "totalAlignedTokens": [token_to_dict(t) for t in self.total_aligned_tokens],
        }
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


def internal_error(prefix: str, exc: BaseException) -> MatchError:
    """Wrap an unexpected exception as an InternalError."""
    return MatchError(kind=ErrorKind.INTERNAL_ERROR, message=f"{prefix}: {exc}")


def no_verses_error(formatted: str) -> MatchError:
    return MatchError(
        kind=ErrorKind.NO_VERSES_IN_RANGE,
        message=f"No verses found in range {formatted}",
        reference=formatted,
    )
