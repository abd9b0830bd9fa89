"""
Message shapes exchanged between the broadcast service and panels.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from linker.ql_model import ProcessedVerse, WordToken


class MessageType(str, Enum):
    HIGHLIGHT_TOKENS = "HIGHLIGHT_TOKENS"
    CLEAR = "CLEAR"


@dataclass(frozen=True)
class ReferenceToken:
    """
    The original-language token a highlight is about.

    Built either from a clicked original-language token or from the
    alignment block of a clicked target-language token.
    """

    unique_id: Optional[str]
    content: str
    strong: Optional[str] = None
    lemma: Optional[str] = None
    occurrence: Optional[int] = None
    verse_ref: str = ""

    @classmethod
    def from_original(cls, token: WordToken, verse_ref: str = "") -> "ReferenceToken":
        return cls(
            unique_id=token.unique_id,
            content=token.content,
            strong=token.strong,
            lemma=token.lemma,
            occurrence=token.occurrence,
            verse_ref=token.owning_verse_ref or verse_ref,
        )

    @classmethod
    def from_alignment(
        cls, token: WordToken, verse_ref: str = ""
    ) -> Optional["ReferenceToken"]:
        """Derive the reference token from a target token's alignment, if any."""
        alignment = token.alignment
        if alignment is None:
            return None
        if not (alignment.source_word_id or alignment.source_content or alignment.strong):
            return None
        return cls(
            unique_id=alignment.source_word_id,
            content=alignment.source_content or "",
            strong=alignment.strong,
            lemma=alignment.lemma,
            occurrence=alignment.source_occurrence,
            verse_ref=token.owning_verse_ref or verse_ref,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uniqueId": self.unique_id,
            "content": self.content,
            "strong": self.strong,
            "lemma": self.lemma,
            "occurrence": self.occurrence,
            "verseRef": self.verse_ref,
        }


@dataclass(frozen=True)
class HighlightMessage:
    """A broadcast delivered to every registered panel."""

    type: MessageType
    source_resource_id: Optional[str] = None
    source_content: Optional[str] = None
    original_language_token: Optional[ReferenceToken] = None
    source_token_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def clear(cls) -> "HighlightMessage":
        return cls(type=MessageType.CLEAR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "sourceResourceId": self.source_resource_id,
            "sourceContent": self.source_content,
            "originalLanguageToken": (
                self.original_language_token.to_dict()
                if self.original_language_token
                else None
            ),
            "sourceTokenId": self.source_token_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class PanelHighlight:
    """What one panel decided to highlight in response to a message."""

    resource_id: str
    tokens: Tuple[WordToken, ...]
    message: HighlightMessage

    @property
    def unique_ids(self) -> Tuple[str, ...]:
        return tuple(t.unique_id for t in self.tokens)


def verse_reference(verse: Optional[ProcessedVerse]) -> str:
    return verse.reference if verse is not None else ""
