"""
Panel-local highlight resolution.

A panel's kind is decided once, when it is registered: an OriginalPanel
hosts original-language text and highlights the referenced token itself; a
TargetPanel hosts a translation and highlights the tokens aligned to it.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Iterator, List, Optional, Tuple

from linker.ql_model import ProcessedChapter, VerseKey, WordToken
from linker.ql_normalize import same_normalized
from linker.ql_reference import ReferenceSyntaxError, parse_verse_ref

from .messages import HighlightMessage, MessageType, PanelHighlight, ReferenceToken

logger = logging.getLogger(__name__)

# Hebrew Bible and Greek New Testament language codes
ORIGINAL_LANGUAGE_CODES = frozenset({"hbo", "el-x-koine", "grc", "he"})

HighlightCallback = Callable[[PanelHighlight], None]


@dataclass(frozen=True)
class PanelRegistration:
    """What a panel declares about itself when it mounts."""

    resource_id: str
    resource_type: str
    language: str
    chapters: Tuple[ProcessedChapter, ...] = field(default_factory=tuple)
    is_original_language: bool = False


def _verse_key(verse_ref: str) -> Optional[VerseKey]:
    if not verse_ref:
        return None
    try:
        return parse_verse_ref(verse_ref)
    except ReferenceSyntaxError:
        logger.debug("Ignoring malformed verse reference %r", verse_ref)
        return None


def _in_verse(token: WordToken, key: Optional[VerseKey]) -> bool:
    if key is None:
        return False
    token_key = _verse_key(token.owning_verse_ref)
    return token_key is not None and token_key.same_verse(key)


class Panel:
    """Base class for registered panels."""

    kind = ""

    def __init__(
        self,
        registration: PanelRegistration,
        on_highlight: Optional[HighlightCallback] = None,
    ):
        self.registration = registration
        self.on_highlight = on_highlight
        self.highlighted: Tuple[WordToken, ...] = ()
        self.last_message: Optional[HighlightMessage] = None

    @property
    def resource_id(self) -> str:
        return self.registration.resource_id

    @property
    def language(self) -> str:
        return self.registration.language

    def iter_word_tokens(self) -> Iterator[WordToken]:
        for chapter in self.registration.chapters:
            for verse in chapter.verses:
                for token in verse.word_tokens:
                    if token.is_highlightable:
                        yield token

    def find_tokens(self, reference: ReferenceToken) -> List[WordToken]:
        """Tokens of this panel that correspond to ``reference``."""
        raise NotImplementedError

    def resolve(self, message: HighlightMessage) -> List[WordToken]:
        """
        Decide which of this panel's tokens ``message`` highlights.

        The clicked token itself is excluded, but only in the panel it was
        clicked in: other panels may hold a token with the same unique id.
        """
        if message.type == MessageType.CLEAR or message.original_language_token is None:
            return []

        is_source_panel = message.source_resource_id == self.resource_id
        tokens = []
        for token in self.find_tokens(message.original_language_token):
            if is_source_panel and token.unique_id == message.source_token_id:
                logger.debug("Skipping clicked token %s in %s", token.unique_id, self.resource_id)
                continue
            tokens.append(token)
        return tokens

    def receive(self, message: HighlightMessage):
        """Bus handler: replace this panel's highlight set and notify its owner."""
        self.highlighted = tuple(self.resolve(message))
        self.last_message = message
        logger.debug(
            "Panel %s highlights %s tokens", self.resource_id, len(self.highlighted)
        )
        if self.on_highlight is not None:
            self.on_highlight(
                PanelHighlight(
                    resource_id=self.resource_id,
                    tokens=self.highlighted,
                    message=message,
                )
            )


class OriginalPanel(Panel):
    """Panel hosting original-language text."""

    kind = "original"

    def find_tokens(self, reference: ReferenceToken) -> List[WordToken]:
        if reference.unique_id:
            return [t for t in self.iter_word_tokens() if t.unique_id == reference.unique_id]

        # Legacy alignment data without source ids
        key = _verse_key(reference.verse_ref)
        return [
            t
            for t in self.iter_word_tokens()
            if t.occurrence == reference.occurrence
            and same_normalized(t.content, reference.content)
            and _in_verse(t, key)
        ]


class TargetPanel(Panel):
    """Panel hosting a translation aligned to the original language."""

    kind = "target"

    def find_tokens(self, reference: ReferenceToken) -> List[WordToken]:
        key = _verse_key(reference.verse_ref)
        return [t for t in self.iter_word_tokens() if self._is_aligned(t, reference, key)]

    @staticmethod
    def _is_aligned(
        token: WordToken, reference: ReferenceToken, key: Optional[VerseKey]
    ) -> bool:
        alignment = token.alignment
        if alignment is None:
            return False

        if reference.unique_id and alignment.source_word_id:
            return alignment.source_word_id == reference.unique_id

        # Fallbacks only apply within the referenced verse
        if not _in_verse(token, key):
            return False

        if reference.strong and alignment.strong == reference.strong:
            if reference.lemma and alignment.lemma:
                return reference.lemma == alignment.lemma
            return True

        return bool(
            alignment.source_content
            and alignment.source_occurrence
            and alignment.source_occurrence == reference.occurrence
            and same_normalized(alignment.source_content, reference.content)
        )


def is_original_language(
    registration: PanelRegistration,
    original_languages: FrozenSet[str] = ORIGINAL_LANGUAGE_CODES,
) -> bool:
    return registration.is_original_language or (
        registration.language.lower() in original_languages
    )


def panel_for(
    registration: PanelRegistration,
    on_highlight: Optional[HighlightCallback] = None,
    original_languages: FrozenSet[str] = ORIGINAL_LANGUAGE_CODES,
) -> Panel:
    """Build the panel variant matching ``registration``."""
    if is_original_language(registration, original_languages):
        return OriginalPanel(registration, on_highlight)
    return TargetPanel(registration, on_highlight)
