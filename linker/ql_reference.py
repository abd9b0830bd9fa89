from functools import lru_cache
from pathlib import Path
from typing import Union

from lark import Lark
from lark.exceptions import LarkError

from linker.ql_model import QuoteReference, VerseKey
from linker.ql_transformer import ReferenceTransformer

GRAMMAR_PATH = Path(__file__).parent / "reference_grammar.lark"
with open(GRAMMAR_PATH, "r", encoding="utf-8") as f:
    REFERENCE_GRAMMAR = f.read()

reference_parser = Lark(
    REFERENCE_GRAMMAR, start=["verse_ref", "quote_ref"], parser="lalr"
)
_transformer = ReferenceTransformer()


class ReferenceSyntaxError(ValueError):
    """Raised when a reference string cannot be parsed."""

    def __init__(self, text: str, reason: str = ""):
        self.text = text
        self.reason = reason
        message = f"Malformed reference: {text!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


def _parse(text: str, start: str):
    if not isinstance(text, str) or not text.strip():
        raise ReferenceSyntaxError(str(text), "empty reference")
    try:
        tree = reference_parser.parse(text.strip(), start=start)
    except LarkError as e:
        raise ReferenceSyntaxError(text, type(e).__name__) from e
    return _transformer.transform(tree)


@lru_cache(maxsize=4096)
def parse_verse_ref(text: str) -> VerseKey:
    """
    Parse a single-verse reference of the form ``"<book> <chapter>:<verse>"``.

    Raises:
        ReferenceSyntaxError: if the string is not a verse reference
    """
    return _parse(text, "verse_ref")


def parse_quote_reference(text: str) -> QuoteReference:
    """
    Parse a quote reference: ``"3JN 1:1"``, ``"3JN 1:1-4"`` or ``"3JN 1:1-2:3"``.

    Raises:
        ReferenceSyntaxError: if the string is not a quote reference
    """
    return _parse(text, "quote_ref")


def format_reference(reference: Union[QuoteReference, VerseKey]) -> str:
    """Render a reference for display, omitting end parts equal to the start."""
    if isinstance(reference, VerseKey):
        return f"{reference.book} {reference.chapter}:{reference.verse}"

    head = f"{reference.book} {reference.start_chapter}:{reference.start_verse}"
    if reference.last_chapter != reference.start_chapter:
        return f"{head}-{reference.last_chapter}:{reference.last_verse}"
    if reference.last_verse != reference.start_verse:
        return f"{head}-{reference.last_verse}"
    return head
