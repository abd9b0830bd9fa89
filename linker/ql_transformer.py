"""
Reference Transformer: Lark tree transformer for scripture references.

Converts parse trees produced by the reference grammar into VerseKey and
QuoteReference values.
"""

from lark import Transformer, v_args

from linker.ql_model import QuoteReference, VerseKey


@v_args(inline=True)
class ReferenceTransformer(Transformer):
    """Transformer that converts reference parse trees into model values."""

    def verse_ref(self, book, chapter, verse):
        """Transform a single-verse reference."""
        return VerseKey(book=str(book), chapter=int(chapter), verse=int(verse))

    def quote_ref(self, book, chapter, verse, end=None):
        """Transform a (possibly ranged) quote reference."""
        end_chapter, end_verse = end if end is not None else (None, None)
        return QuoteReference(
            book=str(book),
            start_chapter=int(chapter),
            start_verse=int(verse),
            end_chapter=end_chapter,
            end_verse=end_verse,
        )

    def chapter_range_end(self, chapter, verse):
        return int(chapter), int(verse)

    def verse_range_end(self, verse):
        return None, int(verse)
