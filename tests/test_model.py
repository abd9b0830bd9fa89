"""
Tests for the token model, text normalization and token construction helpers.
"""

from linker.ql_model import (
    WordToken,
    assign_occurrences,
    build_verse,
    make_unique_id,
)
from linker.ql_normalize import normalize_text, same_normalized


class TestNormalizeText:
    def test_lowercase_and_punctuation(self):
        """Test lowercasing and punctuation removal."""
        assert normalize_text("Hello, World!") == "hello world"

    def test_preserves_greek_letters(self):
        """Test that accented Greek letters survive normalization."""
        assert normalize_text("Γαΐῳ,") == "γαΐῳ"

    def test_preserves_hebrew_letters(self):
        """Test that Hebrew letters survive normalization."""
        assert normalize_text("בְּרֵאשִׁית׃") == normalize_text("בְּרֵאשִׁית")

    def test_collapses_whitespace(self):
        """Test that runs of whitespace collapse to one space."""
        assert normalize_text("  ὁ \t\n πρεσβύτερος  ") == "ὁ πρεσβύτερος"

    def test_keeps_digits_and_drops_underscore(self):
        """Test that digits are kept and underscores dropped."""
        assert normalize_text("verse_12") == "verse12"

    def test_empty(self):
        """Test normalizing empty and punctuation-only text."""
        assert normalize_text("") == ""
        assert normalize_text("...") == ""

    def test_same_normalized(self):
        """Test comparing strings after normalization."""
        assert same_normalized("Elder,", "elder")
        assert not same_normalized("", "")
        assert not same_normalized("elder", "elders")


class TestUniqueIds:
    def test_make_unique_id(self):
        """Test the verse, content and occurrence form of unique ids."""
        assert make_unique_id("rut 1:1", "Jueces", 1) == "rut 1:1:jueces:1"

    def test_owning_verse_ref_falls_back_to_unique_id(self):
        """Test recovering the verse reference from a unique id."""
        token = WordToken(unique_id="3JN 1:1:πρεσβύτερος:1", content="πρεσβύτερος")
        assert token.owning_verse_ref == "3JN 1:1"

    def test_owning_verse_ref_prefers_recorded_reference(self):
        """Test that a recorded verse reference wins over the unique id."""
        token = WordToken(unique_id="x", content="x", verse_ref="3JN 1:2")
        assert token.owning_verse_ref == "3JN 1:2"


class TestOccurrences:
    def test_repeated_words_are_numbered(self):
        """Test that repeated words are numbered within a verse."""
        verse = build_verse("3JN 1:1", 1, ["The", "elder", "to", "Gaius", "the", "beloved"])
        the_tokens = [t for t in verse.word_tokens if t.content.lower() == "the"]
        assert [t.occurrence for t in the_tokens] == [1, 2]
        assert all(t.total_occurrences == 2 for t in the_tokens)
        assert [t.unique_id for t in the_tokens] == ["3JN 1:1:the:1", "3JN 1:1:the:2"]

    def test_non_word_tokens_are_not_counted(self):
        """Test that punctuation tokens do not take part in occurrence counting."""
        tokens = [
            WordToken(unique_id="a", content="and"),
            WordToken(unique_id="p", content=",", type="punctuation"),
            WordToken(unique_id="b", content="and"),
        ]
        result = assign_occurrences(tokens)
        assert [(t.occurrence, t.total_occurrences) for t in result] == [(1, 2), (0, 0), (2, 2)]
        # Inputs are untouched
        assert tokens[1].occurrence == 1

    def test_build_verse_positions(self):
        """Test character positions and word indexes of a built verse."""
        verse = build_verse("3JN 1:1", 1, ["ὁ", "πρεσβύτερος"])
        first, second = verse.word_tokens
        assert (first.position.start, first.position.end, first.position.word_index) == (0, 1, 0)
        assert (second.position.start, second.position.end, second.position.word_index) == (2, 13, 1)
        assert verse.text == "ὁ πρεσβύτερος"
        assert all(t.verse_ref == "3JN 1:1" for t in verse.word_tokens)
