"""
Tests for resolving original-language tokens to aligned translation tokens.
"""

from linker.ql_model import (
    ProcessedChapter,
    QuoteReference,
    TokenAlignment,
    WordToken,
    build_verse,
)
from linker.quotes import ErrorKind, find_aligned_tokens, find_original_tokens
from linker.quotes.alignment import AlignmentTier, alignment_tier

from conftest import aligned_to

VERSE_1 = QuoteReference(book="3JN", start_chapter=1, start_verse=1)


def contents(tokens):
    return [t.content for t in tokens]


def target_chapter(reference, words, alignments, number=1):
    verse = build_verse(reference, number, words, alignments)
    return [ProcessedChapter(number=1, verses=(verse,))]


class TestAlignmentTier:
    def test_exact_link(self):
        """Test that a matching source word id links the tokens directly."""
        original = WordToken(unique_id="3JN 1:1:πρεσβύτερος:1", content="πρεσβύτερος", verse_ref="3JN 1:1")
        target = WordToken(
            unique_id="3JN 1:1:elder:1",
            content="elder",
            verse_ref="3JN 1:1",
            alignment=TokenAlignment(source_word_id="3JN 1:1:πρεσβύτερος:1"),
        )
        assert alignment_tier(original, target) == AlignmentTier.EXACT_LINK

    def test_unaligned_target(self, greek_tokens):
        """Test that a target token without alignment data is never aligned."""
        target = WordToken(unique_id="3JN 1:1:to:1", content="to", verse_ref="3JN 1:1")
        assert alignment_tier(greek_tokens["ὁ"], target) is None

    def test_strong_requires_same_verse(self, greek_tokens):
        """Test that a shared Strong's number only links tokens in the same verse."""
        target = WordToken(
            unique_id="3JN 1:2:elder:1",
            content="elder",
            verse_ref="3JN 1:2",
            alignment=TokenAlignment(strong="G4245"),
        )
        assert alignment_tier(greek_tokens["πρεσβύτερος"], target) is None

    def test_content_and_occurrence(self, greek_tokens):
        """Test alignment by normalized source content and occurrence."""
        target = WordToken(
            unique_id="3JN 1:1:elder:1",
            content="elder",
            verse_ref="3jn 1:1",
            alignment=TokenAlignment(source_content="Πρεσβύτερος", source_occurrence=1),
        )
        assert (
            alignment_tier(greek_tokens["πρεσβύτερος"], target)
            == AlignmentTier.CONTENT_OCCURRENCE
        )

    def test_content_with_other_occurrence(self, greek_tokens):
        """Test that a different source occurrence prevents a content match."""
        target = WordToken(
            unique_id="3JN 1:1:elder:1",
            content="elder",
            verse_ref="3JN 1:1",
            alignment=TokenAlignment(source_content="πρεσβύτερος", source_occurrence=2),
        )
        assert alignment_tier(greek_tokens["πρεσβύτερος"], target) is None


class TestFindAlignedTokens:
    def test_single_exact_link(self):
        """Test resolving one original token through its exact link."""
        original = WordToken(
            unique_id="3JN 1:1:πρεσβύτερος:1", content="πρεσβύτερος", verse_ref="3JN 1:1"
        )
        chapters = target_chapter(
            "3JN 1:1",
            ["The", "elder"],
            {1: TokenAlignment(source_word_id="3JN 1:1:πρεσβύτερος:1")},
        )

        result = find_aligned_tokens([original], chapters, VERSE_1)

        assert result.success
        assert len(result.aligned_matches) == 1
        match = result.aligned_matches[0]
        assert match.original_token is original
        assert contents(match.aligned_tokens) == ["elder"]
        assert match.verse_ref == "3JN 1:1"
        assert contents(result.total_aligned_tokens) == ["elder"]

    def test_quote_result_to_translation(self, greek_chapters, english_chapters):
        """Test aligning quote matcher output to an English verse."""
        quote = find_original_tokens(greek_chapters, "πρεσβύτερος Γαΐῳ", 1, VERSE_1)
        result = find_aligned_tokens(quote.total_tokens, english_chapters, VERSE_1)

        assert result.success
        assert [contents(m.aligned_tokens) for m in result.aligned_matches] == [
            ["elder"],
            ["Gaius"],
        ]

    def test_shared_strong_links_every_article(self, greek_tokens, english_chapters):
        """Test that a repeated Strong's number aligns every token carrying it."""
        # ὁ and τῷ share G3588, so both English articles align to ὁ
        result = find_aligned_tokens([greek_tokens["ὁ"]], english_chapters, VERSE_1)
        assert contents(result.total_aligned_tokens) == ["The", "the"]

    def test_input_order_is_kept(self, greek_tokens, english_chapters):
        """Test that aligned matches follow the order of the original tokens."""
        originals = [greek_tokens["ἀγαπητῷ"], greek_tokens["πρεσβύτερος"]]
        result = find_aligned_tokens(originals, english_chapters, VERSE_1)
        assert [m.original_token.content for m in result.aligned_matches] == [
            "ἀγαπητῷ",
            "πρεσβύτερος",
        ]
        assert contents(result.total_aligned_tokens) == ["beloved", "elder"]

    def test_tokens_without_target_verse_are_skipped(self, greek_chapters, english_chapters):
        """Test that original tokens with no target verse contribute nothing."""
        originals = list(greek_chapters[0].verses[1].word_tokens)
        reference = QuoteReference("3JN", 1, 1, end_verse=2)
        result = find_aligned_tokens(originals, english_chapters, reference)
        assert result.success
        assert result.aligned_matches == []
        assert result.total_aligned_tokens == []

    def test_verse_numbers_compared_numerically(self, greek_tokens):
        """Test that verse references are compared by number, not by string."""
        chapters = target_chapter(
            "3jn 1:01", ["elder"], {0: aligned_to(greek_tokens["πρεσβύτερος"])}
        )
        result = find_aligned_tokens([greek_tokens["πρεσβύτερος"]], chapters, VERSE_1)
        assert contents(result.total_aligned_tokens) == ["elder"]
        assert result.aligned_matches[0].verse_ref == "3jn 1:01"

    def test_malformed_verse_reference(self, english_chapters):
        """Test that a malformed verse reference becomes an internal error."""
        original = WordToken(unique_id="broken", content="ὁ", verse_ref="not a verse")
        result = find_aligned_tokens([original], english_chapters, VERSE_1)
        assert not result.success
        assert result.error.kind == ErrorKind.INTERNAL_ERROR
        assert result.error.message.startswith("Error finding aligned tokens")

    def test_to_dict(self, greek_tokens, english_chapters):
        """Test the camelCase dictionary form of an alignment result."""
        data = find_aligned_tokens(
            [greek_tokens["Γαΐῳ"]], english_chapters, VERSE_1
        ).to_dict()
        assert data["success"] is True
        assert data["alignedMatches"][0]["originalToken"]["content"] == "Γαΐῳ"
        assert [t["content"] for t in data["totalAlignedTokens"]] == ["Gaius"]
