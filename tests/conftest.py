import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from linker.ql_model import (
    ProcessedChapter,
    ProcessedVerse,
    TokenAlignment,
    WordToken,
    build_verse,
)

GREEK_1_1 = ["ὁ", "πρεσβύτερος", "Γαΐῳ", "τῷ", "ἀγαπητῷ"]
GREEK_1_2 = ["ἀγαπητέ", "περὶ", "πάντων", "εὔχομαί", "σε", "εὐοδοῦσθαι", "καὶ", "ὑγιαίνειν"]
GREEK_1_3 = ["ἐχάρην", "γὰρ", "λίαν", "ἐρχομένων", "ἀδελφῶν", "καὶ", "μαρτυρούντων"]

GREEK_LEXICON = {
    "ὁ": ("G3588", "ὁ"),
    "πρεσβύτερος": ("G4245", "πρεσβύτερος"),
    "Γαΐῳ": ("G1050", "Γάϊος"),
    "τῷ": ("G3588", "ὁ"),
    "ἀγαπητῷ": ("G0027", "ἀγαπητός"),
}


def _greek_alignments(words):
    alignments = {}
    for i, word in enumerate(words):
        if word in GREEK_LEXICON:
            strong, lemma = GREEK_LEXICON[word]
            alignments[i] = TokenAlignment(strong=strong, lemma=lemma)
    return alignments


@pytest.fixture
def greek_chapters():
    """3 John 1:1-3 in Greek, as original-language chapters."""
    verses = (
        build_verse("3JN 1:1", 1, GREEK_1_1, _greek_alignments(GREEK_1_1)),
        build_verse("3JN 1:2", 2, GREEK_1_2),
        build_verse("3JN 1:3", 3, GREEK_1_3),
    )
    return [ProcessedChapter(number=1, verses=verses)]


@pytest.fixture
def greek_tokens(greek_chapters):
    """3 John 1:1 Greek tokens keyed by surface text."""
    return {t.content: t for t in greek_chapters[0].verses[0].word_tokens}


def aligned_to(token: WordToken, **extra) -> TokenAlignment:
    """An alignment block pointing at an original-language token."""
    fields = dict(
        source_word_id=token.unique_id,
        source_content=token.content,
        source_occurrence=token.occurrence,
        strong=token.strong,
        lemma=token.lemma,
    )
    fields.update(extra)
    return TokenAlignment(**fields)


@pytest.fixture
def english_chapters(greek_tokens):
    """3 John 1:1 in English, every word linked to its Greek source."""
    words = ["The", "elder", "to", "Gaius", "the", "beloved"]
    alignments = {
        0: aligned_to(greek_tokens["ὁ"]),
        1: aligned_to(greek_tokens["πρεσβύτερος"]),
        3: aligned_to(greek_tokens["Γαΐῳ"]),
        4: aligned_to(greek_tokens["τῷ"]),
        5: aligned_to(greek_tokens["ἀγαπητῷ"]),
    }
    verse = build_verse("3JN 1:1", 1, words, alignments)
    return [ProcessedChapter(number=1, verses=(verse,))]


def ruth_verse(reference, words, source_ids):
    """A Spanish Ruth 1:1 verse; ``source_ids`` maps word index to Hebrew id."""
    alignments = {
        i: TokenAlignment(
            source_word_id=source_id,
            source_content=source_id.split(":")[2],
            source_occurrence=int(source_id.split(":")[3]),
            strong=strong,
            lemma=source_id.split(":")[2],
        )
        for i, (source_id, strong) in source_ids.items()
    }
    return build_verse(reference, 1, words, alignments)


@pytest.fixture
def ruth_panels():
    """ULT and UST renderings of Ruth 1:1 sharing Hebrew alignment data."""
    shafat = ("rut 1:1:שָׁפַט:1", "H8199")
    shofetim = ("rut 1:1:שֹׁפְטִים:1", "H8199b")
    ult = ruth_verse(
        "rut 1:1",
        ["en", "los", "días", "del", "gobierno", "de", "los", "jueces"],
        {4: shafat, 6: shofetim, 7: shofetim},
    )
    ust = ruth_verse(
        "rut 1:1",
        ["cuando", "los", "jueces", "gobernaban", "Israel"],
        {1: shofetim, 2: shofetim, 3: shafat},
    )
    return (
        (ProcessedChapter(number=1, verses=(ult,)),),
        (ProcessedChapter(number=1, verses=(ust,)),),
    )


def punctuation(reference: str, content: str) -> WordToken:
    return WordToken(
        unique_id=f"{reference}:punct:{content}",
        content=content,
        type="punctuation",
        occurrence=0,
        total_occurrences=0,
        verse_ref=reference,
    )


def with_tokens(verse: ProcessedVerse, tokens) -> ProcessedVerse:
    return ProcessedVerse(
        reference=verse.reference,
        number=verse.number,
        text=verse.text,
        word_tokens=tuple(tokens),
    )
