"""
Loading and validation of tokenized chapters.

Converts the JSON-shaped chapter/verse/token dictionaries handed over by the
ingestion pipeline into the frozen model, skipping malformed entries.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from linker.ql_model import (
    TOKEN_TYPES,
    WORD,
    ProcessedChapter,
    ProcessedVerse,
    TokenAlignment,
    TokenPosition,
    WordToken,
)

logger = logging.getLogger(__name__)

REQUIRED_TOKEN_FIELDS = {"uniqueId", "content"}


def validate_raw_token(token_dict: Dict) -> bool:
    """
    Validate that a raw token dictionary can be converted.

    Args:
        token_dict: Dictionary to validate

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(token_dict, dict):
        return False

    missing_fields = REQUIRED_TOKEN_FIELDS - set(token_dict.keys())
    if missing_fields:
        logger.warning("Token missing required fields: %s", missing_fields)
        return False

    unique_id = token_dict["uniqueId"]
    content = token_dict["content"]
    token_type = token_dict.get("type", WORD)
    occurrence = token_dict.get("occurrence", 1)

    if not isinstance(unique_id, str) or not unique_id:
        logger.warning("Invalid uniqueId: %s", unique_id)
        return False

    if not isinstance(content, str) or not content:
        logger.warning("Invalid content: %s", content)
        return False

    if token_type not in TOKEN_TYPES:
        logger.warning("Invalid token type: %s", token_type)
        return False

    if not _is_count(occurrence):
        logger.warning("Invalid occurrence: %s", occurrence)
        return False

    total_occurrences = token_dict.get("totalOccurrences", 1)
    if not _is_count(total_occurrences):
        logger.warning("Invalid totalOccurrences: %s", total_occurrences)
        return False

    position = token_dict.get("position")
    if position is not None and (
        not isinstance(position, dict)
        or not all(
            _is_count(position.get(key, 0)) for key in ("start", "end", "wordIndex")
        )
    ):
        logger.warning("Invalid position: %s", position)
        return False

    return True


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _optional_int(value: Any) -> Optional[int]:
    # Ingestion emits occurrence numbers as strings in places
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _convert_alignment(data: Optional[Dict]) -> Optional[TokenAlignment]:
    if not isinstance(data, dict):
        return None
    return TokenAlignment(
        source_word_id=data.get("sourceWordId") or None,
        source_content=data.get("sourceContent") or None,
        source_occurrence=_optional_int(data.get("sourceOccurrence")),
        strong=data.get("strong") or None,
        lemma=data.get("lemma") or None,
        morph=data.get("morph") or None,
    )


def convert_token(token_dict: Dict, verse_ref: str = "") -> WordToken:
    """Convert a validated raw token dictionary to a WordToken."""
    position = token_dict.get("position") or {}
    return WordToken(
        unique_id=token_dict["uniqueId"],
        content=token_dict["content"],
        type=token_dict.get("type", WORD),
        occurrence=token_dict.get("occurrence", 1),
        total_occurrences=token_dict.get("totalOccurrences", 1),
        position=TokenPosition(
            start=position.get("start", 0),
            end=position.get("end", 0),
            word_index=position.get("wordIndex", 0),
        ),
        alignment=_convert_alignment(token_dict.get("alignment")),
        verse_ref=token_dict.get("verseRef") or verse_ref,
    )


def load_verse(verse_dict: Dict) -> Optional[ProcessedVerse]:
    """Convert one raw verse; returns None when the verse itself is malformed."""
    if not isinstance(verse_dict, dict) or not isinstance(
        verse_dict.get("number"), int
    ):
        logger.warning("Skipping verse without a numeric 'number': %s", verse_dict)
        return None

    reference = verse_dict.get("reference", "")
    tokens = []
    for i, token_dict in enumerate(verse_dict.get("wordTokens") or []):
        if validate_raw_token(token_dict):
            tokens.append(convert_token(token_dict, reference))
        else:
            logger.warning("Skipping invalid token %s in %s", i, reference)

    return ProcessedVerse(
        reference=reference,
        number=verse_dict["number"],
        text=verse_dict.get("text", ""),
        word_tokens=tuple(tokens),
    )


def load_chapters(data: Iterable[Dict]) -> List[ProcessedChapter]:
    """
    Load and validate a list of raw chapter dictionaries.

    Args:
        data: Raw chapters, each ``{"number": int, "verses": [...]}``

    Returns:
        Converted chapters (invalid chapters, verses and tokens are skipped)
    """
    chapters = []
    for chapter_dict in data:
        if not isinstance(chapter_dict, dict) or not isinstance(
            chapter_dict.get("number"), int
        ):
            logger.warning("Skipping chapter without a numeric 'number'")
            continue
        verses = []
        for verse_dict in chapter_dict.get("verses") or []:
            verse = load_verse(verse_dict)
            if verse is not None:
                verses.append(verse)
        chapters.append(
            ProcessedChapter(number=chapter_dict["number"], verses=tuple(verses))
        )

    logger.info(
        "Loaded %s chapters, %s verses",
        len(chapters),
        sum(len(c.verses) for c in chapters),
    )
    return chapters


def load_chapters_file(path: Union[str, Path]) -> List[ProcessedChapter]:
    """Read UTF-8 JSON chapters from disk."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # Accept either a bare list or {"chapters": [...]}
    if isinstance(data, dict):
        data = data.get("chapters", [])
    return load_chapters(data)


def token_to_dict(token: WordToken) -> Dict[str, Any]:
    """Render a WordToken in the ingestion pipeline's camelCase shape."""
    data: Dict[str, Any] = {
        "uniqueId": token.unique_id,
        "content": token.content,
        "type": token.type,
        "occurrence": token.occurrence,
        "totalOccurrences": token.total_occurrences,
        "verseRef": token.owning_verse_ref,
        "position": {
            "start": token.position.start,
            "end": token.position.end,
            "wordIndex": token.position.word_index,
        },
    }
    if token.alignment is not None:
        alignment = token.alignment
        data["alignment"] = {
            key: value
            for key, value in (
                ("sourceWordId", alignment.source_word_id),
                ("sourceContent", alignment.source_content),
                ("sourceOccurrence", alignment.source_occurrence),
                ("strong", alignment.strong),
                ("lemma", alignment.lemma),
                ("morph", alignment.morph),
            )
            if value is not None
        }
    return data


def chapters_to_dicts(chapters: Iterable[ProcessedChapter]) -> List[Dict[str, Any]]:
    """Render chapters back into the raw shape accepted by ``load_chapters``."""
    return [
        {
            "number": chapter.number,
            "verses": [
                {
                    "reference": verse.reference,
                    "number": verse.number,
                    "text": verse.text,
                    "wordTokens": [token_to_dict(t) for t in verse.word_tokens],
                }
                for verse in chapter.verses
            ],
        }
        for chapter in chapters
    ]
