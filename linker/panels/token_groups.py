"""
Token groups to underline in scripture panels.

Groups come from several sources (translation notes, translation-word links)
and each gets a colour class from a fixed palette so that overlapping
groups stay distinguishable.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from linker.ql_model import WordToken
from linker.quotes.core import QuoteMatchResult

logger = logging.getLogger(__name__)

SOURCE_TYPES = ("notes", "translation-words", "other")

COLOR_PALETTE = [
    "#5fa8d3",
    "#72b69d",
    "#bfa75c",
    "#c87f7f",
    "#999ca1",
    "#7fcad3",
    "#cb8b8b",
    "#9b9ea1",
    "#88c39d",
    "#c5ae6d",
]


@dataclass(frozen=True)
class TokenGroup:
    id: str
    source_type: str
    source_id: str
    tokens: Tuple[WordToken, ...] = field(default_factory=tuple)
    label: Optional[str] = None

    def __post_init__(self):
        if self.source_type not in SOURCE_TYPES:
            raise ValueError(f"Unknown token group source type: {self.source_type}")

    def contains(self, unique_id: str) -> bool:
        return any(t.unique_id == unique_id for t in self.tokens)


class TokenGroupBook:
    """The current set of underlined token groups and their colours."""

    def __init__(self):
        self._groups: Dict[str, TokenGroup] = {}
        self._colors: Dict[str, str] = {}

    @property
    def groups(self) -> List[TokenGroup]:
        return list(self._groups.values())

    def add_group(self, group: TokenGroup):
        """Add a group, replacing one with the same id (which keeps its colour)."""
        self._groups.pop(group.id, None)
        self._groups[group.id] = group
        if group.id not in self._colors:
            used = set(self._colors.values())
            self._colors[group.id] = next(
                (color for color in COLOR_PALETTE if color not in used),
                COLOR_PALETTE[0],
            )
        logger.debug("Token group %s: %s tokens", group.id, len(group.tokens))

    def remove_group(self, group_id: str) -> bool:
        self._colors.pop(group_id, None)
        return self._groups.pop(group_id, None) is not None

    def clear_groups(self, source_type: Optional[str] = None):
        """Drop all groups, or only those from ``source_type``."""
        if source_type is None:
            self._groups.clear()
            self._colors.clear()
            return
        for group_id in [g.id for g in self._groups.values() if g.source_type == source_type]:
            self.remove_group(group_id)

    def group_for_token(self, unique_id: str) -> Optional[TokenGroup]:
        """The first group (in insertion order) containing the token."""
        for group in self._groups.values():
            if group.contains(unique_id):
                return group
        return None

    def color_for_group(self, group_id: str) -> str:
        return self._colors.get(group_id, COLOR_PALETTE[0])


def group_from_quote_result(
    group_id: str,
    result: QuoteMatchResult,
    source_type: str = "notes",
    source_id: Optional[str] = None,
    label: Optional[str] = None,
) -> Optional[TokenGroup]:
    """Build a group from a successful quote match; None if it failed or is empty."""
    if not result.success or not result.total_tokens:
        return None
    return TokenGroup(
        id=group_id,
        source_type=source_type,
        source_id=source_id or group_id,
        tokens=tuple(result.total_tokens),
        label=label,
    )
