"""
Panels package - cross-panel highlight broadcasting.

- messages: Broadcast message and reference-token shapes
- bus: Synchronous publish/subscribe message bus
- panel: Panel variants and panel-local highlight resolution
- registry: Process-scoped panel registry
- service: Click handling and broadcast orchestration
- token_groups: Underlined token groups and colour assignment
"""

from .bus import MessageBus, Subscription
from .messages import HighlightMessage, MessageType, PanelHighlight, ReferenceToken
from .panel import (
    ORIGINAL_LANGUAGE_CODES,
    OriginalPanel,
    Panel,
    PanelRegistration,
    TargetPanel,
    panel_for,
)
from .registry import PanelRegistry
from .service import CrossPanelService
from .token_groups import TokenGroup, TokenGroupBook, group_from_quote_result

__all__ = [
    "ORIGINAL_LANGUAGE_CODES",
    "CrossPanelService",
    "HighlightMessage",
    "MessageBus",
    "MessageType",
    "OriginalPanel",
    "Panel",
    "PanelHighlight",
    "PanelRegistration",
    "PanelRegistry",
    "ReferenceToken",
    "Subscription",
    "TargetPanel",
    "TokenGroup",
    "TokenGroupBook",
    "group_from_quote_result",
    "panel_for",
]
