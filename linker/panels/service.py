"""
Cross-panel broadcast service.

Turns a click on a rendered token into a single broadcast carrying the
implicated original-language token. Each registered panel resolves its own
highlights from that token; no panel needs to know another's internals.
"""

import logging
import threading
from typing import Dict, Optional

from linker.ql_model import ProcessedVerse, WordToken

from .bus import MessageBus, MessageHandler, Subscription
from .messages import HighlightMessage, MessageType, ReferenceToken, verse_reference
from .panel import HighlightCallback, Panel, PanelRegistration
from .registry import PanelRegistry

logger = logging.getLogger(__name__)


class CrossPanelService:
    """Registers panels and broadcasts highlight instructions to them."""

    def __init__(
        self,
        registry: Optional[PanelRegistry] = None,
        bus: Optional[MessageBus] = None,
    ):
        self.registry = registry if registry is not None else PanelRegistry()
        self.bus = bus if bus is not None else MessageBus()
        self._subscriptions: Dict[str, Subscription] = {}
        # Registry order and delivery order change together
        self._lock = threading.RLock()

    # === Registration ===

    def register_panel(
        self,
        registration: PanelRegistration,
        on_highlight: Optional[HighlightCallback] = None,
    ) -> Panel:
        """Register (or re-register) a panel and subscribe it to broadcasts."""
        with self._lock:
            previous = self._subscriptions.pop(registration.resource_id, None)
            if previous is not None:
                self.bus.unsubscribe(previous)
            panel = self.registry.register(registration, on_highlight)
            self._subscriptions[registration.resource_id] = self.bus.subscribe(
                panel.receive, name=registration.resource_id
            )
        return panel

    def unregister_panel(self, resource_id: str) -> bool:
        """Unregister a panel; it receives no broadcast after this returns."""
        with self._lock:
            subscription = self._subscriptions.pop(resource_id, None)
            if subscription is not None:
                self.bus.unsubscribe(subscription)
            return self.registry.unregister(resource_id) is not None

    def add_message_handler(self, handler: MessageHandler) -> Subscription:
        """Observe every broadcast message, in addition to the panels."""
        return self.bus.subscribe(handler, name="observer")

    def remove_message_handler(self, subscription: Subscription) -> bool:
        return self.bus.unsubscribe(subscription)

    # === Broadcasting ===

    def reference_token_for(
        self,
        token: WordToken,
        source_resource_id: str,
        source_verse: Optional[ProcessedVerse] = None,
    ) -> Optional[ReferenceToken]:
        """
        Derive the original-language token implicated by a click.

        A click in an original-language panel refers to the token itself. A
        click in a translation refers to the token's own alignment data, so
        no original-language panel has to be registered.
        """
        verse_ref = verse_reference(source_verse)
        panel = self.registry.get(source_resource_id)
        if panel is not None:
            if panel.kind == "original":
                return ReferenceToken.from_original(token, verse_ref)
            return ReferenceToken.from_alignment(token, verse_ref)

        logger.warning("Click from unregistered panel %s", source_resource_id)
        derived = ReferenceToken.from_alignment(token, verse_ref)
        if derived is not None:
            return derived
        return ReferenceToken.from_original(token, verse_ref)

    def handle_word_click(
        self,
        token: WordToken,
        source_resource_id: str,
        source_verse: Optional[ProcessedVerse] = None,
    ) -> Optional[HighlightMessage]:
        """
        Broadcast a highlight for a clicked token.

        Returns:
            The published message, or None when the token cannot be linked to
            an original-language token (non-word token, missing alignment)
        """
        if not token.is_highlightable:
            logger.debug("Ignoring click on %s token %r", token.type, token.content)
            return None

        reference = self.reference_token_for(token, source_resource_id, source_verse)
        if reference is None:
            logger.info(
                "Token %s in %s has no alignment; nothing to highlight",
                token.unique_id,
                source_resource_id,
            )
            return None

        message = HighlightMessage(
            type=MessageType.HIGHLIGHT_TOKENS,
            source_resource_id=source_resource_id,
            source_content=token.content,
            original_language_token=reference,
            source_token_id=token.unique_id,
        )
        delivered = self.bus.publish(message)
        logger.info(
            "Broadcast %r from %s (original %s) to %s handlers",
            token.content,
            source_resource_id,
            reference.unique_id or reference.content,
            delivered,
        )
        return message

    def clear_highlights(self) -> HighlightMessage:
        """Tell every panel to drop its highlights."""
        message = HighlightMessage.clear()
        self.bus.publish(message)
        return message

    # === Diagnostics ===

    def get_statistics(self) -> Dict:
        stats = self.registry.statistics()
        stats["subscribers"] = len(self.bus)
        return stats
