"""
Process-scoped registry of mounted panels.

The registry is an explicit object handed to whatever needs it. It is
initialized by the first registration and cleared when the last panel
unregisters. Registration order is preserved; it is the order in which
panels are listed and counted.
"""

import logging
import threading
from collections import Counter
from typing import Dict, FrozenSet, List, Optional

from .panel import (
    ORIGINAL_LANGUAGE_CODES,
    HighlightCallback,
    Panel,
    PanelRegistration,
    panel_for,
)

logger = logging.getLogger(__name__)


class PanelRegistry:
    """Tracks registered panels keyed by resource id."""

    def __init__(self, original_languages: FrozenSet[str] = ORIGINAL_LANGUAGE_CODES):
        self.original_languages = frozenset(code.lower() for code in original_languages)
        self._lock = threading.RLock()
        self._panels: Dict[str, Panel] = {}
        self.initialized = False

    def register(
        self,
        registration: PanelRegistration,
        on_highlight: Optional[HighlightCallback] = None,
    ) -> Panel:
        """
        Register a panel, replacing any earlier record with the same id.

        A replaced panel moves to the end of the registration order.
        """
        panel = panel_for(registration, on_highlight, self.original_languages)
        with self._lock:
            replaced = self._panels.pop(registration.resource_id, None) is not None
            self._panels[registration.resource_id] = panel
            if not self.initialized:
                self.initialized = True
                logger.debug("Panel registry initialized")
        logger.info(
            "%s panel %s (%s, %s, %s)",
            "Re-registered" if replaced else "Registered",
            registration.resource_id,
            registration.resource_type,
            registration.language,
            panel.kind,
        )
        return panel

    def unregister(self, resource_id: str) -> Optional[Panel]:
        """Remove a panel; returns it, or None if it was not registered."""
        with self._lock:
            panel = self._panels.pop(resource_id, None)
            if panel is not None and not self._panels:
                self.clear()
        if panel is not None:
            logger.info("Unregistered panel %s", resource_id)
        return panel

    def clear(self):
        with self._lock:
            self._panels.clear()
            self.initialized = False
        logger.debug("Panel registry cleared")

    def get(self, resource_id: str) -> Optional[Panel]:
        with self._lock:
            return self._panels.get(resource_id)

    def panels(self) -> List[Panel]:
        """Snapshot of registered panels in registration order."""
        with self._lock:
            return list(self._panels.values())

    def __contains__(self, resource_id: str) -> bool:
        with self._lock:
            return resource_id in self._panels

    def __len__(self) -> int:
        with self._lock:
            return len(self._panels)

    def statistics(self) -> Dict:
        """Panel counts by kind, language and resource type."""
        panels = self.panels()
        original = sum(1 for p in panels if p.kind == "original")
        return {
            "total_panels": len(panels),
            "original_language_panels": original,
            "target_language_panels": len(panels) - original,
            "by_language": dict(Counter(p.language for p in panels)),
            "by_resource_type": dict(
                Counter(p.registration.resource_type for p in panels)
            ),
        }
