"""
application.observers - Ready-made SynthesisObserver implementations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from domain.events import SynthesisCompleted, SynthesisEvent, SynthesisStarted
from domain.models import MenuTree

logger = logging.getLogger(__name__)


@dataclass
class RecordingObserver:
    """Collects events in arrival order."""
    events: list[SynthesisEvent] = field(default_factory=list)

    def notify(self, event: SynthesisEvent) -> None:
        self.events.append(event)

    @property
    def completed_tree(self) -> Optional[MenuTree]:
        for event in reversed(self.events):
            if isinstance(event, SynthesisCompleted):
                return event.tree
        return None


class LoggingObserver:
    """Writes each synthesis event to the module logger."""

    def notify(self, event: SynthesisEvent) -> None:
        if isinstance(event, SynthesisStarted):
            logger.info(
                "Menu synthesis started (role=%s): %s",
                event.role.value, event.utterance[:80],
            )
        else:
            logger.info(
                "Menu synthesis completed (role=%s, nodes=%d)",
                event.tree.role.value, sum(1 for _ in event.tree.nodes()),
            )
