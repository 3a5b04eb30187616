"""Due-card retrieval for a deck."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from src.srs.models import Deck, DueQueueResult, Flashcard, ensure_utc


def _queue_key(card: Flashcard) -> tuple:
    return (card.scheduling.due_date, card.id)


class DueQueueManager:
    """Computes the ordered view of cards waiting for review."""

    def due_queue(self, deck: Deck, now: Optional[datetime] = None) -> DueQueueResult:
        """Return cards due at ``now`` (earliest first) and the next future due time."""
        now = ensure_utc(now)

        due = sorted((card for card in deck if card.is_due(now)), key=_queue_key)
        upcoming = [card.scheduling.due_date for card in deck if not card.is_due(now)]

        return DueQueueResult(
            queue=due,
            total_due=len(due),
            next_review_time=min(upcoming) if upcoming else None,
        )

    def next_card(
        self,
        deck: Deck,
        now: Optional[datetime] = None,
        include_future: bool = True,
    ) -> Optional[Flashcard]:
        """Return the card a learner should study next.

        Falls back to the earliest upcoming card when nothing is due, unless
        ``include_future`` is disabled.
        """
        now = ensure_utc(now)

        candidates = list(deck) if include_future else [card for card in deck if card.is_due(now)]
        if not candidates:
            return None
        return min(candidates, key=_queue_key)
