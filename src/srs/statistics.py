"""Aggregate reporting over a deck."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from src.srs.models import Deck, DeckSummary, ensure_utc
from src.srs.scheduler import round_half_up


MASTERED_REPETITIONS = 3


class DeckStatistics:
    def summarize(self, deck: Deck, now: Optional[datetime] = None) -> DeckSummary:
        """Return counts and averages for every card in ``deck``.

        Averages cover the whole deck, not only due cards. An empty deck
        reports averages of zero.
        """
        now = ensure_utc(now)

        total = len(deck)
        due = sum(1 for card in deck if card.is_due(now))
        reviewed = sum(1 for card in deck if card.scheduling.total_reviews > 0)
        mastered = sum(
            1 for card in deck if card.scheduling.repetition_count >= MASTERED_REPETITIONS
        )

        if total:
            average_ease = sum(card.scheduling.ease_factor for card in deck) / total
            average_interval = sum(card.scheduling.interval for card in deck) / total
        else:
            average_ease = 0.0
            average_interval = 0.0

        return DeckSummary(
            total_cards=total,
            due_cards=due,
            reviewed_cards=reviewed,
            new_cards=total - reviewed,
            average_ease_factor=round_half_up(average_ease, 2),
            average_interval=round_half_up(average_interval, 1),
            mastered_cards=mastered,
        )
