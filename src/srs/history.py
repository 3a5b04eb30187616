"""Per-deck review log used to derive study streaks."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Deque, Dict, Optional, Set, Tuple

from src.srs.models import Quality, ensure_utc


DEFAULT_HISTORY_SIZE = 1000


@dataclass(frozen=True, slots=True)
class ReviewLogEntry:
    """One recorded review outcome."""

    card_id: str
    quality: Quality
    reviewed_at: datetime
    interval: int
    response_time_ms: Optional[int] = None


class StudyHistory:
    """Maintain a rolling review log per deck."""

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        if history_size < 1:
            raise ValueError("history_size must be a positive integer.")
        self._history_size = history_size
        self._history: Dict[str, Deque[ReviewLogEntry]] = {}

    def get(self, deck_id: str) -> Deque[ReviewLogEntry]:
        """Return or create the log associated with a deck."""
        history = self._history.get(deck_id)
        if history is None:
            history = deque(maxlen=self._history_size)
            self._history[deck_id] = history
        return history

    def entries(self, deck_id: str) -> Tuple[ReviewLogEntry, ...]:
        """Return stored reviews for the deck in chronological order."""
        return tuple(sorted(self._history.get(deck_id, ()), key=lambda entry: entry.reviewed_at))

    def record(
        self,
        deck_id: str,
        card_id: str,
        quality: Quality,
        reviewed_at: datetime,
        interval: int,
        response_time_ms: Optional[int] = None,
    ) -> ReviewLogEntry:
        entry = ReviewLogEntry(
            card_id=card_id,
            quality=quality,
            reviewed_at=ensure_utc(reviewed_at),
            interval=interval,
            response_time_ms=response_time_ms,
        )
        self.get(deck_id).append(entry)
        return entry

    def study_streak(self, deck_id: str, now: Optional[datetime] = None) -> int:
        """Count consecutive UTC days with at least one review.

        The streak ends today, or yesterday when nothing was reviewed yet today.
        """
        now = ensure_utc(now)

        days: Set[date] = {
            _utc_day(entry.reviewed_at) for entry in self._history.get(deck_id, ())
        }
        if not days:
            return 0

        cursor = _utc_day(now)
        if cursor not in days:
            cursor -= timedelta(days=1)

        streak = 0
        while cursor in days:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    def accuracy(self, deck_id: str) -> float:
        """Share of logged reviews rated as a successful recall."""
        history = self._history.get(deck_id)
        if not history:
            return 0.0
        correct = sum(1 for entry in history if entry.quality.is_success)
        return round(correct / len(history), 2)

    def clear(self, deck_id: str) -> None:
        self._history.pop(deck_id, None)

    def tracked_decks(self) -> Tuple[str, ...]:
        return tuple(self._history)


def _utc_day(moment: datetime) -> date:
    return ensure_utc(moment).date()
