"""Spaced-repetition scheduling for flashcard reviews (adapted SM-2)."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

from src.srs.models import Quality, SchedulingState, ensure_utc


INITIAL_INTERVAL_DAYS = 1
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
EASE_PENALTY = 0.2
FAILURE_THRESHOLD = Quality.CORRECT_HARD
MAX_INTERVAL_DAYS = 365


class ReviewScheduler:
    """Compute the next scheduling state of a card from a quality rating.

    Instances hold configuration only, so one scheduler can be shared by any
    number of decks. ``max_interval_days=None`` removes the interval ceiling.
    """

    def __init__(self, max_interval_days: Optional[int] = MAX_INTERVAL_DAYS) -> None:
        if max_interval_days is not None and max_interval_days < 1:
            raise ValueError("max_interval_days must be a positive number of days.")
        self._max_interval_days = max_interval_days

    @property
    def max_interval_days(self) -> Optional[int]:
        return self._max_interval_days

    @staticmethod
    def initial_state(now: Optional[datetime] = None) -> SchedulingState:
        """Return the state given to a freshly generated card."""
        now = ensure_utc(now)
        return SchedulingState(
            interval=INITIAL_INTERVAL_DAYS,
            repetition_count=0,
            ease_factor=DEFAULT_EASE_FACTOR,
            due_date=now + timedelta(days=INITIAL_INTERVAL_DAYS),
            total_reviews=0,
        )

    def next_state(
        self,
        state: SchedulingState,
        quality: Quality,
        *,
        now: Optional[datetime] = None,
    ) -> SchedulingState:
        """Return the state following a review rated ``quality``."""
        now = ensure_utc(now)

        quality = Quality(quality)
        ease_factor = next_ease_factor(state.ease_factor, quality)

        if quality < FAILURE_THRESHOLD:
            repetition = 0
            interval = 1
        else:
            repetition = state.repetition_count + 1
            if repetition == 1:
                interval = 1
            elif repetition == 2:
                interval = 6
            else:
                interval = max(1, int(round_half_up(state.interval * ease_factor)))

        if self._max_interval_days is not None and interval > self._max_interval_days:
            interval = self._max_interval_days

        return replace(
            state,
            interval=interval,
            repetition_count=repetition,
            ease_factor=ease_factor,
            due_date=now + timedelta(days=interval),
            last_reviewed_at=now,
            total_reviews=state.total_reviews + 1,
        )


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` places with halves going up, like ``Math.round``."""
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def next_ease_factor(current: float, quality: Quality) -> float:
    """Apply the SM-2 ease adjustment, never dropping below ``MIN_EASE_FACTOR``."""
    if quality >= FAILURE_THRESHOLD:
        adjusted = current + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    else:
        adjusted = current - EASE_PENALTY
    return max(MIN_EASE_FACTOR, adjusted)
