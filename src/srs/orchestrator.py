"""Apply a single learner review to a card inside a deck."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from src.srs.errors import NotFoundError, OperationResult, ValidationError, run_guarded
from src.srs.models import Deck, Quality, ReviewRequest, ReviewResult, ensure_utc
from src.srs.scheduler import ReviewScheduler


LOGGER = logging.getLogger(__name__)


class ReviewOrchestrator:
    """Validates review requests and records the new schedule on the card."""

    def __init__(self, scheduler: Optional[ReviewScheduler] = None) -> None:
        self._scheduler = scheduler or ReviewScheduler()

    @property
    def scheduler(self) -> ReviewScheduler:
        return self._scheduler

    def review(
        self,
        deck: Deck,
        request: ReviewRequest,
        *,
        now: Optional[datetime] = None,
    ) -> OperationResult[ReviewResult]:
        """Reschedule the requested card; other cards in ``deck`` are untouched."""
        return run_guarded("Flashcard review", lambda: self._review(deck, request, now))

    def _review(
        self,
        deck: Deck,
        request: ReviewRequest,
        now: Optional[datetime],
    ) -> ReviewResult:
        now = ensure_utc(now)

        quality = Quality.parse(request.quality)
        response_time = request.response_time_ms
        if response_time is not None and (
            isinstance(response_time, bool) or not isinstance(response_time, int) or response_time < 0
        ):
            raise ValidationError(
                "Response time must be a non-negative number of milliseconds",
                "invalid_response_time",
            )

        card = deck.get_card(request.card_id)
        if card is None:
            raise NotFoundError(
                f"Flashcard {request.card_id!r} not found in deck {deck.id!r}", "card_not_found"
            )

        previous = card.scheduling
        card.scheduling = self._scheduler.next_state(previous, quality, now=now)

        LOGGER.debug(
            "Reviewed card %s with quality %d: interval %d -> %d days, ease %.2f -> %.2f.",
            card.id,
            quality,
            previous.interval,
            card.scheduling.interval,
            previous.ease_factor,
            card.scheduling.ease_factor,
        )
        return ReviewResult(
            next_review_date=card.scheduling.due_date,
            interval=card.scheduling.interval,
            updated_card=card,
            previous_state=previous,
        )
