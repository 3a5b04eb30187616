"""Caller-owned facade combining generation, review, queue and reporting."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Protocol, Sequence

from src.srs.due_queue import DueQueueManager
from src.srs.errors import NotFoundError, OperationResult, run_guarded
from src.srs.factory import DEFAULT_CARD_LIMIT, MAX_CARD_LIMIT, FlashcardFactory
from src.srs.history import StudyHistory
from src.srs.models import (
    Deck,
    DeckSummary,
    DueQueueResult,
    Flashcard,
    GenerateRequest,
    GenerateResult,
    Quality,
    ReviewRequest,
    ReviewResult,
    SourceText,
    TextSegment,
    ensure_utc,
)
from src.srs.orchestrator import ReviewOrchestrator
from src.srs.scheduler import ReviewScheduler
from src.srs.statistics import DeckStatistics


LOGGER = logging.getLogger(__name__)


class SegmentSource(Protocol):
    """Minimal interface required from the annotation pipeline."""

    def get_source(self, source_id: str) -> Optional[SourceText]:
        ...


class ReviewService:
    """Schedules flashcard study for decks handed in by the caller.

    Each instance keeps its own review history, so independent sessions can
    use separate services without sharing state. Logs are kept per deck id
    until ``forget_deck`` drops them, so call it when a deck is discarded.
    """

    def __init__(
        self,
        scheduler: Optional[ReviewScheduler] = None,
        history: Optional[StudyHistory] = None,
        source_provider: Optional[SegmentSource] = None,
        default_card_limit: int = DEFAULT_CARD_LIMIT,
        max_card_limit: int = MAX_CARD_LIMIT,
    ) -> None:
        self._scheduler = scheduler or ReviewScheduler()
        self._history = history or StudyHistory()
        self._source_provider = source_provider
        self._factory = FlashcardFactory(
            default_card_limit=default_card_limit,
            max_card_limit=max_card_limit,
        )
        self._orchestrator = ReviewOrchestrator(self._scheduler)
        self._queue = DueQueueManager()
        self._statistics = DeckStatistics()

    @property
    def history(self) -> StudyHistory:
        return self._history

    def generate_deck(
        self,
        request: GenerateRequest,
        segments: Optional[Sequence[TextSegment]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> OperationResult[GenerateResult]:
        """Build a deck from ``segments`` or from the source named in ``request``."""
        source: Optional[SourceText] = None
        if segments is None and not (request.source_id or "").strip():
            # The factory reports the missing id as a validation failure.
            segments = ()
        elif segments is None:
            lookup = run_guarded("Source lookup", lambda: self._load_source(request.source_id))
            if not lookup.ok:
                return OperationResult.failure(lookup.error)
            source = lookup.value
            segments = source.segments
        return self._factory.generate(request, segments, source=source, now=now)

    def review(
        self,
        deck: Deck,
        request: ReviewRequest,
        *,
        now: Optional[datetime] = None,
    ) -> OperationResult[ReviewResult]:
        """Apply a review and log it for streak tracking."""
        now = ensure_utc(now)

        outcome = self._orchestrator.review(deck, request, now=now)
        if not outcome.ok:
            return outcome

        result = outcome.value
        self._history.record(
            deck.id,
            result.updated_card.id,
            Quality.parse(request.quality),
            reviewed_at=now,
            interval=result.interval,
            response_time_ms=request.response_time_ms,
        )
        streak = self._history.study_streak(deck.id, now=now)
        return OperationResult.success(replace(result, study_streak=streak))

    def due_queue(self, deck: Deck, *, now: Optional[datetime] = None) -> DueQueueResult:
        now = ensure_utc(now)
        result = self._queue.due_queue(deck, now)
        return replace(result, study_streak=self._history.study_streak(deck.id, now=now))

    def next_card(
        self,
        deck: Deck,
        *,
        now: Optional[datetime] = None,
        include_future: bool = True,
    ) -> Optional[Flashcard]:
        return self._queue.next_card(deck, now, include_future=include_future)

    def statistics(self, deck: Deck, *, now: Optional[datetime] = None) -> DeckSummary:
        return self._statistics.summarize(deck, now)

    def forget_deck(self, deck_id: str) -> None:
        """Drop the review log kept for a deck the caller no longer studies."""
        self._history.clear(deck_id)

    def _load_source(self, source_id: str) -> SourceText:
        if self._source_provider is None:
            raise NotFoundError(
                f"Source {source_id!r} cannot be resolved without a segment provider",
                "source_not_found",
            )
        source = self._source_provider.get_source(source_id)
        if source is None:
            raise NotFoundError(f"Source {source_id!r} not found", "source_not_found")
        LOGGER.debug("Loaded %d segments for source %s.", len(source.segments), source_id)
        return source
