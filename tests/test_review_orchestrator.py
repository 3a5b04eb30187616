from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.srs.errors import ErrorKind, ValidationError
from src.srs.models import Deck, Quality, ReviewRequest
from src.srs.orchestrator import ReviewOrchestrator


def test_review_updates_only_the_requested_card(deck: Deck, now: datetime) -> None:
    target, *others = deck.cards
    untouched = [card.scheduling for card in others]

    result = ReviewOrchestrator().review(
        deck, ReviewRequest(card_id=target.id, quality=5), now=now
    )

    assert result.ok
    review = result.value
    assert review.updated_card is deck.get_card(target.id)
    assert review.interval == 1
    assert review.next_review_date == now + timedelta(days=1)
    assert review.previous_state.total_reviews == 0
    assert target.scheduling.repetition_count == 1
    assert target.scheduling.total_reviews == 1
    assert target.scheduling.last_reviewed_at == now
    assert [card.scheduling for card in others] == untouched


def test_two_perfect_reviews_reach_six_days(deck: Deck, now: datetime) -> None:
    orchestrator = ReviewOrchestrator()
    card_id = deck.cards[0].id

    orchestrator.review(deck, ReviewRequest(card_id=card_id, quality=5), now=now)
    second = orchestrator.review(
        deck, ReviewRequest(card_id=card_id, quality=5), now=now + timedelta(days=1)
    )

    assert second.value.updated_card.scheduling.repetition_count == 2
    assert second.value.interval == 6


def test_failed_review_of_mature_card(deck: Deck, now: datetime) -> None:
    card = deck.cards[0]
    card.scheduling = replace(card.scheduling, repetition_count=3, interval=10, ease_factor=2.5)

    result = ReviewOrchestrator().review(
        deck, ReviewRequest(card_id=card.id, quality=1), now=now
    )

    assert result.value.updated_card.scheduling.repetition_count == 0
    assert result.value.interval == 1
    assert result.value.updated_card.scheduling.ease_factor == pytest.approx(2.3)


@pytest.mark.parametrize("quality", [-1, 6, 2.5, "4", True, None])
def test_invalid_quality_is_rejected(deck: Deck, now: datetime, quality) -> None:
    card = deck.cards[0]
    before = card.scheduling

    result = ReviewOrchestrator().review(
        deck, ReviewRequest(card_id=card.id, quality=quality), now=now
    )

    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.code == "invalid_quality"
    assert "between 0 and 5" in result.error.message
    assert card.scheduling is before


def test_negative_response_time_is_rejected(deck: Deck, now: datetime) -> None:
    result = ReviewOrchestrator().review(
        deck,
        ReviewRequest(card_id=deck.cards[0].id, quality=4, response_time_ms=-10),
        now=now,
    )

    assert result.error.code == "invalid_response_time"


def test_unknown_card_is_reported(deck: Deck, now: datetime) -> None:
    result = ReviewOrchestrator().review(
        deck, ReviewRequest(card_id="card_missing", quality=3), now=now
    )

    assert result.error.kind is ErrorKind.NOT_FOUND
    assert result.error.code == "card_not_found"


def test_unexpected_failures_become_internal_errors(deck: Deck, now: datetime) -> None:
    class _BrokenScheduler:
        def next_state(self, state, quality, *, now=None):
            raise RuntimeError("boom")

    result = ReviewOrchestrator(_BrokenScheduler()).review(
        deck, ReviewRequest(card_id=deck.cards[0].id, quality=4), now=now
    )

    assert result.error.kind is ErrorKind.INTERNAL
    assert "boom" in result.error.message


def test_unwrap_raises_matching_error(deck: Deck, now: datetime) -> None:
    result = ReviewOrchestrator().review(
        deck, ReviewRequest(card_id=deck.cards[0].id, quality=9), now=now
    )

    with pytest.raises(ValidationError):
        result.unwrap()


def test_quality_parse_accepts_enum_members() -> None:
    assert Quality.parse(Quality.CORRECT) is Quality.CORRECT
    assert Quality.parse(0) is Quality.BLACKOUT
    assert Quality.parse(3).is_success
    assert not Quality.parse(2).is_success
