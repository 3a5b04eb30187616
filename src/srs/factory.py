"""Turn annotated text segments into a freshly scheduled flashcard deck."""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from src.srs.errors import EmptyInputError, OperationResult, ValidationError, run_guarded
from src.srs.models import (
    DEFAULT_CARD_TAGS,
    Deck,
    DeckMetadata,
    Flashcard,
    FlashcardBack,
    GenerateRequest,
    GenerateResult,
    SourceText,
    TextSegment,
    ensure_utc,
)
from src.srs.scheduler import ReviewScheduler


LOGGER = logging.getLogger(__name__)


DEFAULT_CARD_LIMIT = 20
MAX_CARD_LIMIT = 100
_NAME_PREVIEW_LENGTH = 50
_DESCRIPTION_PREVIEW_LENGTH = 100


class FlashcardFactory:
    """Builds decks of new flashcards from annotation segments."""

    def __init__(
        self,
        default_card_limit: int = DEFAULT_CARD_LIMIT,
        max_card_limit: int = MAX_CARD_LIMIT,
    ) -> None:
        if max_card_limit < 1:
            raise ValueError("max_card_limit must be a positive integer.")
        if default_card_limit < 1 or default_card_limit > max_card_limit:
            raise ValueError(f"default_card_limit must be between 1 and {max_card_limit}.")
        self._default_card_limit = default_card_limit
        self._max_card_limit = max_card_limit

    def generate(
        self,
        request: GenerateRequest,
        segments: Sequence[TextSegment],
        *,
        source: Optional[SourceText] = None,
        now: Optional[datetime] = None,
    ) -> OperationResult[GenerateResult]:
        """Validate ``request`` and build a deck from the eligible ``segments``."""
        return run_guarded(
            "Flashcard generation",
            lambda: self._generate(request, segments, source, now),
        )

    def validate(self, request: GenerateRequest) -> List[str]:
        """Return human readable problems with ``request`` (empty when valid)."""
        errors: List[str] = []
        if not _sanitize_text(request.source_id):
            errors.append("Source id is required")
        limit = request.card_limit
        if limit is not None and (
            isinstance(limit, bool)
            or not isinstance(limit, int)
            or limit < 1
            or limit > self._max_card_limit
        ):
            errors.append(f"Card limit must be between 1 and {self._max_card_limit}")
        return errors

    def _generate(
        self,
        request: GenerateRequest,
        segments: Sequence[TextSegment],
        source: Optional[SourceText],
        now: Optional[datetime],
    ) -> GenerateResult:
        started = time.perf_counter()
        now = ensure_utc(now)

        errors = self.validate(request)
        if errors:
            code = "missing_source_id" if not _sanitize_text(request.source_id) else "invalid_card_limit"
            raise ValidationError(", ".join(errors), code)

        eligible = [segment for segment in segments if is_eligible(segment)]
        if not eligible:
            raise EmptyInputError(
                "No valid segments found for flashcard generation", "no_eligible_content"
            )

        limit = request.card_limit or self._default_card_limit
        selected = eligible[: min(limit, len(eligible))]
        card_tags = frozenset(DEFAULT_CARD_TAGS) | frozenset(request.tags or ())
        cards = [
            self._build_card(
                segment,
                include_definitions=request.include_definitions,
                include_examples=request.include_examples,
                tags=card_tags,
                now=now,
            )
            for segment in selected
        ]

        preview = _source_preview(source, selected)
        deck = Deck(
            id=f"deck_{uuid.uuid4().hex}",
            name=f"Flashcards from {_truncate(preview, _NAME_PREVIEW_LENGTH)}",
            cards=cards,
            source_type="annotation",
            source_id=request.source_id.strip(),
            created_at=now,
            metadata=DeckMetadata(
                card_count=len(cards),
                difficulty=request.difficulty or (source.difficulty if source else None),
                tags=tuple(request.tags) if request.tags else DEFAULT_CARD_TAGS,
                description=(
                    "Generated from text annotation: "
                    f"{_truncate(preview, _DESCRIPTION_PREVIEW_LENGTH)}"
                ),
            ),
        )

        generation_time_ms = round((time.perf_counter() - started) * 1000)
        LOGGER.info(
            "Generated deck %s with %d of %d eligible segments from source %s in %d ms.",
            deck.id,
            len(cards),
            len(eligible),
            deck.source_id,
            generation_time_ms,
        )
        return GenerateResult(deck=deck, generation_time_ms=generation_time_ms)

    @staticmethod
    def _build_card(
        segment: TextSegment,
        *,
        include_definitions: bool,
        include_examples: bool,
        tags: frozenset,
        now: datetime,
    ) -> Flashcard:
        text = segment.text.strip()
        definition = _sanitize_text(segment.definition) if include_definitions else None
        example: Optional[str] = None
        if include_examples:
            example = _sanitize_text(segment.example) or f"Example usage of {text}"

        return Flashcard(
            id=f"card_{uuid.uuid4().hex}",
            front=text,
            back=FlashcardBack(
                pinyin=segment.phonetic or "",
                definition=definition,
                example=example,
                audio_url=_sanitize_text(segment.audio_url),
            ),
            scheduling=ReviewScheduler.initial_state(now),
            created_at=now,
            source_segment_id=segment.id,
            tags=tags,
        )


def is_eligible(segment: TextSegment) -> bool:
    """A segment needs visible text and some phonetic rendering to become a card."""
    return bool(_sanitize_text(segment.text)) and segment.phonetic is not None


def _sanitize_text(value: object) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _source_preview(source: Optional[SourceText], segments: Sequence[TextSegment]) -> str:
    if source is not None:
        preview = _sanitize_text(source.title) or _sanitize_text(source.original_text)
        if preview:
            return preview
    return "".join(segment.text.strip() for segment in segments)


def _truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return f"{text[:length]}..."
