"""Domain objects shared by the flashcard scheduler components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from src.srs.errors import ValidationError


DEFAULT_CARD_TAGS = ("vocabulary", "auto-generated")


def ensure_utc(moment: Optional[datetime] = None) -> datetime:
    """Return ``moment`` as an aware UTC datetime; naive values are taken as UTC."""
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class Quality(IntEnum):
    """SM-2 recall quality rating given by the learner."""

    BLACKOUT = 0
    INCORRECT_HARD = 1
    INCORRECT_EASY = 2
    CORRECT_HARD = 3
    CORRECT = 4
    PERFECT = 5

    @classmethod
    def parse(cls, value: object) -> "Quality":
        """Return the rating for ``value`` or raise ``ValidationError``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Quality rating must be between 0 and 5", "invalid_quality")
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(
                "Quality rating must be between 0 and 5", "invalid_quality"
            ) from exc

    @property
    def is_success(self) -> bool:
        return self >= Quality.CORRECT_HARD


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True, slots=True)
class SchedulingState:
    """Spaced-repetition progress of a single flashcard."""

    interval: int
    repetition_count: int
    ease_factor: float
    due_date: datetime
    last_reviewed_at: Optional[datetime] = None
    total_reviews: int = 0

    def __post_init__(self) -> None:
        if self.interval < 1:
            raise ValueError("interval must be at least 1 day.")
        if self.repetition_count < 0:
            raise ValueError("repetition_count must not be negative.")
        if self.ease_factor < 1.3:
            raise ValueError("ease_factor must not drop below 1.3.")
        if self.total_reviews < 0:
            raise ValueError("total_reviews must not be negative.")
        object.__setattr__(self, "due_date", ensure_utc(self.due_date))
        if self.last_reviewed_at is not None:
            object.__setattr__(self, "last_reviewed_at", ensure_utc(self.last_reviewed_at))


@dataclass(frozen=True, slots=True)
class TextSegment:
    """Annotated piece of Chinese text supplied by the segmentation pipeline."""

    id: str
    text: str
    pinyin: str = ""
    tone_marks: str = ""
    definition: Optional[str] = None
    example: Optional[str] = None
    audio_url: Optional[str] = None

    @property
    def phonetic(self) -> Optional[str]:
        """Tone-marked rendering when available, plain pinyin otherwise."""
        for value in (self.tone_marks, self.pinyin):
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None


@dataclass(frozen=True, slots=True)
class SourceText:
    """Annotated text returned by the annotation collaborator for a source id."""

    id: str
    original_text: str
    segments: Sequence[TextSegment]
    title: Optional[str] = None
    difficulty: Optional[Difficulty] = None


@dataclass(frozen=True, slots=True)
class FlashcardBack:
    pinyin: str
    definition: Optional[str] = None
    example: Optional[str] = None
    audio_url: Optional[str] = None


@dataclass(slots=True)
class Flashcard:
    """A studyable card; its scheduling state is replaced on every review."""

    id: str
    front: str
    back: FlashcardBack
    scheduling: SchedulingState
    created_at: datetime
    source_segment_id: Optional[str] = None
    tags: FrozenSet[str] = frozenset()

    @property
    def due_date(self) -> datetime:
        return self.scheduling.due_date

    def is_due(self, now: datetime) -> bool:
        return self.scheduling.due_date <= ensure_utc(now)


@dataclass(frozen=True, slots=True)
class DeckMetadata:
    card_count: int
    difficulty: Optional[Difficulty] = None
    tags: Sequence[str] = DEFAULT_CARD_TAGS
    description: Optional[str] = None


@dataclass(slots=True)
class Deck:
    """Insertion-ordered collection of flashcards generated from one source.

    ``cards`` is stored as a tuple; use ``add_card`` to grow a deck so the id
    index stays in step with it.
    """

    id: str
    name: str
    cards: Tuple[Flashcard, ...]
    source_type: str
    created_at: datetime
    metadata: DeckMetadata
    source_id: Optional[str] = None
    _index: Dict[str, Flashcard] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.cards = tuple(self.cards)
        self._index = {}
        for card in self.cards:
            self._register(card)

    def _register(self, card: Flashcard) -> None:
        if card.id in self._index:
            raise ValueError(f"Duplicate flashcard id {card.id!r} in deck {self.id!r}.")
        self._index[card.id] = card

    def add_card(self, card: Flashcard) -> None:
        """Append ``card``, rejecting ids already present in the deck."""
        self._register(card)
        self.cards = self.cards + (card,)
        self.metadata = replace(self.metadata, card_count=len(self.cards))

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Flashcard]:
        return iter(self.cards)

    def get_card(self, card_id: str) -> Optional[Flashcard]:
        return self._index.get(card_id)


@dataclass(frozen=True, slots=True)
class GenerateRequest:
    """Parameters for building a deck from an annotated source."""

    source_id: str
    include_definitions: bool = False
    include_examples: bool = False
    card_limit: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[Sequence[str]] = None


@dataclass(frozen=True, slots=True)
class GenerateResult:
    deck: Deck
    generation_time_ms: int


@dataclass(frozen=True, slots=True)
class ReviewRequest:
    """A learner's rating for one card. ``quality`` is validated on use."""

    card_id: str
    quality: int
    response_time_ms: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ReviewResult:
    next_review_date: datetime
    interval: int
    updated_card: Flashcard
    previous_state: SchedulingState
    study_streak: Optional[int] = None


@dataclass(frozen=True, slots=True)
class DueQueueResult:
    queue: List[Flashcard]
    total_due: int
    next_review_time: Optional[datetime] = None
    study_streak: Optional[int] = None


@dataclass(frozen=True, slots=True)
class DeckSummary:
    """Aggregated figures describing the state of a deck."""

    total_cards: int
    due_cards: int
    reviewed_cards: int
    new_cards: int
    average_ease_factor: float
    average_interval: float
    mastered_cards: int = 0
