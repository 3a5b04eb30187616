"""Spaced-repetition review scheduling for Chinese flashcards."""

from .due_queue import DueQueueManager
from .errors import (
    EmptyInputError,
    ErrorInfo,
    ErrorKind,
    InternalError,
    NotFoundError,
    OperationResult,
    SchedulerError,
    ValidationError,
)
from .factory import FlashcardFactory
from .history import StudyHistory
from .models import (
    Deck,
    Difficulty,
    Flashcard,
    GenerateRequest,
    Quality,
    ReviewRequest,
    SchedulingState,
    SourceText,
    TextSegment,
)
from .orchestrator import ReviewOrchestrator
from .scheduler import ReviewScheduler
from .service import ReviewService, SegmentSource
from .statistics import DeckStatistics

__all__ = [
    "Deck",
    "DeckStatistics",
    "Difficulty",
    "DueQueueManager",
    "EmptyInputError",
    "ErrorInfo",
    "ErrorKind",
    "Flashcard",
    "FlashcardFactory",
    "GenerateRequest",
    "InternalError",
    "NotFoundError",
    "OperationResult",
    "Quality",
    "ReviewOrchestrator",
    "ReviewRequest",
    "ReviewScheduler",
    "ReviewService",
    "SchedulerError",
    "SchedulingState",
    "SegmentSource",
    "SourceText",
    "StudyHistory",
    "TextSegment",
    "ValidationError",
]
