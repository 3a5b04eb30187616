"""Bootstrap logic for embedding the review scheduler in an application."""

from __future__ import annotations

import logging
from typing import Optional

from src.app.settings import SchedulerSettings
from src.srs import ReviewScheduler, ReviewService, SegmentSource, StudyHistory


LOGGER = logging.getLogger(__name__)


def configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def build_review_service(
    settings: SchedulerSettings,
    source_provider: Optional[SegmentSource] = None,
) -> ReviewService:
    """Create a review service configured from ``settings``."""
    configure_logging(settings.log_level)
    service = ReviewService(
        scheduler=ReviewScheduler(max_interval_days=settings.max_interval_days),
        history=StudyHistory(history_size=settings.history_size),
        source_provider=source_provider,
        default_card_limit=settings.default_card_limit,
        max_card_limit=settings.max_card_limit,
    )
    LOGGER.info(
        "Review scheduler for %s ready in %s mode (interval cap: %s).",
        settings.app_name,
        settings.app_env,
        settings.max_interval_days or "none",
    )
    return service
