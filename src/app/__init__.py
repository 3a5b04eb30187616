"""Application bootstrap helpers for the Hanzi Review Scheduler."""

from .runtime import build_review_service, configure_logging
from .settings import SchedulerSettings

__all__ = ["build_review_service", "configure_logging", "SchedulerSettings"]
