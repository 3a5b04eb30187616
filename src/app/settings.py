"""Configuration helpers for the review scheduler runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from src.srs.factory import DEFAULT_CARD_LIMIT, MAX_CARD_LIMIT
from src.srs.history import DEFAULT_HISTORY_SIZE
from src.srs.scheduler import MAX_INTERVAL_DAYS


_DISABLED_VALUES = {"0", "none", "off", "false"}


def _read_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


@dataclass(frozen=True)
class SchedulerSettings:
    """Strongly typed scheduler settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    default_card_limit: int
    max_card_limit: int
    max_interval_days: Optional[int]
    history_size: int

    @classmethod
    def from_env(cls) -> SchedulerSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Hanzi Review Scheduler")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO")

        max_card_limit = _read_int("SRS_MAX_CARD_LIMIT", MAX_CARD_LIMIT)
        if max_card_limit < 1:
            raise RuntimeError("SRS_MAX_CARD_LIMIT must be a positive integer.")

        default_card_limit = _read_int("SRS_DEFAULT_CARD_LIMIT", min(DEFAULT_CARD_LIMIT, max_card_limit))
        if default_card_limit < 1 or default_card_limit > max_card_limit:
            raise RuntimeError(
                f"SRS_DEFAULT_CARD_LIMIT must be between 1 and {max_card_limit}."
            )

        raw_interval = os.getenv("SRS_MAX_INTERVAL_DAYS", str(MAX_INTERVAL_DAYS)).strip().lower()
        if raw_interval in _DISABLED_VALUES:
            max_interval_days: Optional[int] = None
        else:
            try:
                max_interval_days = int(raw_interval)
            except ValueError as exc:
                raise RuntimeError("SRS_MAX_INTERVAL_DAYS must be an integer or 'none'.") from exc
            if max_interval_days < 1:
                raise RuntimeError("SRS_MAX_INTERVAL_DAYS must be a positive integer.")

        history_size = _read_int("SRS_HISTORY_SIZE", DEFAULT_HISTORY_SIZE)
        if history_size < 1:
            raise RuntimeError("SRS_HISTORY_SIZE must be a positive integer.")

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            default_card_limit=default_card_limit,
            max_card_limit=max_card_limit,
            max_interval_days=max_interval_days,
            history_size=history_size,
        )
