from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_RELAY_URL = "https://api.allorigins.win/raw?url="

# Refresh admission and pacing
MIN_REFRESH_INTERVAL = 30.0
STAGGER_DELAY = 0.2
LOADING_BUDGET = 10.0

# Content limits
MAX_ARTICLES = 50
MAX_ARTICLES_PER_SOURCE = 5
MAX_ITEMS_CONSIDERED = 10
MAX_CATEGORIES = 15
MAX_CUSTOM_CATEGORIES = 9
MAX_SOURCES_PER_CATEGORY = 5

REQUEST_TIMEOUT = 20.0


def _default_preferences_path() -> Path:
    return Path.home() / ".newsstream" / "preferences.json"


@dataclass
class Settings:
    relay_url: str = DEFAULT_RELAY_URL
    min_refresh_interval: float = MIN_REFRESH_INTERVAL
    stagger_delay: float = STAGGER_DELAY
    max_articles: int = MAX_ARTICLES
    max_articles_per_source: int = MAX_ARTICLES_PER_SOURCE
    max_items_considered: int = MAX_ITEMS_CONSIDERED
    request_timeout: Optional[float] = REQUEST_TIMEOUT
    max_workers: Optional[int] = None
    loading_budget: float = LOADING_BUDGET
    preferences_path: Path = field(default_factory=_default_preferences_path)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from NEWSSTREAM_* environment variables."""
        if dotenv:
            load_dotenv()

        def _get(name: str) -> Optional[str]:
            value = os.getenv(f"NEWSSTREAM_{name}")
            if value is None or not value.strip():
                return None
            return value.strip()

        def _float(name: str, default: Optional[float]) -> Optional[float]:
            raw = _get(name)
            if raw is None:
                return default
            try:
                return float(raw)
            except ValueError as e:
                raise ValueError(f"NEWSSTREAM_{name} must be a number, got {raw!r}") from e

        def _int(name: str, default: Optional[int]) -> Optional[int]:
            raw = _get(name)
            if raw is None:
                return default
            try:
                return int(raw)
            except ValueError as e:
                raise ValueError(f"NEWSSTREAM_{name} must be an integer, got {raw!r}") from e

        prefs_path = _get("PREFERENCES_PATH")
        return cls(
            relay_url=_get("RELAY_URL") or DEFAULT_RELAY_URL,
            min_refresh_interval=_float("MIN_REFRESH_INTERVAL", MIN_REFRESH_INTERVAL),
            stagger_delay=_float("STAGGER_DELAY", STAGGER_DELAY),
            max_articles=_int("MAX_ARTICLES", MAX_ARTICLES),
            max_articles_per_source=_int("MAX_ARTICLES_PER_SOURCE", MAX_ARTICLES_PER_SOURCE),
            max_items_considered=_int("MAX_ITEMS_CONSIDERED", MAX_ITEMS_CONSIDERED),
            request_timeout=_float("REQUEST_TIMEOUT", REQUEST_TIMEOUT),
            max_workers=_int("MAX_WORKERS", None),
            loading_budget=_float("LOADING_BUDGET", LOADING_BUDGET),
            preferences_path=Path(prefs_path).expanduser() if prefs_path else _default_preferences_path(),
            log_level=(_get("LOG_LEVEL") or "INFO").upper(),
        )
