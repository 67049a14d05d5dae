"""Runtime settings for the dashboard, read from the environment.

A ``.env`` file in the working directory is honoured but never overrides
variables already set in the process environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from fintrack.domain import GRANULARITIES, MONTH

DEFAULT_DATA_PATH = "data/seed.json"
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class Settings:
    data_path: str = DEFAULT_DATA_PATH
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"
    default_granularity: str = MONTH

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def load_settings(*, use_dotenv: bool = True) -> Settings:
    if use_dotenv:
        load_dotenv(override=False)

    timezone_name = os.getenv("FINTRACK_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"FINTRACK_TIMEZONE={timezone_name!r} is not a known IANA timezone") from exc

    granularity = os.getenv("FINTRACK_GRANULARITY", MONTH).strip().lower()
    if granularity not in GRANULARITIES:
        raise ValueError(
            f"FINTRACK_GRANULARITY={granularity!r} must be one of {', '.join(GRANULARITIES)}"
        )

    return Settings(
        data_path=os.getenv("FINTRACK_DATA_PATH", DEFAULT_DATA_PATH),
        timezone=timezone_name,
        log_level=os.getenv("FINTRACK_LOG_LEVEL", "INFO"),
        default_granularity=granularity,
    )
