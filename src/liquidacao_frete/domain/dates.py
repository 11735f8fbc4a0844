"""Business date helpers based on the configured application timezone."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def local_today(timezone_name: str = DEFAULT_TIMEZONE) -> date:
    """Return the current calendar date in the given timezone."""

    return datetime.now(tz=ZoneInfo(timezone_name)).date()

