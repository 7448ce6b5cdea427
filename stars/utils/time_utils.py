"""
Time helpers shared by the services.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Timezone-aware current time in UTC. Services take this as their default clock."""
    return datetime.now(timezone.utc)


def year_of(date_str: Optional[str]) -> Optional[str]:
    """
    First four characters of an ISO-ish date string ("2019-06-01" -> "2019").

    Returns None for empty input.
    """
    if not date_str:
        return None
    return date_str[:4]


def year_month_of(date_str: Optional[str]) -> Optional[str]:
    """
    Render an ATS date as YYYY-MM ("2019-06-01" -> "2019-06").

    Values shorter than seven characters (a bare year) are returned as-is.
    """
    if not date_str:
        return None
    return date_str[:7]
