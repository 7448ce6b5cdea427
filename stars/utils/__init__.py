"""
Utility modules for shared functionality.
"""
from .time_utils import (
    utc_now,
    year_of,
    year_month_of,
)

__all__ = [
    "utc_now",
    "year_of",
    "year_month_of",
]
