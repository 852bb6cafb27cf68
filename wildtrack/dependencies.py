# wildtrack/dependencies.py
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Keeps page * limit inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


def coerce_positive_int(value: Optional[str], default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass
class Pagination:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def get_pagination(page: Optional[str] = None, limit: Optional[str] = None) -> Pagination:
    """?page and ?limit, coerced to positive integers with defaults."""
    return Pagination(
        page=min(coerce_positive_int(page, DEFAULT_PAGE), MAX_PAGE),
        limit=min(coerce_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
    )


def isoformat(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Query-string flag: 'true' / 'false', anything else means unset."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None
