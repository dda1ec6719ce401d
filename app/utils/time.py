"""Time Utilities: UTC timestamps and billing months"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union

_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def get_utc_now() -> datetime:
    """
    Returns a naive UTC datetime.
    Matches the DB schema (TIMESTAMP WITHOUT TIME ZONE).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_timestamp(value: Union[datetime, date, str, None]) -> Optional[datetime]:
    """
    Coerce a stored timestamp to a naive UTC datetime.

    Rows written by different code paths may hold a full timestamp, a plain
    date, or an ISO string. Aware datetimes are converted to UTC; plain dates
    become midnight of that day.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise TypeError(f"Unsupported timestamp value: {value!r}")


@dataclass(frozen=True, order=True)
class BillingMonth:
    """A validated calendar month, rendered as ``YYYY-MM``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year out of range: {self.year}")

    @classmethod
    def parse(cls, value: Union[str, "BillingMonth"]) -> "BillingMonth":
        """Parse ``YYYY-MM``; raises ValueError on anything else."""
        if isinstance(value, BillingMonth):
            return value
        match = _MONTH_RE.match(value.strip()) if isinstance(value, str) else None
        if not match:
            raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def current(cls, now: Optional[datetime] = None) -> "BillingMonth":
        now = now or get_utc_now()
        return cls(now.year, now.month)

    def due_date(self, day: int = 25) -> date:
        return date(self.year, self.month, day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
