"""Approximate dates from relative time text such as "3 days ago"."""

import logging
import re
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

TIME_AGO_RE = re.compile(
    r"(?P<amount>\d+|an?|one)\s+(?P<unit>second|minute|hour|day|week|month|year)s?\s+ago",
    re.IGNORECASE,
)

# Months and years are approximations
_UNIT_SECONDS = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "month": 30 * 86400,
    "year": 365 * 86400,
}


class TimeAgoParser:
    """Parse English relative time phrases into aware UTC datetimes.

    Handles prefixes YouTube adds ("Streamed 2 weeks ago", "Premiered 1 day
    ago") and the "just now"/"today"/"yesterday" forms.
    """

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now

    @property
    def now(self) -> datetime:
        return self._now or datetime.now(timezone.utc)

    def parse(self, text: str | None) -> datetime | None:
        """Return the approximate point in time, or None if not understood."""
        if not text:
            return None

        lowered = text.strip().lower()
        if lowered in ("just now", "now", "today"):
            return self.now
        if lowered == "yesterday":
            return self.now - timedelta(days=1)

        match = TIME_AGO_RE.search(lowered)
        if not match:
            logger.debug(f"Could not parse relative time {text!r}")
            return None

        amount = match.group("amount")
        count = int(amount) if amount.isdigit() else 1
        return self.now - timedelta(seconds=count * _UNIT_SECONDS[match.group("unit")])
