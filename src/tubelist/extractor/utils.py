"""Small parsing helpers shared by the extractors."""

import re
from typing import Any

from ..core.models import CHANNEL_URL_BASE, FEED_URL_BASE
from .traverse import optional

HTTP = "http://"
HTTPS = "https://"

# "1.2M", "12K", "1,234", "3.4 B" - optional suffix multipliers
MIXED_NUMBER_RE = re.compile(r"(\d+(?:[.,]\d+)*)\s*([KMB])?(?![a-z])", re.IGNORECASE)
_MULTIPLIERS = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def to_https(url: str) -> str:
    """Normalize a scheme-relative, http or scheme-less URL to https."""
    if url.startswith("//"):
        url = url[2:]
    if url.startswith(HTTP):
        url = HTTPS + url[len(HTTP):]
    elif not url.startswith(HTTPS):
        url = HTTPS + url
    return url


def get_text(obj: Any) -> str | None:
    """Get the plain text of a YouTube text object.

    Text objects come either as ``{"simpleText": "..."}`` or as
    ``{"runs": [{"text": "..."}, ...]}``; runs are concatenated.
    """
    if not isinstance(obj, dict):
        return None
    simple = optional(obj, "simpleText", expected_type=str)
    if simple:
        return simple
    runs = optional(obj, "runs", expected_type=list) or []
    text = "".join(
        run["text"] for run in runs if isinstance(run, dict) and isinstance(run.get("text"), str)
    )
    return text or None


def remove_non_digits(text: str) -> str:
    return re.sub(r"\D", "", text)


def mixed_number_word_to_long(text: str) -> int:
    """Parse an abbreviated count such as ``"1.2M subscribers"``.

    Raises:
        ValueError: If no number can be found in ``text``, or the number has
            a fractional part but no K/M/B suffix (e.g. "1.5 billion").
    """
    match = MIXED_NUMBER_RE.search(text or "")
    if not match:
        raise ValueError(f"No number in {text!r}")

    number, suffix = match.group(1), match.group(2)
    if suffix is None:
        # Plain count: separators are only valid between groups of three digits
        if any(len(group) != 3 for group in re.split(r"[.,]", number)[1:]):
            raise ValueError(f"Unrecognized abbreviation in {text!r}")
        return int(remove_non_digits(number))

    # Abbreviated count: a single separator is the decimal mark
    number = number.replace(",", ".")
    if number.count(".") > 1:
        raise ValueError(f"Ambiguous number in {text!r}")
    return int(round(float(number) * _MULTIPLIERS[suffix.upper()]))


def parse_duration_string(text: str) -> int:
    """Parse ``"H:MM:SS"``, ``"M:SS"`` or ``"SS"`` into seconds.

    Raises:
        ValueError: If the text is not a colon-separated duration.
    """
    parts = text.strip().split(":")
    if not parts or len(parts) > 3 or not all(p.strip().isdigit() for p in parts):
        raise ValueError(f"Invalid duration {text!r}")
    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return seconds


def get_channel_url(channel_id: str) -> str:
    return CHANNEL_URL_BASE + channel_id


def get_feed_url(channel_id: str) -> str:
    """Get the RSS feed URL for a channel id."""
    return FEED_URL_BASE + channel_id
