"""Turn user input into a YouTube channel URL."""

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from ..core.models import CHANNEL_URL_BASE

YOUTUBE_HOSTS = ("youtube.com", "www.youtube.com", "m.youtube.com")
_PREFIXED_PATHS = ("channel", "user", "c")

# Channel ids are "UC" plus 22 base64url characters
CHANNEL_ID_RE = re.compile(r"^UC[A-Za-z0-9_-]{22}$")


@dataclass(frozen=True)
class ChannelLink:
    """A channel identifier and the base URL of its channel page.

    ``id`` is the identifier as it appears in the URL: a ``UC...`` channel id,
    an ``@handle``, or a legacy user/custom name.
    """

    id: str
    url: str

    @classmethod
    def from_input(cls, value: str) -> "ChannelLink":
        """Build a link from a channel id, handle, name or youtube.com URL.

        Raises:
            ValueError: If the input is empty or not a YouTube channel URL.
        """
        value = (value or "").strip()
        if not value:
            raise ValueError("Channel identifier is empty")

        if "/" in value or value.startswith(("http:", "https:")):
            return cls._from_url(value)

        return cls(id=value, url=build_channel_url(value))

    @classmethod
    def _from_url(cls, value: str) -> "ChannelLink":
        if "://" not in value:
            value = "https://" + value.lstrip("/")
        parsed = urlparse(value)
        host = (parsed.hostname or "").lower()
        if host not in YOUTUBE_HOSTS:
            raise ValueError(f"Not a YouTube URL: {value}")

        parts = [p for p in parsed.path.split("/") if p]
        if not parts:
            raise ValueError(f"No channel in URL: {value}")

        if parts[0].startswith("@"):
            return cls(id=parts[0], url=f"https://www.youtube.com/{parts[0]}")
        if parts[0] in _PREFIXED_PATHS and len(parts) > 1:
            return cls(id=parts[1], url=f"https://www.youtube.com/{parts[0]}/{parts[1]}")

        raise ValueError(f"No channel in URL: {value}")


def build_channel_url(channel_id: str) -> str:
    """Build the channel page URL for a channel id, handle or user name."""
    if CHANNEL_ID_RE.match(channel_id):
        return CHANNEL_URL_BASE + channel_id
    elif channel_id.startswith("@"):
        return f"https://www.youtube.com/{channel_id}"
    else:
        return f"https://www.youtube.com/user/{channel_id}"
