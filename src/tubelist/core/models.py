"""Core data models for tubelist."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

CHANNEL_URL_BASE = "https://www.youtube.com/channel/"
WATCH_URL_BASE = "https://www.youtube.com/watch?v="
FEED_URL_BASE = "https://www.youtube.com/feeds/videos.xml?channel_id="
CONTINUATION_URL_TEMPLATE = (
    "https://www.youtube.com/browse_ajax?ctoken={continuation}"
    "&continuation={continuation}&itct={click_tracking_params}"
)

# Sentinel values for counts that could not be determined
UNKNOWN = -1
SUBSCRIBERS_DISABLED = -1
SUBSCRIBERS_HIDDEN = 0


def _format_count(count: int) -> str:
    if count >= 1_000_000_000:
        return f"{count / 1_000_000_000:.1f}B"
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)


class StreamType(str, Enum):
    """Kind of a listed video."""

    VIDEO_STREAM = "video_stream"
    LIVE_STREAM = "live_stream"
    UPCOMING = "upcoming"


@dataclass
class Channel:
    """Channel metadata extracted from a channel page."""

    channel_id: str
    name: str
    url: str = ""
    avatar_url: Optional[str] = None
    banner_url: Optional[str] = None
    description: Optional[str] = None
    subscriber_count: int = SUBSCRIBERS_DISABLED
    feed_url: str = ""

    @property
    def subscribers_hidden(self) -> bool:
        """The channel has subscribers but the owner hides the count."""
        return self.subscriber_count == SUBSCRIBERS_HIDDEN

    @property
    def subscribers_disabled(self) -> bool:
        """Subscriber counts are turned off entirely for this channel."""
        return self.subscriber_count == SUBSCRIBERS_DISABLED

    @property
    def subscriber_count_str(self) -> str:
        """Get a formatted subscriber count string."""
        if self.subscriber_count < 0:
            return ""
        return _format_count(self.subscriber_count)


@dataclass(frozen=True)
class UploaderContext:
    """Channel-level fields stamped onto every listed video."""

    name: str
    url: str


@dataclass
class VideoSummary:
    """One video from a channel's video listing."""

    video_id: str
    url: str
    name: str
    uploader_name: str
    uploader_url: str
    stream_type: StreamType = StreamType.VIDEO_STREAM
    duration: int = UNKNOWN  # seconds
    view_count: int = UNKNOWN
    textual_upload_date: Optional[str] = None
    upload_date: Optional[datetime] = None
    thumbnail_url: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return self.stream_type == StreamType.LIVE_STREAM

    @property
    def duration_str(self) -> str:
        """Get the duration as H:MM:SS or M:SS."""
        if self.duration < 0:
            return ""
        hours, remainder = divmod(self.duration, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    @property
    def view_count_str(self) -> str:
        """Get a formatted view count string."""
        if self.view_count < 0:
            return ""
        return _format_count(self.view_count)


@dataclass(frozen=True)
class ContinuationToken:
    """Opaque pagination cursor plus its tracking parameter."""

    continuation: str
    click_tracking_params: str = ""

    def to_url(self) -> str:
        """Build the next-page request URL for this token."""
        return CONTINUATION_URL_TEMPLATE.format(
            continuation=self.continuation,
            click_tracking_params=self.click_tracking_params,
        )


@dataclass
class InfoItemsPage(Generic[T]):
    """One page of a listing with a forward-only cursor.

    ``next_page_url`` is the full URL of the next page, or an empty string
    when this is the last page. ``errors`` holds the failures of items that
    were skipped while building the page.
    """

    items: list[T] = field(default_factory=list)
    next_page_url: str = ""
    errors: list[Exception] = field(default_factory=list)

    @property
    def has_next_page(self) -> bool:
        return bool(self.next_page_url)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
