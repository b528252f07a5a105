"""Normalize grid tiles into :class:`VideoSummary` records."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from ..core.models import (
    UNKNOWN,
    WATCH_URL_BASE,
    StreamType,
    UploaderContext,
    VideoSummary,
)
from .errors import FieldExtractionError, ParsingError
from .timeago import TimeAgoParser
from .traverse import optional, require
from .utils import get_text, parse_duration_string, remove_non_digits, to_https

logger = logging.getLogger(__name__)

GRID_VIDEO_RENDERER = "gridVideoRenderer"
LIVE_BADGE_STYLE = "BADGE_STYLE_TYPE_LIVE_NOW"

# (renderer, context, time_ago_parser) -> VideoSummary
ItemExtractor = Callable[[dict, UploaderContext, TimeAgoParser | None], VideoSummary]


def _is_live(renderer: dict) -> bool:
    for badge in optional(renderer, "badges", expected_type=list, default=[]):
        if optional(badge, "metadataBadgeRenderer", "style") == LIVE_BADGE_STYLE:
            return True
    for overlay in optional(renderer, "thumbnailOverlays", expected_type=list, default=[]):
        if optional(overlay, "thumbnailOverlayTimeStatusRenderer", "style") == "LIVE":
            return True
    return False


def _get_duration(renderer: dict) -> int:
    for overlay in optional(renderer, "thumbnailOverlays", expected_type=list, default=[]):
        status = optional(overlay, "thumbnailOverlayTimeStatusRenderer", expected_type=dict)
        if status is None:
            continue
        text = get_text(status.get("text"))
        if not text:
            continue
        try:
            return parse_duration_string(text)
        except ValueError:
            logger.debug(f"Unparseable duration {text!r}")
    return UNKNOWN


def _get_view_count(renderer: dict) -> int:
    text = get_text(renderer.get("viewCountText"))
    if text is None:
        return UNKNOWN
    if "no views" in text.lower():
        return 0
    digits = remove_non_digits(text)
    return int(digits) if digits else UNKNOWN


def _get_thumbnail_url(renderer: dict) -> str | None:
    url = optional(renderer, "thumbnail", "thumbnails", -1, "url", expected_type=str)
    return to_https(url) if url else None


def extract_grid_video(
    renderer: dict,
    context: UploaderContext,
    time_ago_parser: TimeAgoParser | None = None,
) -> VideoSummary:
    """Build a :class:`VideoSummary` from a ``gridVideoRenderer``.

    The uploader name and URL always come from ``context``; the tile itself
    does not carry them reliably.

    Raises:
        FieldExtractionError: If the video id or title is missing.
    """
    video_id = require(renderer, "videoId", what="video id", expected_type=str)
    name = get_text(renderer.get("title"))
    if not name:
        raise FieldExtractionError("video title", KeyError(f"no title text for {video_id}"))

    stream_type = StreamType.VIDEO_STREAM
    upload_date = None
    textual_upload_date = get_text(renderer.get("publishedTimeText"))

    start_time = optional(renderer, "upcomingEventData", "startTime", expected_type=(str, int))
    if start_time is not None:
        stream_type = StreamType.UPCOMING
        try:
            upload_date = datetime.fromtimestamp(int(start_time), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            logger.debug(f"Bad upcoming start time {start_time!r} for {video_id}")
    elif _is_live(renderer):
        stream_type = StreamType.LIVE_STREAM
    elif textual_upload_date and time_ago_parser is not None:
        upload_date = time_ago_parser.parse(textual_upload_date)

    return VideoSummary(
        video_id=video_id,
        url=WATCH_URL_BASE + video_id,
        name=name,
        uploader_name=context.name,
        uploader_url=context.url,
        stream_type=stream_type,
        duration=UNKNOWN if stream_type == StreamType.LIVE_STREAM else _get_duration(renderer),
        view_count=_get_view_count(renderer),
        textual_upload_date=textual_upload_date,
        upload_date=upload_date,
        thumbnail_url=_get_thumbnail_url(renderer),
    )


def collect_streams(
    tiles: Any,
    context: UploaderContext,
    extract: ItemExtractor = extract_grid_video,
    time_ago_parser: TimeAgoParser | None = None,
) -> tuple[list[VideoSummary], list[Exception]]:
    """Normalize every video tile of an items array.

    Tiles without a ``gridVideoRenderer`` (ads, continuation placeholders)
    are skipped. A tile whose extraction fails is skipped too and its error
    is returned alongside the items.

    Returns:
        Tuple of (videos in source order, per-item errors).
    """
    videos: list[VideoSummary] = []
    errors: list[Exception] = []

    if not isinstance(tiles, list):
        return videos, errors

    for index, tile in enumerate(tiles):
        renderer = optional(tile, GRID_VIDEO_RENDERER, expected_type=dict)
        if renderer is None:
            continue
        try:
            videos.append(extract(renderer, context, time_ago_parser))
        except ParsingError as e:
            logger.warning(f"Skipping item {index} of {context.name}: {e}")
            errors.append(e)

    return videos, errors
