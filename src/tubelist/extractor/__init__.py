"""Extraction of channel metadata and video listings from browse responses."""

from .channel import YouTubeChannelExtractor
from .continuation import extract_continuation, get_next_page_url
from .errors import (
    ExtractionError,
    FieldExtractionError,
    InvalidPageUrlError,
    InvalidResponseError,
    ParsingError,
    SchemaMismatchError,
)
from .items import collect_streams, extract_grid_video
from .links import ChannelLink
from .timeago import TimeAgoParser
from .traverse import MISSING, optional, require, traverse
from .utils import to_https

__all__ = [
    "ChannelLink",
    "ExtractionError",
    "FieldExtractionError",
    "InvalidPageUrlError",
    "InvalidResponseError",
    "MISSING",
    "ParsingError",
    "SchemaMismatchError",
    "TimeAgoParser",
    "YouTubeChannelExtractor",
    "collect_streams",
    "extract_continuation",
    "extract_grid_video",
    "get_next_page_url",
    "optional",
    "require",
    "to_https",
    "traverse",
]
