"""Core models and settings for tubelist."""

from .models import (
    Channel,
    ContinuationToken,
    InfoItemsPage,
    StreamType,
    UploaderContext,
    VideoSummary,
)
from .settings import ClientSettings, ExtractorSettings, HttpSettings, Settings

__all__ = [
    "Channel",
    "ContinuationToken",
    "InfoItemsPage",
    "StreamType",
    "UploaderContext",
    "VideoSummary",
    "Settings",
    "HttpSettings",
    "ClientSettings",
    "ExtractorSettings",
]
