"""Shared test fixtures for tubelist tests."""

import json
from datetime import datetime, timezone

import pytest

from tubelist.api.base import Response, TransportError
from tubelist.api.youtube import YouTubeClient
from tubelist.core.models import StreamType, UploaderContext, VideoSummary
from tubelist.core.settings import ClientSettings
from tubelist.extractor.channel import YouTubeChannelExtractor
from tubelist.extractor.timeago import TimeAgoParser

CHANNEL_ID = "UC1234567890abcdefghijkl"
CHANNEL_NAME = "Test Channel"
CHANNEL_URL = f"https://www.youtube.com/channel/{CHANNEL_ID}"
VIDEOS_URL = CHANNEL_URL + "/videos?pbj=1&view=0&flow=grid"
FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeDownloader:
    """In-memory transport that records every request."""

    def __init__(self, responses: dict | None = None) -> None:
        self.responses: dict[str, object] = dict(responses or {})
        self.calls: list[tuple[str, dict, str | None]] = []

    async def fetch(self, url, headers=None, locale=None):
        self.calls.append((url, dict(headers or {}), locale))
        result = self.responses.get(url)
        if result is None:
            raise TransportError(f"{url} returned 404", url=url, status=404)
        if isinstance(result, Exception):
            raise result
        return Response(body=result, status=200, url=url)

    @property
    def urls(self) -> list[str]:
        return [url for url, _, _ in self.calls]


def envelope(payload: dict) -> str:
    """Wrap a response object in the browse endpoint's JSON array."""
    return json.dumps([{"page": "browse"}, {"response": payload}])


def grid_video(video_id="vid1", title="First video", **extra) -> dict:
    renderer = {
        "videoId": video_id,
        "title": {"simpleText": title},
        "thumbnail": {
            "thumbnails": [
                {"url": f"//i.ytimg.com/vi/{video_id}/default.jpg", "width": 120},
                {"url": f"//i.ytimg.com/vi/{video_id}/hqdefault.jpg", "width": 480},
            ]
        },
        "publishedTimeText": {"simpleText": "3 days ago"},
        "viewCountText": {"simpleText": "1,234 views"},
        "thumbnailOverlays": [
            {
                "thumbnailOverlayTimeStatusRenderer": {
                    "text": {"simpleText": "4:20"},
                    "style": "DEFAULT",
                }
            }
        ],
    }
    renderer.update(extra)
    return {"gridVideoRenderer": renderer}


def continuations(token="C1", tracking="T1") -> list:
    return [{"nextContinuationData": {"continuation": token, "clickTrackingParams": tracking}}]


def channel_document(
    tiles=None,
    grid_continuations=None,
    channel_id=CHANNEL_ID,
    title=CHANNEL_NAME,
    subscriber_text="1.2M subscribers",
    subscribe_button=True,
    avatar_url="//yt3.ggpht.com/avatar=s100",
    banner_url="https://yt3.ggpht.com/banner=w1060",
    description="All about testing.",
    tab_title="Videos",
    no_videos=False,
) -> dict:
    """Build a channel ``/videos`` response object."""
    header = {"channelId": channel_id, "title": title}
    if avatar_url is not None:
        header["avatar"] = {"thumbnails": [{"url": avatar_url}]}
    if banner_url is not None:
        header["banner"] = {"thumbnails": [{"url": banner_url}]}
    if subscriber_text is not None:
        header["subscriberCountText"] = {"runs": [{"text": subscriber_text}]}
    if subscribe_button:
        header["subscribeButton"] = {"buttonRenderer": {"text": {"simpleText": "Subscribe"}}}

    if no_videos:
        section_item = {
            "messageRenderer": {"text": {"simpleText": "This channel has no videos."}}
        }
    else:
        grid = {"items": tiles if tiles is not None else [grid_video()]}
        if grid_continuations is not None:
            grid["continuations"] = grid_continuations
        section_item = {"gridRenderer": grid}

    tabs = [
        {"tabRenderer": {"title": "Home", "selected": False}},
        {
            "tabRenderer": {
                "title": tab_title,
                "selected": True,
                "content": {
                    "sectionListRenderer": {
                        "contents": [{"itemSectionRenderer": {"contents": [section_item]}}]
                    }
                },
            }
        },
        {"expandableTabRenderer": {"title": "Search"}},
    ]

    document = {
        "header": {"c4TabbedHeaderRenderer": header},
        "contents": {"twoColumnBrowseResultsRenderer": {"tabs": tabs}},
    }
    if description is not None:
        document["metadata"] = {"channelMetadataRenderer": {"description": description}}
    return document


def continuation_response(tiles, next_continuations=None) -> dict:
    grid_continuation = {"items": tiles}
    if next_continuations is not None:
        grid_continuation["continuations"] = next_continuations
    return {"continuationContents": {"gridContinuation": grid_continuation}}


@pytest.fixture
def fake_downloader():
    return FakeDownloader()


@pytest.fixture
def client(fake_downloader):
    return YouTubeClient(fake_downloader, ClientSettings(client_version="2.20250101.00.00"))


@pytest.fixture
def time_ago_parser():
    return TimeAgoParser(now=FIXED_NOW)


@pytest.fixture
def make_extractor(fake_downloader, client, time_ago_parser):
    """Factory for an extractor whose channel page serves ``document``."""

    def factory(document=None, refetch_channel_on_page=True):
        if document is not None:
            fake_downloader.responses[VIDEOS_URL] = envelope(document)
        return YouTubeChannelExtractor(
            CHANNEL_ID,
            client,
            time_ago_parser=time_ago_parser,
            refetch_channel_on_page=refetch_channel_on_page,
        )

    return factory


@pytest.fixture
def uploader():
    return UploaderContext(name=CHANNEL_NAME, url=CHANNEL_URL)


@pytest.fixture
def video_summary():
    return VideoSummary(
        video_id="vid1",
        url="https://www.youtube.com/watch?v=vid1",
        name="First video",
        uploader_name=CHANNEL_NAME,
        uploader_url=CHANNEL_URL,
        stream_type=StreamType.VIDEO_STREAM,
        duration=260,
        view_count=1234,
    )
