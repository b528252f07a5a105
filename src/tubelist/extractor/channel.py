"""Channel metadata and paginated video listings.

:class:`YouTubeChannelExtractor` holds the channel's ``/videos`` browse
response and derives everything from it:

* ``fetch_page()`` downloads (or re-downloads) the channel document.
* The ``get_*`` metadata getters read single fields from the document.
* ``get_initial_page()`` lists the first grid of videos without any further
  request; ``get_page(url)`` follows a continuation URL.

Continuation responses carry no channel-level fields, so by default
``get_page`` fetches the channel document again before fetching the
continuation itself. That costs one extra request per page.
"""

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from ..core.models import (
    SUBSCRIBERS_DISABLED,
    SUBSCRIBERS_HIDDEN,
    Channel,
    InfoItemsPage,
    UploaderContext,
    VideoSummary,
)
from .continuation import get_next_page_url
from .errors import (
    ExtractionError,
    FieldExtractionError,
    InvalidPageUrlError,
    ParsingError,
    SchemaMismatchError,
)
from .items import ItemExtractor, collect_streams, extract_grid_video
from .links import ChannelLink
from .timeago import TimeAgoParser
from .traverse import optional, require, traverse
from .utils import get_channel_url, get_feed_url, get_text, mixed_number_word_to_long, to_https

if TYPE_CHECKING:
    from ..api.youtube import YouTubeClient

logger = logging.getLogger(__name__)

VIDEOS_TAB_TITLE = "Videos"
NO_VIDEOS_MESSAGE = "This channel has no videos."
VIDEOS_PATH_SUFFIX = "/videos?pbj=1&view=0&flow=grid"

# Banner URLs containing any of these are YouTube's placeholder image
PLACEHOLDER_BANNER_MARKERS = ("s.ytimg.com", "default_banner")

_HEADER = ("header", "c4TabbedHeaderRenderer")
# tabRenderer -> first grid section
_SECTION = ("content", "sectionListRenderer", "contents", 0, "itemSectionRenderer", "contents", 0)


class YouTubeChannelExtractor:
    """Extracts a channel and its uploaded videos.

    Args:
        link: Channel link, or anything :meth:`ChannelLink.from_input` accepts.
        client: Request layer used for every fetch.
        time_ago_parser: Turns "3 days ago" into dates; a default English
            parser is used when omitted.
        item_extractor: Per-tile extraction function.
        refetch_channel_on_page: Re-download the channel document before each
            continuation page (see module docstring).
    """

    def __init__(
        self,
        link: ChannelLink | str,
        client: "YouTubeClient",
        time_ago_parser: TimeAgoParser | None = None,
        item_extractor: ItemExtractor = extract_grid_video,
        refetch_channel_on_page: bool = True,
    ) -> None:
        self.link = link if isinstance(link, ChannelLink) else ChannelLink.from_input(link)
        self.client = client
        self.time_ago_parser = time_ago_parser or TimeAgoParser()
        self.item_extractor = item_extractor
        self.refetch_channel_on_page = refetch_channel_on_page
        self._initial_data: dict[str, Any] | None = None

    @property
    def is_fetched(self) -> bool:
        return self._initial_data is not None

    @property
    def initial_data(self) -> dict[str, Any]:
        """The channel document; raises if it has not been fetched yet."""
        if self._initial_data is None:
            raise ExtractionError("Channel page is not fetched, call fetch_page() first")
        return self._initial_data

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def fetch_page(self) -> None:
        """Download the channel's videos document, replacing any previous one."""
        url = self.link.url + VIDEOS_PATH_SUFFIX
        logger.debug(f"Fetching channel page {url}")
        # Assigned only after the whole response parsed successfully
        self._initial_data = await self.client.fetch_browse_response(url)

    # -------------------------------------------------------------------------
    # Channel metadata
    # -------------------------------------------------------------------------

    def get_id(self) -> str:
        return require(
            self.initial_data, *_HEADER, "channelId", what="channel id", expected_type=str
        )

    def get_name(self) -> str:
        return require(self.initial_data, *_HEADER, "title", what="channel name", expected_type=str)

    def get_url(self) -> str:
        """Canonical channel URL, or the link URL when the id is unavailable."""
        try:
            return get_channel_url(self.get_id())
        except ParsingError:
            return self.link.url

    def get_avatar_url(self) -> str:
        url = require(
            self.initial_data,
            *_HEADER,
            "avatar",
            "thumbnails",
            0,
            "url",
            what="avatar",
            expected_type=str,
        )
        if not url:
            raise FieldExtractionError("avatar", ValueError("avatar url is empty"))
        return to_https(url)

    def get_banner_url(self) -> str | None:
        """Banner URL, or None when unset or YouTube's placeholder image."""
        url = optional(
            self.initial_data, *_HEADER, "banner", "thumbnails", 0, "url", expected_type=str
        )
        if not url or any(marker in url for marker in PLACEHOLDER_BANNER_MARKERS):
            return None
        return to_https(url)

    def get_feed_url(self) -> str:
        try:
            return get_feed_url(self.get_id())
        except FieldExtractionError as e:
            raise FieldExtractionError("feed url", e) from e

    def get_subscriber_count(self) -> int:
        """Subscriber count.

        Returns:
            The parsed count; ``0`` if the channel hides it (a subscribe
            button is shown but no count); ``-1`` if subscriber counts are
            disabled for the channel (neither is present).
        """
        header = optional(self.initial_data, *_HEADER, expected_type=dict, default={})
        subscriber_info = header.get("subscriberCountText")
        if subscriber_info is not None:
            text = get_text(subscriber_info)
            try:
                return mixed_number_word_to_long(text or "")
            except ValueError as e:
                raise FieldExtractionError("subscriber count", e) from e

        # If there's no subscribe button, the channel has the subscriber count disabled
        if header.get("subscribeButton") is None:
            return SUBSCRIBERS_DISABLED
        return SUBSCRIBERS_HIDDEN

    def get_description(self) -> str | None:
        return optional(
            self.initial_data,
            "metadata",
            "channelMetadataRenderer",
            "description",
            expected_type=str,
        )

    def get_channel(self) -> Channel:
        """Assemble all metadata into a :class:`Channel`.

        Raises:
            FieldExtractionError: If the id or name is missing, or the
                subscriber count text cannot be parsed.
        """
        channel_id = self.get_id()

        try:
            avatar_url = self.get_avatar_url()
        except ParsingError as e:
            logger.warning(f"No avatar for channel {channel_id}: {e}")
            avatar_url = None

        return Channel(
            channel_id=channel_id,
            name=self.get_name(),
            url=get_channel_url(channel_id),
            avatar_url=avatar_url,
            banner_url=self.get_banner_url(),
            description=self.get_description(),
            subscriber_count=self.get_subscriber_count(),
            feed_url=get_feed_url(channel_id),
        )

    # -------------------------------------------------------------------------
    # Video listing
    # -------------------------------------------------------------------------

    def _get_video_tab(self) -> dict | None:
        """Find the videos tab.

        Returns:
            The ``tabRenderer`` of the videos tab, or None when the channel
            has no videos at all.

        Raises:
            SchemaMismatchError: If there is no videos tab.
        """
        tabs = traverse(
            self.initial_data, "contents", "twoColumnBrowseResultsRenderer", "tabs",
            expected_type=list,
        )
        video_tab = None
        for tab in tabs or []:
            renderer = optional(tab, "tabRenderer", expected_type=dict)
            if renderer is not None and renderer.get("title") == VIDEOS_TAB_TITLE:
                video_tab = renderer
                break

        if video_tab is None:
            raise SchemaMismatchError(f"Could not find {VIDEOS_TAB_TITLE} tab")

        message = get_text(optional(video_tab, *_SECTION, "messageRenderer", "text"))
        if message == NO_VIDEOS_MESSAGE:
            return None

        return video_tab

    def _get_grid(self, video_tab: dict) -> dict:
        try:
            return require(
                video_tab, *_SECTION, "gridRenderer", what="video grid", expected_type=dict
            )
        except FieldExtractionError as e:
            raise SchemaMismatchError(str(e)) from e

    def _uploader_context(self) -> UploaderContext:
        return UploaderContext(name=self.get_name(), url=self.get_url())

    def _collect(self, tiles: Any, next_page_url: str) -> InfoItemsPage[VideoSummary]:
        videos, errors = collect_streams(
            tiles,
            self._uploader_context(),
            extract=self.item_extractor,
            time_ago_parser=self.time_ago_parser,
        )
        return InfoItemsPage(items=videos, next_page_url=next_page_url, errors=errors)

    def get_next_page_url(self) -> str:
        """Cursor of the initial page, empty when it is the only page."""
        video_tab = self._get_video_tab()
        if video_tab is None:
            return ""
        return get_next_page_url(self._get_grid(video_tab).get("continuations"))

    def get_initial_page(self) -> InfoItemsPage[VideoSummary]:
        """List the first page of videos from the fetched document."""
        video_tab = self._get_video_tab()
        if video_tab is None:
            return InfoItemsPage()

        grid = self._get_grid(video_tab)
        tiles = require(grid, "items", what="video grid items", expected_type=list)
        return self._collect(tiles, get_next_page_url(grid.get("continuations")))

    async def get_page(self, page_url: str) -> InfoItemsPage[VideoSummary]:
        """Fetch and list the page behind a continuation URL.

        Raises:
            InvalidPageUrlError: If ``page_url`` is empty or None.
        """
        if not page_url:
            raise InvalidPageUrlError("Page url is empty or None")

        if self.refetch_channel_on_page or not self.is_fetched:
            # Continuation responses don't include the channel name or URL
            logger.debug(f"Re-fetching channel page for {self.link.id} before continuation")
            await self.fetch_page()

        response = await self.client.fetch_browse_response(page_url)
        try:
            continuation = require(
                response,
                "continuationContents",
                "gridContinuation",
                what="grid continuation",
                expected_type=dict,
            )
            tiles = require(continuation, "items", what="continuation items", expected_type=list)
        except FieldExtractionError as e:
            raise SchemaMismatchError(str(e)) from e

        return self._collect(tiles, get_next_page_url(continuation.get("continuations")))

    async def iter_pages(
        self, max_pages: int | None = None
    ) -> AsyncIterator[InfoItemsPage[VideoSummary]]:
        """Yield the initial page and every following page in order.

        The channel document is fetched first if needed.
        """
        if not self.is_fetched:
            await self.fetch_page()

        page = self.get_initial_page()
        count = 1
        yield page
        while page.has_next_page and (max_pages is None or count < max_pages):
            page = await self.get_page(page.next_page_url)
            count += 1
            yield page

    async def iter_videos(self, max_pages: int | None = None) -> AsyncIterator[VideoSummary]:
        """Yield videos across pages, fetching each page only when needed."""
        async for page in self.iter_pages(max_pages=max_pages):
            for video in page.items:
                yield video
