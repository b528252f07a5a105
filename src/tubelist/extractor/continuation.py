"""Next-page cursors from ``continuations`` arrays."""

import logging
from typing import Any

from ..core.models import ContinuationToken
from .traverse import optional

logger = logging.getLogger(__name__)


def extract_continuation(continuations: Any) -> ContinuationToken | None:
    """Get the continuation token from a ``continuations`` array.

    Only the first entry's ``nextContinuationData`` is recognized. Anything
    else (missing array, empty array, other continuation kinds) means there
    is no next page.
    """
    if not isinstance(continuations, list) or not continuations:
        return None

    next_data = optional(continuations, 0, "nextContinuationData", expected_type=dict)
    if next_data is None:
        logger.debug("Unrecognized continuation entry, treating as last page")
        return None

    token = optional(next_data, "continuation", expected_type=str)
    if not token:
        return None

    return ContinuationToken(
        continuation=token,
        click_tracking_params=optional(
            next_data, "clickTrackingParams", expected_type=str, default=""
        ),
    )


def get_next_page_url(continuations: Any) -> str:
    """Get the next page URL, or an empty string when there is none."""
    token = extract_continuation(continuations)
    if token is None:
        return ""
    return token.to_url()
