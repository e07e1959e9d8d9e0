# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Name lookup over cursor-paginated listing endpoints.

Slack has no filter-by-name for channels or users, so a lookup pages
through the full listing and scans each page for the first record whose
name matches.  Pages are scanned one at a time and nothing is carried
over between them; a match stops the scan without fetching further
pages.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from slackdir.api import SlackApi, failure
from slackdir.models import Channel, User
from slackdir.result import Found, NotFound, Result, SearchExhausted


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingEndpoint[T]:
    """A paginated listing endpoint searchable by name.

    Attributes:
        api_method: Listing method (e.g. ``conversations.list``).
        collection_field: Envelope field holding the page's records.
        parse: Builds a record from one raw API item.
        matches: Returns True if a record answers to the wanted name.
        label: Record kind used in log messages and ``NotFound``.
    """

    api_method: str
    collection_field: str
    parse: Callable[[dict[str, Any]], T]
    matches: Callable[[T, str], bool]
    label: str


CHANNELS: ListingEndpoint[Channel] = ListingEndpoint(
    api_method="conversations.list",
    collection_field="channels",
    parse=Channel.from_api,
    matches=Channel.matches,
    label="channel",
)

USERS: ListingEndpoint[User] = ListingEndpoint(
    api_method="users.list",
    collection_field="members",
    parse=User.from_api,
    matches=User.matches,
    label="user",
)


def next_cursor(envelope: dict[str, Any]) -> str | None:
    """Return the continuation cursor of a listing page, if any."""
    metadata = envelope.get("response_metadata") or {}
    return metadata.get("next_cursor") or None


def find_by_name[T](
    api: SlackApi,
    endpoint: ListingEndpoint[T],
    name: str,
    *,
    max_pages: int | None = None,
    page_limit: int | None = None,
) -> Result[T]:
    """Find the first record on a listing endpoint matching *name*.

    Args:
        api: API used to fetch pages.
        endpoint: Endpoint description.
        name: Wanted name; matching is case-insensitive.
        max_pages: Stop after this many pages.  None means no limit.
        page_limit: Page size to request.  None uses the API default.

    Returns:
        ``Found`` with the first match, ``NotFound`` when the listing
        ends without one, ``Failed`` if a page request is rejected, or
        ``SearchExhausted`` when *max_pages* is reached.
    """
    cursor: str | None = None
    pages = 0

    while max_pages is None or pages < max_pages:
        envelope = api.call(
            endpoint.api_method, {"limit": page_limit, "cursor": cursor}
        )
        pages += 1
        if not envelope.get("ok"):
            return failure(endpoint.api_method, envelope)

        for item in envelope.get(endpoint.collection_field) or []:
            record = endpoint.parse(item)
            if endpoint.matches(record, name):
                logger.debug(
                    "Found %s '%s' on page %d", endpoint.label, name, pages
                )
                return Found(record)

        cursor = next_cursor(envelope)
        if cursor is None:
            logger.info(
                "No %s named '%s' after %d page(s)", endpoint.label, name, pages
            )
            return NotFound(endpoint.label)
        logger.debug("Next %s page cursor: %s", endpoint.label, cursor)

    logger.warning(
        "Gave up looking for %s '%s' after %d pages",
        endpoint.label,
        name,
        pages,
    )
    return SearchExhausted(pages)
