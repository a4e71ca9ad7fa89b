"""
New release detection.

Compares a fetched feed's latest timestamp against the persisted
watermark and decides whether a notification is due.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from relnotes_watcher.models import FeedEntry

logger = logging.getLogger(__name__)

# yyyy-MM-dd'T'HH:mm:ss.SSSXXX; %z accepts both "Z" and "+01:00"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class UpdateCheck:
    """
    Outcome of comparing a feed against the watermark.

    Attributes
    ----------
    latest_timestamp : int
        Feed timestamp in epoch milliseconds, 0 when unknown.
    notify : bool
        True if the feed is newer than the watermark.
    headline : FeedEntry | None
        Entry to surface in the notification, set only when notifying.
    """

    latest_timestamp: int = 0
    notify: bool = False
    headline: FeedEntry | None = None


def parse_timestamp(text: str | None) -> int:
    """
    Parse a feed timestamp into epoch milliseconds.

    Parameters
    ----------
    text : str | None
        Timestamp such as ``2024-01-10T00:00:00.000Z``.

    Returns
    -------
    int
        Milliseconds since the epoch, or 0 if the text does not parse.
    """
    if not text:
        return 0

    try:
        parsed = datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        logger.debug("Unparseable feed timestamp: %r", text)
        return 0

    return (parsed - EPOCH) // timedelta(milliseconds=1)


def check_for_update(
    entries: Sequence[FeedEntry],
    watermark: int,
    feed_updated: str | None = None,
) -> UpdateCheck:
    """
    Decide whether the feed carries a release newer than the watermark.

    Parameters
    ----------
    entries : Sequence[FeedEntry]
        Feed entries, newest first.
    watermark : int
        Timestamp of the last release the user was notified about.
    feed_updated : str | None
        Raw top-level ``<updated>`` text of the feed. When absent the
        first entry's own timestamp stands in for it.

    Returns
    -------
    UpdateCheck
        The latest timestamp, the notify decision and the headline entry.
    """
    if not entries:
        return UpdateCheck()

    if feed_updated is None:
        feed_updated = entries[0].updated

    latest = parse_timestamp(feed_updated)
    if latest > watermark:
        return UpdateCheck(latest_timestamp=latest, notify=True, headline=entries[0])

    return UpdateCheck(latest_timestamp=latest)
