"""
Background check for new releases.

One poll reads the watermark, fetches the feed, and notifies when the
feed is newer than the watermark.
"""

import logging

from relnotes_watcher.config import NotificationConfig
from relnotes_watcher.detector import UpdateCheck, check_for_update
from relnotes_watcher.feed import FeedClient
from relnotes_watcher.notifier import Notifier
from relnotes_watcher.storage import WatermarkStore

logger = logging.getLogger(__name__)


class UpdateChecker:
    """
    Polls the feed and notifies about releases newer than the watermark.

    The watermark only advances after the notification was handed off;
    a failure anywhere leaves it untouched so the next poll retries.
    """

    def __init__(
        self,
        client: FeedClient,
        store: WatermarkStore,
        notifier: Notifier,
        url: str,
        notification: NotificationConfig | None = None,
    ):
        """
        Initialize the checker.

        Parameters
        ----------
        client : FeedClient
            Client used to fetch the feed.
        store : WatermarkStore
            Persisted watermark.
        notifier : Notifier
            Backend used to present the notification.
        url : str
            URL of the release-notes feed.
        notification : NotificationConfig | None
            Channel, title and icon of the notification.
        """
        self.client = client
        self.store = store
        self.notifier = notifier
        self.url = url
        self.notification = notification or NotificationConfig()

    async def run_once(self) -> UpdateCheck:
        """
        Run one poll.

        Returns
        -------
        UpdateCheck
            Outcome of the comparison against the watermark.

        Raises
        ------
        aiohttp.ClientError
            If the feed could not be fetched.
        """
        watermark = await self.store.get()
        document = await self.client.fetch(self.url)

        result = check_for_update(document.entries, watermark, document.updated)
        if not result.notify:
            logger.info("No new release notes (watermark %d)", watermark)
            return result

        subtitle = result.headline.date_label if result.headline else ""
        logger.info("New release notes: %s", subtitle or result.latest_timestamp)

        await self.notifier.notify(
            self.notification.channel_id,
            self.notification.title,
            subtitle,
            self.notification.icon,
        )
        await self.store.set(result.latest_timestamp)

        return result
