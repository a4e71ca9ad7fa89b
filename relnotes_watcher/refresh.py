"""
Foreground list refresh.

Fetches the feed on demand and publishes the grouped display sequence
to whoever renders it.
"""

import asyncio
import logging

from relnotes_watcher.channel import LatestValue
from relnotes_watcher.feed import FeedClient
from relnotes_watcher.grouping import group_entries
from relnotes_watcher.models import DisplayItem

logger = logging.getLogger(__name__)


class ReleaseNotesModel:
    """
    Owns the displayed release notes and their refresh task.

    A new refresh supersedes one still in flight; the list is cleared
    when a refresh starts and replaced as a whole when it completes.
    """

    def __init__(self, client: FeedClient, url: str):
        """
        Initialize the model.

        Parameters
        ----------
        client : FeedClient
            Client used to fetch the feed.
        url : str
            URL of the release-notes feed.
        """
        self.client = client
        self.url = url
        self.notes: LatestValue[list[DisplayItem]] = LatestValue([])
        self._task: asyncio.Task | None = None

    def refresh(self) -> asyncio.Task:
        """
        Start a refresh, cancelling any refresh still running.

        Returns
        -------
        asyncio.Task
            The refresh task; it never raises except on cancellation.
        """
        if self._task is not None and not self._task.done():
            logger.debug("Superseding in-flight refresh")
            self._task.cancel()

        self.notes.publish([])
        self._task = asyncio.create_task(self._refresh())
        return self._task

    async def _refresh(self) -> None:
        try:
            document = await self.client.fetch(self.url)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Failed to refresh release notes: %s", e)
            return

        items = group_entries(document.entries)
        self.notes.publish(items)
        logger.debug("Published %d display items", len(items))

    async def close(self) -> None:
        """Cancel the in-flight refresh, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
