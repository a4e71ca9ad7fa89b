"""
Protocol definition for notification backends.

Defines the common interface that all notifiers must implement, and a
notifier that only writes to the log.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """
    Protocol defining the interface for notification backends.

    Delivery is fire-and-forget: a notifier returns once the message has
    been handed off and raises if it could not be.
    """

    async def notify(self, channel_id: str, title: str, subtitle: str, icon: str) -> None:
        """
        Present a notification.

        Parameters
        ----------
        channel_id : str
            Channel the notification belongs to.
        title : str
            Notification title.
        subtitle : str
            Secondary text, e.g. the date label of the newest release.
        icon : str
            Icon reference.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the notifier."""
        ...


class LogNotifier:
    """Notifier that writes notifications to the application log."""

    async def notify(self, channel_id: str, title: str, subtitle: str, icon: str) -> None:
        if subtitle:
            logger.info("[%s] %s - %s", channel_id, title, subtitle)
        else:
            logger.info("[%s] %s", channel_id, title)

    async def close(self) -> None:
        pass
