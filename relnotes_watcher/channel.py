"""
Single-slot "latest value wins" channel.

Publishers overwrite the slot; consumers wake at their own pace and
only ever see the most recent value, never a backlog.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

T = TypeVar("T")


class LatestValue(Generic[T]):
    """
    Holds one value and a version counter bumped on every publish.

    Must be used from a single event loop.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        return self._version

    def publish(self, value: T) -> None:
        """Replace the current value and wake waiting consumers."""
        self._value = value
        self._version += 1
        self._changed.set()

    async def wait_for_change(self, since_version: int) -> tuple[int, T]:
        """
        Wait until a value newer than ``since_version`` is published.

        Parameters
        ----------
        since_version : int
            Version the consumer last observed.

        Returns
        -------
        tuple[int, T]
            The current version and value.
        """
        while self._version == since_version:
            self._changed.clear()
            await self._changed.wait()
        return self._version, self._value

    async def __aiter__(self) -> AsyncIterator[T]:
        """Yield the current value, then each newer value as it lands."""
        version = self._version
        yield self._value
        while True:
            version, value = await self.wait_for_change(version)
            yield value
