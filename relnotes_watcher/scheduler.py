"""
Periodic job scheduling.

Runs named async jobs on a fixed interval, each in its own task, with an
optional network-availability precondition.
"""

import asyncio
import logging
import socket
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[object]]
Precondition = Callable[[], Awaitable[bool]]


def network_available(url: str) -> Precondition:
    """
    Build a precondition that holds while the host of ``url`` resolves.

    Parameters
    ----------
    url : str
        URL whose host is looked up.

    Returns
    -------
    Precondition
        Async callable returning True if the lookup succeeds.
    """
    parsed = urlparse(url)
    host = parsed.hostname or ""
    port = parsed.port or (443 if parsed.scheme == "https" else 80)

    async def check() -> bool:
        try:
            await asyncio.get_running_loop().getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except (OSError, UnicodeError) as e:
            logger.debug("Network check for %s failed: %s", host, e)
            return False
        return True

    return check


@dataclass
class PeriodicJob:
    """
    A registered job.

    Attributes
    ----------
    name : str
        Unique job name.
    job : Job
        Coroutine function run every period.
    interval : float
        Seconds between the end of one run and the start of the next.
    precondition : Precondition | None
        Checked before each run; the run waits while it is False.
    retry_delay : float
        Seconds to wait before re-checking a failed precondition.
    """

    name: str
    job: Job
    interval: float
    precondition: Precondition | None = None
    retry_delay: float = 300


class PeriodicScheduler:
    """
    Runs registered jobs until stopped.

    A job never overlaps with itself: the next period starts only after
    the previous run has finished.
    """

    def __init__(self) -> None:
        self.jobs: dict[str, PeriodicJob] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._running = False

    def register(
        self,
        name: str,
        job: Job,
        interval: float,
        precondition: Precondition | None = None,
        retry_delay: float = 300,
    ) -> bool:
        """
        Register a periodic job.

        Registering a name that is already registered keeps the existing
        job.

        Parameters
        ----------
        name : str
            Unique job name.
        job : Job
            Coroutine function to run.
        interval : float
            Seconds between runs.
        precondition : Precondition | None
            Checked before each run.
        retry_delay : float
            Seconds between precondition checks while it fails.

        Returns
        -------
        bool
            True if the job was added, False if the name was taken.
        """
        if name in self.jobs:
            logger.debug("Job '%s' already registered, keeping existing", name)
            return False

        periodic = PeriodicJob(name, job, interval, precondition, retry_delay)
        self.jobs[name] = periodic
        logger.info("Registered job '%s' every %ss", name, interval)

        if self._running:
            self._start(periodic)
        return True

    async def run(self) -> None:
        """Start all jobs and wait until they are cancelled."""
        self._running = True
        for periodic in self.jobs.values():
            if periodic.name not in self._tasks:
                self._start(periodic)

        try:
            await asyncio.gather(*self._tasks.values())
        except asyncio.CancelledError:
            logger.info("Scheduler tasks cancelled")

    def _start(self, periodic: PeriodicJob) -> None:
        self._tasks[periodic.name] = asyncio.create_task(self._loop(periodic))

    async def stop(self) -> None:
        """Cancel all job tasks and wait for them to finish."""
        self._running = False

        for task in self._tasks.values():
            task.cancel()

        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        self._tasks.clear()

    async def _loop(self, periodic: PeriodicJob) -> None:
        """
        Run one job forever.

        Parameters
        ----------
        periodic : PeriodicJob
            The job to run.
        """
        while self._running:
            if periodic.precondition is not None and not await self._precondition_met(periodic):
                logger.info(
                    "Precondition for '%s' not met, retrying in %ss",
                    periodic.name,
                    periodic.retry_delay,
                )
                await asyncio.sleep(periodic.retry_delay)
                continue

            try:
                await periodic.job()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Job '%s' failed: %s", periodic.name, e)

            await asyncio.sleep(periodic.interval)

    async def _precondition_met(self, periodic: PeriodicJob) -> bool:
        try:
            return await periodic.precondition()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Precondition for '%s' failed: %s", periodic.name, e)
            return False
