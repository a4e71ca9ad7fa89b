"""
Main entry point for Release Notes Watcher.

Runs the periodic update check, a single check, or prints the grouped
release-notes list.
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from urllib.parse import urlparse

import coloredlogs

from relnotes_watcher.checker import UpdateChecker
from relnotes_watcher.config import AppConfig, load_config
from relnotes_watcher.feed import FeedClient
from relnotes_watcher.grouping import DisplayList
from relnotes_watcher.notifier import LogNotifier, Notifier
from relnotes_watcher.refresh import ReleaseNotesModel
from relnotes_watcher.rendering import ListSurface
from relnotes_watcher.scheduler import PeriodicScheduler, network_available
from relnotes_watcher.storage import SQLiteWatermarkStore
from relnotes_watcher.telegram import TelegramNotifier

logger = logging.getLogger(__name__)


def redact_proxy_url(proxy_url: str) -> str:
    """
    Redact credentials from a proxy URL for safe logging.

    Parameters
    ----------
    proxy_url : str
        The proxy URL potentially containing credentials.

    Returns
    -------
    str
        The proxy URL with password redacted.
    """
    try:
        parsed = urlparse(proxy_url)
        if parsed.password:
            netloc = parsed.hostname or ""
            if parsed.port:
                netloc = f"{netloc}:{parsed.port}"
            if parsed.username:
                netloc = f"{parsed.username}:****@{netloc}"
            return f"{parsed.scheme}://{netloc}{parsed.path}"
        return proxy_url
    except ValueError:
        return "<proxy url>"


class ReleaseNotesWatcher:
    """
    Main application.

    Wires the feed client, watermark store and notifier together and
    owns their lifecycle.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the watcher.

        Parameters
        ----------
        config : AppConfig
            Validated application configuration.
        """
        self.config = config
        self.client: FeedClient | None = None
        self.store: SQLiteWatermarkStore | None = None
        self.notifier: Notifier | None = None
        self.scheduler = PeriodicScheduler()

    def _create_client(self) -> FeedClient:
        feed = self.config.feed
        if feed.proxy:
            logger.info("Using proxy: %s", redact_proxy_url(feed.proxy))
        return FeedClient(
            timeout=feed.request_timeout,
            max_retries=feed.max_retries,
            user_agent=feed.user_agent,
            proxy_url=feed.proxy,
        )

    def _create_notifier(self) -> Notifier:
        telegram = self.config.notification.telegram
        if telegram is None:
            return LogNotifier()
        return TelegramNotifier(telegram, proxy_url=self.config.feed.proxy)

    async def start(self, open_store: bool = True) -> None:
        """
        Initialize components.

        Parameters
        ----------
        open_store : bool
            If False, the watermark database is not opened.
        """
        self.client = self._create_client()
        if open_store:
            self.store = SQLiteWatermarkStore(
                self.config.storage.database_path,
                key=self.config.storage.watermark_key,
            )
            await self.store.initialize()
        self.notifier = self._create_notifier()

    def create_checker(self) -> UpdateChecker:
        if not self.client or not self.store or not self.notifier:
            raise RuntimeError("Components not initialized")
        return UpdateChecker(
            self.client,
            self.store,
            self.notifier,
            self.config.feed.url,
            self.config.notification,
        )

    async def check(self) -> bool:
        """
        Run one update check.

        Returns
        -------
        bool
            True if a notification was sent.
        """
        result = await self.create_checker().run_once()
        return result.notify

    async def watch(self) -> None:
        """Run the update check periodically until stopped."""
        schedule = self.config.schedule
        checker = self.create_checker()

        precondition = None
        if schedule.requires_network:
            precondition = network_available(self.config.feed.url)

        self.scheduler.register(
            schedule.name,
            checker.run_once,
            schedule.interval,
            precondition=precondition,
            retry_delay=schedule.network_retry,
        )
        logger.info("Release Notes Watcher started")
        await self.scheduler.run()

    async def list_notes(self, offset: int = 0) -> list[str]:
        """
        Fetch the feed once and render the list window at ``offset``.

        Parameters
        ----------
        offset : int
            Scroll offset in rows.

        Returns
        -------
        list[str]
            Rendered rows, empty if the refresh failed.
        """
        if not self.client:
            raise RuntimeError("Components not initialized")

        model = ReleaseNotesModel(self.client, self.config.feed.url)
        try:
            await model.refresh()
        finally:
            await model.close()

        display = self.config.display
        display_list = DisplayList(model.notes.value, header_height=display.header_height)
        surface = ListSurface(display_list, rows=display.rows, width=display.width)
        return surface.render(offset)

    async def stop(self) -> None:
        """Stop scheduled jobs and close components."""
        await self.scheduler.stop()

        if self.client:
            await self.client.close()
        if self.store:
            await self.store.close()
        if self.notifier:
            await self.notifier.close()

        logger.debug("Release Notes Watcher stopped")


def setup_logging(verbose: bool = False) -> None:
    """
    Configure application logging.

    Parameters
    ----------
    verbose : bool
        If True, set log level to DEBUG.
    """
    level = logging.DEBUG if verbose else logging.INFO

    coloredlogs.install(
        level=level,
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("telegram").setLevel(logging.WARNING)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Release notes feed watcher",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to configuration file (defaults apply when omitted)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("watch", help="Check for new releases periodically")
    commands.add_parser("check", help="Check for a new release once")
    list_parser = commands.add_parser("list", help="Print the grouped release notes")
    list_parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Scroll offset in rows",
    )
    return parser


async def _run_command(watcher: ReleaseNotesWatcher, args: argparse.Namespace) -> None:
    await watcher.start(open_store=args.command != "list")

    if args.command == "check":
        notified = await watcher.check()
        print("New release notes, notification sent" if notified else "No new release notes")
    elif args.command == "list":
        for line in await watcher.list_notes(args.offset):
            print(line)
    else:
        await watcher.watch()


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)

    setup_logging(args.verbose)

    if args.config is None:
        config = AppConfig()
    else:
        config_path = Path(args.config)
        if not config_path.exists():
            logger.error("Configuration file not found: %s", config_path)
            sys.exit(1)
        try:
            config = load_config(config_path)
        except Exception as e:
            logger.error("Invalid configuration: %s", e)
            sys.exit(1)

    watcher = ReleaseNotesWatcher(config)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    main_task = loop.create_task(_run_command(watcher, args))

    def signal_handler():
        logger.info("Received shutdown signal")
        main_task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    exit_code = 0
    try:
        loop.run_until_complete(main_task)
    except asyncio.CancelledError:
        logger.info("Interrupted")
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error("Command '%s' failed: %s", args.command, e)
        exit_code = 1
    finally:
        loop.run_until_complete(watcher.stop())
        loop.close()

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
