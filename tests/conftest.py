"""
Shared fixtures for Release Notes Watcher tests.

Provides common test fixtures for use across all test modules.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from relnotes_watcher.config import TelegramConfig
from relnotes_watcher.models import FeedDocument, FeedEntry
from relnotes_watcher.storage import SQLiteWatermarkStore

# Path to test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Return path to sample config file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def sample_feed_content(fixtures_dir: Path) -> str:
    """Return contents of the sample release-notes feed."""
    return (fixtures_dir / "release_notes.xml").read_text()


@pytest.fixture
def sample_entry() -> FeedEntry:
    """
    Create a sample feed entry for testing.

    Returns
    -------
    FeedEntry
        A fully populated entry instance.
    """
    return FeedEntry(
        date_label="2024-01-10",
        updated="2024-01-10T00:00:00.000Z",
        link="l1",
        content="c1",
    )


@pytest.fixture
def sample_entries() -> list[FeedEntry]:
    """Three entries, newest first, two sharing a date label."""
    return [
        FeedEntry("January 10, 2024", "2024-01-10T00:00:00.000Z", "https://example.com/a", "<p>A</p>"),
        FeedEntry("January 10, 2024", "2024-01-10T00:00:00.000Z", "https://example.com/b", "<p>B</p>"),
        FeedEntry("December 13, 2023", "2023-12-13T00:00:00.000Z", "https://example.com/c", "<p>C</p>"),
    ]


@pytest.fixture
def sample_document(sample_entries: list[FeedEntry]) -> FeedDocument:
    """A feed document whose top-level timestamp matches its newest entry."""
    return FeedDocument(updated="2024-01-10T00:00:00.000Z", entries=tuple(sample_entries))


@pytest.fixture
def minimal_telegram_config() -> TelegramConfig:
    """Create a minimal valid Telegram configuration."""
    return TelegramConfig(
        bot_token="1234567890:ABCdefGHIjklMNOpqrsTUVwxyz",
        chat_id="-1001234567890",
    )


@pytest_asyncio.fixture
async def in_memory_store() -> AsyncGenerator[SQLiteWatermarkStore, None]:
    """
    Create an in-memory SQLite watermark store for testing.

    Yields
    ------
    SQLiteWatermarkStore
        An initialized in-memory store.
    """
    store = SQLiteWatermarkStore(":memory:")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def mock_client(sample_document: FeedDocument) -> MagicMock:
    """
    Create a mock feed client returning the sample document.

    Returns
    -------
    MagicMock
        A mock FeedClient with ``fetch`` mocked.
    """
    client = MagicMock()
    client.fetch = AsyncMock(return_value=sample_document)
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_notifier() -> MagicMock:
    """Create a mock notifier."""
    notifier = MagicMock()
    notifier.notify = AsyncMock()
    notifier.close = AsyncMock()
    return notifier


@pytest.fixture
def mock_telegram_bot() -> MagicMock:
    """
    Create a mock Telegram bot.

    Returns
    -------
    MagicMock
        A mock Bot instance with common methods mocked.
    """
    bot = MagicMock()
    bot.send_message = AsyncMock()
    bot.shutdown = AsyncMock()
    return bot
