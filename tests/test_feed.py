"""
Unit tests for the feed client.

Tests cover Atom parsing, fetching with retries, and session management.
"""

import asyncio
from unittest.mock import MagicMock, patch

import aiohttp
import pytest
from aioresponses import aioresponses

from relnotes_watcher.feed import FeedClient

FEED_URL = "https://example.com/release-notes.xml"


class TestFeedClientInit:
    """Tests for FeedClient initialization."""

    def test_default_values(self) -> None:
        """Test FeedClient default values."""
        client = FeedClient()

        assert client.timeout == 30
        assert client.max_retries == 3
        assert client.user_agent == "Release-Notes-Watcher/1.0"
        assert client.proxy_url is None
        assert client._session is None

    def test_custom_values(self) -> None:
        """Test FeedClient with custom values."""
        client = FeedClient(
            timeout=60,
            max_retries=5,
            user_agent="Custom/2.0",
            proxy_url="socks5://localhost:1080",
        )

        assert client.timeout == 60
        assert client.max_retries == 5
        assert client.user_agent == "Custom/2.0"
        assert client.proxy_url == "socks5://localhost:1080"


class TestFeedClientParse:
    """Tests for feed content parsing."""

    def test_top_level_updated(self, sample_feed_content: str) -> None:
        """Test that the feed's own timestamp is kept raw."""
        document = FeedClient().parse(sample_feed_content)

        assert document.updated == "2024-01-10T00:00:00.000Z"

    def test_entries_in_feed_order(self, sample_feed_content: str) -> None:
        """Test that entries keep feed order and fields."""
        document = FeedClient().parse(sample_feed_content)

        assert [e.date_label for e in document.entries] == [
            "January 10, 2024",
            "January 10, 2024",
            "December 13, 2023",
        ]
        first = document.entries[0]
        assert first.updated == "2024-01-10T00:00:00.000Z"
        assert first.link == (
            "https://developer.android.com/jetpack/androidx/versions/all-channel#january_10_2024"
        )
        assert "Compose" in first.content

    def test_content_text(self, sample_feed_content: str) -> None:
        """Test that escaped HTML bodies render to text."""
        document = FeedClient().parse(sample_feed_content)

        assert document.entries[0].text == "Compose Version 1.6.0 contains these commits."
        assert document.entries[2].text == "Activity 1.8.2 & Fragment 1.6.2 released."

    def test_parse_with_leading_whitespace(self, sample_feed_content: str) -> None:
        """Test parsing feed with leading whitespace."""
        document = FeedClient().parse("\n\n  " + sample_feed_content)

        assert len(document.entries) == 3

    def test_parse_empty_feed(self) -> None:
        """Test parsing a feed with no entries."""
        empty_feed = """<?xml version="1.0" encoding="UTF-8"?>
        <feed xmlns="http://www.w3.org/2005/Atom">
            <title>Empty</title>
            <updated>2024-01-10T00:00:00.000Z</updated>
        </feed>
        """

        document = FeedClient().parse(empty_feed)

        assert document.entries == ()
        assert document.updated == "2024-01-10T00:00:00.000Z"

    def test_parse_without_updated(self) -> None:
        """Test that a missing top-level timestamp is None."""
        feed = """<?xml version="1.0" encoding="UTF-8"?>
        <feed xmlns="http://www.w3.org/2005/Atom"><title>No date</title></feed>
        """

        assert FeedClient().parse(feed).updated is None


class TestFeedClientFetch:
    """Tests for feed fetching with HTTP requests."""

    async def test_fetch_success(self, sample_feed_content: str) -> None:
        """Test successful feed fetch."""
        client = FeedClient()

        with aioresponses() as m:
            m.get(FEED_URL, body=sample_feed_content)

            document = await client.fetch(FEED_URL)

        assert len(document.entries) == 3
        await client.close()

    async def test_fetch_retry_on_error(
        self, sample_feed_content: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test retry logic on transient errors."""
        client = FeedClient(max_retries=3)

        with aioresponses() as m:
            m.get(FEED_URL, exception=aiohttp.ClientError("Connection failed"))
            m.get(FEED_URL, exception=aiohttp.ClientError("Connection failed"))
            m.get(FEED_URL, body=sample_feed_content)

            document = await client.fetch(FEED_URL)

        assert len(document.entries) == 3
        assert "attempt 1/3" in caplog.text.lower()
        await client.close()

    async def test_fetch_retry_on_timeout(self, sample_feed_content: str) -> None:
        """Test that request timeouts are retried like connection errors."""
        client = FeedClient(max_retries=2)

        with aioresponses() as m:
            m.get(FEED_URL, exception=asyncio.TimeoutError())
            m.get(FEED_URL, body=sample_feed_content)

            document = await client.fetch(FEED_URL)

        assert len(document.entries) == 3
        await client.close()

    async def test_fetch_max_retries_exceeded(self) -> None:
        """Test that max retries exceeded raises exception."""
        client = FeedClient(max_retries=2)

        with aioresponses() as m:
            m.get(FEED_URL, exception=aiohttp.ClientError("Failed"))
            m.get(FEED_URL, exception=aiohttp.ClientError("Failed"))

            with pytest.raises(aiohttp.ClientError):
                await client.fetch(FEED_URL)

        await client.close()

    async def test_fetch_http_error_status(self) -> None:
        """Test handling of HTTP error status codes."""
        client = FeedClient(max_retries=1)

        with aioresponses() as m:
            m.get(FEED_URL, status=500)

            with pytest.raises(aiohttp.ClientResponseError):
                await client.fetch(FEED_URL)

        await client.close()


class TestFeedClientSession:
    """Tests for HTTP session management."""

    async def test_session_lazy_creation(self) -> None:
        """Test that session is created lazily."""
        client = FeedClient()

        assert client._session is None

        session = await client._get_session()

        assert client._session is session
        await client.close()

    async def test_session_reused(self, sample_feed_content: str) -> None:
        """Test that session is reused across requests."""
        client = FeedClient()

        with aioresponses() as m:
            m.get(FEED_URL, body=sample_feed_content)
            m.get(FEED_URL, body=sample_feed_content)

            await client.fetch(FEED_URL)
            session1 = client._session

            await client.fetch(FEED_URL)
            session2 = client._session

        assert session1 is session2
        await client.close()

    async def test_close_idempotent(self) -> None:
        """Test that close can be called multiple times."""
        client = FeedClient()
        await client._get_session()

        await client.close()
        await client.close()

        assert client._session is None

    async def test_context_manager_closes_session(self) -> None:
        """Test context manager closes session on exit."""
        client = FeedClient()
        async with client:
            await client._get_session()

        assert client._session is None

    async def test_proxy_creates_connector(self) -> None:
        """Test that proxy URL creates a ProxyConnector."""
        client = FeedClient(proxy_url="socks5://localhost:1080")

        with patch("relnotes_watcher.feed.ProxyConnector") as mock_connector:
            with patch("relnotes_watcher.feed.aiohttp.ClientSession") as mock_session:
                mock_connector.from_url.return_value = MagicMock()

                await client._get_session()

        mock_connector.from_url.assert_called_once_with("socks5://localhost:1080")
        assert mock_session.call_args.kwargs["connector"] is mock_connector.from_url.return_value
