"""
Data model for release-notes entries and list display items.

Feed entries are immutable records built by the feed client; display
items are the header/entry units rendered by the list surface.
"""

import html
import re
from dataclasses import dataclass
from typing import Any

# Some feeds wrap the HTML body in a literal CDATA marker that survives
# entity decoding
CDATA_PREFIX = "<![CDATA["
CDATA_SUFFIX = "]]>"


@dataclass(frozen=True)
class FeedEntry:
    """
    One release-notes entry from the remote feed.

    Attributes
    ----------
    date_label : str
        Entry title, used as the date label of its group.
    updated : str
        Entry timestamp in the feed's native format.
    link : str
        URL of the full release notes.
    content : str
        Raw (possibly escaped) HTML body.
    """

    date_label: str = ""
    updated: str = ""
    link: str = ""
    content: str = ""

    @classmethod
    def from_feedparser(cls, entry: Any) -> "FeedEntry":
        """
        Create a FeedEntry from a feedparser entry.

        Parameters
        ----------
        entry : Any
            A feedparser entry object.

        Returns
        -------
        FeedEntry
            Immutable entry instance.
        """
        content = ""
        if entry.get("content"):
            content = entry["content"][0].get("value", "")
        elif entry.get("summary"):
            content = entry["summary"]

        return cls(
            date_label=entry.get("title", ""),
            updated=entry.get("updated", ""),
            link=entry.get("link", ""),
            content=content,
        )

    @property
    def text(self) -> str:
        """Plain text rendition of the HTML body."""
        return html_to_text(self.content)


@dataclass(frozen=True)
class FeedDocument:
    """
    A fetched feed: its top-level timestamp and entries in feed order.

    Attributes
    ----------
    updated : str | None
        Raw text of the feed's own ``<updated>`` element.
    entries : tuple[FeedEntry, ...]
        Entries, newest first.
    """

    updated: str | None = None
    entries: tuple[FeedEntry, ...] = ()


@dataclass(frozen=True)
class HeaderItem:
    """Group header pseudo-item carrying a date label."""

    date_label: str


@dataclass(frozen=True)
class EntryItem:
    """List item wrapping one feed entry."""

    entry: FeedEntry

    @property
    def date_label(self) -> str:
        return self.entry.date_label


DisplayItem = HeaderItem | EntryItem


def html_to_text(content: str) -> str:
    """
    Convert an HTML fragment into compact plain text.

    Parameters
    ----------
    content : str
        HTML fragment, optionally wrapped in a CDATA marker.

    Returns
    -------
    str
        Text with tags removed, entities decoded and whitespace collapsed.
    """
    text = content.strip()
    if text.startswith(CDATA_PREFIX):
        text = text[len(CDATA_PREFIX) :]
    if text.endswith(CDATA_SUFFIX):
        text = text[: -len(CDATA_SUFFIX)]

    # Keep list items and paragraphs apart once tags are gone
    text = re.sub(r"<\s*(br|/p|/li|/h\d)\s*/?>", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()
