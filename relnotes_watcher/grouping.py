"""
Date grouping of feed entries for list display.

Builds the header/entry display sequence and answers the header
queries the sticky header positioner needs.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from relnotes_watcher.models import DisplayItem, EntryItem, FeedEntry, HeaderItem


class StickyHeaderSource(Protocol):
    """
    Header capabilities of a list, as seen by the positioner.

    Positions are indexes into the display sequence.
    """

    def is_header(self, position: int) -> bool:
        """Return True if the item at ``position`` is a header."""
        ...

    def header_position_for_item(self, position: int) -> int:
        """Return the nearest header position at or before ``position``."""
        ...

    def header_content(self, header_position: int) -> str:
        """Return the text drawn for the header at ``header_position``."""
        ...

    def header_height(self, header_position: int) -> int:
        """Return the measured height of the header at ``header_position``."""
        ...


def group_entries(entries: Iterable[FeedEntry]) -> list[DisplayItem]:
    """
    Interleave a header before every entry, keeping feed order.

    A header is emitted per entry, so consecutive entries sharing a date
    label each get their own header.

    Parameters
    ----------
    entries : Iterable[FeedEntry]
        Entries in feed order.

    Returns
    -------
    list[DisplayItem]
        ``[HeaderItem, EntryItem, HeaderItem, EntryItem, ...]``.
    """
    items: list[DisplayItem] = []
    for entry in entries:
        items.append(HeaderItem(entry.date_label))
        items.append(EntryItem(entry))
    return items


class DisplayList:
    """
    An immutable display sequence with header lookups.

    The header anchor of every position is precomputed so lookups
    during rendering are constant time.
    """

    def __init__(self, items: Sequence[DisplayItem] = (), header_height: int = 1):
        """
        Initialize the display list.

        Parameters
        ----------
        items : Sequence[DisplayItem]
            Display sequence, usually from :func:`group_entries`.
        header_height : int
            Height of a rendered header, in surface units.

        Raises
        ------
        ValueError
            If ``header_height`` is less than 1.
        """
        if header_height < 1:
            raise ValueError("Header height must be at least 1")

        self.items: tuple[DisplayItem, ...] = tuple(items)
        self._header_height = header_height

        self._anchors: list[int] = []
        anchor = 0
        for position, item in enumerate(self.items):
            if isinstance(item, HeaderItem):
                anchor = position
            self._anchors.append(anchor)

    @classmethod
    def from_entries(cls, entries: Iterable[FeedEntry], header_height: int = 1) -> "DisplayList":
        """Group ``entries`` and wrap the result."""
        return cls(group_entries(entries), header_height=header_height)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, position: int) -> DisplayItem:
        return self.items[position]

    def is_header(self, position: int) -> bool:
        if not 0 <= position < len(self.items):
            return False
        return isinstance(self.items[position], HeaderItem)

    def header_position_for_item(self, position: int) -> int:
        if not self._anchors or position < 0:
            return 0
        return self._anchors[min(position, len(self._anchors) - 1)]

    def header_content(self, header_position: int) -> str:
        if not 0 <= header_position < len(self.items):
            return ""
        return self.items[header_position].date_label

    def header_height(self, header_position: int) -> int:
        return self._header_height
