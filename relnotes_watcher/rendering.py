"""
Terminal rendering of the grouped release-notes list.

Lays display items out as rows of text, derives the visible window for
a scroll offset and draws the sticky header over it.
"""

import textwrap
from dataclasses import dataclass

from relnotes_watcher.grouping import DisplayList
from relnotes_watcher.models import EntryItem, HeaderItem
from relnotes_watcher.sticky import HeaderOverlay, StickyHeaderPositioner, Viewport, ViewportChild


@dataclass(frozen=True)
class RowBlock:
    """Rows of one laid-out item and its absolute top offset."""

    position: int
    top: int
    lines: tuple[str, ...]

    @property
    def bottom(self) -> int:
        return self.top + len(self.lines)


def format_header(label: str, width: int, height: int) -> list[str]:
    """Render a date header as ``height`` rows."""
    title = f"== {label} ".ljust(width, "=")[:width]
    return [title] + [""] * (height - 1)


class ListSurface:
    """
    Row-based surface for a DisplayList.

    Headers take ``header_height`` rows; entries take their wrapped
    text plus one row for the link.
    """

    def __init__(self, display_list: DisplayList, rows: int = 24, width: int = 80):
        """
        Initialize the surface and lay out every item.

        Parameters
        ----------
        display_list : DisplayList
            Items to render.
        rows : int
            Height of the viewport.
        width : int
            Width used to wrap entry text.
        """
        self.display_list = display_list
        self.rows = rows
        self.width = width
        self.positioner = StickyHeaderPositioner(display_list)
        self.blocks = self._layout()

    def _layout(self) -> list[RowBlock]:
        blocks = []
        top = 0
        for position, item in enumerate(self.display_list.items):
            match item:
                case HeaderItem(date_label=label):
                    height = self.display_list.header_height(position)
                    lines = format_header(label, self.width, height)
                case EntryItem(entry=entry):
                    lines = textwrap.wrap(entry.text, self.width) or [""]
                    if entry.link:
                        lines.append(entry.link)
            blocks.append(RowBlock(position, top, tuple(lines)))
            top += len(lines)
        return blocks

    @property
    def total_height(self) -> int:
        return self.blocks[-1].bottom if self.blocks else 0

    def clamp_offset(self, offset: int) -> int:
        return max(0, min(offset, self.total_height - self.rows))

    def viewport(self, offset: int) -> Viewport:
        """
        Geometry of the children visible at a scroll offset.

        Parameters
        ----------
        offset : int
            Scroll offset in rows from the top of the list.

        Returns
        -------
        Viewport
            Visible children with offsets relative to the viewport top.
        """
        children = [
            ViewportChild(block.position, block.top - offset, block.bottom - offset)
            for block in self.blocks
            if block.bottom > offset and block.top < offset + self.rows
        ]
        return Viewport(children=tuple(children), height=self.rows)

    def render(self, offset: int = 0) -> list[str]:
        """
        Draw the visible window with the sticky header on top.

        Parameters
        ----------
        offset : int
            Scroll offset in rows; clamped to the list.

        Returns
        -------
        list[str]
            At most ``rows`` lines of text.
        """
        offset = self.clamp_offset(offset)
        viewport = self.viewport(offset)

        screen: list[str] = []
        for child in viewport.children:
            block = self.blocks[child.position]
            for row, line in enumerate(block.lines, start=child.top):
                if 0 <= row < self.rows:
                    screen.append(line)

        overlay = self.positioner.compute_overlay(viewport)
        if overlay is not None:
            self._draw_header(screen, overlay)
        return screen

    def _draw_header(self, screen: list[str], overlay: HeaderOverlay) -> None:
        lines = format_header(overlay.content, self.width, overlay.height)
        for row, line in enumerate(lines, start=overlay.top):
            if 0 <= row < len(screen):
                screen[row] = line
