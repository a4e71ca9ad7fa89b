"""
Sticky header positioning.

Computes which group header is pinned over the top of a scrolled list
and how far it is pushed up when the next header scrolls into it.
All offsets are in surface units, measured from the top of the viewport.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from relnotes_watcher.grouping import StickyHeaderSource


@dataclass(frozen=True)
class ViewportChild:
    """
    Geometry of one laid-out child of the list.

    Attributes
    ----------
    position : int | None
        Index of the item in the display sequence, None if the child
        has no adapter position (e.g. it is being removed).
    top : int
        Offset of the child's top edge; negative when scrolled past.
    bottom : int
        Offset of the child's bottom edge.
    """

    position: int | None
    top: int
    bottom: int

    @property
    def height(self) -> int:
        return self.bottom - self.top


@dataclass(frozen=True)
class Viewport:
    """Visible children, top to bottom, and the viewport height."""

    children: Sequence[ViewportChild] = field(default_factory=tuple)
    height: int = 0


@dataclass(frozen=True)
class HeaderOverlay:
    """
    Header to draw over the list.

    Attributes
    ----------
    header_position : int
        Display position of the header being drawn.
    content : str
        Header text.
    top : int
        Offset to draw the header at; 0 when pinned, negative while
        being pushed off by the next header.
    height : int
        Measured header height.
    """

    header_position: int
    content: str
    top: int
    height: int

    @property
    def pinned(self) -> bool:
        return self.top == 0


class StickyHeaderPositioner:
    """
    Keeps the current group's header pinned to the top of the viewport.

    The header stays at offset 0 until the next header scrolls up into
    contact with its bottom edge, then moves up with it.
    """

    def __init__(self, source: StickyHeaderSource):
        """
        Initialize the positioner.

        Parameters
        ----------
        source : StickyHeaderSource
            Owner of the display sequence.
        """
        self.source = source
        self.sticky_header_height = 0

    def compute_overlay(self, viewport: Viewport) -> HeaderOverlay | None:
        """
        Work out the sticky header for the current scroll state.

        Parameters
        ----------
        viewport : Viewport
            Current geometry of the visible children.

        Returns
        -------
        HeaderOverlay | None
            The header to draw and its offset, or None when nothing is
            visible.
        """
        if not viewport.children:
            return None

        top_child = viewport.children[0]
        if top_child.position is None:
            return None

        header_position = self.source.header_position_for_item(top_child.position)
        content = self.source.header_content(header_position)
        self.sticky_header_height = max(self.source.header_height(header_position), 0)

        # The header is laid out at the top, so its bottom edge is the contact point
        contact_point = self.sticky_header_height
        child_in_contact = self._child_in_contact(viewport, contact_point, header_position)

        if (
            child_in_contact is not None
            and child_in_contact.position is not None
            and self.source.is_header(child_in_contact.position)
        ):
            top = child_in_contact.top - self.sticky_header_height
        else:
            top = 0

        return HeaderOverlay(
            header_position=header_position,
            content=content,
            top=top,
            height=self.sticky_header_height,
        )

    def _child_in_contact(
        self, viewport: Viewport, contact_point: int, header_position: int
    ) -> ViewportChild | None:
        """
        Find the child overlapping the bottom edge of the sticky header.

        Parameters
        ----------
        viewport : Viewport
            Current geometry of the visible children.
        contact_point : int
            Offset of the sticky header's bottom edge.
        header_position : int
            Display position of the sticky header.

        Returns
        -------
        ViewportChild | None
            First child spanning the contact point, if any.
        """
        for child in viewport.children:
            height_tolerance = 0

            # Other headers may be drawn shorter than the sticky one
            if (
                child.position is not None
                and child.position != header_position
                and self.source.is_header(child.position)
            ):
                height_tolerance = self.sticky_header_height - child.height

            if child.top > 0:
                child_bottom = child.bottom + height_tolerance
            else:
                child_bottom = child.bottom

            if child_bottom > contact_point and child.top <= contact_point:
                return child

        return None
