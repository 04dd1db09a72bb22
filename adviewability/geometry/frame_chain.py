"""
Frame chain resolution: walks from an element's own window up to the top
window, composing frame offsets and clipping against every ancestor frame.
"""

from dataclasses import dataclass
from typing import Iterator

from adviewability.config import settings
from adviewability.errors import FrameChainError
from adviewability.geometry.rect import Rect
from adviewability.geometry.viewport import ViewportSize, resolve_viewport_size
from adviewability.host.base import ElementRef, HostEnvironment, WindowRef
from adviewability.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FrameLink:
    """One window in the chain and the frame element hosting it in the next window up."""
    window: WindowRef
    frame_element: ElementRef | None = None

    @property
    def is_top(self) -> bool:
        return self.frame_element is None


class FrameChain:
    """
    Ordered windows from the element's own window (index 0) to the top
    window (last index). Collected once per sample.
    """

    def __init__(self, links: list[FrameLink]):
        if not links:
            raise FrameChainError("Frame chain needs at least one window")
        self.links = links

    @classmethod
    def collect(
        cls,
        host: HostEnvironment,
        window: WindowRef,
        max_depth: int | None = None,
    ) -> "FrameChain":
        """
        Walk parent windows until the top window is reached.

        Raises:
            CrossOriginAccessError: the host refused a parent or frame element
            FrameChainError: the walk went deeper than `max_depth`
        """
        max_depth = max_depth if max_depth is not None else settings.max_frame_depth
        top = host.top_window(window)
        links: list[FrameLink] = []
        current = window

        while True:
            if len(links) >= max_depth:
                raise FrameChainError(
                    f"Frame chain deeper than {max_depth} windows without reaching the top"
                )
            if current == top:
                links.append(FrameLink(current))
                break

            parent = host.parent_window(current)
            if parent == current:
                # A window that is its own parent is a top window
                links.append(FrameLink(current))
                break

            links.append(FrameLink(current, host.hosting_frame_element(current)))
            current = parent

        logger.debug("Collected frame chain", depth=len(links))
        return cls(links)

    @property
    def own_window(self) -> WindowRef:
        return self.links[0].window

    @property
    def top_window(self) -> WindowRef:
        return self.links[-1].window

    @property
    def depth(self) -> int:
        return len(self.links)

    def __len__(self) -> int:
        return len(self.links)

    def __iter__(self) -> Iterator[FrameLink]:
        return iter(self.links)

    def __getitem__(self, level: int) -> FrameLink:
        return self.links[level]


def min_viewport_across_chain(host: HostEnvironment, chain: FrameChain) -> ViewportSize:
    """
    Smallest-area viewport among every window in the chain.

    Unresolved levels have infinite area and never win; the result is only
    unresolved when every level is.
    """
    minimum = resolve_viewport_size(host, chain.own_window)
    for link in chain.links[1:]:
        viewport = resolve_viewport_size(host, link.window)
        if viewport.area < minimum.area:
            minimum = viewport
    return minimum


def position_relative_to_viewport(
    host: HostEnvironment,
    element: ElementRef,
    chain: FrameChain,
    level: int = 0,
) -> Rect:
    """
    Element rect translated into the top window's coordinate space.

    Only the left/top of each hosting frame element is added; frames never
    rescale their content.
    """
    element_rect = host.get_bounding_rect(element)
    link = chain[level]

    offset_left = 0.0
    offset_top = 0.0
    if not link.is_top:
        frame_position = position_relative_to_viewport(host, link.frame_element, chain, level + 1)
        offset_left = frame_position.left
        offset_top = frame_position.top

    return element_rect.translated(offset_left, offset_top)


def visible_dimension(
    host: HostEnvironment,
    element: ElementRef,
    chain: FrameChain,
    level: int = 0,
) -> Rect:
    """
    Element rect in top-window space, clipped by every hosting frame above it.

    Each frame's own visible rect (computed the same way one level up) cuts
    the element's bottom and right edges. An element lying entirely beyond
    one of those edges collapses to zero height or width on that axis.
    """
    result = position_relative_to_viewport(host, element, chain, level)
    link = chain[level]

    if not link.is_top:
        parent = visible_dimension(host, link.frame_element, chain, level + 1)

        if parent.bottom < result.bottom:
            if parent.bottom < result.top:
                result.top = parent.bottom
            result.bottom = parent.bottom

        if parent.right < result.right:
            if parent.right < result.left:
                result.left = parent.right
            result.right = parent.right

        result.recompute()

    return result
