"""
Geometry Viewability Calculator - percentage of an element's area that lies
inside every nested viewport.
"""

import math
from dataclasses import dataclass
from typing import Any

from adviewability.geometry.frame_chain import (
    FrameChain,
    min_viewport_across_chain,
    visible_dimension,
)
from adviewability.geometry.rect import Rect
from adviewability.geometry.viewport import resolve_viewport_size
from adviewability.host.base import ElementRef, HostEnvironment, WindowRef
from adviewability.utils.logger import get_logger

logger = get_logger(__name__)

VIEWPORT_ERROR = "Failed to determine viewport"

# Below this viewport/element area ratio the area ratio alone is reported
FAST_PATH_RATIO = 0.5


@dataclass
class GeometryResult:
    """Outcome of one geometry measurement."""
    percent_viewable: int | None = None
    viewport_width: float | None = None
    viewport_height: float | None = None
    element_rect: Rect | None = None
    fast_path: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "percent_viewable": self.percent_viewable,
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "element_rect": self.element_rect.to_dict() if self.element_rect else None,
            "fast_path": self.fast_path,
            "error": self.error,
        }


class GeometryViewabilityCalculator:
    """
    Measures how much of an element survives clipping by its own window and
    every ancestor frame.

    The returned percentage is not clamped to [0, 100]; the monitor does
    that. Degenerate clipped extents count as zero so the visible area is
    never negative.
    """

    def __init__(self, host: HostEnvironment, max_frame_depth: int | None = None):
        self.host = host
        self.max_frame_depth = max_frame_depth

    def get_viewability_state(
        self,
        element: ElementRef,
        window: WindowRef | None = None,
        chain: FrameChain | None = None,
    ) -> GeometryResult:
        """
        Measure an element.

        Args:
            element: Element to measure
            window: The element's own window (looked up from the host when omitted)
            chain: Pre-collected frame chain for this sample

        Raises:
            CrossOriginAccessError: the frame chain could not be walked
        """
        if chain is None:
            window = window if window is not None else self.host.owner_window(element)
            chain = FrameChain.collect(self.host, window, self.max_frame_depth)

        min_viewport = min_viewport_across_chain(self.host, chain)
        if not min_viewport.is_resolved:
            logger.debug("No viewport resolved in frame chain", depth=chain.depth)
            return GeometryResult(error=VIEWPORT_ERROR)

        element_rect = self.host.get_bounding_rect(element)
        element_area = element_rect.area
        if element_area == 0:
            return GeometryResult(
                percent_viewable=0,
                viewport_width=min_viewport.width,
                viewport_height=min_viewport.height,
                element_rect=element_rect,
            )

        if min_viewport.area / element_area < FAST_PATH_RATIO:
            return GeometryResult(
                percent_viewable=math.floor(100 * min_viewport.area / element_area),
                viewport_width=min_viewport.width,
                viewport_height=min_viewport.height,
                element_rect=element_rect,
                fast_path=True,
            )

        top_viewport = resolve_viewport_size(self.host, chain.top_window)
        visible = visible_dimension(self.host, element, chain)
        width = visible.width
        height = visible.height

        # Below the bottom
        if visible.bottom > top_viewport.height:
            height -= visible.bottom - top_viewport.height
        # Above the top
        if visible.top < 0:
            height += visible.top
        # Left of the left edge
        if visible.left < 0:
            width += visible.left
        # Right of the right edge
        if visible.right > top_viewport.width:
            width -= visible.right - top_viewport.width

        visible_area = max(0.0, width) * max(0.0, height)

        return GeometryResult(
            percent_viewable=math.floor(100 * visible_area / element_area),
            viewport_width=top_viewport.width,
            viewport_height=top_viewport.height,
            element_rect=element_rect,
        )
