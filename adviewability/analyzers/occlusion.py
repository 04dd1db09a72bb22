"""
Occlusion Detector - hit-tests a 3x3 grid of points over the element and
measures how much of it the topmost foreign element covers.
"""

import math

from adviewability.config import settings
from adviewability.geometry.rect import Rect, overlap_fraction
from adviewability.host.base import ElementRef, HostEnvironment, WindowRef
from adviewability.monitor.state import SampleResult
from adviewability.utils.logger import get_logger

logger = get_logger(__name__)


class OcclusionDetector:
    """
    Detects elements painted over the target.

    Only the target's own document is hit-tested. Elements that are the
    target or live inside it never count as covering it.
    """

    def __init__(self, host: HostEnvironment, inset: float | None = None):
        self.host = host
        self.inset = inset if inset is not None else settings.occlusion_sample_inset

    def sample_points(self, rect: Rect) -> list[tuple[float, float]]:
        """Corners and edge midpoints inset from the border, plus the center, row by row."""
        x_left = rect.left + self.inset
        x_right = rect.right - self.inset
        x_center = math.floor(rect.left + rect.width / 2)
        y_top = max(0, rect.top + self.inset)
        y_bottom = rect.bottom - self.inset
        y_center = math.floor(rect.top + rect.height / 2)

        return [
            (x, y)
            for y in (y_top, y_center, y_bottom)
            for x in (x_left, x_center, x_right)
        ]

    def is_dom_obscured(
        self,
        element: ElementRef,
        window: WindowRef,
        accepted_percentage: float,
        sample: SampleResult,
    ) -> bool:
        """
        Check whether another element covers more than the accepted share.

        Each sample point that hits a foreign element overwrites
        `sample.percent_obscured`. The first one above `accepted_percentage`
        also sets `sample.percent_viewable` and ends the scan.
        """
        target_rect = self.host.get_bounding_rect(element)

        for x, y in self.sample_points(target_rect):
            if x < 0 or y < 0:
                continue

            hit = self.host.element_from_point(window, x, y)
            if hit is None:
                continue
            if self.host.same_element(hit, element) or self.host.is_descendant_of(hit, element):
                continue

            covered = overlap_fraction(target_rect, self.host.get_bounding_rect(hit))
            if covered <= 0:
                continue

            sample.percent_obscured = 100 * covered
            if sample.percent_obscured > accepted_percentage:
                sample.percent_viewable = 100 - sample.percent_obscured
                logger.debug(
                    "Element obscured",
                    x=x,
                    y=y,
                    percent_obscured=sample.percent_obscured,
                )
                return True

        return False
