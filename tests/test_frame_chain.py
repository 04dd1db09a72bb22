"""Tests for frame chain collection, offsets and clipping."""
import math

import pytest

from adviewability.errors import CrossOriginAccessError, FrameChainError
from adviewability.geometry.frame_chain import (
    FrameChain,
    min_viewport_across_chain,
    position_relative_to_viewport,
    visible_dimension,
)
from adviewability.host.snapshot import SnapshotHost
from adviewability.models import PageSnapshot

from helpers import make_element, make_window


def _two_level_page(**inner_overrides) -> PageSnapshot:
    """top (1024x768) > outer frame at (100, 200) > inner frame at (10, 20) > ad."""
    inner = dict(width=300, height=250, parent_id="outer", frame_element_id="inner-iframe")
    inner.update(inner_overrides)
    return PageSnapshot(
        windows=[
            make_window("top"),
            make_window("outer", 600, 400, parent_id="top", frame_element_id="outer-iframe"),
            make_window("inner", **inner),
        ],
        elements=[
            make_element("outer-iframe", 100, 200, 600, 400, window_id="top"),
            make_element("inner-iframe", 10, 20, 300, 250, window_id="outer"),
            make_element("ad", 5, 5, 100, 50, window_id="inner"),
        ],
    )


class TestCollect:
    """Tests for walking windows up to the top."""

    def test_top_window_is_single_link(self) -> None:
        host = SnapshotHost(PageSnapshot(windows=[make_window("top")]))
        chain = FrameChain.collect(host, "top")
        assert chain.depth == 1
        assert chain[0].is_top
        assert chain.own_window == chain.top_window == "top"

    def test_nested_chain_order(self) -> None:
        host = SnapshotHost(_two_level_page())
        chain = FrameChain.collect(host, "inner")
        assert [link.window for link in chain] == ["inner", "outer", "top"]
        assert [link.frame_element for link in chain] == ["inner-iframe", "outer-iframe", None]

    def test_cross_origin_parent_fails_whole_chain(self) -> None:
        host = SnapshotHost(_two_level_page(cross_origin=True))
        with pytest.raises(CrossOriginAccessError):
            FrameChain.collect(host, "inner")

    def test_depth_limit(self) -> None:
        host = SnapshotHost(_two_level_page())
        with pytest.raises(FrameChainError):
            FrameChain.collect(host, "inner", max_depth=2)


class TestMinViewport:
    """Tests for the smallest viewport across the chain."""

    def test_smallest_area_wins(self) -> None:
        host = SnapshotHost(_two_level_page())
        viewport = min_viewport_across_chain(host, FrameChain.collect(host, "inner"))
        assert (viewport.width, viewport.height) == (300, 250)

    def test_unresolved_level_is_skipped(self) -> None:
        host = SnapshotHost(_two_level_page(width=None, height=None))
        viewport = min_viewport_across_chain(host, FrameChain.collect(host, "inner"))
        assert (viewport.width, viewport.height) == (600, 400)

    def test_all_levels_unresolved(self) -> None:
        page = PageSnapshot(
            windows=[
                make_window("top", None, None),
                make_window("frame", None, None, parent_id="top", frame_element_id="iframe"),
            ],
            elements=[make_element("iframe", 0, 0, 300, 250)],
        )
        host = SnapshotHost(page)
        viewport = min_viewport_across_chain(host, FrameChain.collect(host, "frame"))
        assert math.isinf(viewport.area)


class TestPositionRelativeToViewport:
    """Tests for translating frame content into top-window space."""

    def test_offsets_compose_across_levels(self) -> None:
        host = SnapshotHost(_two_level_page())
        chain = FrameChain.collect(host, "inner")
        rect = position_relative_to_viewport(host, "ad", chain)
        assert (rect.left, rect.top) == (100 + 10 + 5, 200 + 20 + 5)
        assert (rect.right, rect.bottom) == (rect.left + 100, rect.top + 50)

    def test_top_level_element_is_unchanged(self) -> None:
        host = SnapshotHost(_two_level_page())
        chain = FrameChain.collect(host, "top")
        rect = position_relative_to_viewport(host, "outer-iframe", chain)
        assert (rect.left, rect.top, rect.right, rect.bottom) == (100, 200, 700, 600)


class TestVisibleDimension:
    """Tests for clipping against hosting frames."""

    def _page(self, ad_left: float, ad_top: float) -> PageSnapshot:
        return PageSnapshot(
            windows=[
                make_window("top"),
                make_window("frame", 300, 250, parent_id="top", frame_element_id="iframe"),
            ],
            elements=[
                make_element("iframe", 100, 100, 300, 250, window_id="top"),
                make_element("ad", ad_left, ad_top, 100, 100, window_id="frame"),
            ],
        )

    def test_inside_frame_is_not_clipped(self) -> None:
        host = SnapshotHost(self._page(10, 10))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "frame"))
        assert (rect.left, rect.top, rect.width, rect.height) == (110, 110, 100, 100)

    def test_bottom_and_right_clipped_by_frame(self) -> None:
        host = SnapshotHost(self._page(250, 200))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "frame"))
        # Frame spans 100..400 horizontally and 100..350 vertically
        assert (rect.right, rect.bottom) == (400, 350)
        assert (rect.width, rect.height) == (50, 50)

    def test_entirely_below_frame_collapses_height(self) -> None:
        host = SnapshotHost(self._page(10, 400))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "frame"))
        assert rect.height == 0
        assert rect.top == rect.bottom == 350
        assert rect.width == 100

    def test_entirely_right_of_frame_collapses_width(self) -> None:
        host = SnapshotHost(self._page(500, 10))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "frame"))
        assert rect.width == 0
        assert rect.area == 0


class TestVisibleDimensionTwoLevels:
    """Tests for clipping by a grandparent frame."""

    def _page(self, inner_left: float, inner_top: float, ad_left: float, ad_top: float) -> PageSnapshot:
        """top > outer frame spanning 100..700 x 200..600 > inner 300x250 frame > 100x100 ad."""
        return PageSnapshot(
            windows=[
                make_window("top"),
                make_window("outer", 600, 400, parent_id="top", frame_element_id="outer-iframe"),
                make_window("inner", 300, 250, parent_id="outer", frame_element_id="inner-iframe"),
            ],
            elements=[
                make_element("outer-iframe", 100, 200, 600, 400, window_id="top"),
                make_element("inner-iframe", inner_left, inner_top, 300, 250, window_id="outer"),
                make_element("ad", ad_left, ad_top, 100, 100, window_id="inner"),
            ],
        )

    def test_outer_bottom_clips_through_inner_frame(self) -> None:
        # Inner frame spans 500..750 vertically, cut to 600 by the outer frame
        host = SnapshotHost(self._page(10, 300, 5, 50))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "inner"))
        assert (rect.left, rect.top, rect.right, rect.bottom) == (115, 550, 215, 600)
        assert (rect.width, rect.height) == (100, 50)

    def test_outer_right_clips_through_inner_frame(self) -> None:
        # Inner frame spans 500..800 horizontally, cut to 700 by the outer frame
        host = SnapshotHost(self._page(400, 20, 150, 5))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "inner"))
        assert (rect.left, rect.top, rect.right, rect.bottom) == (650, 225, 700, 325)
        assert (rect.width, rect.height) == (50, 100)

    def test_beyond_outer_right_edge_collapses(self) -> None:
        host = SnapshotHost(self._page(400, 20, 250, 5))
        rect = visible_dimension(host, "ad", FrameChain.collect(host, "inner"))
        assert rect.left == rect.right == 700
        assert rect.width == 0
        assert rect.height == 100
