"""Tests for rectangle math."""
import pytest

from adviewability.geometry.rect import Rect, overlap_fraction


class TestRect:
    """Tests for Rect construction and derived values."""

    def test_from_edges_derives_size(self) -> None:
        rect = Rect.from_edges(10, 20, 110, 70)
        assert rect.width == 100
        assert rect.height == 50
        assert rect.area == 5000

    def test_degenerate_rect_has_zero_area(self) -> None:
        """Negative extents must never produce a negative or positive area."""
        assert Rect.from_edges(100, 100, 50, 50).area == 0
        assert Rect.from_edges(0, 0, 100, -10).area == 0
        assert Rect.from_edges(0, 0, 0, 100).is_degenerate

    def test_recompute_after_edge_move(self) -> None:
        rect = Rect.from_edges(0, 0, 100, 100)
        rect.bottom = 40
        rect.recompute()
        assert rect.height == 40

    def test_translated_keeps_size(self) -> None:
        rect = Rect.from_edges(0, 0, 100, 50).translated(-30, 20)
        assert (rect.left, rect.top, rect.right, rect.bottom) == (-30, 20, 70, 70)
        assert rect.width == 100

    def test_contains_point_is_half_open(self) -> None:
        rect = Rect.from_edges(0, 0, 10, 10)
        assert rect.contains_point(0, 0)
        assert rect.contains_point(9.9, 9.9)
        assert not rect.contains_point(10, 5)


class TestOverlapFraction:
    """Tests for the target-relative overlap fraction."""

    def test_disjoint_rects(self) -> None:
        a = Rect.from_edges(0, 0, 100, 100)
        b = Rect.from_edges(200, 200, 300, 300)
        assert overlap_fraction(a, b) == 0

    def test_touching_edges_do_not_overlap(self) -> None:
        a = Rect.from_edges(0, 0, 100, 100)
        b = Rect.from_edges(100, 0, 200, 100)
        assert overlap_fraction(a, b) == 0

    def test_partial_overlap(self) -> None:
        a = Rect.from_edges(0, 0, 100, 100)
        b = Rect.from_edges(50, 50, 150, 150)
        assert overlap_fraction(a, b) == pytest.approx(0.25)

    def test_full_cover(self) -> None:
        a = Rect.from_edges(10, 10, 20, 20)
        b = Rect.from_edges(0, 0, 100, 100)
        assert overlap_fraction(a, b) == 1

    def test_asymmetric_under_swap(self) -> None:
        """The fraction is relative to the first rect only."""
        small = Rect.from_edges(0, 0, 10, 10)
        large = Rect.from_edges(0, 0, 100, 100)
        assert overlap_fraction(small, large) == 1
        assert overlap_fraction(large, small) == pytest.approx(0.01)

    def test_zero_area_target(self) -> None:
        a = Rect.from_edges(0, 0, 0, 100)
        b = Rect.from_edges(0, 0, 100, 100)
        assert overlap_fraction(a, b) == 0
