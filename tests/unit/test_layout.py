"""Tests for duplication layout."""

import pytest

from pancakepath.core.layout import FILL_PERCENT, compute_layout, duplicate_for_layout, fit_scale
from pancakepath.domain import (
    CompoundShape,
    Contour,
    LayoutResult,
    PathMetadata,
    PathRecord,
    Point,
    Size,
)
from pancakepath.exceptions import LayoutError

AREA = Size(1000, 500)


class TestComputeLayout:
    """Tests for compute_layout."""

    def test_single_copy_centered(self) -> None:
        result = compute_layout(1, Size(100, 100), AREA)
        assert result.scale == pytest.approx(4.0)
        assert result.positions == [Point(500, 250)]

    def test_four_copies_in_quadrants(self) -> None:
        result = compute_layout(4, Size(100, 100), AREA)

        assert len(result.positions) == 4
        quadrants = {(p.x < 500, p.y < 250) for p in result.positions}
        assert len(quadrants) == 4
        assert Point(250, 125) in result.positions
        assert Point(750, 375) in result.positions

    def test_two_copies_landscape_stacked(self) -> None:
        """A trace wider than the area's aspect stacks copies vertically."""
        result = compute_layout(2, Size(400, 50), AREA)
        assert result.positions == [Point(500, 125), Point(500, 375)]

    def test_two_copies_portrait_side_by_side(self) -> None:
        result = compute_layout(2, Size(50, 400), AREA)
        assert result.positions == [Point(250, 250), Point(750, 250)]

    def test_eight_copies_landscape(self) -> None:
        result = compute_layout(8, Size(400, 50), AREA)

        assert len(result.positions) == 8
        assert {p.x for p in result.positions} == {250, 750}
        assert sorted({p.y for p in result.positions}) == [62.5, 187.5, 312.5, 437.5]

    def test_eight_copies_portrait(self) -> None:
        result = compute_layout(8, Size(50, 400), AREA)

        assert {p.y for p in result.positions} == {125, 375}
        assert sorted({p.x for p in result.positions}) == [125, 375, 625, 875]

    @pytest.mark.parametrize("count", [1, 2, 4, 8])
    def test_scale_uses_fill_percent(self, count: int) -> None:
        trace = Size(200, 300)
        result = compute_layout(count, trace, AREA)
        fill = FILL_PERCENT[count]
        expected = min(AREA.width * fill / trace.width, AREA.height * fill / trace.height)
        assert result.scale == pytest.approx(expected)

    def test_zero_width_trace(self) -> None:
        result = compute_layout(4, Size(0, 100), AREA)
        assert result.scale == 1.0
        assert result.positions == []

    def test_zero_width_checked_before_count(self) -> None:
        result = compute_layout(3, Size(0, 100), AREA)
        assert result == LayoutResult(scale=1.0, positions=[])

    @pytest.mark.parametrize("count", [0, 3, 5, 16])
    def test_unsupported_count(self, count: int) -> None:
        with pytest.raises(LayoutError):
            compute_layout(count, Size(100, 100), AREA)

    def test_unsupported_count_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            compute_layout(6, Size(100, 100), AREA)


class TestFitScale:
    """Tests for fit_scale."""

    def test_limited_by_height(self) -> None:
        assert fit_scale(Size(100, 100), Size(1000, 500)) == pytest.approx(4.0)

    def test_custom_fill(self) -> None:
        assert fit_scale(Size(100, 100), Size(1000, 1000), 0.5, 0.25) == pytest.approx(2.5)

    def test_zero_height_ignored(self) -> None:
        assert fit_scale(Size(100, 0), Size(1000, 500)) == pytest.approx(8.0)

    def test_zero_size(self) -> None:
        assert fit_scale(Size(0, 0), Size(1000, 500)) == 1.0


class TestDuplicateForLayout:
    """Tests for placing copies of a record."""

    def test_copies_centered_and_scaled(self) -> None:
        contour = Contour(points=[Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)])
        original = PathRecord(
            shape=CompoundShape(contours=[contour]),
            fill_color="#e2bc15",
            metadata=PathMetadata(name="heart", color=1, fill=True),
        )
        layout = compute_layout(2, Size(10, 10), AREA)

        copies = duplicate_for_layout(original, layout, origin=(100, 50))

        assert len(copies) == 2
        size = 10 * layout.scale
        for copy, position in zip(copies, layout.positions):
            min_x, min_y, max_x, max_y = copy.shape.bounding_box()
            assert (min_x + max_x) / 2 == pytest.approx(100 + position.x)
            assert (min_y + max_y) / 2 == pytest.approx(50 + position.y)
            assert max_x - min_x == pytest.approx(size)
            assert copy.fill_color == "#e2bc15"
            assert copy.metadata.color == 1
            assert copy.metadata.fill

        assert [c.metadata.name for c in copies] == ["heart-1", "heart-2"]
        assert len({c.metadata.identity for c in copies} | {original.metadata.identity}) == 3
        assert original.shape.bounding_box() == (0, 0, 10, 10)
