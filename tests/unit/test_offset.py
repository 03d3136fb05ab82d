"""Tests for polygon offsetting."""

from unittest.mock import Mock

import pytest

from pancakepath.config import OffsetConfig
from pancakepath.core.geometry import shape_area
from pancakepath.core.offset import PolygonOffsetter, arc_segments, paths_to_svg
from pancakepath.domain import CompoundShape, Contour, FillRule, Point, PointType


def square(x: float, y: float, size: float, reverse: bool = False) -> Contour:
    points = [Point(x, y), Point(x + size, y), Point(x + size, y + size), Point(x, y + size)]
    if reverse:
        points.reverse()
    return Contour(points=points)


def square_with_spike() -> CompoundShape:
    """A 40x40 square with a 1 unit wide, 20 unit long spike on its right side."""
    outline = Contour(
        points=[
            Point(0, 0),
            Point(40, 0),
            Point(40, 20),
            Point(60, 20),
            Point(60, 21),
            Point(40, 21),
            Point(40, 40),
            Point(0, 40),
        ]
    )
    return CompoundShape(contours=[outline])


@pytest.fixture
def offsetter() -> PolygonOffsetter:
    return PolygonOffsetter(OffsetConfig())


class TestPathsToSvg:
    """Tests for the fixed-point path data builder."""

    def test_descaled_commands(self) -> None:
        data = paths_to_svg([[(0, 0), (1000, 0), (1000, 550)]], 100)
        assert data == "M0,0 L10,0 L10,5.5 Z"

    def test_multiple_polygons(self) -> None:
        data = paths_to_svg([[(0, 0), (100, 0), (0, 100)], [(500, 500), (600, 500), (500, 600)]], 100)
        assert data.count("M") == 2
        assert data.count("Z") == 2

    def test_empty(self) -> None:
        assert paths_to_svg([], 100) == ""


class TestArcSegments:
    """Tests for round join precision."""

    def test_small_delta_uses_one_segment(self) -> None:
        assert arc_segments(0.1, 0.25) == 1

    def test_larger_delta_needs_more_segments(self) -> None:
        assert arc_segments(1000, 0.25) > arc_segments(100, 0.25) >= 1

    def test_sign_ignored(self) -> None:
        assert arc_segments(-500, 0.25) == arc_segments(500, 0.25)


class TestOffset:
    """Tests for PolygonOffsetter.offset."""

    def test_zero_offset_keeps_geometry(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10)])
        result = offsetter.offset(shape, 0, 0.5)

        assert result is not None
        assert result.bounding_box() == pytest.approx((0, 0, 10, 10))
        assert shape_area(result) == pytest.approx(100.0)

    def test_grow(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10)])
        result = offsetter.offset(shape, 2, 0.5)

        assert result is not None
        assert result.bounding_box() == pytest.approx((-2, -2, 12, 12), abs=0.02)
        # Round joins: more than a square, less than the full 14x14 box
        assert 14 * 14 > shape_area(result) > 10 * 10 + 4 * 10 * 2

    def test_shrink(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10)])
        result = offsetter.offset(shape, -2, 0.5)

        assert result is not None
        assert result.bounding_box() == pytest.approx((2, 2, 8, 8), abs=0.02)

    def test_large_negative_offset_vanishes(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10)])
        assert offsetter.offset(shape, -50, 0.5) is None

    def test_input_untouched(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10)])
        before = shape.clone()
        offsetter.offset(shape, 3, 0.5)
        assert shape == before

    def test_result_is_closed_polygons(self, offsetter: PolygonOffsetter) -> None:
        curved = CompoundShape(
            contours=[
                Contour(
                    points=[
                        Point(0, 0),
                        Point(20, 0),
                        Point(20, 20, PointType.OFF_CURVE_QUAD),
                        Point(0, 20),
                    ]
                )
            ]
        )
        result = offsetter.offset(curved, 1, 0.5)

        assert result is not None
        assert result.is_flat()
        assert all(c.closed for c in result.contours)

    def test_hole_survives_growth(self, offsetter: PolygonOffsetter) -> None:
        ring = CompoundShape(
            contours=[square(0, 0, 40), square(10, 10, 20)],
            fill_rule=FillRule.EVEN_ODD,
        )
        result = offsetter.offset(ring, 2, 0.5)

        assert result is not None
        assert len(result.contours) == 2
        assert not result.contains_point(20, 20)
        assert result.contains_point(11, 20)

    def test_hole_closes_when_grown_past_it(self, offsetter: PolygonOffsetter) -> None:
        ring = CompoundShape(contours=[square(0, 0, 40), square(18, 18, 4, reverse=True)])
        result = offsetter.offset(ring, 3, 0.5)

        assert result is not None
        assert len(result.contours) == 1

    def test_single_point_contour_ignored(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10), Contour(points=[Point(50, 50)])])
        result = offsetter.offset(shape, 1, 0.5)

        assert result is not None
        assert result.bounding_box() == pytest.approx((-1, -1, 11, 11), abs=0.02)

    def test_empty_shape(self, offsetter: PolygonOffsetter) -> None:
        assert offsetter.offset(CompoundShape(), 1, 0.5) is None

    def test_flatten_failure_logged(self) -> None:
        logger = Mock()
        offsetter = PolygonOffsetter(OffsetConfig(), logger)
        broken = CompoundShape(
            contours=[Contour(points=[Point(0, 0, PointType.OFF_CURVE_QUAD), Point(1, 1), Point(2, 0)])]
        )

        assert offsetter.offset(broken, 1, 0.5, name="broken") is None
        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["shape"] == "broken"

    def test_invalid_resolution_is_degenerate(self, offsetter: PolygonOffsetter) -> None:
        shape = CompoundShape(contours=[square(0, 0, 10)])
        assert offsetter.offset(shape, 1, 0) is None


class TestErodeDilate:
    """Tests for the thin feature round trip."""

    def test_thin_spike_removed(self, offsetter: PolygonOffsetter) -> None:
        result = offsetter.erode_dilate_round_trip(square_with_spike(), 2, 0.5)

        assert result is not None
        min_x, min_y, max_x, max_y = result.bounding_box()
        assert (min_x, min_y, max_y) == pytest.approx((0, 0, 40), abs=0.05)
        # Where the spike met the square a rounded bump under 0.1 high remains
        assert max_x < 40.1
        assert not any(p.x > 41 for c in result.contours for p in c.points)

    def test_thick_shape_keeps_topology(self, offsetter: PolygonOffsetter) -> None:
        ring = CompoundShape(contours=[square(0, 0, 40), square(15, 15, 10, reverse=True)])
        result = offsetter.erode_dilate_round_trip(ring, 2, 0.5)

        assert result is not None
        assert len(result.contours) == 2
        assert not result.contains_point(20, 20)
        assert result.contains_point(5, 20)

    def test_thin_shape_vanishes(self, offsetter: PolygonOffsetter) -> None:
        sliver = CompoundShape(
            contours=[Contour(points=[Point(0, 0), Point(40, 0), Point(40, 1), Point(0, 1)])]
        )
        assert offsetter.erode_dilate_round_trip(sliver, 2, 0.5) is None
