"""
Tests for the coordinate projector.
"""

import pytest

from map_engine.errors import InvalidTargetError
from map_engine.layout import GridCell
from map_engine.projector import (
    iter_cell_projections,
    project,
    project_positions,
    segment_geometry,
    unproject,
)
from map_engine.viewport import ContainerSize, Point
from map_engine.zones import get_layout, list_zones

DESKTOP = ContainerSize(1200, 600)
MOBILE = ContainerSize(360, 640)


class TestRoundTrip:
    """unproject(project(cell)) returns the cell for every placeable cell."""

    @pytest.mark.parametrize('zone', list_zones())
    def test_desktop(self, zone):
        layout = get_layout(zone)
        for cell in layout.valid_cells():
            projection = project(layout, cell.row, cell.col, DESKTOP)
            point = Point(projection.x, projection.y)
            assert unproject(layout, point, DESKTOP) == cell

    @pytest.mark.parametrize('zone', list_zones())
    def test_mobile(self, zone):
        layout = get_layout(zone)
        for cell in layout.valid_cells():
            projection = project(layout, cell.row, cell.col, MOBILE, is_mobile=True)
            point = Point(projection.x, projection.y)
            assert unproject(layout, point, MOBILE, is_mobile=True) == cell


class TestProject:
    """Tests for the forward mapping."""

    def test_deterministic(self):
        layout = get_layout('treetown')
        assert project(layout, 4, 1, DESKTOP) == project(layout, 4, 1, DESKTOP)

    def test_invalid_cell_raises(self):
        layout = get_layout('lkmetro')
        with pytest.raises(InvalidTargetError):
            project(layout, 2, 9, DESKTOP)
        with pytest.raises(InvalidTargetError):
            project(layout, 5, 1, DESKTOP)

    def test_rows_sit_on_opposite_sides_of_the_road(self):
        """Row 1 is above a horizontal road, row 2 below it."""
        layout = get_layout('soi6')
        top = project(layout, 1, 5, DESKTOP)
        bottom = project(layout, 2, 5, DESKTOP)
        assert top.x == bottom.x
        assert top.y < DESKTOP.height / 2 < bottom.y

    def test_columns_advance_left_to_right(self):
        layout = get_layout('soi6')
        xs = [project(layout, 1, col, DESKTOP).x for col in range(1, 21)]
        assert xs == sorted(xs)

    def test_mobile_rotation(self):
        """On mobile Soi 6 runs top to bottom: columns advance along y."""
        layout = get_layout('soi6')
        first = project(layout, 1, 1, MOBILE, is_mobile=True)
        last = project(layout, 1, 20, MOBILE, is_mobile=True)
        assert first.x == last.x
        assert first.y < last.y

    def test_marker_size_clamped(self):
        layout = get_layout('beachroad')
        desktop = layout.profile_for(False)
        size = project(layout, 1, 1, DESKTOP).marker_size
        assert desktop.min_marker <= size <= desktop.max_marker

    def test_marker_formula(self):
        """marker = clamp(L / n - inset); gap = (L - n * marker) / (n + 1)."""
        layout = get_layout('soi6')
        segment = layout.segments[0]
        geometry = segment_geometry(segment, layout.profile_for(False), DESKTOP)
        length = DESKTOP.width * 0.96
        marker = min(45, max(25, length / 20 - 8))
        gap = (length - 20 * marker) / 21
        assert geometry.marker_size == pytest.approx(marker)
        assert geometry.slot_centers[0] == pytest.approx(DESKTOP.width * 0.02 + gap + marker / 2)
        assert geometry.lane_centers[0] == pytest.approx(300 - (60 + marker / 2))
        assert geometry.lane_centers[1] == pytest.approx(300 + (60 + marker / 2))

    def test_project_positions_skips_unplaceable(self):
        layout = get_layout('lkmetro')
        projected = project_positions(
            layout, {'a': GridCell(1, 1), 'b': GridCell(3, 1)}, DESKTOP
        )
        assert set(projected) == {'a'}

    def test_iter_cell_projections_covers_every_cell(self):
        layout = get_layout('treetown')
        cells = [cell for cell, _ in iter_cell_projections(layout, DESKTOP)]
        assert len(cells) == 42


class TestUnproject:
    """Tests for the hit test."""

    def test_outside_every_band(self):
        layout = get_layout('soi6')
        assert unproject(layout, Point(600, 5), DESKTOP) is None
        assert unproject(layout, Point(-50, 300), DESKTOP) is None

    def test_masked_cell_returns_none(self):
        """Pointer over the geometric slot of masked (2, 9) in LK Metro."""
        layout = get_layout('lkmetro')
        segment = layout.segment_for(2)
        geometry = segment_geometry(segment, layout.profile_for(False), DESKTOP)
        slot, lane = segment.slot_and_lane(2, 9)
        point = Point(geometry.slot_centers[slot], geometry.lane_centers[lane])
        assert unproject(layout, point, DESKTOP) is None

    def test_near_a_marker(self):
        """Points a few pixels off a marker centre still hit its cell."""
        layout = get_layout('soi6')
        projection = project(layout, 2, 7, DESKTOP)
        assert unproject(layout, Point(projection.x + 5, projection.y - 5), DESKTOP) == (2, 7)

    def test_between_markers_clamps_to_a_slot(self):
        layout = get_layout('soi6')
        left = project(layout, 1, 3, DESKTOP)
        right = project(layout, 1, 4, DESKTOP)
        midpoint = Point((left.x + right.x) / 2, left.y)
        assert unproject(layout, midpoint, DESKTOP) in ((1, 3), (1, 4))

    def test_pure(self):
        layout = get_layout('treetown')
        point = Point(300, 120)
        assert unproject(layout, point, DESKTOP) == unproject(layout, point, DESKTOP)
