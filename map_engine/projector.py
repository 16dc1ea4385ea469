"""
Coordinate projector.

Forward (cell -> pixel) and inverse (pixel -> cell) mapping for a zone
layout. Everything here is a pure function of its arguments, so it is safe
to call on every frame and from the hit test itself.

Per segment, the road length along its axis is shared by slot_count markers
and slot_count + 1 equal gaps; each marker is centred in its slot. Lanes sit
on either side of the road, one marker half-width off the road edge.
"""

import math
from functools import lru_cache
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

from map_engine.errors import InvalidTargetError
from map_engine.layout import HORIZONTAL, GridCell, Segment, SizeProfile, ZoneLayout
from map_engine.viewport import ContainerSize, Point


class Projection(NamedTuple):
    x: float
    y: float
    marker_size: float


class SegmentGeometry(NamedTuple):
    """Pixel geometry of one segment for one container size and profile."""

    marker_size: float
    slot_centers: Tuple[float, ...]
    lane_centers: Tuple[float, ...]
    anchor: float
    along_min: float
    along_max: float
    perp_min: float
    perp_max: float


def _clamp(value, low, high):
    return max(low, min(high, value))


@lru_cache(maxsize=512)
def segment_geometry(segment: Segment, profile: SizeProfile,
                     container: ContainerSize) -> SegmentGeometry:
    """Compute slot and lane centres plus the segment's hit band."""
    if segment.axis == HORIZONTAL:
        along_dim, perp_dim = container.width, container.height
    else:
        along_dim, perp_dim = container.height, container.width

    start = along_dim * segment.span_start_percent / 100
    end = along_dim * segment.span_end_percent / 100
    length = end - start
    slots = segment.slot_count

    marker = _clamp(length / slots - profile.inset, profile.min_marker, profile.max_marker)
    gap = (length - slots * marker) / (slots + 1)
    slot_centers = tuple(
        start + gap * (i + 1) + marker * i + marker / 2 for i in range(slots)
    )

    anchor = perp_dim * segment.anchor_percent / 100
    offset = profile.road_width / 2 + marker / 2
    if segment.lane_count == 1:
        lane_centers = (anchor - offset,)
    else:
        lane_centers = (anchor - offset, anchor + offset)

    # Band: slot extent along the road, lanes plus half a marker across it
    margin = marker / 2
    perp_min = lane_centers[0] - marker / 2 - margin
    if segment.lane_count == 1:
        perp_max = anchor
    else:
        perp_max = lane_centers[1] + marker / 2 + margin

    return SegmentGeometry(
        marker_size=marker,
        slot_centers=slot_centers,
        lane_centers=lane_centers,
        anchor=anchor,
        along_min=min(start, slot_centers[0] - marker / 2),
        along_max=max(end, slot_centers[-1] + marker / 2),
        perp_min=perp_min,
        perp_max=perp_max,
    )


def _geometry_for(layout: ZoneLayout, segment: Segment, container,
                  is_mobile: bool) -> SegmentGeometry:
    return segment_geometry(segment, layout.profile_for(is_mobile), ContainerSize(*container))


def project(layout: ZoneLayout, row: int, col: int, container,
            is_mobile: bool = False) -> Projection:
    """
    Project a grid cell onto container pixels.

    Args:
        layout: Zone layout
        row: Grid row (1-based)
        col: Grid column (1-based)
        container: (width, height) of the map container
        is_mobile: Device class

    Returns:
        Projection with the marker centre and its size

    Raises:
        InvalidTargetError: if the cell is not valid for the layout
    """
    if not layout.is_valid_cell(row, col):
        raise InvalidTargetError(f'{layout.zone}: cell ({row}, {col}) is not placeable')

    segment = layout.segment_for(row, is_mobile)
    geometry = _geometry_for(layout, segment, container, is_mobile)
    slot, lane = segment.slot_and_lane(row, col)
    along = geometry.slot_centers[slot]
    perp = geometry.lane_centers[lane]

    if segment.axis == HORIZONTAL:
        return Projection(along, perp, geometry.marker_size)
    return Projection(perp, along, geometry.marker_size)


def _nearest_slot(geometry: SegmentGeometry, along: float) -> int:
    centers = geometry.slot_centers
    radius = geometry.marker_size / 2

    nearest = min(range(len(centers)), key=lambda i: abs(along - centers[i]))
    if abs(along - centers[nearest]) <= radius:
        return nearest

    # Between markers: slot whose leading edge precedes the pointer
    if len(centers) == 1:
        return 0
    step = centers[1] - centers[0]
    leading_edge = centers[0] - step / 2
    return int(_clamp(math.floor((along - leading_edge) / step), 0, len(centers) - 1))


def unproject(layout: ZoneLayout, point, container,
              is_mobile: bool = False) -> Optional[GridCell]:
    """
    Hit test a container-relative point.

    Every segment whose band contains the point proposes a cell; the
    proposal whose marker centre is closest to the point wins.

    Returns:
        The cell under the point, or None outside all segment bands and
        over masked or otherwise unplaceable cells
    """
    px, py = Point(*point)
    best = None
    best_distance = math.inf

    for segment in layout.segments_for(is_mobile):
        geometry = _geometry_for(layout, segment, container, is_mobile)
        if segment.axis == HORIZONTAL:
            along, perp = px, py
        else:
            along, perp = py, px

        if not (geometry.along_min <= along <= geometry.along_max):
            continue
        if not (geometry.perp_min <= perp <= geometry.perp_max):
            continue

        lane = 0 if segment.lane_count == 1 or perp < geometry.anchor else 1
        slot = _nearest_slot(geometry, along)
        distance = math.hypot(
            along - geometry.slot_centers[slot],
            perp - geometry.lane_centers[lane],
        )
        if distance < best_distance:
            best = segment.cell_at(slot, lane)
            best_distance = distance

    if best is None or not layout.is_valid_cell(best.row, best.col):
        return None
    return best


def project_positions(layout: ZoneLayout, positions: Dict[str, GridCell], container,
                      is_mobile: bool = False) -> Dict[str, Projection]:
    """Project every entity with a placeable cell; others are skipped."""
    projected = {}
    for entity_id, cell in positions.items():
        if layout.is_valid_cell(cell.row, cell.col):
            projected[entity_id] = project(layout, cell.row, cell.col, container, is_mobile)
    return projected


def iter_cell_projections(layout: ZoneLayout, container,
                          is_mobile: bool = False) -> Iterable[Tuple[GridCell, Projection]]:
    """Yield every placeable cell with its projection (empty-slot overlay)."""
    for cell in layout.valid_cells():
        yield cell, project(layout, cell.row, cell.col, container, is_mobile)
