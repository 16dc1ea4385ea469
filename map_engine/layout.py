"""
Zone layout model.

A ZoneLayout is the declarative geometry of one zone: grid bounds, masked
cells and the road segments establishments line up along. It is immutable
and shared by the projector, the resolver and the controller.

Segment vocabulary:
- axis: direction the road runs ('horizontal' or 'vertical')
- along: grid coordinate that advances along the road ('col' or 'row');
  the other coordinate picks the road side (lane 0 above/left, lane 1
  below/right)
- anchor_percent: road centre line, as a percentage of the container
  dimension perpendicular to the axis
- span_*_percent: road extent along its axis
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Optional, Tuple, Any

from map_engine.errors import InvalidTargetError, LayoutError


HORIZONTAL = 'horizontal'
VERTICAL = 'vertical'
L_SHAPED = 'l-shaped'
U_SHAPED = 'u-shaped'

SEGMENTS_PER_SHAPE = {
    HORIZONTAL: 1,
    VERTICAL: 1,
    L_SHAPED: 2,
    U_SHAPED: 3,
}

AXES = (HORIZONTAL, VERTICAL)
ALONG_COL = 'col'
ALONG_ROW = 'row'


class GridCell(NamedTuple):
    """Abstract (row, col) slot of a zone, 1-based."""

    row: int
    col: int


@dataclass(frozen=True)
class SizeProfile:
    """Marker sizing and road width for one device class, in pixels."""

    road_width: float = 120
    min_marker: float = 25
    max_marker: float = 45
    inset: float = 8


DESKTOP_PROFILE = SizeProfile()
MOBILE_PROFILE = SizeProfile(road_width=80, min_marker=20, max_marker=40, inset=4)


@dataclass(frozen=True)
class Segment:
    """Contiguous run of rows sharing one road."""

    name: str
    first_row: int
    last_row: int
    first_col: int
    last_col: int
    axis: str
    anchor_percent: float
    span_start_percent: float = 2.0
    span_end_percent: float = 98.0
    along: str = ALONG_COL

    def __post_init__(self):
        if self.axis not in AXES:
            raise LayoutError(f'Segment {self.name}: invalid axis {self.axis!r}')
        if self.along not in (ALONG_COL, ALONG_ROW):
            raise LayoutError(f'Segment {self.name}: invalid along {self.along!r}')
        if self.first_row < 1 or self.last_row < self.first_row:
            raise LayoutError(f'Segment {self.name}: invalid row range')
        if self.first_col < 1 or self.last_col < self.first_col:
            raise LayoutError(f'Segment {self.name}: invalid column range')
        if self.lane_count not in (1, 2):
            raise LayoutError(
                f'Segment {self.name}: {self.lane_count} lanes, expected 1 or 2'
            )
        if not 0 <= self.span_start_percent < self.span_end_percent <= 100:
            raise LayoutError(f'Segment {self.name}: invalid span')
        if not 0 <= self.anchor_percent <= 100:
            raise LayoutError(f'Segment {self.name}: anchor outside container')

    @property
    def rows(self) -> range:
        return range(self.first_row, self.last_row + 1)

    @property
    def cols(self) -> range:
        return range(self.first_col, self.last_col + 1)

    @property
    def slot_count(self) -> int:
        return len(self.cols) if self.along == ALONG_COL else len(self.rows)

    @property
    def lane_count(self) -> int:
        return len(self.rows) if self.along == ALONG_COL else len(self.cols)

    def contains_row(self, row: int) -> bool:
        return self.first_row <= row <= self.last_row

    def contains(self, row: int, col: int) -> bool:
        return self.contains_row(row) and self.first_col <= col <= self.last_col

    def slot_and_lane(self, row: int, col: int) -> Tuple[int, int]:
        """Return 0-based (slot, lane) of a cell inside this segment."""
        if self.along == ALONG_COL:
            return col - self.first_col, row - self.first_row
        return row - self.first_row, col - self.first_col

    def cell_at(self, slot: int, lane: int) -> GridCell:
        """Inverse of slot_and_lane."""
        if self.along == ALONG_COL:
            return GridCell(self.first_row + lane, self.first_col + slot)
        return GridCell(self.first_row + slot, self.first_col + lane)

    def cells(self) -> List[GridCell]:
        return [GridCell(row, col) for row in self.rows for col in self.cols]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'rows': [self.first_row, self.last_row],
            'cols': [self.first_col, self.last_col],
            'axis': self.axis,
            'along': self.along,
            'anchor_percent': self.anchor_percent,
            'span_percent': [self.span_start_percent, self.span_end_percent],
        }


@dataclass(frozen=True)
class ZoneLayout:
    """
    Immutable geometry of one zone.

    mobile_segments, when given, replaces the segment geometry on mobile
    (for example a horizontal street drawn vertically on a phone). It must
    cover exactly the same cells as the desktop segments.
    """

    zone: str
    shape: str
    max_rows: int
    max_cols: int
    segments: Tuple[Segment, ...]
    masked_cells: FrozenSet[GridCell] = frozenset()
    mobile_segments: Optional[Tuple[Segment, ...]] = None
    desktop_profile: SizeProfile = DESKTOP_PROFILE
    mobile_profile: SizeProfile = MOBILE_PROFILE
    label: str = field(default='', compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'segments', tuple(self.segments))
        object.__setattr__(
            self, 'masked_cells', frozenset(GridCell(*cell) for cell in self.masked_cells)
        )
        if self.mobile_segments is not None:
            object.__setattr__(self, 'mobile_segments', tuple(self.mobile_segments))
        self._validate()

    def _validate(self):
        if self.shape not in SEGMENTS_PER_SHAPE:
            raise LayoutError(f'{self.zone}: unknown shape {self.shape!r}')
        if self.max_rows < 1 or self.max_cols < 1:
            raise LayoutError(f'{self.zone}: grid must have at least one cell')

        expected = SEGMENTS_PER_SHAPE[self.shape]
        if len(self.segments) != expected:
            raise LayoutError(
                f'{self.zone}: shape {self.shape} needs {expected} segments, '
                f'got {len(self.segments)}'
            )
        self._validate_partition(self.segments)

        if self.mobile_segments is not None:
            self._validate_partition(self.mobile_segments)
            desktop_cells = {c for s in self.segments for c in s.cells()}
            mobile_cells = {c for s in self.mobile_segments for c in s.cells()}
            if desktop_cells != mobile_cells:
                raise LayoutError(f'{self.zone}: mobile segments cover different cells')

        for cell in self.masked_cells:
            if not (1 <= cell.row <= self.max_rows and 1 <= cell.col <= self.max_cols):
                raise LayoutError(f'{self.zone}: masked cell {tuple(cell)} outside grid')

    def _validate_partition(self, segments: Tuple[Segment, ...]):
        covered = []
        for segment in segments:
            if segment.last_row > self.max_rows or segment.last_col > self.max_cols:
                raise LayoutError(f'{self.zone}: segment {segment.name} exceeds grid')
            covered.extend(segment.rows)
        if sorted(covered) != list(range(1, self.max_rows + 1)):
            raise LayoutError(
                f'{self.zone}: segments must partition rows 1..{self.max_rows}'
            )

    def segments_for(self, is_mobile: bool = False) -> Tuple[Segment, ...]:
        if is_mobile and self.mobile_segments is not None:
            return self.mobile_segments
        return self.segments

    def profile_for(self, is_mobile: bool = False) -> SizeProfile:
        return self.mobile_profile if is_mobile else self.desktop_profile

    def segment_for(self, row: int, is_mobile: bool = False) -> Segment:
        """
        Get the segment owning a row.

        Raises:
            InvalidTargetError: if no segment owns the row
        """
        for segment in self.segments_for(is_mobile):
            if segment.contains_row(row):
                return segment
        raise InvalidTargetError(f'{self.zone}: row {row} is outside every segment')

    def is_valid_cell(self, row: int, col: int) -> bool:
        """Bounds, segment column range and mask check."""
        if not isinstance(row, int) or not isinstance(col, int):
            return False
        if isinstance(row, bool) or isinstance(col, bool):
            return False
        if not (1 <= row <= self.max_rows and 1 <= col <= self.max_cols):
            return False
        if (row, col) in self.masked_cells:
            return False
        return any(s.contains(row, col) for s in self.segments)

    def valid_cells(self) -> List[GridCell]:
        return [
            cell
            for segment in self.segments
            for cell in segment.cells()
            if cell not in self.masked_cells
        ]

    @cached_property
    def cell_count(self) -> int:
        return len(self.valid_cells())

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly descriptor."""
        data = {
            'zone': self.zone,
            'label': self.label or self.zone,
            'shape': self.shape,
            'max_rows': self.max_rows,
            'max_cols': self.max_cols,
            'cell_count': self.cell_count,
            'masked_cells': sorted([list(cell) for cell in self.masked_cells]),
            'segments': [s.to_dict() for s in self.segments],
        }
        if self.mobile_segments is not None:
            data['mobile_segments'] = [s.to_dict() for s in self.mobile_segments]
        return data


def horizontal_street(name: str, rows: Iterable[int], max_cols: int,
                      anchor_percent: float = 50.0,
                      span: Tuple[float, float] = (2.0, 98.0)) -> Segment:
    """Helper for the common two-sided street running left to right."""
    rows = list(rows)
    return Segment(
        name=name,
        first_row=rows[0],
        last_row=rows[-1],
        first_col=1,
        last_col=max_cols,
        axis=HORIZONTAL,
        anchor_percent=anchor_percent,
        span_start_percent=span[0],
        span_end_percent=span[1],
        along=ALONG_COL,
    )


def vertical_street(name: str, rows: Iterable[int], max_cols: int,
                    anchor_percent: float = 50.0,
                    span: Tuple[float, float] = (2.0, 98.0)) -> Segment:
    """Same cells as horizontal_street, drawn top to bottom."""
    rows = list(rows)
    return Segment(
        name=name,
        first_row=rows[0],
        last_row=rows[-1],
        first_col=1,
        last_col=max_cols,
        axis=VERTICAL,
        anchor_percent=anchor_percent,
        span_start_percent=span[0],
        span_end_percent=span[1],
        along=ALONG_COL,
    )
