"""
Registered zone layouts.

Each zone is data: one ZoneLayout built from segments. Adding a zone means
adding an entry here, not a new map implementation.
"""

from typing import Dict, List

from map_engine.errors import UnknownZoneError
from map_engine.layout import (
    ALONG_ROW, HORIZONTAL, L_SHAPED, U_SHAPED, VERTICAL,
    Segment, ZoneLayout, horizontal_street, vertical_street
)


def _straight_street(zone: str, label: str, max_cols: int,
                     rotate_on_mobile: bool = True) -> ZoneLayout:
    """Two-sided street: row 1 above the road, row 2 below it."""
    return ZoneLayout(
        zone=zone,
        label=label,
        shape=HORIZONTAL,
        max_rows=2,
        max_cols=max_cols,
        segments=(horizontal_street('main', (1, 2), max_cols),),
        mobile_segments=(
            (vertical_street('main', (1, 2), max_cols),) if rotate_on_mobile else None
        ),
    )


ZONE_LAYOUTS: Dict[str, ZoneLayout] = {}


def register_layout(layout: ZoneLayout) -> ZoneLayout:
    """Add a layout to the registry, replacing any previous one for the zone."""
    ZONE_LAYOUTS[layout.zone] = layout
    return layout


register_layout(_straight_street('soi6', 'Soi 6', 20))
register_layout(_straight_street('beachroad', 'Beach Road', 40))
register_layout(_straight_street('boyztown', 'Boyztown', 12))
register_layout(_straight_street('jomtiencomplex', 'Jomtien Complex', 15))
register_layout(_straight_street('soi78', 'Soi 7 & 8', 16, rotate_on_mobile=False))

register_layout(ZoneLayout(
    zone='soibuakhao',
    label='Soi Buakhao',
    shape=VERTICAL,
    max_rows=2,
    max_cols=18,
    segments=(vertical_street('main', (1, 2), 18, span=(4.0, 96.0)),),
))

# L-shaped: a short horizontal street (rows 1-2) turning into a vertical
# one (rows 3-4, west/east sides). (2,9) and (3,1)-(3,2) sit on the corner.
register_layout(ZoneLayout(
    zone='lkmetro',
    label='LK Metro',
    shape=L_SHAPED,
    max_rows=4,
    max_cols=9,
    segments=(
        Segment('horizontal', 1, 2, 1, 9, HORIZONTAL, anchor_percent=30,
                span_start_percent=25, span_end_percent=55),
        Segment('vertical', 3, 4, 1, 9, VERTICAL, anchor_percent=55,
                span_start_percent=40, span_end_percent=95),
    ),
    masked_cells=frozenset({(2, 9), (3, 1), (3, 2)}),
))

# U-shaped: horizontal main street with a vertical branch at each end.
# Branch rows run down the road; columns 1/2 are the west/east sides.
register_layout(ZoneLayout(
    zone='treetown',
    label='Tree Town',
    shape=U_SHAPED,
    max_rows=14,
    max_cols=10,
    segments=(
        Segment('main', 1, 2, 1, 10, HORIZONTAL, anchor_percent=22,
                span_start_percent=20, span_end_percent=80),
        Segment('left-branch', 3, 8, 1, 2, VERTICAL, anchor_percent=20,
                span_start_percent=38, span_end_percent=92, along=ALONG_ROW),
        Segment('right-branch', 9, 14, 1, 2, VERTICAL, anchor_percent=80,
                span_start_percent=38, span_end_percent=92, along=ALONG_ROW),
    ),
    masked_cells=frozenset({(2, 1), (2, 10)}),
))


def get_layout(zone: str) -> ZoneLayout:
    """
    Get the layout registered for a zone.

    Raises:
        UnknownZoneError: if the zone has no layout
    """
    try:
        return ZONE_LAYOUTS[zone]
    except KeyError:
        raise UnknownZoneError(zone) from None


def list_zones() -> List[str]:
    return sorted(ZONE_LAYOUTS)
