"""
Conflict resolver.

Decides what a drop on a candidate cell would do. Pending optimistic
overrides are consulted before confirmed positions so a second drag made
before the first commit settles sees the freshest layout.
"""

from typing import Mapping, Optional

from map_engine.layout import GridCell, ZoneLayout

MOVE = 'move'
SWAP = 'swap'
BLOCKED = 'blocked'

DROP_ACTIONS = (MOVE, SWAP, BLOCKED)


def occupant_at(cell: GridCell, confirmed: Mapping[str, GridCell],
                overrides: Mapping[str, GridCell]) -> Optional[str]:
    """
    Find the entity shown at a cell.

    An entity carrying an override is shown at the override cell only; its
    confirmed cell is vacated.
    """
    cell = GridCell(*cell)
    for entity_id, override in overrides.items():
        if override == cell:
            return entity_id
    for entity_id, position in confirmed.items():
        if entity_id not in overrides and position == cell:
            return entity_id
    return None


def resolve(layout: ZoneLayout, candidate: Optional[GridCell], dragged_id: str,
            confirmed: Mapping[str, GridCell],
            overrides: Mapping[str, GridCell]) -> str:
    """
    Resolve a candidate drop cell to 'move', 'swap' or 'blocked'.

    Args:
        layout: Zone layout used for cell validity
        candidate: Cell under the pointer, or None outside every segment
        dragged_id: Entity being dragged
        confirmed: Last confirmed server positions
        overrides: Pending optimistic positions

    Returns:
        One of MOVE, SWAP, BLOCKED
    """
    if candidate is None:
        return BLOCKED
    if not layout.is_valid_cell(candidate[0], candidate[1]):
        return BLOCKED

    occupant = occupant_at(candidate, confirmed, overrides)
    if occupant is None:
        return MOVE
    if occupant == dragged_id:
        return BLOCKED
    return SWAP
