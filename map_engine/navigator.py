"""
Spatial keyboard navigation between the establishments of a zone map.
"""

import logging
from typing import Callable, Mapping, Optional

from map_engine.layout import GridCell

logger = logging.getLogger(__name__)

ARROW_LEFT = 'ArrowLeft'
ARROW_RIGHT = 'ArrowRight'
ARROW_UP = 'ArrowUp'
ARROW_DOWN = 'ArrowDown'
ARROW_KEYS = (ARROW_LEFT, ARROW_RIGHT, ARROW_UP, ARROW_DOWN)
SELECT_KEYS = ('Enter', ' ', 'Space')


class SpatialNavigator:
    """
    Arrow-key focus traversal over grid positions.

    Left/Right move to the nearest entity in the same row; Up/Down move to
    the nearest populated row above/below, picking the closest column
    (lower column on ties). The first arrow press focuses the first entity
    in (row, col) order. Enter/Space select the focused entity.

    Args:
        positions: Callable returning the current entity_id -> GridCell map
        is_active: Callable telling whether navigation is enabled
        on_select: Called with the focused entity id on Enter/Space
    """

    def __init__(self, positions: Callable[[], Mapping[str, GridCell]],
                 is_active: Callable[[], bool] = lambda: True,
                 on_select: Optional[Callable[[str], None]] = None):
        self._positions = positions
        self._is_active = is_active
        self.on_select = on_select
        self.focused_id: Optional[str] = None

    @classmethod
    def for_controller(cls, controller, on_select=None) -> 'SpatialNavigator':
        """Navigator over a controller's effective positions, inactive in edit mode."""
        return cls(
            positions=controller.store.effective_positions,
            is_active=lambda: not controller.edit_mode,
            on_select=on_select,
        )

    def focus(self, entity_id: Optional[str]) -> None:
        self.focused_id = entity_id

    def handle_key(self, key: str) -> Optional[str]:
        """
        Process a key press.

        Returns:
            The focused entity id after the key, or None if the key was not
            handled
        """
        if not self._is_active():
            return None

        positions = {eid: GridCell(*cell) for eid, cell in self._positions().items()}
        if not positions:
            return None

        if key in SELECT_KEYS:
            if self.focused_id in positions and self.on_select is not None:
                self.on_select(self.focused_id)
                return self.focused_id
            return None

        if key not in ARROW_KEYS:
            return None

        current = positions.get(self.focused_id)
        if current is None:
            self.focused_id = min(positions, key=lambda eid: (positions[eid], eid))
            return self.focused_id

        target = _find_target(key, self.focused_id, current, positions)
        if target is not None:
            self.focused_id = target
        return self.focused_id


def _find_target(key: str, current_id: str, current: GridCell,
                 positions: Mapping[str, GridCell]) -> Optional[str]:
    others = {eid: cell for eid, cell in positions.items() if eid != current_id}

    if key in (ARROW_LEFT, ARROW_RIGHT):
        if key == ARROW_RIGHT:
            same_row = [(cell.col, eid) for eid, cell in others.items()
                        if cell.row == current.row and cell.col > current.col]
        else:
            same_row = [(-cell.col, eid) for eid, cell in others.items()
                        if cell.row == current.row and cell.col < current.col]
        return min(same_row)[1] if same_row else None

    if key == ARROW_UP:
        rows = [cell.row for cell in others.values() if cell.row < current.row]
        if not rows:
            return None
        target_row = max(rows)
    else:
        rows = [cell.row for cell in others.values() if cell.row > current.row]
        if not rows:
            return None
        target_row = min(rows)

    candidates = [(abs(cell.col - current.col), cell.col, eid)
                  for eid, cell in others.items() if cell.row == target_row]
    return min(candidates)[2]
