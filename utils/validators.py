"""
Input validation helper functions.
Provides validation for grid move requests and their fields.
"""

import re

from map_engine.layout import ZoneLayout
from utils.messages import get_message

UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE
)

GRID_MOVE_REQUIRED = ('entityId', 'grid_row', 'grid_col', 'zone')


def validate_uuid(value) -> bool:
    """
    Validate UUID format (any version).

    Args:
        value: Value to validate

    Returns:
        True if value is a UUID string
    """
    if not isinstance(value, str):
        return False
    return bool(UUID_PATTERN.match(value))


def parse_grid_coordinate(value):
    """
    Parse a grid row/column from JSON.

    Accepts integers and integral strings; rejects booleans and floats.

    Returns:
        int or None if not a valid coordinate
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.match(r'^-?\d+$', value.strip()):
        return int(value.strip())
    return None


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def validate_grid_move(data) -> tuple:
    """
    Validate the shape of a grid move request body.

    Args:
        data: Parsed JSON body

    Returns:
        Tuple of (move, reason, error_message). move is a dict with
        entity_id, grid_row, grid_col, zone and swap_with_id when valid,
        otherwise None with a reason code and message.
    """
    if not isinstance(data, dict) or any(
        data.get(field) in (None, '') for field in GRID_MOVE_REQUIRED
    ):
        return None, 'missing_fields', get_message('missing_fields')

    entity_id = data['entityId']
    if not validate_uuid(entity_id):
        return None, 'invalid_id', get_message('invalid_id', field='entityId')

    swap_with_id = data.get('swap_with_id')
    if swap_with_id is not None and not validate_uuid(swap_with_id):
        return None, 'invalid_id', get_message('invalid_id', field='swap_with_id')

    grid_row = parse_grid_coordinate(data['grid_row'])
    grid_col = parse_grid_coordinate(data['grid_col'])
    if grid_row is None or grid_col is None:
        return None, 'out_of_bounds', get_message('invalid_coordinates')

    move = {
        'entity_id': entity_id,
        'grid_row': grid_row,
        'grid_col': grid_col,
        'zone': sanitize_input(str(data['zone']), max_length=64),
        'swap_with_id': swap_with_id,
    }
    return move, None, None


def validate_grid_cell(layout: ZoneLayout, grid_row: int, grid_col: int) -> tuple:
    """
    Check a target cell against a zone layout.

    Returns:
        Tuple of (is_valid, reason, error_message)
    """
    if not 1 <= grid_row <= layout.max_rows:
        return False, 'out_of_bounds', get_message('row_out_of_bounds', label=layout.label or layout.zone)

    segment = layout.segment_for(grid_row)
    if grid_col not in segment.cols:
        return False, 'out_of_bounds', get_message('column_out_of_bounds')

    if (grid_row, grid_col) in layout.masked_cells:
        return False, 'masked_cell', get_message(
            'masked_cell', row=grid_row, col=grid_col, label=layout.label or layout.zone
        )

    return True, None, None
