"""
Centralized user-facing messages.
Toast texts of the map engine and error texts of the position service.
"""

MESSAGES = {
    # Success messages
    'move_success': 'Grid position updated successfully',
    'swap_success': 'Positions swapped successfully',
    'db_initialized': 'Database initialized successfully!',

    # Engine notifications
    'move_failed': 'Failed to move establishment',
    'swap_failed': 'Failed to swap establishments',
    'position_out_of_bounds': 'Invalid position: Row {row}, Col {col} is out of bounds',
    'column_out_of_bounds_toast': 'Invalid position: Column {col} is out of bounds',
    'position_conflict': 'Position changed in the meantime - please try a different position',
    'server_error': 'Server error - please try again',
    'network_error': 'Network error - please try again',
    'commit_timeout': 'The server did not answer in time - please try again',

    # Service errors
    'missing_fields': 'Missing required fields: entityId, grid_row, grid_col, zone',
    'invalid_id': 'Invalid {field} format',
    'invalid_coordinates': 'grid_row and grid_col must be integers',
    'unknown_zone': 'Unknown zone: {zone}',
    'row_out_of_bounds': 'Row position out of bounds for {label}',
    'column_out_of_bounds': 'Column position out of bounds',
    'masked_cell': 'Position ({row}, {col}) is not available in {label}',
    'establishment_not_found': 'Establishment not found',
    'zone_mismatch': 'Establishment does not belong to zone {zone}',
    'position_occupied': 'Position already occupied',
    'swap_mismatch': 'swap_with_id does not match the establishment at target position',
    'same_entity': 'Cannot swap an establishment with itself',
    'not_found': 'Resource not found',
    'internal_error': 'Internal server error',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
