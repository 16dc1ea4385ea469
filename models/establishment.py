"""
Establishment data access functions.
Handles establishment lookup, creation and grid position changes.
"""

import sqlite3
import uuid
from typing import Any, Dict, List, Optional

from database import get_db
from utils.messages import get_message


def get_establishments(zone: str = None) -> List[Dict[str, Any]]:
    """
    Get establishments, optionally of one zone.

    Args:
        zone: Filter by zone name (optional)

    Returns:
        List of establishment dicts ordered by zone and grid position
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM establishments WHERE 1=1'
    params = []

    if zone:
        query += ' AND zone = ?'
        params.append(zone)

    query += ' ORDER BY zone, grid_row, grid_col'

    cursor.execute(query, params)
    rows = cursor.fetchall()
    return [dict(row) for row in rows]


def get_establishment_by_id(establishment_id: str) -> Optional[Dict[str, Any]]:
    """
    Get establishment by ID.

    Args:
        establishment_id: Establishment UUID

    Returns:
        Establishment dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM establishments WHERE id = ?', (establishment_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_establishment_at(zone: str, grid_row: int, grid_col: int) -> Optional[Dict[str, Any]]:
    """Get the establishment occupying a cell, if any."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM establishments
        WHERE zone = ? AND grid_row = ? AND grid_col = ?
    ''', (zone, grid_row, grid_col))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_establishment(name: str, zone: str, grid_row: int = None, grid_col: int = None,
                         category: str = 'bar') -> str:
    """
    Create new establishment.

    Args:
        name: Display name
        zone: Zone name
        grid_row: Grid row (optional, unplaced when omitted)
        grid_col: Grid column (optional)
        category: Category code

    Returns:
        New establishment ID

    Raises:
        ValueError: If the cell is already occupied
    """
    if grid_row is not None and grid_col is not None:
        if get_establishment_at(zone, grid_row, grid_col):
            raise ValueError(get_message('position_occupied'))

    establishment_id = str(uuid.uuid4())
    with get_db() as conn:
        conn.execute('''
            INSERT INTO establishments (id, name, category, zone, grid_row, grid_col)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (establishment_id, name, category, zone, grid_row, grid_col))

    return establishment_id


def update_grid_position(establishment_id: str, grid_row: int, grid_col: int) -> bool:
    """
    Move an establishment to an empty cell.

    Returns:
        True if a row was updated

    Raises:
        sqlite3.IntegrityError: If the cell was taken concurrently
    """
    with get_db() as conn:
        cursor = conn.execute('''
            UPDATE establishments
            SET grid_row = ?, grid_col = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (grid_row, grid_col, establishment_id))
        return cursor.rowcount > 0


def swap_grid_positions(source_id: str, target_id: str) -> bool:
    """
    Exchange the cells of two establishments in one transaction.

    The source is parked on a NULL position first so the unique cell index
    never sees two establishments on the same cell.

    Returns:
        True if both establishments were found and swapped
    """
    source = get_establishment_by_id(source_id)
    target = get_establishment_by_id(target_id)
    if not source or not target:
        return False

    with get_db() as conn:
        conn.execute('''
            UPDATE establishments SET grid_row = NULL, grid_col = NULL
            WHERE id = ?
        ''', (source_id,))
        conn.execute('''
            UPDATE establishments
            SET grid_row = ?, grid_col = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (source['grid_row'], source['grid_col'], target_id))
        conn.execute('''
            UPDATE establishments
            SET grid_row = ?, grid_col = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (target['grid_row'], target['grid_col'], source_id))

    return True


def apply_grid_move(establishment_id: str, zone: str, grid_row: int, grid_col: int,
                    swap_with_id: str = None) -> Dict[str, Any]:
    """
    Apply a validated move or swap request.

    The target cell must already be checked against the zone layout.

    Args:
        establishment_id: Establishment being moved
        zone: Zone of the target cell
        grid_row: Target row
        grid_col: Target column
        swap_with_id: Establishment expected at the target cell (swap)

    Returns:
        Dict with success status and either the action performed or the
        failure reason code and message
    """
    source = get_establishment_by_id(establishment_id)
    if not source:
        return _failure('not_found', get_message('establishment_not_found'))
    if source['zone'] != zone:
        return _failure('zone_mismatch', get_message('zone_mismatch', zone=zone))

    occupant = get_establishment_at(zone, grid_row, grid_col)

    if swap_with_id:
        if swap_with_id == establishment_id:
            return _failure('same_entity', get_message('same_entity'))
        if not occupant or occupant['id'] != swap_with_id:
            return _failure('swap_mismatch', get_message('swap_mismatch'))
        try:
            swap_grid_positions(establishment_id, swap_with_id)
        except sqlite3.IntegrityError:
            return _failure('occupied', get_message('position_occupied'))
        return {
            'success': True,
            'action': 'swap',
            'message': get_message('swap_success'),
            'positions': _positions_of(establishment_id, swap_with_id),
        }

    if occupant and occupant['id'] != establishment_id:
        return _failure('occupied', get_message('position_occupied'))

    try:
        update_grid_position(establishment_id, grid_row, grid_col)
    except sqlite3.IntegrityError:
        return _failure('occupied', get_message('position_occupied'))

    return {
        'success': True,
        'action': 'move',
        'message': get_message('move_success'),
        'positions': _positions_of(establishment_id),
    }


def _failure(reason: str, error: str) -> Dict[str, Any]:
    return {'success': False, 'reason': reason, 'error': error}


def _positions_of(*establishment_ids: str) -> List[Dict[str, Any]]:
    positions = []
    for establishment_id in establishment_ids:
        establishment = get_establishment_by_id(establishment_id)
        positions.append({
            'id': establishment['id'],
            'grid_row': establishment['grid_row'],
            'grid_col': establishment['grid_col'],
        })
    return positions
