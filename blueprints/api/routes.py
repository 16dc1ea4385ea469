"""
API routes for JSON endpoints.
Serves zone layouts and establishment positions, and applies grid moves.
"""

from flask import Blueprint, current_app, jsonify, request

from map_engine.errors import UnknownZoneError
from map_engine.zones import get_layout, list_zones
from models.establishment import apply_grid_move, get_establishments
from utils.api_response import api_rejection, api_success
from utils.messages import get_message
from utils.validators import validate_grid_cell, validate_grid_move

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON with status and version
    """
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'ZoneMap')
    })


@api_bp.route('/zones')
def api_zones():
    """
    List registered zones.

    Returns:
        JSON list of zone summaries
    """
    zones = []
    for zone in list_zones():
        layout = get_layout(zone)
        zones.append({
            'zone': zone,
            'label': layout.label or zone,
            'shape': layout.shape,
            'cell_count': layout.cell_count,
        })
    return api_success(data={'zones': zones})


@api_bp.route('/zones/<zone>/layout')
def api_zone_layout(zone):
    """Zone layout descriptor used by map clients."""
    try:
        layout = get_layout(zone)
    except UnknownZoneError as e:
        return api_rejection('unknown_zone', get_message('unknown_zone', zone=e.zone), status=404)
    return api_success(data=layout.to_dict())


@api_bp.route('/zones/<zone>/establishments')
def api_zone_establishments(zone):
    """
    Get establishments of a zone with their grid positions.

    Returns:
        JSON list of establishments
    """
    try:
        get_layout(zone)
    except UnknownZoneError as e:
        return api_rejection('unknown_zone', get_message('unknown_zone', zone=e.zone), status=404)

    establishments = get_establishments(zone=zone)
    return api_success(data={
        'zone': zone,
        'establishments': establishments,
        'count': len(establishments)
    })


@api_bp.route('/grid-move', methods=['POST'])
def api_grid_move():
    """
    Move an establishment to a cell, or swap it with the cell's occupant.

    Request JSON:
    {
        "entityId": "uuid",
        "grid_row": int,
        "grid_col": int,
        "zone": "lkmetro",
        "swap_with_id": "uuid"      (optional, swap only)
    }

    Response JSON:
    {
        "success": true,
        "data": {"action": "move" | "swap", "positions": [...]},
        "message": "..."
    }

    Failures carry "error" and a "reason" code.
    """
    try:
        move, reason, error = validate_grid_move(request.get_json(silent=True))
        if reason:
            return api_rejection(reason, error)

        try:
            layout = get_layout(move['zone'])
        except UnknownZoneError:
            return api_rejection('unknown_zone', get_message('unknown_zone', zone=move['zone']))

        is_valid, reason, error = validate_grid_cell(layout, move['grid_row'], move['grid_col'])
        if not is_valid:
            return api_rejection(reason, error)

        result = apply_grid_move(
            move['entity_id'],
            move['zone'],
            move['grid_row'],
            move['grid_col'],
            swap_with_id=move['swap_with_id']
        )
        if not result['success']:
            current_app.logger.info(
                f"[ZoneMap] grid move of {move['entity_id']} rejected: {result['reason']}"
            )
            return api_rejection(result['reason'], result['error'])

        return api_success(
            data={'action': result['action'], 'positions': result['positions']},
            message=result['message']
        )

    except Exception as e:
        current_app.logger.error(f'Error in grid move: {e}', exc_info=True)
        return api_rejection('internal_error', get_message('internal_error'), status=500)
