"""
JSON envelopes for the position service.

    Success:   {"success": true, "data": {...}, "message": "..."}
    Rejection: {"success": false, "error": "message", "reason": "code"}

A rejection's HTTP status follows from its reason code, so clients can
branch on either one.

Usage:
    from utils.api_response import api_success, api_rejection

    return api_success(data={'action': 'move'}, message=get_message('move_success'))
    return api_rejection('occupied', get_message('position_occupied'))
"""

from flask import jsonify
from typing import Any

# HTTP status per rejection reason
REASON_STATUS = {
    'missing_fields': 400,
    'invalid_id': 400,
    'unknown_zone': 400,
    'out_of_bounds': 400,
    'masked_cell': 400,
    'zone_mismatch': 400,
    'same_entity': 400,
    'not_found': 404,
    'occupied': 409,
    'swap_mismatch': 409,
}


def api_success(data: dict | None = None, message: str | None = None,
                status: int = 200) -> tuple:
    """
    Build a success response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}
    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build an error response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., reason).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}
    response.update(extra_fields)
    return jsonify(response), status


def api_rejection(reason: str, error: str, status: int | None = None) -> tuple:
    """Error response carrying a reason code; the status defaults from REASON_STATUS."""
    if status is None:
        status = REASON_STATUS.get(reason, 400)
    return api_error(error, status=status, reason=reason)
