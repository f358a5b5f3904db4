"""Shared API utilities — envelope builders, error mapping, request parsing.

Every JSON response uses the same envelope:
    {'success': bool, 'data': ..., 'error': ..., 'count': ...}
"""
import logging
import uuid

from flask import current_app, jsonify, request

from ..exceptions import DealerDeskError

logger = logging.getLogger('dealerdesk.api')


# ============== Envelope ==============

def success_response(data=None, status_code=200, **extra):
    """Build a success envelope. Extra keyword args are merged at top level."""
    body = {'success': True, 'data': data}
    body.update(extra)
    return jsonify(body), status_code


def error_response(message, status_code=400):
    """Build a failure envelope."""
    return jsonify({'success': False, 'error': message}), status_code


def safe_error_response(e, status_code=500):
    """Return error response without leaking DB internals.

    - DealerDeskError subclasses: their own status code and message
    - ValueError/KeyError: str(e) as 400 (business validation, safe to expose)
    - Everything else: logs full exception, returns generic message
    """
    if isinstance(e, DealerDeskError):
        return error_response(e.message, e.status_code)
    if isinstance(e, (ValueError, KeyError)):
        return error_response(str(e), 400)

    logger.exception('Unhandled error in API route')
    return error_response('An internal error occurred', status_code)


# ============== Request Parsing ==============

def get_json_or_error():
    """Get JSON object from request body.

    Returns (data, error_response) tuple. Caller pattern:
        data, error = get_json_or_error()
        if error:
            return error
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, error_response('Invalid or missing JSON body', 400)
    return data, None


def get_pagination():
    """Read limit/offset query args, clamped to the configured page size."""
    config = current_app.config['DEALERDESK']
    limit = request.args.get('limit', config.DEFAULT_PAGE_SIZE, type=int)
    offset = request.args.get('offset', 0, type=int)
    limit = max(1, min(limit, config.MAX_PAGE_SIZE))
    offset = max(0, offset)
    return limit, offset


def is_uuid(value):
    """True if value parses as a UUID (guards uuid columns from cast errors)."""
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        return False
    return True
