"""Test drive API routes — list/search, detail, CRUD."""

import logging

from flask import current_app, request

from . import test_drives_bp
from .repositories import TestDriveRepository
from .service import build_test_drive
from ..core.auth.decorators import dealer_required
from ..core.exceptions import NotFoundError
from ..core.utils.api_helpers import (
    success_response, error_response, safe_error_response,
    get_json_or_error, get_pagination, is_uuid,
)

logger = logging.getLogger('dealerdesk.test_drives.routes')

NOT_FOUND = 'Test drive not found'


@test_drives_bp.route('/api/test-drives', methods=['GET'])
@dealer_required
def api_test_drives(dealer):
    """List test drives.
    Query: search, status (all|scheduled|in-progress|completed|cancelled), sort_by, sort_order, limit, offset
    """
    limit, offset = get_pagination()
    try:
        rows, total = TestDriveRepository(dealer['id']).search(
            search=request.args.get('search', '').strip() or None,
            status=request.args.get('status') or None,
            sort_by=request.args.get('sort_by'),
            sort_order=request.args.get('sort_order'),
            limit=limit, offset=offset,
        )
        return success_response(rows, count=total, limit=limit, offset=offset)
    except Exception as e:
        return safe_error_response(e)


@test_drives_bp.route('/api/test-drives', methods=['POST'])
@dealer_required
def api_create_test_drive(dealer):
    data, error = get_json_or_error()
    if error:
        return error
    try:
        record = build_test_drive(data, current_app.config['DEALERDESK'].DEFAULT_COUNTRY)
        entry = TestDriveRepository(dealer['id']).create(record)
        logger.info(f'Test drive {entry["id"]} booked for {record["vehicle_registration"]}')
        return success_response(entry, 201)
    except Exception as e:
        return safe_error_response(e)


@test_drives_bp.route('/api/test-drives/<entry_id>', methods=['GET'])
@dealer_required
def api_test_drive_detail(dealer, entry_id):
    if not is_uuid(entry_id):
        return error_response(NOT_FOUND, 404)
    try:
        entry = TestDriveRepository(dealer['id']).get(entry_id)
        if not entry:
            return error_response(NOT_FOUND, 404)
        return success_response(entry)
    except Exception as e:
        return safe_error_response(e)


@test_drives_bp.route('/api/test-drives/<entry_id>', methods=['PUT'])
@dealer_required
def api_update_test_drive(dealer, entry_id):
    if not is_uuid(entry_id):
        return error_response(NOT_FOUND, 404)
    data, error = get_json_or_error()
    if error:
        return error
    try:
        repo = TestDriveRepository(dealer['id'])
        if not repo.get(entry_id):
            return error_response(NOT_FOUND, 404)
        record = build_test_drive(data, current_app.config['DEALERDESK'].DEFAULT_COUNTRY)
        updated = repo.update(entry_id, record)
        if not updated:
            raise NotFoundError(NOT_FOUND)
        return success_response(updated)
    except Exception as e:
        return safe_error_response(e)


@test_drives_bp.route('/api/test-drives/<entry_id>', methods=['DELETE'])
@dealer_required
def api_delete_test_drive(dealer, entry_id):
    if not is_uuid(entry_id):
        return error_response(NOT_FOUND, 404)
    try:
        if not TestDriveRepository(dealer['id']).delete(entry_id):
            return error_response(NOT_FOUND, 404)
        return success_response({'id': entry_id})
    except Exception as e:
        return safe_error_response(e)
