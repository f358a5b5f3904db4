"""Customer API routes — list/search, detail, CRUD."""

import logging

from flask import current_app, request

from . import customers_bp
from .repositories import CustomerRepository
from .service import build_customer
from ..core.auth.decorators import dealer_required
from ..core.exceptions import ConflictError, NotFoundError
from ..core.utils.api_helpers import (
    success_response, error_response, safe_error_response,
    get_json_or_error, get_pagination, is_uuid,
)

logger = logging.getLogger('dealerdesk.customers.routes')


def _default_country():
    return current_app.config['DEALERDESK'].DEFAULT_COUNTRY


def _check_email_free(repo, email, exclude_id=None):
    if email and repo.find_by_email(email, exclude_id=exclude_id):
        raise ConflictError('Customer with this email already exists')


@customers_bp.route('/api/customers', methods=['GET'])
@dealer_required
def api_customers(dealer):
    """List customers.
    Query: search, status (all|active|inactive|prospect), sort_by, sort_order, limit, offset
    """
    limit, offset = get_pagination()
    try:
        rows, total = CustomerRepository(dealer['id']).search(
            search=request.args.get('search', '').strip() or None,
            status=request.args.get('status') or None,
            sort_by=request.args.get('sort_by'),
            sort_order=request.args.get('sort_order'),
            limit=limit, offset=offset,
        )
        return success_response(rows, count=total, limit=limit, offset=offset)
    except Exception as e:
        return safe_error_response(e)


@customers_bp.route('/api/customers', methods=['POST'])
@dealer_required
def api_create_customer(dealer):
    data, error = get_json_or_error()
    if error:
        return error
    try:
        record = build_customer(data, _default_country())
        repo = CustomerRepository(dealer['id'])
        _check_email_free(repo, record['email'])
        customer = repo.create(record)
        logger.info(f'Customer {customer["id"]} created')
        return success_response(customer, 201)
    except Exception as e:
        return safe_error_response(e)


@customers_bp.route('/api/customers/<customer_id>', methods=['GET'])
@dealer_required
def api_customer_detail(dealer, customer_id):
    if not is_uuid(customer_id):
        return error_response('Customer not found', 404)
    try:
        customer = CustomerRepository(dealer['id']).get(customer_id)
        if not customer:
            return error_response('Customer not found', 404)
        return success_response(customer)
    except Exception as e:
        return safe_error_response(e)


@customers_bp.route('/api/customers/<customer_id>', methods=['PUT'])
@dealer_required
def api_update_customer(dealer, customer_id):
    """Replace a customer record. Email conflicts are checked against other customers."""
    if not is_uuid(customer_id):
        return error_response('Customer not found', 404)
    data, error = get_json_or_error()
    if error:
        return error
    try:
        repo = CustomerRepository(dealer['id'])
        if not repo.get(customer_id):
            return error_response('Customer not found', 404)
        record = build_customer(data, _default_country())
        _check_email_free(repo, record['email'], exclude_id=customer_id)
        updated = repo.update(customer_id, record)
        if not updated:
            raise NotFoundError('Customer not found')
        return success_response(updated)
    except Exception as e:
        return safe_error_response(e)


@customers_bp.route('/api/customers/<customer_id>', methods=['DELETE'])
@dealer_required
def api_delete_customer(dealer, customer_id):
    if not is_uuid(customer_id):
        return error_response('Customer not found', 404)
    try:
        if not CustomerRepository(dealer['id']).delete(customer_id):
            return error_response('Customer not found', 404)
        logger.info(f'Customer {customer_id} deleted')
        return success_response({'id': customer_id})
    except Exception as e:
        return safe_error_response(e)
