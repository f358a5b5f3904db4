"""Stock action API routes — vehicle costs, return costs, sale completion PDF."""

import logging
import re

from flask import Response, request

from . import stock_actions_bp
from .repositories import VehicleCostRepository, ReturnCostRepository
from .services.cost_calculator import (
    calculate_vehicle_costs, validate_cost_lines, return_cost_totals,
)
from .services.sale_completion_pdf import generate_sale_completion_pdf
from ..company.repositories import CompanySettingsRepository
from ..core.auth.decorators import dealer_required
from ..core.utils.api_helpers import (
    success_response, error_response, safe_error_response, get_json_or_error,
)
from ..core.utils.payload import as_bool

logger = logging.getLogger('dealerdesk.stock_actions.routes')


def _stock_id(value):
    return str(value).strip() if value is not None else ''


def _filename_part(value):
    """Registration or stock id reduced to characters safe inside a quoted filename."""
    return re.sub(r'[^A-Za-z0-9._-]+', '-', str(value).strip()).strip('-') or 'sale'


# ════════════════════════════════════════════════════════════════
# Vehicle costs
# ════════════════════════════════════════════════════════════════

@stock_actions_bp.route('/api/stock-actions/vehicle-costs', methods=['GET'])
@dealer_required
def api_vehicle_costs(dealer):
    """List the dealer's cost sheets, newest first. Query: stockId (optional)."""
    try:
        rows = VehicleCostRepository(dealer['id']).list(_stock_id(request.args.get('stockId')) or None)
        return success_response(rows, count=len(rows))
    except Exception as e:
        return safe_error_response(e)


@stock_actions_bp.route('/api/stock-actions/vehicle-costs', methods=['POST'])
@dealer_required
def api_save_vehicle_costs(dealer):
    """Create or update the cost sheet for a stock item.
    Body: stockId, stockReference, registration, fixedCosts, groupedCosts, replaceMode
    Without replaceMode new costs are added to the stored sheet.
    """
    data, error = get_json_or_error()
    if error:
        return error
    stock_id = _stock_id(data.get('stockId'))
    if not stock_id:
        return error_response('Stock ID is required', 400)

    try:
        repo = VehicleCostRepository(dealer['id'])
        existing = repo.get_by_stock(stock_id)
        fields = calculate_vehicle_costs(
            existing,
            data.get('fixedCosts'),
            data.get('groupedCosts'),
            replace_mode=as_bool(data.get('replaceMode', False)),
        )
        fields['stock_reference'] = data.get('stockReference')
        fields['registration'] = data.get('registration')
        if existing:
            fields['stock_reference'] = fields['stock_reference'] or existing.get('stock_reference')
            fields['registration'] = fields['registration'] or existing.get('registration')

        row = repo.save(stock_id, fields, exists=bool(existing))
        logger.info(f'Vehicle costs saved for stock {stock_id}: grand total {fields["grand_total"]}')
        return success_response(row, merged=bool(existing))
    except Exception as e:
        return safe_error_response(e)


# ════════════════════════════════════════════════════════════════
# Return costs
# ════════════════════════════════════════════════════════════════

@stock_actions_bp.route('/api/stock-actions/return-costs', methods=['GET'])
@dealer_required
def api_return_costs(dealer):
    try:
        rows = ReturnCostRepository(dealer['id']).list(_stock_id(request.args.get('stockId')) or None)
        rows = [return_cost_totals(r) for r in rows]
        return success_response(rows, count=len(rows))
    except Exception as e:
        return safe_error_response(e)


@stock_actions_bp.route('/api/stock-actions/return-costs', methods=['POST'])
@dealer_required
def api_save_return_costs(dealer):
    """Body: stockId, stockReference, registration, vatableCosts, nonVatableCosts."""
    data, error = get_json_or_error()
    if error:
        return error
    stock_id = _stock_id(data.get('stockId'))
    if not stock_id:
        return error_response('Stock ID is required', 400)

    try:
        fields = {
            'stock_reference': data.get('stockReference'),
            'registration': data.get('registration'),
            'vatable_costs': validate_cost_lines(data.get('vatableCosts'), 'vatableCosts'),
            'non_vatable_costs': validate_cost_lines(data.get('nonVatableCosts'), 'nonVatableCosts'),
        }
        row = ReturnCostRepository(dealer['id']).save(stock_id, fields)
        return success_response(return_cost_totals(row))
    except Exception as e:
        return safe_error_response(e)


# ════════════════════════════════════════════════════════════════
# Sale completion document
# ════════════════════════════════════════════════════════════════

@stock_actions_bp.route('/api/stock-actions/sale-details/export-pdf', methods=['POST'])
@dealer_required
def api_export_sale_pdf(dealer):
    """Render the sale completion sheet as a PDF download.
    Body: stockId, registration, saleDate, customerName, completionData
    """
    data, error = get_json_or_error()
    if error:
        return error
    stock_id = _stock_id(data.get('stockId'))
    if not stock_id:
        return error_response('Stock ID is required', 400)

    completion_data = data.get('completionData') or {}
    if not isinstance(completion_data, dict):
        return error_response('completionData must be an object', 400)

    try:
        settings = CompanySettingsRepository(dealer['id']).get()
        pdf = generate_sale_completion_pdf({
            'stock_id': stock_id,
            'registration': data.get('registration'),
            'sale_date': data.get('saleDate'),
            'customer_name': data.get('customerName'),
            'completion_data': completion_data,
        }, settings)
    except Exception as e:
        return safe_error_response(e)

    filename = f'sales-completion-{_filename_part(data.get("registration") or stock_id)}.pdf'
    return Response(
        pdf.getvalue(),
        mimetype='application/pdf',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )
