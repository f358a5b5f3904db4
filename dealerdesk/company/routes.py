"""Company settings API routes."""

import logging

from . import company_bp
from .repositories import CompanySettingsRepository
from ..core.auth.decorators import dealer_required
from ..core.utils.api_helpers import success_response, safe_error_response, get_json_or_error
from ..core.utils.payload import camel, pick, blank_to_none

logger = logging.getLogger('dealerdesk.company.routes')


@company_bp.route('/api/company-settings', methods=['GET'])
@dealer_required
def api_company_settings(dealer):
    """Return the dealer's company settings, or null when none are saved."""
    try:
        return success_response(CompanySettingsRepository(dealer['id']).get())
    except Exception as e:
        return safe_error_response(e)


@company_bp.route('/api/company-settings', methods=['PUT'])
@dealer_required
def api_save_company_settings(dealer):
    data, error = get_json_or_error()
    if error:
        return error
    try:
        fields = {}
        for column in CompanySettingsRepository.EDITABLE:
            if column in data or camel(column) in data:
                fields[column] = blank_to_none(pick(data, column))
        settings = CompanySettingsRepository(dealer['id']).upsert(fields)
        logger.info('Company settings saved')
        return success_response(settings)
    except Exception as e:
        return safe_error_response(e)
