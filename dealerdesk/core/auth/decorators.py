"""Dealer resolution decorator.

    @bp.route('/api/things')
    @dealer_required
    def api_things(dealer):
        repo = ThingRepository(dealer['id'])

Unauthenticated callers get 401 before any query runs. Authenticated
callers without a provisioned dealer row get 404.
"""
import logging
from functools import wraps

from flask import g
from flask_login import current_user

from ..utils.api_helpers import error_response, safe_error_response
from ..utils.logging_config import LogContext
from .repositories import DealerRepository

logger = logging.getLogger('dealerdesk.core.auth')

_dealer_repo = DealerRepository()


def dealer_required(f):
    """Resolve the caller's dealer and pass it as the first handler argument."""
    @wraps(f)
    def decorated(*args, **kwargs):
        if not current_user.is_authenticated:
            return error_response('Unauthorized', 401)

        try:
            dealer = _dealer_repo.get_by_identity_user_id(current_user.id)
        except Exception as e:
            return safe_error_response(e)

        if not dealer:
            logger.warning(f'No dealer provisioned for identity {current_user.id}')
            return error_response('Dealer not found', 404)

        g.dealer = dealer
        with LogContext(logger, dealer_id=dealer['id']):
            return f(dealer, *args, **kwargs)
    return decorated
