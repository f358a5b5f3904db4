"""Auth API routes — current dealer profile."""

from flask_login import current_user

from . import auth_bp
from .decorators import dealer_required
from ..utils.api_helpers import success_response


@auth_bp.route('/api/auth/current-dealer', methods=['GET'])
@dealer_required
def api_current_dealer(dealer):
    """Return the dealer resolved for the caller's identity."""
    return success_response({
        'identity_user_id': current_user.id,
        'dealer': {
            'id': dealer['id'],
            'name': dealer.get('name'),
            'email': dealer.get('email'),
            'role': dealer.get('role'),
            'created_at': dealer.get('created_at'),
        },
    })
