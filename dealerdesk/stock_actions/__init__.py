"""DealerDesk Stock Actions — vehicle costs, return costs, sale documents."""
from flask import Blueprint

stock_actions_bp = Blueprint('stock_actions', __name__)

from . import routes  # noqa: E402, F401
