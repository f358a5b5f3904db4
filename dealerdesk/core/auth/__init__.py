"""DealerDesk Core Auth.

Identity gate (bearer tokens from the identity provider) and dealer
resolution for every tenant-scoped endpoint.
"""
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from . import routes  # noqa: E402, F401
