"""DealerDesk Test Drives — booking log for vehicle test drives."""
from flask import Blueprint

test_drives_bp = Blueprint('test_drives', __name__)

from . import routes  # noqa: E402, F401
