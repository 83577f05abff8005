"""Reports blueprint for cross-class attendance reports and exports."""

from flask import Blueprint

bp = Blueprint("reports", __name__, url_prefix="/reports")

from . import routes  # noqa: E402, F401
