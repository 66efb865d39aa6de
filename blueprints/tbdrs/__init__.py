from flask import Blueprint

bp = Blueprint("tbdrs", __name__)

from . import routes  # noqa: E402,F401
