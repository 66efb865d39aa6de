from flask import Blueprint

bp = Blueprint("core", __name__)

# routes must be imported for the hooks and endpoints to register
from . import routes  # noqa: E402,F401
