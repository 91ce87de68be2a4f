"""
Auth Blueprint

Registration, login, session verification and logout.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from storefront.auth import routes  # noqa: E402, F401
