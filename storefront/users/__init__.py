"""
Users Blueprint

Favorites and cart of the authenticated user.
"""

from flask import Blueprint

users_bp = Blueprint('users', __name__)

from storefront.users import routes  # noqa: E402, F401
