"""
Admin Blueprint

User and catalog management. Every route requires an authenticated
account holding the administrator role.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from storefront.admin import routes  # noqa: E402, F401
