"""
Admin Decorators

Role checks run after authentication and before any handler logic.
"""

from functools import wraps

from flask_login import current_user

from storefront.errors import AuthenticationRequired, Forbidden
from storefront.models import Role


def role_required(role):
    """Decorator to ensure the authenticated user holds ``role``.

    Fails with 401 when nobody is logged in (or the account was disabled
    since) and with 403 when the role does not match.
    """
    role = Role(role)

    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthenticationRequired()
            if not current_user.has_role(role):
                raise Forbidden()
            return f(*args, **kwargs)
        return wrapper
    return decorator


admin_required = role_required(Role.ADMIN)
