"""
Admin Services

User management and statistics for the administration panel.
"""

import logging

from storefront.errors import NotFound, OperationNotPermitted, ValidationError
from storefront.extensions import db
from storefront.models import User, Role, Product
from storefront.services.accounts import create_user, find_user_by_email

logger = logging.getLogger(__name__)

# Fields an administrator may change on another account
MUTABLE_USER_FIELDS = ('role', 'isActive')


def get_users():
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def get_stats():
    total_users = User.query.count()
    total_admins = User.query.filter_by(role=Role.ADMIN.value).count()
    active_users = User.query.filter_by(is_active=True).count()
    total_products = Product.query.count()
    return {
        'totalUsers': total_users,
        'totalAdmins': total_admins,
        'activeUsers': active_users,
        'totalProducts': total_products,
        'totalRegularUsers': total_users - total_admins,
    }


def ensure_not_self(acting_user, user_id, action='modify'):
    """Administrators cannot change or delete their own account here."""
    if acting_user.id == user_id:
        raise OperationNotPermitted(f'You cannot {action} your own account')


def valid_user_updates(updates):
    """Keep only the whitelisted, well-formed fields; ignore everything else."""
    valid = {}
    role = updates.get('role')
    if isinstance(role, str) and role in Role.values():
        valid['role'] = role
    is_active = updates.get('isActive')
    if isinstance(is_active, bool):
        valid['is_active'] = is_active
    return valid


def update_user(acting_user, user_id, updates):
    ensure_not_self(acting_user, user_id, 'modify')
    valid = valid_user_updates(updates)
    if not valid:
        raise ValidationError('No valid changes')
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    for field, value in valid.items():
        setattr(user, field, value)
    db.session.commit()
    logger.info('Admin %s updated user %s: %s', acting_user.id, user_id, valid,
                extra={'user_id': acting_user.id})
    return user


def delete_user(acting_user, user_id):
    ensure_not_self(acting_user, user_id, 'delete')
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    db.session.delete(user)
    db.session.commit()
    logger.info('Admin %s deleted user %s', acting_user.id, user_id,
                extra={'user_id': acting_user.id})


def ensure_admin(email, password=None, first_name='Admin', last_name='SneakZone'):
    """Promote ``email`` to administrator, creating the account if a password is given.

    Returns:
        (user, created)
    """
    user = find_user_by_email(email)
    if user is not None:
        if not user.is_admin or not user.is_active:
            user.role = Role.ADMIN.value
            user.is_active = True
            db.session.commit()
        return user, False
    if password is None:
        raise NotFound(f'No account for {email}')
    user = create_user(email, password, first_name, last_name, role=Role.ADMIN)
    return user, True
