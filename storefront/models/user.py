"""
User Model
"""

import enum

from flask_login import UserMixin

from storefront.extensions import db
from storefront.utils import utcnow


class Role(str, enum.Enum):
    """Account roles. Capabilities are checked against these at the router."""
    USER = 'user'
    ADMIN = 'admin'

    @classmethod
    def values(cls):
        return [r.value for r in cls]


class User(UserMixin, db.Model):
    """Customer or administrator account"""
    __tablename__ = 'users'
    __table_args__ = (
        db.CheckConstraint("role IN ('user', 'admin')", name='ck_users_role'),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=Role.USER.value)
    # Overrides UserMixin.is_active so Flask-Login refuses disabled accounts
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    favorites = db.relationship('Favorite', backref='user', lazy=True,
                                cascade='all, delete-orphan')
    cart_items = db.relationship('CartItem', backref='user', lazy=True,
                                 cascade='all, delete-orphan')

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    def has_role(self, role):
        return self.role == Role(role).value

    def to_dict(self):
        """Public representation (never includes the password hash)."""
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'role': self.role,
            'isActive': bool(self.is_active),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'
