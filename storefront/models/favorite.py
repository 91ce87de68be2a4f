"""
Favorite Model
"""

from storefront.extensions import db
from storefront.utils import utcnow


class Favorite(db.Model):
    """A (user, product) bookmark"""
    __tablename__ = 'favorites'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'product_id', name='uq_favorites_user_product'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'),
                           nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<Favorite user:{self.user_id} product:{self.product_id}>'
