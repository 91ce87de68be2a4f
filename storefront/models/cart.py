"""
Cart Item Model
"""

from storefront.extensions import db
from storefront.utils import utcnow


class CartItem(db.Model):
    """One cart line. Removing the line deletes the row; quantity never drops to 0."""
    __tablename__ = 'cart_items'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'product_id', name='uq_cart_items_user_product'),
        db.CheckConstraint('quantity >= 1', name='ck_cart_items_quantity'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'),
                           nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<CartItem user:{self.user_id} product:{self.product_id} x{self.quantity}>'
