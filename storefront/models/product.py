"""
Product Model
"""

from storefront.extensions import db
from storefront.utils import utcnow


class Product(db.Model):
    """Catalog entry. The name doubles as the lookup key in URLs."""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False, index=True)
    brand = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    image_emoji = db.Column(db.String(10))
    sizes = db.Column(db.String(50))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    favorites = db.relationship('Favorite', backref='product', lazy=True,
                                cascade='all, delete-orphan')
    cart_items = db.relationship('CartItem', backref='product', lazy=True,
                                 cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'brand': self.brand,
            'description': self.description,
            'price': float(self.price) if self.price is not None else None,
            'imageEmoji': self.image_emoji,
            'sizes': self.sizes,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Product {self.name}>'
