"""
Cart Services
"""

import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from storefront.extensions import db
from storefront.models import CartItem, Product
from storefront.services.catalog import get_product_by_name

logger = logging.getLogger(__name__)


def list_cart(user):
    """Cart lines joined with product details, for ``user`` only."""
    rows = db.session.query(Product, CartItem.quantity)\
        .join(CartItem, CartItem.product_id == Product.id)\
        .filter(CartItem.user_id == user.id)\
        .order_by(CartItem.id)\
        .all()
    items = []
    total = Decimal('0.00')
    for product, quantity in rows:
        item = product.to_dict()
        item['quantity'] = quantity
        items.append(item)
        total += product.price * quantity
    return items, total


def _increment(item_id):
    CartItem.query.filter_by(id=item_id).update(
        {CartItem.quantity: CartItem.quantity + 1}, synchronize_session=False
    )
    db.session.commit()
    return db.session.get(CartItem, item_id, populate_existing=True).quantity


def add_to_cart(user, product_name):
    """Add one unit of the product. Returns the resulting line quantity."""
    product = get_product_by_name(product_name)
    existing = CartItem.query.filter_by(user_id=user.id, product_id=product.id).first()
    if existing is not None:
        return _increment(existing.id)

    db.session.add(CartItem(user_id=user.id, product_id=product.id, quantity=1))
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent add created the line first; count this one on top
        db.session.rollback()
        existing = CartItem.query.filter_by(user_id=user.id, product_id=product.id).one()
        return _increment(existing.id)
    return 1


def remove_from_cart(user, product_name):
    """Delete the whole cart line for the product, whatever its quantity."""
    product = get_product_by_name(product_name)
    deleted = CartItem.query.filter_by(user_id=user.id, product_id=product.id).delete()
    db.session.commit()
    return bool(deleted)
