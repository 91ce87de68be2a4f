"""
Favorites Services
"""

import logging

from sqlalchemy.exc import IntegrityError

from storefront.extensions import db
from storefront.models import Favorite, Product
from storefront.services.catalog import get_product_by_name

logger = logging.getLogger(__name__)


def list_favorites(user):
    """The user's favorite products, most recently added first."""
    rows = db.session.query(Product, Favorite.created_at)\
        .join(Favorite, Favorite.product_id == Product.id)\
        .filter(Favorite.user_id == user.id)\
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())\
        .all()
    favorites = []
    for product, favorited_at in rows:
        item = product.to_dict()
        item['favoritedAt'] = favorited_at.isoformat() if favorited_at else None
        favorites.append(item)
    return favorites


def toggle_favorite(user, product_name):
    """Add the product to the user's favorites, or remove it if present.

    Returns:
        True if the product is a favorite after the call.
    """
    product = get_product_by_name(product_name)
    existing = Favorite.query.filter_by(user_id=user.id, product_id=product.id).first()
    if existing is not None:
        db.session.delete(existing)
        db.session.commit()
        return False

    db.session.add(Favorite(user_id=user.id, product_id=product.id))
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent toggle inserted the same pair first
        db.session.rollback()
        logger.info('Duplicate favorite insert for user %s product %s', user.id, product.id)
    return True
