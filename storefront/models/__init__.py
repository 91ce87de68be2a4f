"""
Models Package

Exports all models for easy importing.
"""

from storefront.models.user import User, Role
from storefront.models.product import Product
from storefront.models.favorite import Favorite
from storefront.models.cart import CartItem
from storefront.models.session import SessionRecord

__all__ = ['User', 'Role', 'Product', 'Favorite', 'CartItem', 'SessionRecord']
