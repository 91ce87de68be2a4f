"""
Services Package

Exports all services for easy importing.
"""

from storefront.services.accounts import register, login, logout, authenticate, establish_session
from storefront.services.catalog import list_products, get_product_by_name, add_product
from storefront.services.favorites import list_favorites, toggle_favorite
from storefront.services.cart import list_cart, add_to_cart, remove_from_cart
from storefront.services.admin import get_users, get_stats, update_user, delete_user, ensure_admin

__all__ = [
    'register',
    'login',
    'logout',
    'authenticate',
    'establish_session',
    'list_products',
    'get_product_by_name',
    'add_product',
    'list_favorites',
    'toggle_favorite',
    'list_cart',
    'add_to_cart',
    'remove_from_cart',
    'get_users',
    'get_stats',
    'update_user',
    'delete_user',
    'ensure_admin',
]
