"""
User Routes

Every route works on ``current_user`` only; there is no way to address
another user's favorites or cart.
"""

from flask import jsonify
from flask_login import login_required, current_user

from storefront.users import users_bp
from storefront.services import favorites as favorites_service
from storefront.services import cart as cart_service


@users_bp.route('/favorites', methods=['GET'])
@login_required
def favorites():
    items = favorites_service.list_favorites(current_user)
    return jsonify(success=True, favorites=items)


@users_bp.route('/favorites/<path:product_name>', methods=['POST'])
@login_required
def toggle_favorite(product_name):
    """Add the product to favorites, or remove it if already there."""
    is_favorite = favorites_service.toggle_favorite(current_user, product_name)
    message = 'Added to favorites' if is_favorite else 'Removed from favorites'
    return jsonify(success=True, message=message, isFavorite=is_favorite)


@users_bp.route('/cart', methods=['GET'])
@login_required
def cart():
    items, total = cart_service.list_cart(current_user)
    return jsonify(success=True, cartItems=items, total=float(total))


@users_bp.route('/cart/<path:product_name>', methods=['POST'])
@login_required
def add_to_cart(product_name):
    quantity = cart_service.add_to_cart(current_user, product_name)
    return jsonify(success=True, message='Added to cart', quantity=quantity)


@users_bp.route('/cart/<path:product_name>', methods=['DELETE'])
@login_required
def remove_from_cart(product_name):
    """Remove the whole cart line, not a single unit."""
    cart_service.remove_from_cart(current_user, product_name)
    return jsonify(success=True, message='Removed from cart')
