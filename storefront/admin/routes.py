"""
Admin Routes
"""

from flask import jsonify
from flask_login import current_user

from storefront.admin import admin_bp
from storefront.admin.decorators import admin_required
from storefront.services import admin as admin_service
from storefront.services import catalog as catalog_service
from storefront.services.validation import json_body


@admin_bp.route('/users', methods=['GET'])
@admin_required
def users():
    return jsonify(success=True, users=[u.to_dict() for u in admin_service.get_users()])


@admin_bp.route('/stats', methods=['GET'])
@admin_required
def stats():
    return jsonify(success=True, stats=admin_service.get_stats())


@admin_bp.route('/users/<int:user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    """Change another user's role and/or active flag; other fields are ignored."""
    user = admin_service.update_user(current_user, user_id, json_body())
    return jsonify(success=True, message='User updated', user=user.to_dict())


@admin_bp.route('/users/<int:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    admin_service.delete_user(current_user, user_id)
    return jsonify(success=True, message='User deleted')


@admin_bp.route('/products', methods=['GET'])
@admin_required
def products():
    items = catalog_service.list_products(newest_first=True)
    return jsonify(success=True, products=[p.to_dict() for p in items])


@admin_bp.route('/products', methods=['POST'])
@admin_required
def add_product():
    product = catalog_service.add_product(json_body())
    return jsonify(success=True, message='Product added', product=product.to_dict()), 201
