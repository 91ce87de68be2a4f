"""
Auth Routes

JSON endpoints for account registration and session management.
"""

from flask import jsonify
from flask_login import login_required, current_user

from storefront.auth import auth_bp
from storefront.services import accounts
from storefront.services.validation import json_body


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and log it in"""
    user = accounts.register(json_body())
    return jsonify(success=True, message='Account created', user=user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Log in with email and password"""
    user = accounts.login(json_body())
    return jsonify(success=True, message='Logged in', user=user.to_dict())


@auth_bp.route('/verify', methods=['GET'])
@login_required
def verify():
    """Return the user bound to the current session"""
    return jsonify(success=True, user=current_user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Destroy the session and clear its cookie"""
    accounts.logout()
    return jsonify(success=True, message='Logged out')
