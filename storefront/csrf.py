"""
CSRF Guard

Flask-WTF issues a per-session secret and rejects POST/PUT/PATCH/DELETE
requests that do not echo a matching signed token in the ``X-CSRF-Token``
(or ``X-CSRFToken``) header. Read-only methods are never checked.
"""

from flask import Blueprint, jsonify
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms import ValidationError as TokenError

csrf_bp = Blueprint('csrf', __name__)


def issue_token():
    """Return a token bound to the current session, creating its secret if needed."""
    return generate_csrf()


def verify_token(token):
    """Check ``token`` against the current session's secret."""
    try:
        validate_csrf(token)
    except TokenError:
        return False
    return True


@csrf_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify(success=True, csrfToken=issue_token())
