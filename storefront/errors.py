"""
API Errors

Every failure reaches the client as the JSON envelope
``{"success": false, "message": ...}``, optionally with ``errors`` (field
level detail) and ``code`` (machine readable reason).
"""

import logging

from flask import jsonify, request, current_app
from flask_wtf.csrf import CSRFError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

CSRF_ERROR_CODE = 'csrf_invalid'


class ApiError(Exception):
    """Base class for errors translated into the JSON error envelope."""
    status_code = 500
    default_message = 'Server error'
    code = None

    def __init__(self, message=None, errors=None, code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.errors = errors
        if code is not None:
            self.code = code

    def to_dict(self):
        payload = {'success': False, 'message': self.message}
        if self.errors:
            payload['errors'] = self.errors
        if self.code:
            payload['code'] = self.code
        return payload


class ValidationError(ApiError):
    status_code = 400
    default_message = 'Invalid data'
    code = 'validation_error'


class ConflictError(ApiError):
    status_code = 400
    default_message = 'Resource already exists'
    code = 'conflict'


class OperationNotPermitted(ApiError):
    status_code = 400
    default_message = 'Operation not permitted on own account'
    code = 'own_account'


class AuthenticationRequired(ApiError):
    status_code = 401
    default_message = 'Authentication required'
    code = 'unauthenticated'


class InvalidCredentials(ApiError):
    status_code = 401
    default_message = 'Invalid email or password'
    code = 'invalid_credentials'


class Forbidden(ApiError):
    status_code = 403
    default_message = 'Administrator access required'
    code = 'forbidden'


class NotFound(ApiError):
    status_code = 404
    default_message = 'Not found'
    code = 'not_found'


class RateLimitExceeded(ApiError):
    status_code = 429
    default_message = 'Too many requests, try again later'
    code = 'rate_limited'

    def __init__(self, message=None, retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


class ServerError(ApiError):
    status_code = 500
    default_message = 'Server error'
    code = 'server_error'


def error_response(error):
    """Build the JSON response for an ``ApiError``."""
    response = jsonify(error.to_dict())
    response.status_code = error.status_code
    retry_after = getattr(error, 'retry_after', None)
    if retry_after is not None:
        response.headers['Retry-After'] = str(int(retry_after))
    return response


def _is_api_request():
    return request.path.startswith('/api/') or request.path == '/api'


def register_error_handlers(app):
    """Translate every failure into the JSON envelope."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return error_response(error)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        logger.warning('CSRF rejection on %s %s: %s', request.method, request.path, error.description)
        return error_response(Forbidden('Invalid CSRF token', code=CSRF_ERROR_CODE))

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        from storefront.extensions import db
        db.session.rollback()
        logger.exception('Storage failure on %s %s', request.method, request.path)
        return error_response(ServerError())

    @app.errorhandler(404)
    def handle_not_found(error):
        if _is_api_request():
            return error_response(NotFound('API route not found'))
        if request.method in ('GET', 'HEAD'):
            return current_app.send_static_file('index.html')
        return error_response(NotFound())

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        api_error = ApiError(error.description)
        api_error.status_code = error.code or 500
        api_error.code = error.name.lower().replace(' ', '_')
        return error_response(api_error)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        from storefront.extensions import db
        db.session.rollback()
        logger.exception('Unhandled error on %s %s', request.method, request.path)
        return error_response(ServerError())
