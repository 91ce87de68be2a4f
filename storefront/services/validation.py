"""
Request Validation

Helpers that collect field-level errors and raise a single
``ValidationError`` carrying all of them.
"""

from decimal import Decimal, InvalidOperation

from email_validator import validate_email, EmailNotValidError
from flask import request

from storefront.errors import ValidationError

PASSWORD_MIN_LENGTH = 8
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
# products.price is NUMERIC(10, 2)
MAX_PRICE = Decimal('100000000')


def json_body():
    """Return the request body as a dict, or raise ``ValidationError``."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def normalize_email(value):
    """Return the canonical, lower-cased form of ``value``, or None if invalid."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        info = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return None
    return info.normalized.lower()


class FieldErrors:
    """Accumulates ``{field, message}`` entries."""

    def __init__(self):
        self.errors = []

    def add(self, field, message):
        self.errors.append({'field': field, 'message': message})

    def __bool__(self):
        return bool(self.errors)

    def raise_if_any(self, message='Invalid data'):
        if self.errors:
            raise ValidationError(message, errors=self.errors)


def text_field(payload, field, errors, min_length=None, max_length=None, required=True):
    value = payload.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            errors.add(field, f'{field} is required')
        return None
    if not isinstance(value, str):
        errors.add(field, f'{field} must be a string')
        return None
    value = value.strip()
    if min_length is not None and len(value) < min_length:
        errors.add(field, f'{field} must be at least {min_length} characters long')
    elif max_length is not None and len(value) > max_length:
        errors.add(field, f'{field} must be at most {max_length} characters long')
    return value


def email_field(payload, errors, field='email'):
    email = normalize_email(payload.get(field))
    if email is None:
        errors.add(field, 'A valid email address is required')
    return email


def password_field(payload, errors, min_length=None, field='password'):
    password = payload.get(field)
    if not isinstance(password, str) or not password:
        errors.add(field, 'Password is required')
        return None
    if min_length is not None and len(password) < min_length:
        errors.add(field, f'Password must be at least {min_length} characters long')
    return password


def price_field(payload, errors, field='price'):
    value = payload.get(field)
    if value is None or isinstance(value, bool) or value == '':
        errors.add(field, 'price is required')
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        errors.add(field, 'price must be a number')
        return None
    if not price.is_finite() or price < 0:
        errors.add(field, 'price must be a non-negative number')
        return None
    if price >= MAX_PRICE:
        errors.add(field, f'price must be lower than {MAX_PRICE}')
        return None
    return price.quantize(Decimal('0.01'))
