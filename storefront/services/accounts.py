"""
Account Services

Registration, login and logout. Session establishment goes through
Flask-Login so the authenticated user id ends up in the server-side
session payload.
"""

import logging

from flask import session
from flask_login import login_user, logout_user
from sqlalchemy.exc import IntegrityError

from storefront.errors import ConflictError, InvalidCredentials
from storefront.extensions import db
from storefront.models import User, Role
from storefront.services.credentials import hash_password, verify_password, burn_verification
from storefront.services.validation import (
    FieldErrors, email_field, password_field, text_field,
    PASSWORD_MIN_LENGTH, NAME_MIN_LENGTH, NAME_MAX_LENGTH,
)

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT_MESSAGE = 'An account with this email already exists'


def validate_registration(payload):
    """Return (email, password, first_name, last_name) or raise ``ValidationError``."""
    errors = FieldErrors()
    email = email_field(payload, errors)
    password = password_field(payload, errors, min_length=PASSWORD_MIN_LENGTH)
    first_name = text_field(payload, 'firstName', errors, NAME_MIN_LENGTH, NAME_MAX_LENGTH)
    last_name = text_field(payload, 'lastName', errors, NAME_MIN_LENGTH, NAME_MAX_LENGTH)
    errors.raise_if_any()
    return email, password, first_name, last_name


def validate_login(payload):
    errors = FieldErrors()
    email = email_field(payload, errors)
    password = password_field(payload, errors)
    errors.raise_if_any()
    return email, password


def find_user_by_email(email):
    return User.query.filter_by(email=email).first()


def create_user(email, password, first_name, last_name, role=Role.USER):
    """Insert a new account. Raises ``ConflictError`` if the email is taken."""
    if find_user_by_email(email) is not None:
        raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=Role(role).value,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email
        db.session.rollback()
        raise ConflictError(DUPLICATE_ACCOUNT_MESSAGE)
    return user


def establish_session(user):
    """Bind ``user`` to the current session and rotate the session id."""
    login_user(user)
    rotate = getattr(session, 'rotate', None)
    if rotate is not None:
        rotate()


def register(payload):
    """Validate, create the account and log it in."""
    email, password, first_name, last_name = validate_registration(payload)
    user = create_user(email, password, first_name, last_name)
    establish_session(user)
    logger.info('Registered user %s', user.id, extra={'user_id': user.id})
    return user


def authenticate(email, password):
    """Return the active user matching the credentials.

    Unknown email, wrong password and disabled account all raise the same
    ``InvalidCredentials`` error so the response does not reveal which
    accounts exist.
    """
    user = find_user_by_email(email)
    if user is None:
        burn_verification(password)
        raise InvalidCredentials()
    if not verify_password(user.password_hash, password):
        raise InvalidCredentials()
    if not user.is_active:
        logger.info('Login refused for disabled account %s', user.id, extra={'user_id': user.id})
        raise InvalidCredentials()
    return user


def login(payload):
    email, password = validate_login(payload)
    try:
        user = authenticate(email, password)
    except InvalidCredentials:
        logger.info('Failed login attempt for %s', email)
        raise
    establish_session(user)
    logger.info('User %s logged in', user.id, extra={'user_id': user.id})
    return user


def logout():
    """Drop the authenticated identity and the whole session payload."""
    logout_user()
    session.clear()
