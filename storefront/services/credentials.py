"""
Credential Store

Slow, salted password hashing via werkzeug.security. Verification goes
through ``check_password_hash``, which compares digests in constant time.
"""

from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

DEFAULT_METHOD = 'pbkdf2:sha256'

# Hashed once per method so unknown-account logins cost the same as real ones
_dummy_hashes = {}


def _method():
    return current_app.config.get('PASSWORD_HASH_METHOD', DEFAULT_METHOD)


def hash_password(password):
    """Return a salted hash of ``password`` (never store the plaintext)."""
    return generate_password_hash(password, method=_method())


def verify_password(password_hash, password):
    """Check ``password`` against a stored hash."""
    if not password_hash or password is None:
        return False
    return check_password_hash(password_hash, password)


def burn_verification(password):
    """Spend the same work as ``verify_password`` against a throwaway hash."""
    method = _method()
    if method not in _dummy_hashes:
        _dummy_hashes[method] = generate_password_hash('not-a-real-password', method=method)
    check_password_hash(_dummy_hashes[method], password or '')
    return False
