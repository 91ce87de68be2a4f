"""
Configuration settings for the SneakZone storefront
"""
import logging
import os


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Flask application configuration"""

    # Flask secret key for sessions and CSRF token signing
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'sneakzone.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server-side sessions (rolling idle timeout)
    SESSION_IDLE_MINUTES = int(os.environ.get('SESSION_IDLE_MINUTES', 30))
    SESSION_COOKIE_NAME = 'storefront_sid'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = os.environ.get('STOREFRONT_ENV') == 'production'
    SESSION_PURGE_INTERVAL_SECONDS = int(os.environ.get('SESSION_PURGE_INTERVAL_SECONDS', 300))

    # CSRF tokens live as long as the session that issued them
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

    # Password hashing (werkzeug.security)
    PASSWORD_HASH_METHOD = os.environ.get('PASSWORD_HASH_METHOD') or 'pbkdf2:sha256'

    # Rate limiting
    RATE_LIMIT_ENABLED = True
    RATE_LIMIT_WINDOW_SECONDS = 15 * 60
    AUTH_RATE_LIMIT = 10
    API_RATE_LIMIT = 200

    # JSON bodies are small
    MAX_CONTENT_LENGTH = 10 * 1024

    # Default data
    SEED_DEFAULT_DATA = _env_flag('SEED_DEFAULT_DATA', True)
    DEFAULT_ADMIN_EMAIL = os.environ.get('DEFAULT_ADMIN_EMAIL') or 'admin@sneakzone.com'
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD') or '#Adm1nSneakZone97!'

    # Logging
    LOG_LEVEL = getattr(logging, (os.environ.get('LOG_LEVEL') or 'INFO').upper(), logging.INFO)
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(basedir, 'logs')
    LOG_TO_FILE = _env_flag('LOG_TO_FILE', True)


class ProductionConfig(Config):
    """Production configuration"""
    SESSION_COOKIE_SECURE = True


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'
    SEED_DEFAULT_DATA = False
    DEFAULT_ADMIN_PASSWORD = 'admin-password'
    LOG_TO_FILE = False
    LOG_LEVEL = logging.WARNING
