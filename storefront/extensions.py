"""
Flask Extensions

Shared extension instances, bound to the application in ``create_app``.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

from storefront.ratelimit import RateLimiter

# Database instance
db = SQLAlchemy()

# Login manager for the authenticated identity carried by the session
login_manager = LoginManager()

# Anti-forgery tokens for every state-mutating request
csrf = CSRFProtect()

# Request throttling for the JSON API
limiter = RateLimiter()
