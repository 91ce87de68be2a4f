"""
Rate Limiting

In-memory sliding-window limiter. State resets on restart and is local
to the process, which matches the single-process deployment model.
"""

import logging
import threading
import time

from flask import g, request

from storefront.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

AUTH_ENDPOINTS = ('/api/auth/login', '/api/auth/register')


class RateLimiter:
    """Sliding-window request counter keyed by arbitrary strings."""

    def __init__(self, clock=time.monotonic, sweep_interval=60):
        self._clock = clock
        self._hits = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._last_sweep = None
        self._longest_window = 0

    def __len__(self):
        return len(self._hits)

    def _prune(self, key, window, now):
        hits = [t for t in self._hits.get(key, ()) if now - t < window]
        if hits:
            self._hits[key] = hits
        else:
            self._hits.pop(key, None)
        return hits

    def _sweep(self, now):
        """Forget every key with no hit inside the longest window in use."""
        if self._last_sweep is not None and now - self._last_sweep < self._sweep_interval:
            return
        self._last_sweep = now
        stale = [key for key, hits in self._hits.items() if now - hits[-1] >= self._longest_window]
        for key in stale:
            del self._hits[key]

    def check(self, key, limit, window):
        """Check whether ``key`` may make another request.

        Returns:
            (allowed, remaining, retry_after) where ``retry_after`` is the
            number of seconds until the oldest recorded hit leaves the window.
        """
        with self._lock:
            now = self._clock()
            self._longest_window = max(self._longest_window, window)
            self._sweep(now)
            hits = self._prune(key, window, now)
            if len(hits) >= limit:
                retry_after = max(0, int(min(hits) + window - now) + 1)
                return False, 0, retry_after
            return True, limit - len(hits), 0

    def hit(self, key):
        """Record one request for ``key``."""
        with self._lock:
            self._hits.setdefault(key, []).append(self._clock())

    def reset(self, key=None):
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def _client_address():
    return request.remote_addr or 'unknown'


def _auth_key():
    payload = request.get_json(silent=True)
    email = None
    if isinstance(payload, dict) and isinstance(payload.get('email'), str):
        email = payload['email'].strip().lower() or None
    return f"auth:{_client_address()}-{email or 'unknown'}"


def init_rate_limits(app, limiter):
    """Install the API throttling hooks on ``app``.

    Every ``/api/`` request counts against a per-address budget. Login and
    registration additionally count failed attempts against a budget keyed
    by address and email. The limiter starts empty for each application
    it is bound to.
    """
    limiter.reset()
    app.extensions['rate_limiter'] = limiter

    @app.before_request
    def throttle_api():
        if not app.config.get('RATE_LIMIT_ENABLED', True):
            return None
        if not request.path.startswith('/api/'):
            return None
        window = app.config['RATE_LIMIT_WINDOW_SECONDS']

        if request.method == 'POST' and request.path in AUTH_ENDPOINTS:
            key = _auth_key()
            allowed, _, retry_after = limiter.check(key, app.config['AUTH_RATE_LIMIT'], window)
            if not allowed:
                logger.warning('Authentication rate limit hit for %s', key)
                raise RateLimitExceeded('Too many login attempts, try again in 15 minutes', retry_after)
            g.auth_rate_key = key

        key = f'api:{_client_address()}'
        allowed, _, retry_after = limiter.check(key, app.config['API_RATE_LIMIT'], window)
        if not allowed:
            logger.warning('API rate limit hit for %s', key)
            raise RateLimitExceeded(retry_after=retry_after)
        limiter.hit(key)
        return None

    @app.after_request
    def record_failed_auth_attempt(response):
        key = g.pop('auth_rate_key', None)
        if key and response.status_code >= 400 and response.status_code != 429:
            limiter.hit(key)
        return response
