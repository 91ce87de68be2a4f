"""
API Client

Thin wrapper over ``requests`` for the storefront JSON API. Mutating
calls carry the session's CSRF token; the token is fetched lazily before
the first such call, and a request rejected for a stale token is retried
exactly once after fetching a fresh one.
"""

import logging
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

SAFE_METHODS = ('GET', 'HEAD', 'OPTIONS')
CSRF_HEADER = 'X-CSRF-Token'
CSRF_ERROR_CODE = 'csrf_invalid'


class ClientError(Exception):
    """Raised when the API answers with an error envelope."""

    def __init__(self, status_code, message, payload=None):
        super().__init__(f'{status_code}: {message}')
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}

    @property
    def code(self):
        return self.payload.get('code')

    @property
    def is_csrf_failure(self):
        return self.status_code == 403 and self.code == CSRF_ERROR_CODE


def _payload(response):
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _is_csrf_rejection(response):
    if response.status_code != 403:
        return False
    data = _payload(response) or {}
    return data.get('code') == CSRF_ERROR_CODE


def _product_path(name):
    return quote(name, safe='')


class ApiClient:
    """Client for the ``/api`` endpoints.

    Args:
        base_url: Server root, e.g. ``http://localhost:3000``.
        http: A ``requests.Session`` (or compatible) to send requests with.
            The session cookie lives in its cookie jar.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, base_url='http://localhost:3000', http=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.http = http if http is not None else requests.Session()
        self.http.headers.setdefault('Accept', 'application/json')
        self.timeout = timeout
        self.csrf_token = None

    def _url(self, endpoint):
        return f'{self.base_url}/api{endpoint}'

    def init_csrf(self):
        """Fetch a CSRF token bound to the current session."""
        response = self.http.get(self._url('/csrf-token'), timeout=self.timeout)
        data = _payload(response)
        if not response.ok or not data or not data.get('csrfToken'):
            raise ClientError(response.status_code, 'CSRF token not received', data)
        self.csrf_token = data['csrfToken']
        return self.csrf_token

    def _send(self, method, endpoint, body):
        headers = {}
        if method not in SAFE_METHODS:
            # Over HTTPS the CSRF check also requires a same-origin Referer
            headers['Referer'] = f'{self.base_url}/'
            if self.csrf_token:
                headers[CSRF_HEADER] = self.csrf_token
        return self.http.request(
            method, self._url(endpoint), json=body, headers=headers, timeout=self.timeout
        )

    def request(self, method, endpoint, body=None):
        """Send a request and return the decoded JSON body.

        Raises:
            ClientError: on any non-2xx answer (after the single CSRF retry).
        """
        method = method.upper()
        mutating = method not in SAFE_METHODS
        if mutating and self.csrf_token is None:
            self.init_csrf()

        response = self._send(method, endpoint, body)
        if mutating and _is_csrf_rejection(response):
            logger.info('CSRF token rejected for %s %s, refreshing and retrying once', method, endpoint)
            self.csrf_token = None
            self.init_csrf()
            response = self._send(method, endpoint, body)

        if response.status_code == 204:
            return {'success': True}
        data = _payload(response)
        if not response.ok:
            message = (data or {}).get('message') or f'HTTP {response.status_code}'
            raise ClientError(response.status_code, message, data)
        if data is None:
            raise ClientError(response.status_code, 'Invalid JSON response')
        return data

    # Auth
    def login(self, email, password):
        return self.request('POST', '/auth/login', {'email': email, 'password': password})

    def register(self, email, password, first_name, last_name):
        return self.request('POST', '/auth/register', {
            'email': email,
            'password': password,
            'firstName': first_name,
            'lastName': last_name,
        })

    def logout(self):
        return self.request('POST', '/auth/logout')

    def verify_session(self):
        return self.request('GET', '/auth/verify')

    # Catalog
    def products(self):
        return self.request('GET', '/products')

    # Favorites
    def favorites(self):
        return self.request('GET', '/users/favorites')

    def toggle_favorite(self, product_name):
        return self.request('POST', f'/users/favorites/{_product_path(product_name)}')

    # Cart
    def cart(self):
        return self.request('GET', '/users/cart')

    def add_to_cart(self, product_name):
        return self.request('POST', f'/users/cart/{_product_path(product_name)}')

    def remove_from_cart(self, product_name):
        return self.request('DELETE', f'/users/cart/{_product_path(product_name)}')

    # Admin
    def admin_users(self):
        return self.request('GET', '/admin/users')

    def update_user(self, user_id, **changes):
        return self.request('PUT', f'/admin/users/{int(user_id)}', changes)

    def delete_user(self, user_id):
        return self.request('DELETE', f'/admin/users/{int(user_id)}')

    def stats(self):
        return self.request('GET', '/admin/stats')

    def admin_products(self):
        return self.request('GET', '/admin/products')

    def add_product(self, name, brand, price, description=None, image_emoji=None, sizes=None):
        return self.request('POST', '/admin/products', {
            'name': name,
            'brand': brand,
            'price': price,
            'description': description,
            'imageEmoji': image_emoji,
            'sizes': sizes,
        })
