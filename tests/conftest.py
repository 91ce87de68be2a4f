import pytest
import requests
from flask import g, has_app_context
from flask.testing import FlaskClient
from requests.structures import CaseInsensitiveDict
from urllib.parse import urlsplit

from storefront import create_app
from storefront.config import TestConfig
from storefront.extensions import db
from storefront.models import User, Role
from storefront.services.catalog import ensure_default_products
from storefront.services.credentials import hash_password

CSRF_ERROR_CODE = 'csrf_invalid'
PASSWORD = 'password1'


class IsolatedRequestClient(FlaskClient):
    """Test client that gives every request an empty ``flask.g``.

    Tests hold one application context open for database access, and a
    request pushed inside it shares that context. Values cached on ``g``
    (the loaded user, the CSRF token) must not carry over from one request
    or client to the next, just as they would not on a real server.
    """

    def open(self, *args, **kwargs):
        if not has_app_context():
            return super().open(*args, **kwargs)
        outer = {name: g.pop(name) for name in list(g)}
        try:
            return super().open(*args, **kwargs)
        finally:
            for name in list(g):
                g.pop(name)
            for name, value in outer.items():
                setattr(g, name, value)


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    app.test_client_class = IsolatedRequestClient
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


class JsonApi:
    """Test client wrapper that sends JSON and echoes the CSRF token."""

    def __init__(self, client):
        self.client = client
        self.csrf_token = None

    def refresh_csrf(self):
        self.csrf_token = self.client.get('/api/csrf-token').get_json()['csrfToken']
        return self.csrf_token

    def get(self, url):
        return self.client.get(url)

    def _mutate(self, method, url, body=None):
        if self.csrf_token is None:
            self.refresh_csrf()
        r = self.client.open(url, method=method, json=body, headers={'X-CSRF-Token': self.csrf_token})
        if r.status_code == 403 and (r.get_json() or {}).get('code') == CSRF_ERROR_CODE:
            self.refresh_csrf()
            r = self.client.open(url, method=method, json=body, headers={'X-CSRF-Token': self.csrf_token})
        return r

    def post(self, url, body=None):
        return self._mutate('POST', url, body)

    def put(self, url, body=None):
        return self._mutate('PUT', url, body)

    def delete(self, url, body=None):
        return self._mutate('DELETE', url, body)

    def login(self, email, password=PASSWORD):
        return self.post('/api/auth/login', {'email': email, 'password': password})

    def logout(self):
        return self.post('/api/auth/logout')


@pytest.fixture()
def api(client):
    return JsonApi(client)


@pytest.fixture()
def make_api(app):
    """A fresh API client with its own cookie jar."""
    def _make_api():
        return JsonApi(app.test_client())
    return _make_api


@pytest.fixture()
def make_user(app):
    def _make_user(email, password=PASSWORD, role=Role.USER, is_active=True,
                   first_name='Jane', last_name='Doe'):
        user = User(email=email, password_hash=hash_password(password), first_name=first_name,
                    last_name=last_name, role=Role(role).value, is_active=is_active)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture()
def products(app):
    ensure_default_products()


@pytest.fixture()
def user(make_user):
    return make_user('shopper@example.com')


@pytest.fixture()
def admin(make_user):
    return make_user('boss@example.com', role=Role.ADMIN, first_name='Ada', last_name='Admin')


@pytest.fixture()
def user_api(api, user):
    assert api.login(user.email).status_code == 200
    return api


@pytest.fixture()
def admin_api(api, admin):
    assert api.login(admin.email).status_code == 200
    return api


class FlaskAdapter(requests.adapters.BaseAdapter):
    """Route ``requests`` traffic into a Flask test client.

    Cookies are kept by the test client, so the session behaves as it
    would in a browser.
    """

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()
        self.sent = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        path = parts.path + ('?' + parts.query if parts.query else '')
        headers = {k: v for k, v in request.headers.items()
                   if k.lower() not in ('content-length', 'cookie', 'host')}
        self.sent.append((request.method, path))
        resp = self.client.open(path, method=request.method, headers=headers, data=request.body,
                                base_url=f'{parts.scheme}://{parts.netloc}')

        response = requests.Response()
        response.status_code = resp.status_code
        response.reason = resp.status
        response.headers = CaseInsensitiveDict(resp.headers.items())
        response._content = resp.get_data()
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


@pytest.fixture()
def transport(app):
    return FlaskAdapter(app)


@pytest.fixture()
def http(transport):
    session = requests.Session()
    session.mount('http://testserver', transport)
    session.mount('https://testserver', transport)
    return session
