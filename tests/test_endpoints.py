import storefront.csrf  # noqa: F401
from storefront import create_app
from storefront.config import TestConfig


def test_products_are_public(client, products):
    r = client.get('/api/products')
    assert r.status_code == 200
    data = r.get_json()
    assert data['success'] is True
    names = [p['name'] for p in data['products']]
    assert names == ['Air Jordan 1 Retro High', 'Yeezy Boost 350 V2', 'Air Max 90']
    first = data['products'][0]
    assert first['brand'] == 'NIKE'
    assert first['price'] == 179.0
    assert first['sizes'] == '38-46'


def test_unknown_api_route_returns_json_404(client):
    r = client.get('/api/does-not-exist')
    assert r.status_code == 404
    assert r.is_json
    assert r.get_json()['success'] is False


def test_root_serves_application_shell(client):
    r = client.get('/')
    assert r.status_code == 200
    assert r.mimetype == 'text/html'


def test_client_side_routes_fall_back_to_shell(client):
    r = client.get('/admin/dashboard')
    assert r.status_code == 200
    assert r.mimetype == 'text/html'
    assert b'<html' in r.get_data().lower()


def test_wrong_method_on_api_is_json(client):
    r = client.get('/api/auth/login')
    assert r.status_code == 405
    assert r.get_json()['success'] is False


def test_oversized_body_is_rejected(api, app):
    api.refresh_csrf()
    big = {'email': 'x@example.com', 'password': 'p' * (app.config['MAX_CONTENT_LENGTH'] + 1)}
    r = api.post('/api/auth/login', big)
    assert r.status_code == 413


def test_factory_builds_more_than_one_app(app):
    second = create_app(TestConfig)
    assert second is not app

    client = second.test_client()
    r = client.post('/api/auth/login', json={'email': 'a@example.com', 'password': 'password1'})
    assert r.status_code == 403
    assert r.get_json()['code'] == 'csrf_invalid'
    assert client.get('/api/csrf-token').status_code == 200
