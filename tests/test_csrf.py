from storefront.csrf import issue_token, verify_token


def test_mutating_request_without_token_is_rejected(client):
    r = client.post('/api/auth/login', json={'email': 'a@example.com', 'password': 'password1'})
    assert r.status_code == 403
    data = r.get_json()
    assert data['success'] is False
    assert data['code'] == 'csrf_invalid'


def test_same_request_succeeds_after_fetching_token(client, user):
    body = {'email': user.email, 'password': 'password1'}
    assert client.post('/api/auth/login', json=body).status_code == 403

    token = client.get('/api/csrf-token').get_json()['csrfToken']
    r = client.post('/api/auth/login', json=body, headers={'X-CSRF-Token': token})
    assert r.status_code == 200


def test_token_from_another_session_is_rejected(app, user):
    first = app.test_client()
    second = app.test_client()
    token = first.get('/api/csrf-token').get_json()['csrfToken']
    second.get('/api/csrf-token')

    r = second.post('/api/auth/login', json={'email': user.email, 'password': 'password1'},
                    headers={'X-CSRF-Token': token})
    assert r.status_code == 403


def test_forged_token_is_rejected(client, user):
    client.get('/api/csrf-token')
    r = client.post('/api/auth/login', json={'email': user.email, 'password': 'password1'},
                    headers={'X-CSRF-Token': 'forged'})
    assert r.status_code == 403
    assert r.get_json()['code'] == 'csrf_invalid'


def test_safe_methods_bypass_guard(client, products):
    assert client.get('/api/products').status_code == 200


def test_alternate_header_name_is_accepted(client, user):
    token = client.get('/api/csrf-token').get_json()['csrfToken']
    r = client.post('/api/auth/login', json={'email': user.email, 'password': 'password1'},
                    headers={'X-CSRFToken': token})
    assert r.status_code == 200


def test_token_survives_login(api, user):
    token = api.refresh_csrf()
    api.login(user.email)
    assert api.csrf_token == token

    r = api.client.post('/api/auth/logout', headers={'X-CSRF-Token': token})
    assert r.status_code == 200


def test_token_is_invalid_after_logout(api, user):
    api.login(user.email)
    token = api.csrf_token
    api.logout()

    r = api.client.post('/api/auth/login', json={'email': user.email, 'password': 'password1'},
                        headers={'X-CSRF-Token': token})
    assert r.status_code == 403


def test_issue_and_verify_helpers(app):
    with app.test_request_context('/'):
        token = issue_token()
        assert verify_token(token)
        assert not verify_token('nope')
        assert not verify_token(None)
