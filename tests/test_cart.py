from urllib.parse import quote

from storefront.extensions import db
from storefront.models import CartItem, Product

JORDAN = 'Air Jordan 1 Retro High'


def cart_url(name):
    return '/api/users/cart/' + quote(name, safe='')


def test_adding_n_times_yields_single_row_with_quantity_n(user_api, user, products):
    for expected in range(1, 5):
        r = user_api.post(cart_url(JORDAN))
        assert r.status_code == 200
        assert r.get_json()['quantity'] == expected

    rows = CartItem.query.filter_by(user_id=user.id).all()
    assert len(rows) == 1
    assert rows[0].quantity == 4


def test_remove_deletes_whole_line(user_api, user, products):
    for _ in range(3):
        user_api.post(cart_url(JORDAN))

    r = user_api.delete(cart_url(JORDAN))
    assert r.status_code == 200
    assert CartItem.query.filter_by(user_id=user.id).count() == 0


def test_cart_lists_items_with_product_details_and_total(user_api, products):
    user_api.post(cart_url(JORDAN))
    user_api.post(cart_url(JORDAN))
    user_api.post(cart_url('Air Max 90'))

    data = user_api.get('/api/users/cart').get_json()
    items = {item['name']: item for item in data['cartItems']}
    assert items[JORDAN]['quantity'] == 2
    assert items[JORDAN]['brand'] == 'NIKE'
    assert items['Air Max 90']['quantity'] == 1
    assert data['total'] == 179.0 * 2 + 129.0


def test_cart_is_private_to_its_owner(api, make_user, products):
    make_user('first@example.com')
    make_user('second@example.com')

    api.login('first@example.com')
    api.post(cart_url(JORDAN))
    api.logout()

    api.login('second@example.com')
    data = api.get('/api/users/cart').get_json()
    assert data['cartItems'] == []
    assert data['total'] == 0


def test_unknown_product_is_not_found(user_api, products):
    assert user_api.post(cart_url('Ghost Runner')).status_code == 404
    assert user_api.delete(cart_url('Ghost Runner')).status_code == 404


def test_removing_absent_line_is_harmless(user_api, products):
    r = user_api.delete(cart_url(JORDAN))
    assert r.status_code == 200


def test_cart_requires_login(api, products):
    assert api.get('/api/users/cart').status_code == 401
    assert api.post(cart_url(JORDAN)).status_code == 401
    assert api.delete(cart_url(JORDAN)).status_code == 401


def test_deleting_product_cascades_to_cart_lines(user_api, products):
    user_api.post(cart_url(JORDAN))
    product = Product.query.filter_by(name=JORDAN).one()
    db.session.delete(product)
    db.session.commit()

    assert CartItem.query.count() == 0
    assert user_api.get('/api/users/cart').get_json()['cartItems'] == []
