"""
Client-side Store

Mirror of the signed-in user's server state. The server stays the source
of truth: the maps are refreshed wholesale on sign-in and only change
after the server has confirmed a mutation.
"""

import logging
from decimal import Decimal

from storefront.client.api import ApiClient, ClientError

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store operation was refused before reaching the server."""


def _price(value):
    try:
        return Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        return Decimal('0')


class StorefrontStore:
    """Current user plus favorites and cart maps keyed by product name."""

    def __init__(self, api=None):
        self.api = api if api is not None else ApiClient()
        self.user = None
        self.favorites = {}
        self.cart = {}

    # Session

    @property
    def is_authenticated(self):
        return self.user is not None

    @property
    def is_admin(self):
        return bool(self.user) and self.user.get('role') == 'admin'

    def init(self):
        """Restore state for an existing session, if any."""
        self.api.init_csrf()
        try:
            self.user = self.api.verify_session()['user']
        except ClientError as e:
            if e.status_code != 401:
                raise
            self.reset()
            return False
        self.load_user_data()
        return True

    def login(self, email, password):
        self.user = self.api.login(email, password)['user']
        self.load_user_data()
        return self.user

    def register(self, email, password, first_name, last_name):
        self.user = self.api.register(email, password, first_name, last_name)['user']
        self.load_user_data()
        return self.user

    def logout(self):
        try:
            self.api.logout()
        finally:
            self.reset()

    def reset(self):
        self.user = None
        self.favorites.clear()
        self.cart.clear()

    def load_user_data(self):
        """Replace both maps with the server's current view."""
        favorites = self.api.favorites().get('favorites', [])
        cart_items = self.api.cart().get('cartItems', [])

        self.favorites = {item['name']: dict(item) for item in favorites}
        self.cart = {
            item['name']: {
                'name': item['name'],
                'price': _price(item.get('price')),
                'quantity': int(item.get('quantity') or 1),
            }
            for item in cart_items
        }

    def _require_user(self, action):
        if not self.is_authenticated:
            raise StoreError(f'Log in to {action}')

    # Favorites

    def is_favorite(self, product_name):
        return product_name in self.favorites

    def toggle_favorite(self, product):
        """Toggle ``product`` (a product dict from the catalog) on the server."""
        self._require_user('manage favorites')
        name = product['name']
        response = self.api.toggle_favorite(name)
        if response['isFavorite']:
            self.favorites[name] = dict(product)
        else:
            self.favorites.pop(name, None)
        return response['isFavorite']

    @property
    def favorites_count(self):
        return len(self.favorites)

    # Cart

    def add_to_cart(self, product):
        self._require_user('add to the cart')
        name = product['name']
        response = self.api.add_to_cart(name)
        line = self.cart.get(name)
        if line is None:
            line = self.cart[name] = {'name': name, 'price': _price(product.get('price')), 'quantity': 0}
        line['quantity'] = response.get('quantity', line['quantity'] + 1)
        return line['quantity']

    def remove_from_cart(self, product_name):
        self._require_user('change the cart')
        self.api.remove_from_cart(product_name)
        self.cart.pop(product_name, None)

    @property
    def cart_count(self):
        return sum(line['quantity'] for line in self.cart.values())

    @property
    def cart_total(self):
        return sum((line['price'] * line['quantity'] for line in self.cart.values()), Decimal('0.00'))

    def checkout(self):
        """Simulated checkout: no payment, the cart is emptied on the server.

        Returns:
            The total that would have been charged.
        """
        self._require_user('check out')
        if not self.cart:
            raise StoreError('Your cart is empty')
        total = self.cart_total
        for name in list(self.cart):
            self.remove_from_cart(name)
        logger.info('Simulated checkout of %s', total)
        return total
