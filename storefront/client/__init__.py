"""
Storefront Client

Python counterpart of the browser application: an HTTP client for the
JSON API and an explicit state object mirroring the user's favorites and
cart.
"""

from storefront.client.api import ApiClient, ClientError
from storefront.client.store import StorefrontStore, StoreError

__all__ = ['ApiClient', 'ClientError', 'StorefrontStore', 'StoreError']
