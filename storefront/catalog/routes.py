"""
Catalog Routes

Public product listing.
"""

from flask import jsonify

from storefront.catalog import catalog_bp
from storefront.services.catalog import list_products


@catalog_bp.route('/products', methods=['GET'])
def products():
    return jsonify(success=True, products=[p.to_dict() for p in list_products()])
