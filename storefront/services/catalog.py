"""
Catalog Services
"""

import logging

from sqlalchemy.exc import IntegrityError

from storefront.errors import ConflictError, NotFound
from storefront.extensions import db
from storefront.models import Product
from storefront.services.validation import FieldErrors, text_field, price_field

logger = logging.getLogger(__name__)

DUPLICATE_PRODUCT_MESSAGE = 'A product with this name already exists'

DEFAULT_PRODUCTS = [
    {'name': 'Air Jordan 1 Retro High', 'brand': 'NIKE', 'description': 'Chicago - Red/White/Black',
     'price': '179.00', 'image_emoji': '👟', 'sizes': '38-46'},
    {'name': 'Yeezy Boost 350 V2', 'brand': 'ADIDAS', 'description': 'Zebra - White/Black',
     'price': '249.00', 'image_emoji': '🏃', 'sizes': '36-45'},
    {'name': 'Air Max 90', 'brand': 'NIKE', 'description': 'Triple White',
     'price': '129.00', 'image_emoji': '⚡', 'sizes': '37-47'},
]


def list_products(newest_first=False):
    query = Product.query
    if newest_first:
        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return query.order_by(Product.id).all()


def get_product_by_name(name):
    """Look a product up by its (unique) name or raise ``NotFound``."""
    product = Product.query.filter_by(name=name).first()
    if product is None:
        raise NotFound('Product not found')
    return product


def validate_product(payload):
    errors = FieldErrors()
    name = text_field(payload, 'name', errors, max_length=255)
    brand = text_field(payload, 'brand', errors, max_length=100)
    description = text_field(payload, 'description', errors, required=False)
    price = price_field(payload, errors)
    image_emoji = text_field(payload, 'imageEmoji', errors, max_length=10, required=False)
    sizes = text_field(payload, 'sizes', errors, max_length=50, required=False)
    errors.raise_if_any()
    return {
        'name': name,
        'brand': brand,
        'description': description,
        'price': price,
        'image_emoji': image_emoji,
        'sizes': sizes,
    }


def add_product(payload):
    """Create a catalog entry. Names must be unique since URLs look products up by name."""
    fields = validate_product(payload)
    if Product.query.filter_by(name=fields['name']).first() is not None:
        raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)
    product = Product(**fields)
    db.session.add(product)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(DUPLICATE_PRODUCT_MESSAGE)
    logger.info('Added product %s (%s)', product.id, product.name)
    return product


def ensure_default_products():
    """Insert the default catalog entries that are missing."""
    created = 0
    for entry in DEFAULT_PRODUCTS:
        if Product.query.filter_by(name=entry['name']).first() is None:
            db.session.add(Product(**entry))
            created += 1
    db.session.commit()
    return created
