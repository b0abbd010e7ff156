"""
Per-user wishlist keyed by product id.

Adding overwrites, removing deletes; neither reports "already exists" or
"missing".
"""
import logging
from datetime import datetime

from storefront import db
from storefront.models import WishlistItem, Product
from storefront.services.error_handler import ErrorCategory, with_error_handling

logger = logging.getLogger(__name__)


def _get(user_id, product_id):
    return WishlistItem.query.filter_by(user_id=user_id, product_id=product_id).first()


@with_error_handling(ErrorCategory.WISHLIST, preserve_integrity=True)
def add_to_wishlist(user_id, product):
    item = _get(user_id, product.id)
    if item is None:
        item = WishlistItem(user_id=user_id, product_id=product.id)
        db.session.add(item)

    item.name = product.name
    item.price = product.price
    item.image = product.image
    item.category = product.category
    item.added_at = datetime.utcnow()

    logger.info(f'Product {product.id} added to wishlist', extra={
        'event_type': 'wishlist_add',
        'user_id': user_id,
        'product_id': product.id,
    })
    return item


@with_error_handling(ErrorCategory.WISHLIST, preserve_integrity=True)
def remove_from_wishlist(user_id, product_id):
    deleted = WishlistItem.query.filter_by(user_id=user_id, product_id=product_id).delete()
    logger.info(f'Product {product_id} removed from wishlist', extra={
        'event_type': 'wishlist_remove',
        'user_id': user_id,
        'product_id': product_id,
        'deleted': deleted,
    })
    return deleted > 0


def is_in_wishlist(user_id, product_id):
    return _get(user_id, product_id) is not None


def wishlisted_product_ids(user_id, product_ids):
    """One query for the wishlist state of a page of product cards."""
    product_ids = list(product_ids)
    if not product_ids:
        return set()
    rows = (
        db.session.query(WishlistItem.product_id)
        .filter(WishlistItem.user_id == user_id, WishlistItem.product_id.in_(product_ids))
        .all()
    )
    return {row.product_id for row in rows}


def toggle_wishlist(user_id, product):
    """Returns True when the product ends up in the wishlist."""
    if is_in_wishlist(user_id, product.id):
        remove_from_wishlist(user_id, product.id)
        return False
    add_to_wishlist(user_id, product)
    return True


def list_wishlist(user_id):
    """Wishlist entries whose product still exists, newest first."""
    return (
        db.session.query(WishlistItem, Product)
        .join(Product, Product.id == WishlistItem.product_id)
        .filter(WishlistItem.user_id == user_id)
        .order_by(WishlistItem.added_at.desc(), WishlistItem.id.desc())
        .all()
    )
