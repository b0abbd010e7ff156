"""
Catalog browsing, reviews and admin product/category management
"""
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError

from storefront import db
from storefront.models import Product, Category, Review, SavedCartItem
from storefront.services.error_handler import (
    ErrorCategory, ValidationError, NotFoundError, AuthenticationError, with_error_handling,
)

logger = logging.getLogger(__name__)

DEFAULT_RATING = 4
PRODUCT_SORT_FIELDS = ('name', 'price')


def get_product_or_404(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError('Product not found')
    return product


def filter_products(products, category='all', search='', sort_order='asc'):
    """Category + name search, then price sort. Missing prices sort as 0."""
    search = (search or '').lower()
    result = [
        p for p in products
        if (not category or category == 'all' or p.category == category)
        and search in (p.name or '').lower()
    ]
    return sorted(result, key=lambda p: p.price or 0, reverse=(sort_order == 'desc'))


def category_names(products):
    """Distinct non-empty category names in first-seen order."""
    seen = []
    for p in products:
        if p.category and p.category not in seen:
            seen.append(p.category)
    return seen


def is_new_product(created_at, days=30, now=None):
    if not created_at:
        return False
    now = now or datetime.utcnow()
    return now - created_at <= timedelta(days=days)


def related_products(product):
    if not product.category:
        return []
    return (
        Product.query
        .filter(Product.category == product.category, Product.id != product.id)
        .all()
    )


def average_rating(reviews):
    if not reviews:
        return 0
    return sum(r.rating for r in reviews) / len(reviews)


def _parse_rating(value, default):
    if value in (None, ''):
        return default
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return default
    if not 1 <= rating <= 5:
        raise ValidationError('Rating must be between 1 and 5')
    return rating


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def add_review(product_id, user, review_text, rating=5):
    if user is None or not user.is_authenticated:
        raise AuthenticationError('Please login to review.')
    text = (review_text or '').strip()
    if not text:
        raise ValidationError('Review text is required')

    product = get_product_or_404(product_id)
    review = Review(
        product_id=product.id,
        user_id=user.id,
        user_name=user.display_name or user.email,
        rating=_parse_rating(rating, 5),
        review_text=text,
        timestamp=datetime.utcnow(),
    )
    db.session.add(review)
    return review


@with_error_handling(ErrorCategory.CART, preserve_integrity=True)
def save_to_cart(user_id, product_id):
    """Write the product to the user's saved cart with quantity 1, overwriting."""
    product = get_product_or_404(product_id)
    item = SavedCartItem.query.filter_by(user_id=user_id, product_id=product.id).first()
    if item is None:
        item = SavedCartItem(user_id=user_id, product_id=product.id)
        db.session.add(item)

    item.name = product.name
    item.price = product.price
    item.image = product.image
    item.quantity = 1
    item.added_at = datetime.utcnow()
    return item


# Admin: products

def _product_fields(data, partial=False):
    fields = {}

    if 'name' in data or not partial:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError('Product name is required')
        fields['name'] = name

    if 'price' in data or not partial:
        try:
            price = float(data.get('price'))
        except (TypeError, ValueError):
            raise ValidationError('Price must be a number')
        if price < 0:
            raise ValidationError('Price cannot be negative')
        fields['price'] = price

    if 'image' in data or not partial:
        image = (data.get('image') or '').strip()
        if not image:
            raise ValidationError('Image is required')
        fields['image'] = image

    if 'rating' in data or not partial:
        fields['rating'] = _parse_rating(data.get('rating'), DEFAULT_RATING)

    for key in ('category', 'description'):
        if key in data:
            fields[key] = (data.get(key) or '').strip() or None

    if 'stock' in data:
        stock = data.get('stock')
        try:
            fields['stock'] = None if stock in (None, '') else int(stock)
        except (TypeError, ValueError):
            raise ValidationError('Stock must be an integer')

    return fields


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def create_product(data):
    product = Product(**_product_fields(data))
    db.session.add(product)
    db.session.flush()
    logger.info(f'Product {product.id} created', extra={'event_type': 'product_created', 'product_id': product.id})
    return product


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def update_product(product_id, data):
    product = get_product_or_404(product_id)
    for key, value in _product_fields(data, partial=True).items():
        setattr(product, key, value)
    return product


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def delete_product(product_id):
    product = get_product_or_404(product_id)
    db.session.delete(product)


def sorted_products(products, sort_by='name'):
    if sort_by not in PRODUCT_SORT_FIELDS:
        raise ValidationError(f'Cannot sort products by {sort_by}')
    if sort_by == 'price':
        return sorted(products, key=lambda p: p.price or 0)
    return sorted(products, key=lambda p: (p.name or '').lower())


# Admin: categories

def _category_name(name):
    name = (name or '').strip()
    if not name:
        raise ValidationError('Category name is required')
    return name


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def create_category(name):
    category = Category(name=_category_name(name))
    db.session.add(category)
    try:
        db.session.flush()
    except IntegrityError:
        raise ValidationError(f'Category "{category.name}" already exists')
    return category


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def rename_category(category_id, name):
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFoundError('Category not found')
    category.name = _category_name(name)
    try:
        db.session.flush()
    except IntegrityError:
        raise ValidationError(f'Category "{category.name}" already exists')
    return category


@with_error_handling(ErrorCategory.CATALOG, preserve_integrity=True)
def delete_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFoundError('Category not found')
    db.session.delete(category)
