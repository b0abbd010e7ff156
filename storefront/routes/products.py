from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required
from storefront.models import Product
from storefront.services import catalog
from storefront.services.wishlist import wishlisted_product_ids

bp = Blueprint('products', __name__, url_prefix='/products')

def _payload():
    return request.get_json(silent=True) or request.form

@bp.route('')
@bp.route('/')
def list_products():
    category = request.args.get('category', 'all')
    search = request.args.get('search', '')
    sort_order = request.args.get('sort', 'asc')

    current_app.logger.info('Products list requested', extra={
        'event_type': 'page_view',
        'page': 'products_list',
        'category': category
    })

    products = Product.query.all()
    shown = catalog.filter_products(products, category=category, search=search, sort_order=sort_order)

    wishlisted = set()
    if current_user.is_authenticated:
        wishlisted = wishlisted_product_ids(current_user.id, [p.id for p in shown])

    new_days = current_app.config['NEW_PRODUCT_DAYS']
    items = []
    for product in shown:
        data = product.to_dict()
        data['is_new'] = catalog.is_new_product(product.created_at, days=new_days)
        data['in_wishlist'] = product.id in wishlisted
        items.append(data)

    return jsonify({
        'products': items,
        'categories': catalog.category_names(products),
    })

@bp.route('/<int:product_id>')
def product_detail(product_id):
    current_app.logger.info(f'Product detail requested: {product_id}', extra={
        'event_type': 'page_view',
        'page': 'product_detail',
        'product_id': product_id
    })

    product = catalog.get_product_or_404(product_id)
    reviews = product.reviews

    return jsonify({
        'product': product.to_dict(),
        'reviews': [r.to_dict() for r in reviews],
        'average_rating': catalog.average_rating(reviews),
        'related': [p.to_dict() for p in catalog.related_products(product)],
    })

@bp.route('/<int:product_id>/reviews', methods=['POST'])
def add_review(product_id):
    data = _payload()
    review = catalog.add_review(
        product_id,
        current_user,
        data.get('review_text'),
        rating=data.get('rating', 5),
    )
    return jsonify(review.to_dict()), 201

@bp.route('/<int:product_id>/save-to-cart', methods=['POST'])
@login_required
def save_to_cart(product_id):
    item = catalog.save_to_cart(current_user.id, product_id)
    current_app.logger.info('Product saved to user cart', extra={
        'event_type': 'saved_cart_add',
        'user_id': current_user.id,
        'product_id': product_id
    })
    return jsonify({'message': 'Added to cart!', 'item': item.to_dict()}), 201
