from flask import Blueprint, current_app, jsonify, request
from storefront.services.cart import cart_store
from storefront.services.catalog import get_product_or_404
from storefront.services.error_handler import CartError

bp = Blueprint('cart', __name__, url_prefix='/cart')

def _int_arg(name, default=None):
    data = request.get_json(silent=True) or request.form
    value = data.get(name, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CartError(f'{name} must be an integer')

@bp.route('')
@bp.route('/')
def view_cart():
    cart = cart_store.load()

    current_app.logger.info(f'Cart contains {len(cart)} items, total: {cart.total}', extra={
        'event_type': 'cart_viewed',
        'item_count': cart.item_count,
        'total_amount': cart.total
    })

    return jsonify(cart.to_dict())

@bp.route('/add/<int:product_id>', methods=['POST'])
def add_to_cart(product_id):
    product = get_product_or_404(product_id)
    quantity = _int_arg('quantity', 1)

    cart = cart_store.load()
    line = cart.add(product, quantity)
    cart_store.save(cart)

    current_app.logger.info(f'Product {product_id} added to cart', extra={
        'event_type': 'cart_add',
        'product_id': product_id,
        'quantity': quantity,
        'line_quantity': line.quantity,
        'price': float(product.price or 0)
    })

    return jsonify(cart.to_dict())

@bp.route('/remove/<int:index>', methods=['POST'])
def remove_from_cart(index):
    cart = cart_store.load()
    line = cart.remove(index)
    cart_store.save(cart)
    current_app.logger.info(f'Product {line.id} removed from cart', extra={
        'event_type': 'cart_remove',
        'product_id': line.id
    })
    return jsonify(cart.to_dict())

@bp.route('/update/<int:index>', methods=['POST'])
def update_quantity(index):
    cart = cart_store.load()
    cart.set_quantity(index, _int_arg('quantity'))
    cart_store.save(cart)
    return jsonify(cart.to_dict())

@bp.route('/decrement/<int:index>', methods=['POST'])
def decrement(index):
    cart = cart_store.load()
    cart.decrement(index)
    cart_store.save(cart)
    return jsonify(cart.to_dict())
