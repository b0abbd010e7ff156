from flask import Blueprint, current_app, jsonify, request, url_for
from flask_login import current_user
from storefront.services.cart import cart_store
from storefront.services.orders import place_order

bp = Blueprint('checkout', __name__, url_prefix='/checkout')

@bp.route('', methods=['POST'])
@bp.route('/', methods=['POST'])
def checkout():
    user_id = current_user.id if current_user.is_authenticated else None
    cart = cart_store.load()

    current_app.logger.info('Checkout initiated', extra={
        'event_type': 'checkout_start',
        'user_id': user_id,
        'item_count': cart.item_count,
        'total_amount': cart.total
    })

    form = request.get_json(silent=True) or request.form
    order = place_order(form, cart, user_id=user_id)
    cart_store.clear()

    return jsonify({
        'message': 'Order placed successfully!',
        'order': order.to_dict(),
        'redirect': url_for('main.index'),
    }), 201
