from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from storefront.services import accounts, notifications, wishlist
from storefront.services.catalog import get_product_or_404
from storefront.services.orders import orders_for_email

bp = Blueprint('account', __name__)

def _payload():
    return request.get_json(silent=True) or request.form

@bp.route('/my-orders')
@login_required
def my_orders():
    orders = orders_for_email(current_user.email)
    return jsonify({'orders': [o.to_dict() for o in orders]})

@bp.route('/profile', methods=['GET', 'POST'])
@login_required
def profile():
    if request.method == 'POST':
        data = _payload()
        accounts.update_settings(
            current_user,
            display_name=data.get('display_name'),
            photo_url=data.get('photo_url'),
            current_password=data.get('current_password', ''),
            new_password=data.get('new_password', ''),
            confirm_password=data.get('confirm_password', ''),
        )
        return jsonify({'message': 'Profile updated successfully!', 'user': current_user.to_dict()})
    return jsonify({'user': current_user.to_dict()})

@bp.route('/wishlist')
@login_required
def view_wishlist():
    items = []
    for entry, product in wishlist.list_wishlist(current_user.id):
        data = product.to_dict()
        data['added_at'] = entry.added_at.isoformat() if entry.added_at else None
        items.append(data)
    return jsonify({'items': items})

@bp.route('/wishlist/<int:product_id>', methods=['POST'])
@login_required
def toggle_wishlist(product_id):
    product = get_product_or_404(product_id)
    in_wishlist = wishlist.toggle_wishlist(current_user.id, product)
    return jsonify({'product_id': product_id, 'in_wishlist': in_wishlist})

@bp.route('/wishlist/<int:product_id>', methods=['DELETE'])
@login_required
def remove_from_wishlist(product_id):
    wishlist.remove_from_wishlist(current_user.id, product_id)
    return jsonify({'product_id': product_id, 'in_wishlist': False})

@bp.route('/notifications')
@login_required
def list_notifications():
    items = notifications.list_for_user(current_user.id)
    return jsonify({
        'notifications': [n.to_dict() for n in items],
        'unread_count': notifications.unread_count(items),
    })

@bp.route('/notifications/<int:notification_id>/read', methods=['POST'])
@login_required
def mark_notification_read(notification_id):
    notification = notifications.mark_read(notification_id, current_user)
    return jsonify(notification.to_dict())

@bp.route('/notifications/read-all', methods=['POST'])
@login_required
def mark_all_notifications_read():
    updated = notifications.mark_all_read(current_user.id)
    return jsonify({'updated': updated, 'unread_count': 0})
