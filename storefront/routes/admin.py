from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user
from storefront.models import Order, Product, Category
from storefront.services import accounts, catalog, notifications, orders as order_service
from storefront.services.accounts import admin_required
from storefront.services.error_handler import ValidationError

# Admin console routes keep the storefront's /admin-* paths
bp = Blueprint('admin', __name__)

def _payload():
    return request.get_json(silent=True) or request.form

def _page_arg():
    try:
        return int(request.args.get('page', 1))
    except ValueError:
        raise ValidationError('page must be an integer')


@bp.route('/admin-login', methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return jsonify({'message': 'Admin login required'}), 401

    data = _payload()
    user = accounts.admin_sign_in(data.get('email'), data.get('password'))
    return jsonify({'user': user.to_dict(), 'redirect': '/admin-dashboard'})


@bp.route('/admin-dashboard')
@admin_required
def dashboard():
    all_orders = Order.query.all()

    shown = order_service.filter_orders(
        all_orders,
        search=request.args.get('search'),
        status=request.args.get('status'),
    )
    shown = order_service.sort_orders(
        shown,
        field=request.args.get('sort', 'created_at'),
        ascending=request.args.get('direction', 'desc') == 'asc',
    )
    page = order_service.paginate(shown, _page_arg(), current_app.config['ORDERS_PER_PAGE'])

    return jsonify({
        'stats': order_service.dashboard_stats(all_orders),
        'orders': [o.to_dict() for o in page['items']],
        'page': page['page'],
        'total_pages': page['total_pages'],
    })


# Products

@bp.route('/admin-products', methods=['GET'])
@admin_required
def list_products():
    products = catalog.sorted_products(Product.query.all(), request.args.get('sort', 'name'))
    search = (request.args.get('search') or '').lower()
    if search:
        products = [p for p in products if search in (p.name or '').lower()]
    return jsonify({
        'products': [p.to_dict() for p in products],
        'categories': [c.to_dict() for c in Category.query.order_by(Category.name).all()],
    })

@bp.route('/admin-products', methods=['POST'])
@admin_required
def create_product():
    product = catalog.create_product(_payload())
    return jsonify(product.to_dict()), 201

@bp.route('/admin-products/<int:product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    product = catalog.update_product(product_id, _payload())
    return jsonify(product.to_dict())

@bp.route('/admin-products/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    catalog.delete_product(product_id)
    return jsonify({'deleted': product_id})


# Categories

@bp.route('/admin/categories', methods=['GET'])
@admin_required
def list_categories():
    return jsonify({'categories': [c.to_dict() for c in Category.query.order_by(Category.name).all()]})

@bp.route('/admin/categories', methods=['POST'])
@admin_required
def create_category():
    category = catalog.create_category(_payload().get('name'))
    return jsonify(category.to_dict()), 201

@bp.route('/admin/categories/<int:category_id>', methods=['PUT'])
@admin_required
def rename_category(category_id):
    category = catalog.rename_category(category_id, _payload().get('name'))
    return jsonify(category.to_dict())

@bp.route('/admin/categories/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    catalog.delete_category(category_id)
    return jsonify({'deleted': category_id})


# Orders

@bp.route('/admin-orders', methods=['GET'])
@admin_required
def list_orders():
    shown = order_service.filter_orders(
        Order.query.order_by(Order.created_at.desc()).all(),
        search=request.args.get('search'),
        on_date=request.args.get('date'),
        status=request.args.get('status'),
    )
    return jsonify({'orders': [o.to_dict() for o in shown]})

@bp.route('/admin-orders/<int:order_id>/status', methods=['POST'])
@admin_required
def change_status(order_id):
    order, notification = order_service.change_order_status(order_id, _payload().get('status'))

    current_app.logger.info(f'Admin {current_user.email} set order {order_id} to {order.status}', extra={
        'event_type': 'admin_order_status',
        'order_id': order_id,
        'status': order.status
    })

    return jsonify({
        'order': order.to_dict(),
        'notification': notification.to_dict() if notification else None,
    })

@bp.route('/admin-orders/<int:order_id>', methods=['PUT'])
@admin_required
def update_order(order_id):
    data = _payload()
    order, notification = order_service.update_order(
        order_id,
        name=data.get('name'),
        email=data.get('email'),
        status=data.get('status'),
    )
    return jsonify({
        'order': order.to_dict(),
        'notification': notification.to_dict() if notification else None,
    })

@bp.route('/admin-orders/<int:order_id>', methods=['DELETE'])
@admin_required
def delete_order(order_id):
    order_service.delete_order(order_id)
    return jsonify({'deleted': order_id})


# Notifications

@bp.route('/admin-notifications')
@admin_required
def list_notifications():
    items = notifications.list_all()
    return jsonify({
        'notifications': [n.to_dict() for n in items],
        'unread_count': notifications.unread_count(items),
    })

@bp.route('/admin-notifications/<int:notification_id>/read', methods=['POST'])
@admin_required
def mark_notification_read(notification_id):
    notification = notifications.mark_read(notification_id, current_user, is_admin=True)
    return jsonify(notification.to_dict())


# Settings

@bp.route('/admin-settings', methods=['GET', 'POST'])
@admin_required
def settings():
    if request.method == 'POST':
        data = _payload()
        accounts.update_settings(
            current_user,
            display_name=data.get('display_name'),
            current_password=data.get('current_password', ''),
            new_password=data.get('new_password', ''),
            confirm_password=data.get('confirm_password', ''),
        )
        return jsonify({'message': 'Profile updated successfully!', 'user': current_user.to_dict()})
    return jsonify({'user': current_user.to_dict()})
