"""
Checkout, order history and the admin order workflow
"""
import logging
from collections import OrderedDict
from datetime import date, datetime

from storefront import db
from storefront.models import Order, OrderStatus
from storefront.models.order import can_transition
from storefront.services.error_handler import (
    ErrorCategory, ValidationError, NotFoundError, with_error_handling,
)
from storefront.services.notifications import create_notification

logger = logging.getLogger(__name__)

CHECKOUT_FIELDS = ('name', 'email', 'address')


def get_order_or_404(order_id):
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError('Order not found')
    return order


def parse_status(value):
    try:
        return OrderStatus.parse(value)
    except ValueError as e:
        raise ValidationError(str(e))


def validate_checkout_form(form):
    """Return the stripped contact fields; every field is required."""
    cleaned = {}
    missing = []
    for field_name in CHECKOUT_FIELDS:
        value = (form.get(field_name) or '').strip()
        if not value:
            missing.append(field_name)
        cleaned[field_name] = value
    if missing:
        raise ValidationError(f'Missing required fields: {", ".join(missing)}')
    return cleaned


@with_error_handling(ErrorCategory.ORDERS, preserve_integrity=True)
def place_order(form, cart, user_id=None):
    """
    Write one order holding a snapshot of the cart.

    The total is frozen here: later product price edits never change it.
    New orders carry the "Pending" label as their status.
    """
    contact = validate_checkout_form(form)
    if not len(cart):
        raise ValidationError('Cart is empty')

    order = Order(
        name=contact['name'],
        email=contact['email'],
        address=contact['address'],
        cart=cart.snapshot(),
        total=cart.total,
        status=OrderStatus.PENDING.label,
        user_id=user_id,
        created_at=datetime.utcnow(),
    )
    db.session.add(order)
    db.session.flush()

    logger.info(f'Order {order.id} placed', extra={
        'event_type': 'order_success',
        'order_id': order.id,
        'user_id': user_id,
        'item_count': cart.item_count,
        'total_amount': order.total,
    })
    return order


def orders_for_email(email):
    return (
        Order.query
        .filter(db.func.lower(Order.email) == (email or '').lower())
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


@with_error_handling(ErrorCategory.ORDERS, preserve_integrity=True)
def change_order_status(order_id, new_status):
    """
    Set an order's status and notify its owner.

    The status write and the notification commit together. Orders without a
    user_id get no notification.
    """
    order = get_order_or_404(order_id)
    status = parse_status(new_status)
    if not can_transition(order.status, status):
        raise ValidationError(f'Cannot move order from {order.status} to {status.value}')

    previous = order.status
    order.status = status.value

    notification = None
    if order.user_id:
        notification = create_notification(order.user_id, order.id, status)
    else:
        logger.warning(f'No userId on order {order.id}; skipping notification')

    logger.info(f'Order {order.id} status {previous} -> {status.value}', extra={
        'event_type': 'order_status_changed',
        'order_id': order.id,
        'from_status': previous,
        'to_status': status.value,
        'notified': notification is not None,
    })
    return order, notification


@with_error_handling(ErrorCategory.ORDERS, preserve_integrity=True)
def update_order(order_id, name=None, email=None, status=None):
    """Admin edit form: name, email and status. Notifies only on a real status change."""
    order = get_order_or_404(order_id)

    if name is not None:
        order.name = name
    if email is not None:
        order.email = email

    notification = None
    if status is not None:
        new_status = parse_status(status)
        changed = (order.status or '').lower() != new_status.value
        order.status = new_status.value
        if changed and order.user_id:
            notification = create_notification(order.user_id, order.id, new_status)

    return order, notification


@with_error_handling(ErrorCategory.ORDERS, preserve_integrity=True)
def delete_order(order_id):
    order = get_order_or_404(order_id)
    db.session.delete(order)
    logger.info(f'Order {order_id} deleted', extra={'event_type': 'order_deleted', 'order_id': order_id})


def _to_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f'Invalid date: {value}')


def filter_orders(orders, search=None, on_date=None, status=None):
    """Admin order filters: name/email substring, calendar day, status."""
    result = list(orders)

    if search:
        needle = search.lower()
        result = [
            o for o in result
            if needle in (o.name or '').lower() or needle in (o.email or '').lower()
        ]

    day = _to_date(on_date)
    if day:
        result = [o for o in result if o.created_at and o.created_at.date() == day]

    if status:
        wanted = status.lower()
        result = [o for o in result if (o.status or '').lower() == wanted]

    return result


def sort_orders(orders, field='created_at', ascending=False):
    def key(order):
        if field == 'created_at':
            return order.created_at or datetime.min
        if field == 'total':
            return order.total or 0.0
        value = getattr(order, field, None)
        return '' if value is None else str(value).lower()

    return sorted(orders, key=key, reverse=not ascending)


def paginate(items, page=1, per_page=10):
    total_pages = max(1, -(-len(items) // per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return {
        'items': items[start:start + per_page],
        'page': page,
        'total_pages': total_pages,
        'total_items': len(items),
    }


def dashboard_stats(orders):
    """Status counts, total revenue and revenue per calendar day."""
    counts = {status.value: 0 for status in OrderStatus}
    revenue_by_date = OrderedDict()
    revenue = 0.0

    for order in sorted(orders, key=lambda o: o.created_at or datetime.min):
        normalized = (order.status or '').lower()
        if normalized in counts:
            counts[normalized] += 1
        amount = order.total or 0.0
        revenue += amount
        day = order.created_at.date().isoformat() if order.created_at else 'Unknown'
        revenue_by_date[day] = revenue_by_date.get(day, 0.0) + amount

    return {
        'total_orders': len(orders),
        'total_revenue': round(revenue, 2),
        'status_counts': counts,
        'revenue_by_date': [
            {'date': day, 'revenue': round(amount, 2)} for day, amount in revenue_by_date.items()
        ],
    }
