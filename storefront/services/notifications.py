"""
Order-status notifications and read tracking
"""
import logging

from storefront import db
from storefront.models import Notification
from storefront.services.error_handler import (
    ErrorCategory, NotFoundError, AuthorizationError, with_error_handling,
)

logger = logging.getLogger(__name__)


def status_message(order_id, status):
    return f'Your order {order_id} status has been updated to "{status}".'


def create_notification(user_id, order_id, status):
    """
    Stage a notification for an order-status change in the current session.
    The caller owns the commit. Returns None when there is no recipient.
    """
    if not user_id:
        logger.warning(f'No userId provided for notification on order {order_id}; skipping')
        return None

    notification = Notification(
        user_id=user_id,
        order_id=order_id,
        message=status_message(order_id, getattr(status, 'value', status)),
        read=False,
    )
    db.session.add(notification)
    db.session.flush()

    logger.info('Notification created', extra={
        'event_type': 'notification_created',
        'user_id': user_id,
        'order_id': order_id,
        'notification_id': notification.id,
    })
    return notification


def _newest_first(query):
    return query.order_by(Notification.created_at.desc(), Notification.id.desc())


def list_for_user(user_id):
    return _newest_first(Notification.query.filter_by(user_id=user_id)).all()


def list_all():
    return _newest_first(Notification.query).all()


def unread_count(notifications):
    return sum(1 for n in notifications if not n.read)


@with_error_handling(ErrorCategory.NOTIFICATIONS, preserve_integrity=True)
def mark_read(notification_id, user, is_admin=False):
    notification = db.session.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError('Notification not found')
    if not is_admin and notification.user_id != user.id:
        raise AuthorizationError('Cannot modify another user\'s notification')

    notification.read = True
    return notification


@with_error_handling(ErrorCategory.NOTIFICATIONS, preserve_integrity=True)
def mark_all_read(user_id):
    """Mark every unread notification of a user read in one transaction."""
    updated = (
        Notification.query
        .filter_by(user_id=user_id, read=False)
        .update({Notification.read: True}, synchronize_session='fetch')
    )
    logger.info(f'Marked {updated} notifications read for user {user_id}', extra={
        'event_type': 'notifications_read_all',
        'user_id': user_id,
        'count': updated,
    })
    return updated
