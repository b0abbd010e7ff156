"""
Registration, sign-in, profile settings and the admin allow-list
"""
import logging
import re
from functools import wraps

from flask import current_app, redirect, url_for
from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import IntegrityError

from storefront import db
from storefront.models import User
from storefront.services.error_handler import (
    ErrorCategory, AuthenticationError, ValidationError, error_handler, with_error_handling,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

AUTH_ERROR_MESSAGES = {
    'user-not-found': 'User not found. Please check your email.',
    'wrong-password': 'Incorrect password. Please try again.',
    'invalid-email': 'Invalid email format.',
    'user-disabled': 'User account is disabled.',
    'email-already-in-use': 'Email already registered.',
    'not-admin': 'Unauthorized - Not an admin',
}

ADMIN_DEFAULT_DISPLAY_NAME = 'Admin User'


def auth_error(code):
    return AuthenticationError(AUTH_ERROR_MESSAGES[code], code=code)


def email_taken_error():
    return ValidationError(AUTH_ERROR_MESSAGES['email-already-in-use'], code='email-already-in-use')


def normalize_email(email):
    email = (email or '').strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise auth_error('invalid-email')
    return email


def is_admin_email(email):
    return (email or '').lower() in current_app.config.get('ADMIN_EMAILS', ())


def is_admin(user):
    return bool(user is not None and user.is_authenticated and is_admin_email(user.email))


@with_error_handling(ErrorCategory.AUTHENTICATION, preserve_integrity=True)
def register(name, email, password):
    email = normalize_email(email)
    if not password:
        raise ValidationError('Password is required')
    if User.query.filter_by(email=email).first():
        raise email_taken_error()

    user = User(email=email, display_name=(name or '').strip() or None)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.flush()
    except IntegrityError:
        raise email_taken_error()

    logger.info(f'User registered: {email}', extra={'event_type': 'user_registered', 'user_id': user.id})
    return user


def authenticate(email, password):
    """Check credentials and return the user, or raise AuthenticationError with a code."""
    email = normalize_email(email)
    user = User.query.filter_by(email=email).first()

    if user is None:
        logger.warning(f'User not found: {email}')
        raise auth_error('user-not-found')
    if user.disabled:
        logger.warning(f'Disabled account sign-in attempt: {email}')
        raise auth_error('user-disabled')
    if not user.check_password(password or ''):
        logger.warning(f'Password check failed for user: {email}')
        raise auth_error('wrong-password')

    return user


def sign_in(email, password):
    user = authenticate(email, password)
    login_user(user)
    logger.info(f'Login successful for user: {user.email}', extra={'event_type': 'login', 'user_id': user.id})
    return user


def admin_sign_in(email, password):
    """Sign in, then require the allow-list; fill in a display name if missing."""
    user = authenticate(email, password)
    if not is_admin_email(user.email):
        logout_user()
        logger.warning(f'Non-admin attempted admin login: {user.email}')
        raise auth_error('not-admin')

    if not user.display_name:
        def set_default_name():
            user.display_name = ADMIN_DEFAULT_DISPLAY_NAME
        error_handler.preserve_data_integrity(
            set_default_name, ErrorCategory.AUTHENTICATION, {'function': 'admin_sign_in'}
        )

    login_user(user)
    logger.info(f'Admin login: {user.email}', extra={'event_type': 'admin_login', 'user_id': user.id})
    return user


@with_error_handling(ErrorCategory.AUTHENTICATION, preserve_integrity=True)
def update_settings(user, display_name=None, photo_url=None,
                    current_password='', new_password='', confirm_password=''):
    """Profile fields plus an optional password change that re-checks the current password."""
    if display_name is not None and display_name != user.display_name:
        user.display_name = display_name
    if photo_url is not None and photo_url != user.photo_url:
        user.photo_url = photo_url

    if current_password or new_password or confirm_password:
        if not (current_password and new_password and confirm_password):
            raise ValidationError('Please fill all password fields to change password.')
        if new_password != confirm_password:
            raise ValidationError('New password and confirmation do not match.')
        if not user.check_password(current_password):
            raise auth_error('wrong-password')
        user.set_password(new_password)
        logger.info(f'Password updated for user {user.id}', extra={'event_type': 'password_changed', 'user_id': user.id})

    return user


def admin_required(f):
    """
    Gate for /admin-* views: anonymous visitors go to the admin login,
    signed-in users outside the allow-list go to the storefront home.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for('admin.login'))
        if not is_admin_email(current_user.email):
            logger.warning(f'Non-admin {current_user.email} redirected away from admin console')
            return redirect(url_for('main.index'))
        return f(*args, **kwargs)
    return wrapper
