"""
Error taxonomy, structured error logging and transactional write helpers
"""
import logging
import traceback
import functools
import json
import uuid
from typing import Dict, Any, Callable, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from storefront import db


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    CART = "cart"
    ORDERS = "orders"
    NOTIFICATIONS = "notifications"
    WISHLIST = "wishlist"
    CATALOG = "catalog"
    DATABASE = "database"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"


class StorefrontError(Exception):
    """Base class for errors reported back to the caller"""
    status_code = 400
    category = ErrorCategory.VALIDATION

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self):
        data = {'error': self.message, 'category': self.category.value}
        if self.code:
            data['code'] = self.code
        return data


class ValidationError(StorefrontError):
    pass


class CartError(StorefrontError):
    category = ErrorCategory.CART


class NotFoundError(StorefrontError):
    status_code = 404


class AuthenticationError(StorefrontError):
    status_code = 401
    category = ErrorCategory.AUTHENTICATION


class AuthorizationError(StorefrontError):
    status_code = 403
    category = ErrorCategory.AUTHORIZATION


@dataclass
class ErrorDetail:
    error_id: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception_type: str
    stack_trace: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "exception_type": self.exception_type,
            "context": self.context,
            "timestamp": self.timestamp,
        }


class StoreErrorHandler:
    """Builds, logs and contains errors raised by storefront writes"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def create_error_detail(
        self,
        exception: Exception,
        category: ErrorCategory,
        severity: Optional[ErrorSeverity] = None,
        context: Dict[str, Any] = None,
    ) -> ErrorDetail:
        if severity is None:
            severity = self.severity_for(exception)
        if isinstance(exception, StorefrontError):
            category = exception.category

        return ErrorDetail(
            error_id=str(uuid.uuid4())[:8],
            category=category,
            severity=severity,
            message=str(exception),
            exception_type=type(exception).__name__,
            stack_trace=traceback.format_exc(),
            context=context or {},
        )

    @staticmethod
    def severity_for(exception: Exception) -> ErrorSeverity:
        # Caller mistakes are expected traffic; storage failures are not
        if isinstance(exception, StorefrontError):
            return ErrorSeverity.LOW
        if isinstance(exception, SQLAlchemyError):
            return ErrorSeverity.HIGH
        return ErrorSeverity.MEDIUM

    def log_error(self, error_detail: ErrorDetail):
        log_message = (
            f"[{error_detail.error_id}] {error_detail.category.value.upper()} ERROR "
            f"({error_detail.severity.value}): {error_detail.message}"
        )
        if error_detail.context:
            log_message += f" | Context: {json.dumps(error_detail.context, default=str)}"

        if error_detail.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message)
        elif error_detail.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message)
        elif error_detail.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

        if error_detail.severity in [ErrorSeverity.HIGH, ErrorSeverity.CRITICAL]:
            self.logger.error(f"[{error_detail.error_id}] Stack trace:\n{error_detail.stack_trace}")

    def preserve_data_integrity(
        self,
        operation_func: Callable,
        category: ErrorCategory = ErrorCategory.DATABASE,
        context: Dict[str, Any] = None,
    ):
        """Run operation_func and commit; roll back, log and re-raise on failure."""
        try:
            result = operation_func()
            db.session.commit()
            return result

        except Exception as e:
            db.session.rollback()
            error_detail = self.create_error_detail(e, category, context=context)
            self.log_error(error_detail)
            raise


def with_error_handling(
    category: ErrorCategory = ErrorCategory.DATABASE,
    preserve_integrity: bool = False,
):
    """Log failures of the wrapped function; commit/rollback when preserve_integrity is set."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            context = {"function": func.__name__}
            if preserve_integrity:
                return error_handler.preserve_data_integrity(
                    lambda: func(*args, **kwargs), category, context
                )
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_handler.log_error(error_handler.create_error_detail(e, category, context=context))
                raise

        return wrapper
    return decorator


def register_error_handlers(app):
    """Render storefront and database errors as JSON responses"""

    @app.errorhandler(StorefrontError)
    def handle_storefront_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_sqlalchemy_error(error):
        db.session.rollback()
        app.logger.error(f'Database error: {error}', extra={'event_type': 'database_error'})
        return jsonify({'error': 'Database error', 'category': ErrorCategory.DATABASE.value}), 500

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Not found'}), 404


error_handler = StoreErrorHandler()
