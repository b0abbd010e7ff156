"""
Logging configuration with request context
"""
import logging
import sys
from flask import has_request_context, request
from flask_login import current_user

class RequestFormatter(logging.Formatter):
    """Custom formatter that adds request context to logs"""

    def format(self, record):
        if has_request_context():
            record.url = request.url
            record.method = request.method
            record.remote_addr = request.remote_addr
            record.user_id = current_user.get_id()
        else:
            record.url = 'N/A'
            record.method = 'N/A'
            record.remote_addr = 'N/A'
            record.user_id = None

        return super().format(record)


def setup_logging(app):
    """
    Setup logging configuration for the Flask app.
    app.logger is the "storefront" logger, so service modules using
    logging.getLogger(__name__) share its handler.
    """
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    formatter = RequestFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - '
        '[%(method)s %(url)s] - '
        '[IP: %(remote_addr)s] [user: %(user_id)s] - '
        '%(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure app logger, replacing handlers from an earlier create_app()
    for handler in list(app.logger.handlers):
        if isinstance(handler.formatter, RequestFormatter):
            app.logger.removeHandler(handler)
    app.logger.setLevel(level)
    app.logger.addHandler(console_handler)

    # Prevent duplicate logs
    app.logger.propagate = False

    app.logger.info('Application logging configured', extra={
        'event_type': 'app_startup',
        'environment': 'testing' if app.config.get('TESTING') else 'default'
    })

    return app.logger
