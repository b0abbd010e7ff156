"""
Application configuration read from environment variables
"""
import os


def _split_emails(value):
    return tuple(e.strip().lower() for e in value.split(',') if e.strip())


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///storefront.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Emails allowed into the /admin-* console
    ADMIN_EMAILS = _split_emails(os.getenv('ADMIN_EMAILS', 'admin@example.com'))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    NEW_RELIC_ENABLED = os.getenv('NEW_RELIC_ENABLED', 'false').lower() == 'true'

    ORDERS_PER_PAGE = 10
    HOME_PRODUCT_LIMIT = 8
    NEW_PRODUCT_DAYS = 30


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    ADMIN_EMAILS = ('admin@example.com',)
    LOG_LEVEL = 'WARNING'
    NEW_RELIC_ENABLED = False
