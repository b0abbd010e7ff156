from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, current_user
from flask_migrate import Migrate

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()

def create_app(config_object=None):
    app = Flask(__name__)

    # Configuration
    from storefront.config import Config
    app.config.from_object(config_object or Config)

    # Setup logging
    from storefront.logging_config import setup_logging
    setup_logging(app)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    login_manager.login_view = 'auth.login'

    from storefront.services.error_handler import register_error_handlers
    register_error_handlers(app)

    # New Relic Custom Attributes for User Tracking
    @app.before_request
    def add_newrelic_user_attributes():
        """Add user information as custom attributes to New Relic for error tracking"""
        if not app.config.get('NEW_RELIC_ENABLED'):
            return
        try:
            import newrelic.agent

            if current_user.is_authenticated:
                newrelic.agent.add_custom_attribute('enduser.id', str(current_user.id))
                newrelic.agent.add_custom_attribute('userId', str(current_user.id))
                newrelic.agent.add_custom_attribute('user', current_user.email)
        except ImportError:
            app.logger.warning('New Relic not available (ImportError)')
        except Exception as e:
            # Avoid breaking the request if attribute setting fails
            app.logger.error(f'Failed to set New Relic custom attributes: {e}')

    # Register blueprints
    from storefront.routes import main, auth, products, cart, checkout, account, admin
    app.register_blueprint(main.bp)
    app.register_blueprint(auth.bp)
    app.register_blueprint(products.bp)
    app.register_blueprint(cart.bp)
    app.register_blueprint(checkout.bp)
    app.register_blueprint(account.bp)
    app.register_blueprint(admin.bp)

    return app
