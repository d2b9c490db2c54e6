from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, current_user
from flask_migrate import Migrate

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()

def create_app(config=None):
    app = Flask(__name__)

    # Configuration
    from storefront.config import Settings
    app.config.update(Settings().to_flask_config())
    if config:
        app.config.update(config)

    # Setup logging
    from storefront.logging_config import setup_logging
    setup_logging(app)

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    from storefront.errors import register_error_handlers
    register_error_handlers(app)

    # New Relic Custom Attributes for User Tracking
    @app.before_request
    def add_newrelic_user_attributes():
        """Add user information as custom attributes to New Relic for error tracking"""
        try:
            import newrelic.agent
        except ImportError:
            # Agent not installed; nothing to report to
            return

        if current_user.is_authenticated:
            newrelic.agent.add_custom_attribute('enduser.id', str(current_user.id))
            newrelic.agent.add_custom_attribute('user', current_user.username)

    # Register blueprints
    from storefront.routes import main, auth, catalog, orders, cart
    app.register_blueprint(main.bp)
    app.register_blueprint(auth.bp)
    app.register_blueprint(catalog.bp)
    app.register_blueprint(orders.bp)
    app.register_blueprint(cart.bp)

    from storefront.logging_config import log_startup
    log_startup(app)

    return app
