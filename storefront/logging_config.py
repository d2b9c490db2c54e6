"""
Storefront logging

Every line carries the request (method, path, client address), the
signed-in account when there is one, and the ``event_type`` that the
stores and workflows attach through ``extra``.
"""
import logging
import sys
from flask import has_request_context, request, session
from flask.logging import default_handler

LOG_FORMAT = (
    '%(asctime)s - %(name)s - %(levelname)s - '
    '[%(method)s %(path)s] [IP: %(remote_addr)s] [user: %(user_id)s] '
    '[%(event_type)s] %(message)s'
)


class StorefrontFormatter(logging.Formatter):
    """Fills in request and account fields, '-' outside a request"""

    def format(self, record):
        if has_request_context():
            record.method = request.method
            record.path = request.full_path.rstrip('?')
            record.remote_addr = request.remote_addr
            # Flask-Login keeps the account id in the session
            record.user_id = session.get('_user_id', 'anonymous')
        else:
            record.method = record.path = record.remote_addr = record.user_id = '-'
        if not hasattr(record, 'event_type'):
            record.event_type = '-'

        return super().format(record)


def resolve_level(name):
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(app):
    """Attach a stdout handler to the ``storefront`` logger.

    Module loggers (``storefront.services.*``) propagate into it, so the
    stores and workflows share one handler and one level.
    """
    level = resolve_level(app.config.get('LOG_LEVEL', 'INFO'))

    # create_app may run many times in one process (tests)
    for handler in list(app.logger.handlers):
        if getattr(handler, '_storefront_handler', False):
            app.logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(StorefrontFormatter(LOG_FORMAT))
    console_handler._storefront_handler = True

    app.logger.removeHandler(default_handler)
    app.logger.setLevel(level)
    app.logger.addHandler(console_handler)
    app.logger.propagate = False

    return app.logger


def log_startup(app):
    """One record describing how this storefront instance is wired."""
    database_uri = app.config.get('SQLALCHEMY_DATABASE_URI') or ''
    atomic = app.config.get('ORDER_PLACEMENT_ATOMIC', True)

    app.logger.info(
        f'Storefront ready: {len(app.blueprints)} blueprints, '
        f'{"atomic" if atomic else "step-by-step"} order placement',
        extra={
            'event_type': 'app_startup',
            'database_backend': database_uri.split(':', 1)[0] or 'unset',
            'order_placement_atomic': atomic,
            'blueprints': sorted(app.blueprints),
            'log_level': logging.getLevelName(app.logger.level),
            'testing': app.testing,
        }
    )
