"""
Storefront error types and their HTTP mapping

Errors are raised where they are detected and converted to JSON responses
by the handlers registered in ``register_error_handlers``. Nothing here is
retried.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from flask import jsonify, request
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500
    error_type = 'storefront_error'

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'error_type': self.error_type,
            'timestamp': datetime.utcnow().isoformat(),
        }


class ValidationError(StorefrontError):
    """Malformed or missing required input"""

    status_code = 400
    error_type = 'validation_error'


class NotFoundError(StorefrontError):
    """Referenced order, product or category does not exist"""

    status_code = 404
    error_type = 'not_found'


class StorageError(StorefrontError):
    """The database rejected or failed a read or write"""

    status_code = 500
    error_type = 'storage_error'

    @classmethod
    def from_sqlalchemy(cls, error: SQLAlchemyError, operation: str) -> 'StorageError':
        if isinstance(error, IntegrityError):
            category = 'constraint_violation'
        elif isinstance(error, OperationalError):
            category = 'operational_error'
        else:
            category = 'database_error'

        logger.error(f'Storage failure during {operation}: {error}', extra={
            'event_type': 'storage_error',
            'operation': operation,
            'error_category': category,
        })
        return cls(f'Storage failure during {operation}', context={
            'operation': operation,
            'error_category': category,
        })


def register_error_handlers(app):
    """Register JSON error handlers on the Flask application"""

    @app.errorhandler(StorefrontError)
    def handle_storefront_error(error):
        log = app.logger.error if error.status_code >= 500 else app.logger.warning
        log(f'{error.error_type}: {error.message}', extra={
            'event_type': error.error_type,
            'endpoint': request.endpoint,
            'context': error.context,
        })
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_sqlalchemy_error(error):
        from storefront import db

        db.session.rollback()
        storage_error = StorageError.from_sqlalchemy(error, request.endpoint or 'request')
        return jsonify(storage_error.to_dict()), storage_error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({
            'message': error.description,
            'error_type': 'http_error',
            'timestamp': datetime.utcnow().isoformat(),
        }), error.code
