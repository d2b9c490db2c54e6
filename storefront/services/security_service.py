"""
Access control for admin-only endpoints
"""
import functools
import logging

from flask import jsonify, request
from flask_login import current_user

from storefront import login_manager

logger = logging.getLogger(__name__)


@login_manager.unauthorized_handler
def unauthorized():
    logger.warning('Unauthenticated request rejected', extra={
        'event_type': 'auth_required',
        'endpoint': request.endpoint,
    })
    return jsonify({'message': 'Authentication required'}), 401


def admin_required(f):
    """Allow the view only for logged-in administrators (401 / 403 otherwise)"""
    @functools.wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()

        if not current_user.is_admin:
            logger.warning(f'Admin access denied for user {current_user.id}', extra={
                'event_type': 'admin_access_denied',
                'user_id': current_user.id,
                'endpoint': request.endpoint,
            })
            return jsonify({'message': 'Admin access required'}), 403

        return f(*args, **kwargs)

    return decorated_function
