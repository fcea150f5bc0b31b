"""
Bearer-token identity for ServiceHub routes.

Tokens are issued by the account service; this module only verifies them
(HS256, ``user_id`` claim) and resolves the caller's ``User`` row.
"""
import logging
from functools import wraps

import jwt
from flask import current_app, jsonify, request

from servicehub import db
from servicehub.models import User

logger = logging.getLogger(__name__)


def verify_token(token):
    """Verify JWT token and return user_id"""
    try:
        payload = jwt.decode(token, current_app.config['JWT_SECRET'], algorithms=['HS256'])
        return payload.get('user_id')
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def _current_user():
    header = request.headers.get('Authorization', '')
    token = header.replace('Bearer ', '', 1).strip()
    if not token:
        return None
    user_id = verify_token(token)
    if not user_id:
        return None
    user = db.session.get(User, user_id)
    if user is None or user.status != 'active':
        return None
    return user


def require_auth(f):
    """Decorator to require authentication"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = _current_user()
        if user is None:
            return jsonify({'success': False, 'error': 'Unauthorized'}), 401
        return f(*args, current_user=user, **kwargs)
    return decorated_function


def optional_auth(f):
    """Decorator that passes the user if authenticated, None otherwise."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        return f(*args, current_user=_current_user(), **kwargs)
    return decorated_function


def require_admin(f):
    """Decorator that requires the caller to be an admin."""
    @wraps(f)
    @require_auth
    def decorated_function(*args, current_user=None, **kwargs):
        if not current_user.is_admin:
            logger.warning("Non-admin user %s attempted admin route %s", current_user.id, request.path)
            return jsonify({'success': False, 'error': 'Admin access required'}), 403
        return f(*args, current_user=current_user, **kwargs)
    return decorated_function
