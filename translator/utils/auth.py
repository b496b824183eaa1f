"""Shared authentication utilities.

Tokens are HS256 JWTs signed with JWT_SECRET_KEY. They are accepted from the
``Authorization: Bearer <token>`` header or from the HTTP-only session cookie
set at login.
"""

from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app
import jwt

from translator import db

AUTH_COOKIE_NAME = 'access_token'


def issue_token(user):
    """Sign a token for user, valid for JWT_ACCESS_TOKEN_EXPIRES seconds."""
    payload = {
        'user_id': user.id,
        'email': user.email,
        'exp': datetime.now(timezone.utc) + timedelta(seconds=current_app.config['JWT_ACCESS_TOKEN_EXPIRES']),
    }
    return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm='HS256')


def _token_from_request(req):
    auth_header = req.headers.get('Authorization')
    if auth_header:
        # Support both "Bearer <token>" and raw token formats
        return auth_header.split(' ')[1] if ' ' in auth_header else auth_header
    return req.cookies.get(AUTH_COOKIE_NAME)


def authenticate(req):
    """Resolve the verified user behind req, or None."""
    from translator.models import User

    token = _token_from_request(req)
    if not token:
        return None

    try:
        payload = jwt.decode(token, current_app.config['JWT_SECRET_KEY'], algorithms=['HS256'])
        user_id = int(payload['user_id'])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        return None

    user = db.session.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user


def token_required(f):
    """
    Decorator to require a valid token.

    Passes the authenticated user's id as the first argument to the
    decorated function.

    Usage:
        @bp.route('/protected')
        @token_required
        def protected_route(current_user_id):
            return jsonify({'user_id': current_user_id})
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        user = authenticate(request)
        if user is None:
            return jsonify({'error': 'Unauthorized'}), 401
        return f(user.id, *args, **kwargs)
    return decorated
