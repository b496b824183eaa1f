"""Authentication routes: registration, login, logout and current user."""

from flask import Blueprint, request, jsonify, current_app
import re

from translator import db, limiter
from translator.models import User
from translator.utils import AUTH_COOKIE_NAME, issue_token, token_required

auth_bp = Blueprint('auth', __name__)

# Email validation regex
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128


def _session_response(user, status):
    """Build the {token, user} response and set the session cookie."""
    token = issue_token(user)
    response = jsonify({'token': token, 'user': user.to_dict()})
    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        max_age=current_app.config['JWT_ACCESS_TOKEN_EXPIRES'],
        httponly=True,
        samesite='Lax',
        secure=current_app.config['SESSION_COOKIE_SECURE'],
    )
    return response, status


@auth_bp.route('/register', methods=['POST'])
@limiter.limit("5 per minute")
def register():
    """Register a new user account and sign it in."""
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not all(k in data for k in ['email', 'password']):
        return jsonify({'error': 'Missing required fields'}), 400

    email = str(data['email']).strip().lower()
    password = data['password']

    if not EMAIL_REGEX.match(email) or len(email) > 254:
        return jsonify({'error': 'Invalid email format'}), 400

    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({'error': f'Password must be at least {MIN_PASSWORD_LENGTH} characters'}), 400

    if len(password) > MAX_PASSWORD_LENGTH:
        return jsonify({'error': f'Password must be less than {MAX_PASSWORD_LENGTH} characters'}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already exists'}), 409

    try:
        user = User(email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return _session_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    """Authenticate user and return a token."""
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not all(k in data for k in ['email', 'password']):
        return jsonify({'error': 'Missing email or password'}), 400

    user = User.query.filter_by(email=str(data['email']).strip().lower()).first()

    if not user or not user.check_password(str(data['password'])):
        return jsonify({'error': 'Invalid email or password'}), 401

    if not user.is_active:
        return jsonify({'error': 'Account is disabled'}), 403

    return _session_response(user, 200)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clear the session cookie."""
    response = jsonify({'message': 'Logged out'})
    response.delete_cookie(AUTH_COOKIE_NAME)
    return response, 200


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user_id):
    """Return the signed-in user."""
    user = db.session.get(User, current_user_id)
    return jsonify({'user': user.to_dict()}), 200
