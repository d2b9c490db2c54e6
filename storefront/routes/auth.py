from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy import select
from storefront import db
from storefront.errors import ValidationError
from storefront.models import User
from storefront.schemas import RegisterRequest, LoginRequest, parse_request

bp = Blueprint('auth', __name__, url_prefix='/auth')

@bp.route('/register', methods=['POST'])
def register():
    data = parse_request(RegisterRequest)

    if not data.username or not data.email or not data.password:
        raise ValidationError('Username, email and password are required')

    existing = db.session.scalars(
        select(User).where((User.email == data.email) | (User.username == data.username))
    ).first()
    if existing:
        raise ValidationError('Email or username already registered')

    user = User(username=data.username, email=data.email)
    user.set_password(data.password)
    db.session.add(user)
    db.session.commit()

    current_app.logger.info(f'User registered: {user.id}', extra={
        'event_type': 'user_registered',
        'user_id': user.id
    })
    return jsonify(user.to_dict()), 201

@bp.route('/login', methods=['POST'])
def login():
    data = parse_request(LoginRequest)

    user = db.session.scalars(select(User).filter_by(email=data.email)).first()
    if user is None or not user.check_password(data.password):
        current_app.logger.warning(f'Login failed for {data.email}', extra={
            'event_type': 'login_failed',
            'user_found': user is not None
        })
        return jsonify({'message': 'Invalid email or password'}), 401

    login_user(user)
    current_app.logger.info(f'Login successful for user {user.id}', extra={
        'event_type': 'login_success',
        'user_id': user.id
    })
    return jsonify(user.to_dict())

@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out'})

@bp.route('/me')
@login_required
def me():
    return jsonify(current_user.to_dict())
