from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity
from sqlalchemy import select
from tracker.models.authz import User, UserRole
from tracker import get_db
from tracker.constants.roles import ROLE_USER, ROLE_ADMIN, ROLES
from tracker.decorators.auth import require_role
from tracker.services.policy import get_user_role, assert_not_removing_last_admin, current_actor
from tracker.utils.validation import require_text, validate_choice

auth_bp = Blueprint('auth', __name__)


def _user_json(user: User, role: str):
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'role': role,
        'is_admin': role == ROLE_ADMIN,
    }


@auth_bp.post('/login')
def login():
    data = request.json or {}
    email = data.get('email'); password = data.get('password')
    if not email or not password:
        abort(400, description='email & password required')
    session = get_db()
    user = session.execute(select(User).where(User.email==email)).scalar_one_or_none()
    if not user or not user.verify_password(password):
        abort(401, description='invalid credentials')
    if not user.is_active:
        abort(403, description='account disabled')
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(user.id), additional_claims={'role': get_user_role(user.id, session)})
    return {'access_token': token}


@auth_bp.get('/me')
@jwt_required()
def me():
    # Identity stored as string, cast back to int for DB lookup
    user_id = int(get_jwt_identity())
    session = get_db()
    user = session.execute(select(User).where(User.id==user_id)).scalar_one_or_none()
    if not user:
        abort(404)
    return _user_json(user, get_user_role(user.id, session))


@auth_bp.post('/users')
@require_role(ROLE_ADMIN)
def create_user():
    data = request.json or {}
    email = require_text(data, 'email')
    password = data.get('password')
    if not password:
        abort(400, description='password required')
    role = validate_choice(data.get('role') or ROLE_USER, ROLES, 'role')
    session = get_db()
    if session.execute(select(User).where(User.email==email)).scalar_one_or_none():
        abort(400, description='user exists')
    user = User(name=data.get('name') or email.split('@')[0], email=email, password_hash='')
    user.set_password(password)
    session.add(user); session.flush()
    session.add(UserRole(user_id=user.id, role=role))
    session.commit()
    current_app.logger.info('User %s created with role %s by %s', user.id, role, current_actor().user_id)
    return _user_json(user, role), 201


@auth_bp.put('/users/<int:user_id>/role')
@require_role(ROLE_ADMIN)
def set_user_role(user_id: int):
    session = get_db()
    user = session.execute(select(User).where(User.id==user_id)).scalar_one_or_none()
    if not user:
        abort(404)
    data = request.json or {}
    role = validate_choice(data.get('role'), ROLES, 'role')
    assert_not_removing_last_admin(user.id, role, session)
    row = session.execute(select(UserRole).where(UserRole.user_id==user.id)).scalar_one_or_none()
    if row:
        row.role = role
    else:
        session.add(UserRole(user_id=user.id, role=role))
    session.commit()
    current_app.logger.info('User %s role set to %s by %s', user.id, role, current_actor().user_id)
    return _user_json(user, role)
