from __future__ import annotations
from dataclasses import dataclass
from flask import abort
from flask_jwt_extended import get_jwt, get_jwt_identity
from sqlalchemy import select
from tracker.models.authz import UserRole
from tracker.constants.roles import ROLE_ADMIN, ROLE_NONE, ROLES
from tracker import get_db


@dataclass(frozen=True)
class ActorContext:
    """Who is performing an operation, resolved once per request.

    Services and the audit writer receive this explicitly; the role stored on
    audit entries is whatever this carried at call time.
    """
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_user_role(user_id: int, session=None) -> str:
    """Role lookup: 'user' | 'admin', or 'none' when no valid assignment exists."""
    session = session or get_db()
    row = session.execute(select(UserRole).where(UserRole.user_id==user_id)).scalar_one_or_none()
    if not row or row.role not in ROLES:
        return ROLE_NONE
    return row.role


def count_admins(session=None) -> int:
    session = session or get_db()
    return len(session.execute(select(UserRole).where(UserRole.role==ROLE_ADMIN)).scalars().all())


def assert_not_removing_last_admin(target_user_id: int, new_role: str, session=None):
    """Refuse a role change that would leave the system without any admin."""
    if new_role == ROLE_ADMIN:
        return
    session = session or get_db()
    if get_user_role(target_user_id, session) == ROLE_ADMIN and count_admins(session) <= 1:
        abort(400, description='Cannot remove last admin')


def current_actor() -> ActorContext:
    """Build the actor from the verified JWT (identity + 'role' claim)."""
    claims = get_jwt()
    role = claims.get('role') or ROLE_NONE
    return ActorContext(user_id=str(get_jwt_identity()), role=role)


def assert_admin(actor: ActorContext, description: str = 'Admin role required'):
    if not actor.is_admin:
        abort(403, description=description)
