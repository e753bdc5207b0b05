"""Role names stored in user_roles and carried in the JWT 'role' claim."""
from __future__ import annotations

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'
ROLE_NONE = 'none'  # authenticated, but no user_roles row

ROLES = (ROLE_USER, ROLE_ADMIN)

__all__ = ['ROLE_USER', 'ROLE_ADMIN', 'ROLE_NONE', 'ROLES']
