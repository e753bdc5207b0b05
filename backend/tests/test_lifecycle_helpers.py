"""Reusable test helpers shared by the endpoint tests.

Patterns unified:
 - Auth header creation using direct JWT claims (bypassing /login) or via login.
 - Creation + toggle sequencing with assertion helpers.
 - Audit trail lookups for a single record.
"""
from __future__ import annotations
from typing import Dict, List
from flask_jwt_extended import create_access_token
from tests.test_utils_seed import ensure_user_with_role
from tracker import get_db
from tracker.models.audit import AuditLog

# ---------- Generic Auth Helpers ---------- #

def jwt_headers(user_id, role: str):
    token = create_access_token(identity=str(user_id), additional_claims={'role': role})
    return {'Authorization': f'Bearer {token}'}


def login_headers(client, email: str, password: str = 'pw'):
    resp = client.post('/auth/login', json={'email': email, 'password': password})
    assert resp.status_code == 200, resp.get_json()
    return {'Authorization': f"Bearer {resp.get_json()['access_token']}"}


def seed_actor(email: str, role: str):
    """Ensure a user with `role` and return (user, headers)."""
    user = ensure_user_with_role(email, role)
    return user, jwt_headers(user.id, role)

# ---------- Assertion Helpers ---------- #

def assert_toggle(client, url: str, headers: Dict[str, str], expected_status: int, expected_field: str = None, expected_value=None):
    resp = client.post(url, headers=headers)
    assert resp.status_code == expected_status, resp.get_json()
    if expected_status < 400 and expected_field is not None:
        assert resp.get_json()[expected_field] == expected_value
    return resp


def create_resource_and_assert(client, url: str, payload: dict, headers: Dict[str, str]):
    resp = client.post(url, json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def audit_entries(record_id: str) -> List[AuditLog]:
    """Entries for one record, oldest first."""
    session = get_db()
    session.expire_all()
    return session.query(AuditLog).filter(AuditLog.record_id==record_id).order_by(AuditLog.id.asc()).all()

__all__ = [
    'jwt_headers', 'login_headers', 'seed_actor', 'assert_toggle', 'create_resource_and_assert', 'audit_entries'
]
