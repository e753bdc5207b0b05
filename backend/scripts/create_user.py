#!/usr/bin/env python
"""Idempotent bootstrap for login accounts.

Usage:
    python backend/scripts/create_user.py admin@example.com --role admin
    python backend/scripts/create_user.py clerk@example.com --password s3cret
    python backend/scripts/create_user.py clerk@example.com --role admin --dry-run
    python backend/scripts/create_user.py --list
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from tracker import create_app, get_db  # type: ignore
from tracker.models.authz import Base, User, UserRole
from tracker.constants.roles import ROLE_USER, ROLES
from tracker.services.policy import assert_not_removing_last_admin
from werkzeug.exceptions import HTTPException


def ensure_user(session, email: str, name: str | None, password: str | None):
    """Return (user, created). A new user needs a password."""
    user = session.execute(select(User).where(User.email==email)).scalar_one_or_none()
    if user:
        if password:
            user.set_password(password)
        if name:
            user.name = name
        return user, False
    if not password:
        password = os.getenv('SEED_ADMIN_PASSWORD')
    if not password:
        raise SystemExit('[ERROR] --password (or SEED_ADMIN_PASSWORD) required for a new user')
    user = User(name=name or email.split('@')[0], email=email, password_hash='')
    user.set_password(password)
    session.add(user)
    session.flush()
    return user, True


def ensure_role(session, user: User, role: str):
    row = session.execute(select(UserRole).where(UserRole.user_id==user.id)).scalar_one_or_none()
    if row and row.role == role:
        return False
    try:
        assert_not_removing_last_admin(user.id, role, session)
    except HTTPException as e:
        raise SystemExit(f'[ERROR] {e.description}')
    if row:
        row.role = role
    else:
        session.add(UserRole(user_id=user.id, role=role))
    return True


def print_users(session):
    rows = session.execute(select(User).order_by(User.email)).scalars().all()
    if not rows:
        print('[INFO] No users present.')
        return
    email_w = max(len(u.email) for u in rows)
    print(f"{'Email'.ljust(email_w)} | Role  | Active")
    print('-' * (email_w + 20))
    for u in rows:
        role = u.role.role if u.role else 'none'
        print(f"{u.email.ljust(email_w)} | {role.ljust(5)} | {'yes' if u.is_active else 'no'}")


def parse_args():
    p = argparse.ArgumentParser(
        description='Create or update a user and its role',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  first admin: create_user.py owner@example.com --role admin --password ...\n  dry run: create_user.py a@b.c --role user --dry-run\n  list: create_user.py --list\n""")
    )
    p.add_argument('email', nargs='?', help='Account email (lookup key)')
    p.add_argument('--name', help='Display name (defaults to the email local part)')
    p.add_argument('--password', help='Password to set (required when creating)')
    p.add_argument('--role', choices=ROLES, default=ROLE_USER, help='Role to assign')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    p.add_argument('--list', action='store_true', help='Print users and roles')
    args = p.parse_args()
    if not args.email and not args.list:
        p.error('email is required unless --list is given')
    return args


def main():
    args = parse_args()
    app = create_app()
    with app.app_context():
        session = get_db()
        # Bootstrap convenience; prefer `alembic upgrade head` in real deployments
        Base.metadata.create_all(session.get_bind(), checkfirst=True)
        try:
            if args.email:
                user, created = ensure_user(session, args.email, args.name, args.password)
                role_changed = ensure_role(session, user, args.role)
                if args.dry_run:
                    session.rollback()
                    print(f"[DRY-RUN] (rolled back) user created: {created}, role changed: {role_changed}")
                else:
                    session.commit()
                    print(f"[DONE] {args.email}: user created: {created}, role: {args.role}")
            if args.list:
                print_users(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

if __name__ == '__main__':
    main()
