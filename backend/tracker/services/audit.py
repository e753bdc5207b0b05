from __future__ import annotations
"""Audit trail writer and reader.

Writing is best-effort: callers commit their own mutation first, then call
record_audit(). The entry goes through a separate session so a failing audit
store can neither roll back nor fail the business change; the failure is only
reported to the application log.

Reading is admin-only and fails loudly (store errors propagate).
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from tracker import get_db, open_session
from tracker.models.audit import AuditLog
from tracker.constants.audit import ACTION_FIELDS, ACTION_TYPES, RECORD_TYPES
from tracker.constants.roles import ROLES
from tracker.services.policy import ActorContext, assert_admin
from tracker.utils.validation import is_uuid


class AuditValidationError(ValueError):
    """The audit call itself is malformed; nothing was written."""


def _is_uuid(value: Any) -> bool:
    return isinstance(value, str) and is_uuid(value)


def _jsonable(value: Any):
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _validate(actor, action_type, record_type, record_id, worker_id, previous_value, new_value):
    if actor is None or not actor.user_id:
        raise AuditValidationError('actor is required')
    if actor.role not in ROLES:
        raise AuditValidationError(f'actor role must be one of {ROLES}, got {actor.role!r}')
    if action_type not in ACTION_TYPES:
        raise AuditValidationError(f'unknown action_type {action_type!r}')
    if record_type not in RECORD_TYPES:
        raise AuditValidationError(f'unknown record_type {record_type!r}')
    bound = ACTION_FIELDS.get(action_type)
    if bound and bound[0] != record_type:
        raise AuditValidationError(f'{action_type} applies to {bound[0]} records, not {record_type}')
    if not _is_uuid(record_id):
        raise AuditValidationError(f'record_id must be a UUID string, got {record_id!r}')
    if worker_id is not None and not _is_uuid(worker_id):
        raise AuditValidationError(f'worker_id must be a UUID string, got {worker_id!r}')
    if previous_value is None and new_value is None:
        raise AuditValidationError('previous_value or new_value is required')


def _audit_session():
    return open_session()


def record_audit(
    actor: ActorContext,
    action_type: str,
    record_type: str,
    record_id: str,
    *,
    previous_value: Optional[Dict[str, Any]] = None,
    new_value: Optional[Dict[str, Any]] = None,
    worker_id: Optional[str] = None,
    reason: Optional[str] = None,
) -> Optional[AuditLog]:
    """Append one audit entry for a mutation that has already committed.

    Raises AuditValidationError for malformed input. Returns the persisted
    entry, or None when the store rejected the write (logged, not raised).
    """
    _validate(actor, action_type, record_type, record_id, worker_id, previous_value, new_value)
    entry = AuditLog(
        action_type=action_type,
        record_type=record_type,
        record_id=record_id,
        worker_id=worker_id,
        performed_by=actor.user_id,
        performed_by_role=actor.role,
        previous_value=_jsonable(previous_value) if previous_value is not None else None,
        new_value=_jsonable(new_value) if new_value is not None else None,
        reason=reason or None,
    )
    session = None
    try:
        session = _audit_session()
        session.add(entry)
        session.commit()
    except SQLAlchemyError:
        if session is not None:
            try:
                session.rollback()
            except SQLAlchemyError:
                pass  # connection already gone; the original failure is logged below
        current_app.logger.exception(
            'Audit write failed for %s %s/%s by %s', action_type, record_type, record_id, actor.user_id
        )
        return None
    finally:
        if session is not None:
            session.close()
    current_app.logger.debug('Audit %s %s/%s by %s (%s)', action_type, record_type, record_id, actor.user_id, actor.role)
    return entry


def query_audit_logs(
    actor: ActorContext,
    *,
    record_type: Optional[str] = None,
    record_id: Optional[str] = None,
    worker_id: Optional[str] = None,
    action_type: Optional[str] = None,
    limit: Optional[int] = None,
    session=None,
) -> List[AuditLog]:
    """Return entries matching every given filter, newest first.

    Non-admin actors are rejected (403) before the query runs. No cap unless
    `limit` is given.
    """
    assert_admin(actor, 'Audit log access requires admin role')
    session = session or get_db()
    q = session.query(AuditLog)
    if record_type:
        q = q.filter(AuditLog.record_type==record_type)
    if record_id:
        q = q.filter(AuditLog.record_id==record_id)
    if worker_id:
        q = q.filter(AuditLog.worker_id==worker_id)
    if action_type:
        q = q.filter(AuditLog.action_type==action_type)
    q = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
    if limit is not None:
        q = q.limit(limit)
    return q.all()


__all__ = ['AuditValidationError', 'record_audit', 'query_audit_logs']
