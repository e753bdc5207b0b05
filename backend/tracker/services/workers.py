from __future__ import annotations
from typing import Optional
from flask import abort
from sqlalchemy import select
from tracker import get_db
from tracker.models.worker import Worker
from tracker.constants import audit as A
from tracker.services.audit import record_audit
from tracker.services.policy import ActorContext, assert_admin


def worker_json(w: Worker):
    return {
        'id': w.id,
        'name': w.name,
        'daily_income_amount': w.daily_income_amount,
        'status': w.status,
        'created_by': w.created_by,
        'created_at': w.created_at.isoformat() if w.created_at else None,
        'updated_at': w.updated_at.isoformat() if w.updated_at else None,
    }


def get_worker_or_404(worker_id: str, session=None) -> Worker:
    session = session or get_db()
    w = session.execute(select(Worker).where(Worker.id==worker_id)).scalar_one_or_none()
    if not w:
        abort(404, description='worker not found')
    return w


def create_worker(actor: ActorContext, name: str, daily_income_amount: float, reason: Optional[str] = None) -> Worker:
    assert_admin(actor, 'Only admins can create workers')
    session = get_db()
    w = Worker(name=name, daily_income_amount=daily_income_amount, status=Worker.STATUS_ACTIVE, created_by=actor.user_id)
    session.add(w)
    session.commit()
    record_audit(
        actor, A.WORKER_CREATED, A.RECORD_WORKER, w.id,
        worker_id=w.id,
        new_value={'name': w.name, 'daily_income_amount': w.daily_income_amount},
        reason=reason,
    )
    return w


def update_worker(actor: ActorContext, worker_id: str, changes: dict, reason: Optional[str] = None) -> Worker:
    """Apply profile changes (name, daily_income_amount); audits the touched fields only."""
    assert_admin(actor, 'Only admins can update workers')
    session = get_db()
    w = get_worker_or_404(worker_id, session)
    fields = [k for k in ('name', 'daily_income_amount') if k in changes]
    before = {k: getattr(w, k) for k in fields}
    for k in fields:
        setattr(w, k, changes[k])
    session.commit()
    record_audit(
        actor, A.WORKER_UPDATED, A.RECORD_WORKER, w.id,
        worker_id=w.id,
        previous_value=before,
        new_value={k: getattr(w, k) for k in fields},
        reason=reason,
    )
    return w


def toggle_worker_status(actor: ActorContext, worker_id: str, reason: Optional[str] = None) -> Worker:
    assert_admin(actor, 'Only admins can change worker status')
    session = get_db()
    w = get_worker_or_404(worker_id, session)
    old_status = w.status
    w.status = w.toggled_status()
    session.commit()
    record_audit(
        actor, A.WORKER_UPDATED, A.RECORD_WORKER, w.id,
        worker_id=w.id,
        previous_value={'status': old_status},
        new_value={'status': w.status},
        reason=reason,
    )
    return w


def delete_worker(actor: ActorContext, worker_id: str, reason: Optional[str] = None) -> dict:
    """Delete the worker and its income/expense rows; returns the prior snapshot."""
    assert_admin(actor, 'Only admins can delete workers')
    session = get_db()
    w = get_worker_or_404(worker_id, session)
    snapshot = worker_json(w)
    session.delete(w)
    session.commit()
    record_audit(
        actor, A.WORKER_DELETED, A.RECORD_WORKER, snapshot['id'],
        worker_id=snapshot['id'],
        previous_value=snapshot,
        reason=reason,
    )
    return snapshot


__all__ = ['worker_json', 'get_worker_or_404', 'create_worker', 'update_worker', 'toggle_worker_status', 'delete_worker']
