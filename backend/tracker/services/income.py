from __future__ import annotations
from datetime import date
from typing import Optional
from flask import abort
from sqlalchemy import select
from tracker import get_db
from tracker.models.income_record import IncomeRecord
from tracker.constants import audit as A
from tracker.services.audit import record_audit
from tracker.services.policy import ActorContext
from tracker.services.workers import get_worker_or_404


def income_json(r: IncomeRecord):
    return {
        'id': r.id,
        'worker_id': r.worker_id,
        'date': r.date.isoformat(),
        'expected_amount': r.expected_amount,
        'paid_amount': r.paid_amount,
        'remaining_balance': r.remaining_balance,
        'is_completed': r.is_completed,
        'notes': r.notes,
        'completed_at': r.completed_at.isoformat() if r.completed_at else None,
        'completed_by': r.completed_by,
    }


def get_income_or_404(record_id: str, session=None) -> IncomeRecord:
    session = session or get_db()
    r = session.execute(select(IncomeRecord).where(IncomeRecord.id==record_id)).scalar_one_or_none()
    if not r:
        abort(404, description='income record not found')
    return r


def submit_payment(
    actor: ActorContext,
    worker_id: str,
    on_date: date,
    paid_amount: float,
    notes: Optional[str] = None,
    reason: Optional[str] = None,
) -> IncomeRecord:
    """Upsert the (worker, date) income row; every call is audited separately."""
    session = get_db()
    worker = get_worker_or_404(worker_id, session)
    r = session.execute(
        select(IncomeRecord).where(IncomeRecord.worker_id==worker.id, IncomeRecord.date==on_date)
    ).scalar_one_or_none()
    if not r:
        r = IncomeRecord(worker_id=worker.id, date=on_date)
        session.add(r)
    r.expected_amount = worker.daily_income_amount
    r.apply_payment(paid_amount, actor.user_id)
    if notes is not None:
        r.notes = notes
    session.commit()
    record_audit(
        actor, A.PARTIAL_PAYMENT_ADDED, A.RECORD_INCOME, r.id,
        worker_id=worker.id,
        new_value={'paid_amount': r.paid_amount, 'is_completed': r.is_completed},
        reason=reason,
    )
    return r


def toggle_completion(actor: ActorContext, record_id: str, reason: Optional[str] = None) -> IncomeRecord:
    """Flip is_completed by hand; paid_amount is left as is."""
    session = get_db()
    r = get_income_or_404(record_id, session)
    if r.is_completed and not actor.is_admin:
        abort(403, description='Only admins can uncheck completed payments')
    was_completed = r.is_completed
    r.set_completion(not was_completed, actor.user_id)
    session.commit()
    record_audit(
        actor,
        A.COMPLETION_UNCHECKED if was_completed else A.FULL_COMPLETION_CHECKED,
        A.RECORD_INCOME, r.id,
        worker_id=r.worker_id,
        previous_value={'is_completed': was_completed},
        new_value={'is_completed': r.is_completed},
        reason=reason,
    )
    return r


def edit_payment(actor: ActorContext, record_id: str, paid_amount: float, reason: Optional[str] = None) -> IncomeRecord:
    session = get_db()
    r = get_income_or_404(record_id, session)
    if r.is_completed and not actor.is_admin:
        abort(403, description='Only admins can edit completed payments')
    old_amount = r.paid_amount
    r.apply_payment(paid_amount, actor.user_id)
    session.commit()
    record_audit(
        actor, A.AMOUNT_EDITED, A.RECORD_INCOME, r.id,
        worker_id=r.worker_id,
        previous_value={'paid_amount': old_amount},
        new_value={'paid_amount': r.paid_amount},
        reason=reason,
    )
    return r


__all__ = ['income_json', 'get_income_or_404', 'submit_payment', 'toggle_completion', 'edit_payment']
