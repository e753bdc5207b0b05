from __future__ import annotations
from datetime import date
from typing import Optional
from flask import abort
from sqlalchemy import select
from tracker import get_db
from tracker.models.expense import Expense
from tracker.constants import audit as A
from tracker.services.audit import record_audit
from tracker.services.policy import ActorContext
from tracker.services.workers import get_worker_or_404


def expense_json(e: Expense):
    return {
        'id': e.id,
        'worker_id': e.worker_id,
        'amount': e.amount,
        'category': e.category,
        'description': e.description,
        'expense_type': e.expense_type,
        'recurrence_pattern': e.recurrence_pattern,
        'date': e.date.isoformat(),
        'is_paid': e.is_paid,
        'paid_at': e.paid_at.isoformat() if e.paid_at else None,
        'paid_by': e.paid_by,
    }


def get_expense_or_404(expense_id: str, session=None) -> Expense:
    session = session or get_db()
    e = session.execute(select(Expense).where(Expense.id==expense_id)).scalar_one_or_none()
    if not e:
        abort(404, description='expense not found')
    return e


def create_expense(
    actor: ActorContext,
    worker_id: str,
    amount: float,
    category: str,
    expense_type: str,
    on_date: date,
    recurrence_pattern: Optional[str] = None,
    description: Optional[str] = None,
    reason: Optional[str] = None,
) -> Expense:
    session = get_db()
    worker = get_worker_or_404(worker_id, session)
    e = Expense(
        worker_id=worker.id,
        amount=amount,
        category=category,
        description=description,
        expense_type=expense_type,
        recurrence_pattern=recurrence_pattern if expense_type == Expense.TYPE_RECURRING else None,
        date=on_date,
        is_paid=False,
    )
    session.add(e)
    session.commit()
    record_audit(
        actor, A.RECORD_CREATED, A.RECORD_EXPENSE, e.id,
        worker_id=worker.id,
        new_value={'amount': e.amount, 'category': e.category, 'expense_type': e.expense_type},
        reason=reason,
    )
    return e


def toggle_paid(actor: ActorContext, expense_id: str, reason: Optional[str] = None) -> Expense:
    session = get_db()
    e = get_expense_or_404(expense_id, session)
    if e.is_paid and not actor.is_admin:
        abort(403, description='Only admins can unmark paid expenses')
    was_paid = e.is_paid
    e.set_paid(not was_paid, actor.user_id)
    session.commit()
    record_audit(
        actor,
        A.EXPENSE_MARKED_UNPAID if was_paid else A.EXPENSE_MARKED_PAID,
        A.RECORD_EXPENSE, e.id,
        worker_id=e.worker_id,
        previous_value={'is_paid': was_paid},
        new_value={'is_paid': e.is_paid},
        reason=reason,
    )
    return e


__all__ = ['expense_json', 'get_expense_or_404', 'create_expense', 'toggle_paid']
