"""Closed vocabularies for the audit trail.

Extend cautiously; never rename action codes silently since stored entries keep
the old string forever.
"""
from __future__ import annotations
from typing import Dict, Tuple

RECORD_INCOME = 'income'
RECORD_EXPENSE = 'expense'
RECORD_WORKER = 'worker'
RECORD_TYPES = (RECORD_INCOME, RECORD_EXPENSE, RECORD_WORKER)

PARTIAL_PAYMENT_ADDED = 'partial_payment_added'
FULL_COMPLETION_CHECKED = 'full_completion_checked'
COMPLETION_UNCHECKED = 'completion_unchecked'
AMOUNT_EDITED = 'amount_edited'
RECORD_DELETED = 'record_deleted'
RECORD_CREATED = 'record_created'
EXPENSE_MARKED_PAID = 'expense_marked_paid'
EXPENSE_MARKED_UNPAID = 'expense_marked_unpaid'
WORKER_CREATED = 'worker_created'
WORKER_UPDATED = 'worker_updated'
WORKER_DELETED = 'worker_deleted'

ACTION_TYPES = (
    PARTIAL_PAYMENT_ADDED,
    FULL_COMPLETION_CHECKED,
    COMPLETION_UNCHECKED,
    AMOUNT_EDITED,
    RECORD_DELETED,
    RECORD_CREATED,
    EXPENSE_MARKED_PAID,
    EXPENSE_MARKED_UNPAID,
    WORKER_CREATED,
    WORKER_UPDATED,
    WORKER_DELETED,
)

# action -> (record_type, previous_value fields, new_value fields)
# None means the payload is absent; '*' means a full record snapshot.
# worker_updated carries whichever fields changed (profile or status).
# record_deleted is reserved; no endpoint emits it yet.
ACTION_FIELDS: Dict[str, Tuple[str, object, object]] = {
    PARTIAL_PAYMENT_ADDED: (RECORD_INCOME, None, ('paid_amount', 'is_completed')),
    FULL_COMPLETION_CHECKED: (RECORD_INCOME, ('is_completed',), ('is_completed',)),
    COMPLETION_UNCHECKED: (RECORD_INCOME, ('is_completed',), ('is_completed',)),
    AMOUNT_EDITED: (RECORD_INCOME, ('paid_amount',), ('paid_amount',)),
    RECORD_CREATED: (RECORD_EXPENSE, None, ('amount', 'category', 'expense_type')),
    EXPENSE_MARKED_PAID: (RECORD_EXPENSE, ('is_paid',), ('is_paid',)),
    EXPENSE_MARKED_UNPAID: (RECORD_EXPENSE, ('is_paid',), ('is_paid',)),
    WORKER_CREATED: (RECORD_WORKER, None, ('name', 'daily_income_amount')),
    WORKER_UPDATED: (RECORD_WORKER, '*', '*'),
    WORKER_DELETED: (RECORD_WORKER, '*', None),
}

__all__ = [name for name in dir() if name.isupper()]
