from __future__ import annotations
from datetime import date
from flask import Blueprint, request, abort
from tracker import get_db
from tracker.models.expense import Expense
from tracker.constants.roles import ROLES
from tracker.decorators.auth import require_role
from tracker.services.policy import current_actor
from tracker.services import expenses as svc
from tracker.utils.filters import apply_filters
from tracker.utils.listing import build_list_payload
from tracker.utils.validation import parse_amount, parse_date, parse_bool, validate_choice, optional_text
from tracker.config.limits import LIST_ROW_CAP

expenses_bp = Blueprint('expenses', __name__)


@expenses_bp.get('')
@require_role(*ROLES)
def list_expenses():
    session = get_db()
    q = session.query(Expense)
    filter_specs = {
        'worker_id': {'op': lambda qu, v: qu.filter(Expense.worker_id==v)},
        'category': {'op': lambda qu, v: qu.filter(Expense.category==v), 'validate': lambda v: v in Expense.CATEGORIES},
        'is_paid': {'coerce': lambda v: parse_bool(v, 'is_paid'), 'op': lambda qu, v: qu.filter(Expense.is_paid.is_(v))},
    }
    q = apply_filters(q, filter_specs, request.args)
    rows = q.order_by(Expense.date.desc(), Expense.created_at.desc()).limit(LIST_ROW_CAP).all()
    return build_list_payload([svc.expense_json(e) for e in rows], LIST_ROW_CAP)


@expenses_bp.post('')
@require_role(*ROLES)
def create_expense():
    data = request.json or {}
    worker_id = data.get('worker_id')
    if not worker_id:
        abort(400, description='worker_id required')
    amount = parse_amount(data.get('amount'), 'amount', minimum=0, allow_minimum=False)
    category = validate_choice(data.get('category') or 'other', Expense.CATEGORIES, 'category')
    expense_type = validate_choice(data.get('expense_type') or Expense.TYPE_ONE_TIME, Expense.ALL_TYPES, 'expense_type')
    recurrence_pattern = None
    if expense_type == Expense.TYPE_RECURRING:
        recurrence_pattern = validate_choice(data.get('recurrence_pattern'), Expense.RECURRENCE_PATTERNS, 'recurrence_pattern')
    on_date = parse_date(data.get('date'), 'date', default=date.today())
    e = svc.create_expense(
        current_actor(), str(worker_id), amount, category, expense_type, on_date,
        recurrence_pattern=recurrence_pattern,
        description=optional_text(data, 'description'),
        reason=optional_text(data, 'reason'),
    )
    return svc.expense_json(e), 201


@expenses_bp.post('/<expense_id>/toggle-paid')
@require_role(*ROLES)
def toggle_paid(expense_id: str):
    data = request.get_json(silent=True) or {}
    e = svc.toggle_paid(current_actor(), expense_id, reason=optional_text(data, 'reason'))
    return svc.expense_json(e)
