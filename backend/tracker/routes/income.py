from __future__ import annotations
from datetime import date
from flask import Blueprint, request, abort
from tracker import get_db
from tracker.models.income_record import IncomeRecord
from tracker.constants.roles import ROLES
from tracker.decorators.auth import require_role
from tracker.services.policy import current_actor
from tracker.services import income as svc
from tracker.utils.filters import apply_filters
from tracker.utils.listing import build_list_payload
from tracker.utils.validation import parse_amount, parse_date, parse_bool, optional_text
from tracker.config.limits import LIST_ROW_CAP

income_bp = Blueprint('income', __name__)


@income_bp.get('/records')
@require_role(*ROLES)
def list_income_records():
    session = get_db()
    q = session.query(IncomeRecord)
    filter_specs = {
        'worker_id': {'op': lambda qu, v: qu.filter(IncomeRecord.worker_id==v)},
        'date': {'coerce': lambda v: parse_date(v), 'op': lambda qu, v: qu.filter(IncomeRecord.date==v)},
        'is_completed': {'coerce': lambda v: parse_bool(v, 'is_completed'), 'op': lambda qu, v: qu.filter(IncomeRecord.is_completed.is_(v))},
    }
    q = apply_filters(q, filter_specs, request.args)
    rows = q.order_by(IncomeRecord.date.desc(), IncomeRecord.created_at.desc()).limit(LIST_ROW_CAP).all()
    return build_list_payload([svc.income_json(r) for r in rows], LIST_ROW_CAP)


@income_bp.post('/records')
@require_role(*ROLES)
def submit_payment():
    data = request.json or {}
    worker_id = data.get('worker_id')
    if not worker_id:
        abort(400, description='worker_id required')
    on_date = parse_date(data.get('date'), 'date', default=date.today())
    paid_amount = parse_amount(data.get('paid_amount', 0), 'paid_amount')
    r = svc.submit_payment(
        current_actor(), str(worker_id), on_date, paid_amount,
        notes=optional_text(data, 'notes'),
        reason=optional_text(data, 'reason'),
    )
    return svc.income_json(r), 201


@income_bp.post('/records/<record_id>/toggle-complete')
@require_role(*ROLES)
def toggle_complete(record_id: str):
    data = request.get_json(silent=True) or {}
    r = svc.toggle_completion(current_actor(), record_id, reason=optional_text(data, 'reason'))
    return svc.income_json(r)


@income_bp.put('/records/<record_id>/payment')
@require_role(*ROLES)
def edit_payment(record_id: str):
    data = request.json or {}
    paid_amount = parse_amount(data.get('paid_amount'), 'paid_amount')
    r = svc.edit_payment(current_actor(), record_id, paid_amount, reason=optional_text(data, 'reason'))
    return svc.income_json(r)
