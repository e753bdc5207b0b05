from __future__ import annotations
from flask import Blueprint, request, abort
from tracker import get_db
from tracker.models.worker import Worker
from tracker.constants.roles import ROLE_ADMIN, ROLES
from tracker.decorators.auth import require_role
from tracker.services.policy import current_actor
from tracker.services import workers as svc
from tracker.utils.filters import apply_filters
from tracker.utils.listing import build_list_payload
from tracker.utils.validation import require_text, parse_amount, optional_text
from tracker.config.limits import LIST_ROW_CAP

workers_bp = Blueprint('workers', __name__)


@workers_bp.get('')
@require_role(*ROLES)
def list_workers():
    session = get_db()
    q = session.query(Worker)
    filter_specs = {
        'status': {'op': lambda qu, v: qu.filter(Worker.status==v), 'validate': lambda v: v in Worker.ALL_STATUSES},
    }
    q = apply_filters(q, filter_specs, request.args)
    rows = q.order_by(Worker.created_at.desc(), Worker.name.asc()).limit(LIST_ROW_CAP).all()
    return build_list_payload([svc.worker_json(w) for w in rows], LIST_ROW_CAP)


@workers_bp.post('')
@require_role(ROLE_ADMIN)
def create_worker():
    data = request.json or {}
    name = require_text(data, 'name')
    amount = parse_amount(data.get('daily_income_amount'), 'daily_income_amount')
    w = svc.create_worker(current_actor(), name, amount, reason=optional_text(data, 'reason'))
    return svc.worker_json(w), 201


@workers_bp.get('/<worker_id>')
@require_role(*ROLES)
def get_worker(worker_id: str):
    return svc.worker_json(svc.get_worker_or_404(worker_id))


@workers_bp.put('/<worker_id>')
@require_role(ROLE_ADMIN)
def update_worker(worker_id: str):
    data = request.json or {}
    changes = {}
    if 'name' in data:
        changes['name'] = require_text(data, 'name')
    if 'daily_income_amount' in data:
        changes['daily_income_amount'] = parse_amount(data.get('daily_income_amount'), 'daily_income_amount')
    if not changes:
        abort(400, description='name or daily_income_amount required')
    w = svc.update_worker(current_actor(), worker_id, changes, reason=optional_text(data, 'reason'))
    return svc.worker_json(w)


@workers_bp.post('/<worker_id>/toggle-status')
@require_role(ROLE_ADMIN)
def toggle_worker_status(worker_id: str):
    data = request.get_json(silent=True) or {}
    w = svc.toggle_worker_status(current_actor(), worker_id, reason=optional_text(data, 'reason'))
    return svc.worker_json(w)


@workers_bp.delete('/<worker_id>')
@require_role(ROLE_ADMIN)
def delete_worker(worker_id: str):
    data = request.get_json(silent=True) or {}
    snapshot = svc.delete_worker(current_actor(), worker_id, reason=optional_text(data, 'reason'))
    return {'status': 'deleted', 'id': snapshot['id']}
