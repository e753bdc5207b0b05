from __future__ import annotations
from flask import Blueprint, request, abort
from tracker.constants.audit import ACTION_TYPES, RECORD_TYPES
from tracker.constants.roles import ROLE_ADMIN
from tracker.decorators.auth import require_role
from tracker.services.policy import current_actor
from tracker.services.audit import query_audit_logs
from tracker.utils.listing import build_list_payload
from tracker.utils.validation import validate_choice
from tracker.config.limits import AUDIT_VIEW_LIMIT, normalize_limit

audit_bp = Blueprint('audit', __name__)


@audit_bp.get('/logs')
@require_role(ROLE_ADMIN)
def list_audit_logs():
    record_type = request.args.get('record_type') or None
    action_type = request.args.get('action_type') or None
    if record_type:
        validate_choice(record_type, RECORD_TYPES, 'record_type')
    if action_type:
        validate_choice(action_type, ACTION_TYPES, 'action_type')
    try:
        limit = normalize_limit(request.args.get('limit'), AUDIT_VIEW_LIMIT)
    except ValueError as e:
        abort(400, description=str(e))
    rows = query_audit_logs(
        current_actor(),
        record_type=record_type,
        action_type=action_type,
        record_id=request.args.get('record_id') or None,
        worker_id=request.args.get('worker_id') or None,
        limit=limit,
    )
    return build_list_payload([r.to_json() for r in rows], limit)
