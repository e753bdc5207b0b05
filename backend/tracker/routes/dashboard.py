from __future__ import annotations
from datetime import date
from flask import Blueprint, request
from tracker.constants.roles import ROLES
from tracker.decorators.auth import require_role
from tracker.services.dashboard import compute_summary
from tracker.utils.validation import parse_date

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.get('/summary')
@require_role(*ROLES)
def summary():
    today = parse_date(request.args.get('as_of'), 'as_of', default=date.today())
    return compute_summary(today)
