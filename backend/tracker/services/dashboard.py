from __future__ import annotations
import calendar
from datetime import date, timedelta
from typing import Dict, Optional, Tuple
from sqlalchemy import func, and_
from tracker import get_db
from tracker.models.worker import Worker
from tracker.models.income_record import IncomeRecord
from tracker.models.expense import Expense


def week_bounds(today: date) -> Tuple[date, date]:
    """Sunday..Saturday week containing `today`."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_bounds(today: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def _sum(session, column, *conditions) -> float:
    q = session.query(func.coalesce(func.sum(column), 0))
    if conditions:
        q = q.filter(and_(*conditions))
    return round(float(q.scalar() or 0), 2)


def compute_summary(today: date, session=None) -> Dict[str, object]:
    """Dashboard totals. Expense figures only count paid expenses."""
    session = session or get_db()
    week_start, week_end = week_bounds(today)
    month_start, month_end = month_bounds(today)
    paid = Expense.is_paid.is_(True)

    def income_between(start: Optional[date], end: Optional[date]):
        conds = []
        if start:
            conds.append(IncomeRecord.date >= start)
        if end:
            conds.append(IncomeRecord.date <= end)
        return _sum(session, IncomeRecord.paid_amount, *conds)

    def expenses_between(start: Optional[date], end: Optional[date]):
        conds = [paid]
        if start:
            conds.append(Expense.date >= start)
        if end:
            conds.append(Expense.date <= end)
        return _sum(session, Expense.amount, *conds)

    total_income = income_between(None, None)
    total_expenses = expenses_between(None, None)
    active_workers = session.query(func.count(Worker.id)).filter(Worker.status==Worker.STATUS_ACTIVE).scalar() or 0
    outstanding = _sum(session, IncomeRecord.remaining_balance, IncomeRecord.remaining_balance > 0)
    return {
        'as_of': today.isoformat(),
        'active_workers': int(active_workers),
        'total_income': total_income,
        'total_expenses': total_expenses,
        'net_profit': round(total_income - total_expenses, 2),
        'today_income': income_between(today, today),
        'today_expenses': expenses_between(today, today),
        'week_income': income_between(week_start, week_end),
        'week_expenses': expenses_between(week_start, week_end),
        'month_income': income_between(month_start, month_end),
        'month_expenses': expenses_between(month_start, month_end),
        'outstanding_dues': outstanding,
    }


__all__ = ['compute_summary', 'week_bounds', 'month_bounds']
