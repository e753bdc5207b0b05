from __future__ import annotations
import uuid
import datetime as dt
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy import String, Numeric, Boolean, Date, DateTime, Text, ForeignKey, UniqueConstraint, func
from typing import Optional
from .authz import Base


def is_payment_complete(paid_amount: float, expected_amount: float) -> bool:
    """Completion threshold: a day is settled once the paid amount reaches the expected one."""
    return paid_amount >= expected_amount


class IncomeRecord(Base):
    __tablename__ = 'income_records'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    worker_id: Mapped[str] = mapped_column(ForeignKey('workers.id', ondelete='CASCADE'), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    expected_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    paid_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    worker = relationship('Worker', back_populates='income_records')

    __table_args__ = (UniqueConstraint('worker_id', 'date', name='uq_income_worker_date'),)

    @hybrid_property
    def remaining_balance(self):
        return round(self.expected_amount - self.paid_amount, 2)

    @remaining_balance.expression
    def remaining_balance(cls):
        return cls.expected_amount - cls.paid_amount

    def set_completion(self, completed: bool, actor_id: str):
        self.is_completed = completed
        self.completed_by = actor_id if completed else None
        self.completed_at = datetime.now(timezone.utc) if completed else None

    def apply_payment(self, paid_amount: float, actor_id: str):
        """Write paid_amount and re-evaluate completion against expected_amount."""
        self.paid_amount = paid_amount
        self.set_completion(is_payment_complete(paid_amount, self.expected_amount), actor_id)

__all__ = ["IncomeRecord", "is_payment_complete"]
