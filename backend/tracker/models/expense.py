from __future__ import annotations
import uuid
import datetime as dt
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Numeric, Boolean, Date, DateTime, Text, ForeignKey, func
from typing import Optional
from .authz import Base


class Expense(Base):
    __tablename__ = 'expenses'
    CATEGORIES = ('tools', 'transport', 'food', 'accommodation', 'equipment', 'other')
    TYPE_ONE_TIME = 'one_time'
    TYPE_RECURRING = 'recurring'
    ALL_TYPES = (TYPE_ONE_TIME, TYPE_RECURRING)
    RECURRENCE_PATTERNS = ('daily', 'weekly', 'monthly')

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    worker_id: Mapped[str] = mapped_column(ForeignKey('workers.id', ondelete='CASCADE'), nullable=False, index=True)
    amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, default='other', index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    expense_type: Mapped[str] = mapped_column(String(16), nullable=False, default=TYPE_ONE_TIME)
    recurrence_pattern: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    worker = relationship('Worker', back_populates='expenses')

    def set_paid(self, paid: bool, actor_id: str):
        self.is_paid = paid
        self.paid_by = actor_id if paid else None
        self.paid_at = datetime.now(timezone.utc) if paid else None

__all__ = ["Expense"]
