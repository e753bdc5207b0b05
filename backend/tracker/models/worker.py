from __future__ import annotations
import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Numeric, DateTime, func
from typing import Optional
from .authz import Base


class Worker(Base):
    __tablename__ = 'workers'
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    ALL_STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    daily_income_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_ACTIVE, index=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Dependent rows go with the worker; audit entries do not (no FK from audit_logs).
    income_records = relationship('IncomeRecord', back_populates='worker', cascade='all, delete-orphan')
    expenses = relationship('Expense', back_populates='worker', cascade='all, delete-orphan')

    def toggled_status(self) -> str:
        return self.STATUS_INACTIVE if self.status == self.STATUS_ACTIVE else self.STATUS_ACTIVE

__all__ = ["Worker"]
