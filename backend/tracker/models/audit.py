from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, JSON, Text, DateTime, func
from typing import Optional, Dict, Any

from .authz import Base  # reuse same metadata


class AuditLog(Base):
    """Append-only; nothing in the codebase updates or deletes rows."""
    __tablename__ = 'audit_logs'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    action_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    record_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    record_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    worker_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    performed_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    performed_by_role: Mapped[str] = mapped_column(String(16), nullable=False)
    previous_value: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON(none_as_null=True), nullable=True)
    new_value: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON(none_as_null=True), nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # stamped by the database; entries within one clock tick are ordered by id
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    # load created_at back on insert so returned entries are complete
    __mapper_args__ = {'eager_defaults': True}

    def to_json(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'action_type': self.action_type,
            'record_type': self.record_type,
            'record_id': self.record_id,
            'worker_id': self.worker_id,
            'performed_by': self.performed_by,
            'performed_by_role': self.performed_by_role,
            'previous_value': self.previous_value,
            'new_value': self.new_value,
            'reason': self.reason,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

__all__ = ["AuditLog"]
