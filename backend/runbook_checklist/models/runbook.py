"""
Runbook model for reusable checklist templates
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Index
from runbook_checklist.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Runbook(Base):
    __tablename__ = "runbooks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    steps = Column(JSON, nullable=False, default=list)  # ordered StepTemplate dicts: text, link, image
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_runbooks_created', 'created_at'),
    )

    def __repr__(self):
        return f"<Runbook(id={self.id}, title='{self.title}', steps={len(self.steps or [])})>"
