"""
Execution model: one run of a runbook checklist against an incident
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON, Index
from runbook_checklist.core.database import Base
from runbook_checklist.models.runbook import utcnow


class Execution(Base):
    __tablename__ = "executions"

    id = Column(Integer, primary_key=True, index=True)
    # No foreign key: deleting a runbook leaves its executions untouched
    runbook_id = Column(Integer, nullable=True, index=True)
    runbook_title = Column(String(500), nullable=True)  # frozen at creation
    incident_id = Column(String(200), nullable=True)
    operator = Column(String(200), nullable=True)
    priority = Column(String(20), nullable=True)  # high, medium, low
    status = Column(String(20), nullable=False, default="in_progress")  # in_progress, completed
    started_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    # Ordered ExecutionStep dicts; timestamps stored as ISO-8601 strings
    steps = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index('idx_executions_runbook', 'runbook_id'),
        Index('idx_executions_started', 'started_at'),
    )

    def __repr__(self):
        return f"<Execution(id={self.id}, status='{self.status}', runbook_id={self.runbook_id})>"
