import uuid

from sqlalchemy import Column, String, DateTime, Index

from ..base import Base
from factdesk.core.timeutils import utcnow


class FactCheckerActivity(Base):
    """Append-only log of what a fact-checker did to which claim."""
    __tablename__ = 'fact_checker_activities'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    fact_checker_id = Column(String(36), nullable=False)
    claim_id = Column(String(36), nullable=False, index=True)
    verdict_id = Column(String(36))
    action = Column(String(30), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_activities_checker_timestamp', 'fact_checker_id', 'timestamp'),
    )
