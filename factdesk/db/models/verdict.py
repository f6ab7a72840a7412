import uuid

from sqlalchemy import Column, Float, String, Boolean, DateTime, Text, ForeignKey, Index, true

from ..base import Base
from factdesk.core.timeutils import utcnow


class Verdict(Base):
    __tablename__ = 'verdicts'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    claim_id = Column(String(36), ForeignKey('claims.id'), nullable=False, index=True)
    fact_checker_id = Column(String(36), ForeignKey('fact_checkers.id'), nullable=False, index=True)
    outcome = Column(String(20), nullable=False)
    reasoning = Column(Text, nullable=False)
    resolution_seconds = Column(Float)  # verdict time minus assignment time
    is_current = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    superseded_at = Column(DateTime(timezone=True))

    __table_args__ = (
        # At most one current verdict per claim; superseded rows stay for audit
        Index(
            'uq_verdicts_current_claim',
            'claim_id',
            unique=True,
            postgresql_where=(is_current == true()),
            sqlite_where=(is_current == true()),
        ),
        Index('idx_verdicts_checker_created', 'fact_checker_id', 'created_at'),
    )
