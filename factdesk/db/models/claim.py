import uuid

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Index

from ..base import Base
from .enums import ClaimStatus, TERMINAL_STATUSES
from factdesk.core.timeutils import utcnow


class Claim(Base):
    __tablename__ = 'claims'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    submitter_id = Column(String(64), nullable=False, index=True)
    video_url = Column(Text)
    source_url = Column(Text)
    status = Column(String(20), nullable=False, default=ClaimStatus.PENDING.value, index=True)
    is_trending = Column(Boolean, nullable=False, default=False)
    assigned_fact_checker_id = Column(String(36), index=True)  # weak reference, lookup only
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    assigned_at = Column(DateTime(timezone=True))
    verdict_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime(timezone=True))
    version = Column(Integer, nullable=False)

    __table_args__ = (
        Index('idx_claims_submitted_at', 'submitted_at'),
        Index('idx_claims_checker_status', 'assigned_fact_checker_id', 'status'),
    )

    # Every UPDATE is issued as "... WHERE id = ? AND version = ?"; a writer
    # holding a stale row gets StaleDataError instead of overwriting.
    __mapper_args__ = {"version_id_col": version}

    @property
    def is_terminal(self) -> bool:
        return self.status in {s.value for s in TERMINAL_STATUSES}

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self):
        return f"<Claim id={self.id} status={self.status}>"
