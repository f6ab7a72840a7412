import uuid

from sqlalchemy import Column, String, DateTime, Text

from ..base import Base
from factdesk.core.timeutils import utcnow


class ModerationAction(Base):
    """Audit trail of moderator decisions (overrides, deletions, approvals)."""
    __tablename__ = 'moderation_actions'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    actor_id = Column(String(64), nullable=False, index=True)
    action = Column(String(30), nullable=False)
    claim_id = Column(String(36), index=True)
    fact_checker_id = Column(String(36))
    note = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
