import uuid

from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON

from ..base import Base
from .enums import VerificationStatus
from factdesk.core.timeutils import utcnow


class FactChecker(Base):
    __tablename__ = 'fact_checkers'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), unique=True, index=True, nullable=False)
    expertise_areas = Column(JSON, nullable=False, default=list)
    additional_info = Column(Text, default="")
    verification_status = Column(String(20), nullable=False, default=VerificationStatus.PENDING.value)
    is_active = Column(Boolean, nullable=False, default=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    reviewed_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def is_approved(self) -> bool:
        return self.verification_status == VerificationStatus.APPROVED.value

    def covers(self, category: str) -> bool:
        return category in (self.expertise_areas or [])
