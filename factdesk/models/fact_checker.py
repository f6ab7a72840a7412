from typing import List, Optional

from pydantic import Field

from factdesk.schemas.base import RequestModel


class FactCheckerApply(RequestModel):
    expertise_areas: List[str] = Field(default_factory=list)
    additional_info: Optional[str] = Field(None, max_length=5000)


class FactCheckerUpdate(RequestModel):
    expertise_areas: Optional[List[str]] = None
    additional_info: Optional[str] = Field(None, max_length=5000)


class AvailabilityUpdate(RequestModel):
    is_available: bool


class AssignRequest(RequestModel):
    claim_id: str = Field(..., min_length=1)
