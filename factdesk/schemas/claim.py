from typing import List, Optional

from pydantic import ConfigDict

from factdesk.db.models.enums import ClaimStatus
from .base import CamelModel, Pagination, UtcDatetime, OptionalUtcDatetime


class Claim(CamelModel):
    id: str
    title: str
    description: str
    category: str
    submitter_id: str
    video_url: Optional[str] = None
    source_url: Optional[str] = None
    status: ClaimStatus
    is_trending: bool
    assigned_fact_checker_id: Optional[str] = None
    submitted_at: UtcDatetime
    assigned_at: OptionalUtcDatetime = None
    verdict_at: OptionalUtcDatetime = None
    updated_at: OptionalUtcDatetime = None

    model_config = ConfigDict(use_enum_values=True)


class ClaimResponse(CamelModel):
    claim: Claim


class ClaimListResponse(CamelModel):
    claims: List[Claim]
    pagination: Pagination
