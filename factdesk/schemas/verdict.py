from typing import Dict, Optional

from pydantic import ConfigDict

from factdesk.db.models.enums import VerdictOutcome
from .base import CamelModel, UtcDatetime, OptionalUtcDatetime
from .claim import Claim


class Verdict(CamelModel):
    id: str
    claim_id: str
    fact_checker_id: str
    outcome: VerdictOutcome
    reasoning: str
    resolution_seconds: Optional[float] = None
    is_current: bool
    created_at: UtcDatetime
    superseded_at: OptionalUtcDatetime = None

    model_config = ConfigDict(use_enum_values=True)


class VerdictResponse(CamelModel):
    verdict: Verdict


class VerdictRecordedResponse(CamelModel):
    verdict: Verdict
    claim: Claim


class VerdictStats(CamelModel):
    total: int
    by_outcome: Dict[str, int]


class ActivityStats(CamelModel):
    total: int
    by_action: Dict[str, int]


class ClaimDetailResponse(CamelModel):
    """A claim together with its standing verdict, if it has one."""

    claim: Claim
    verdict: Optional[Verdict] = None
