from pydantic import Field

from factdesk.db.models.enums import VerdictOutcome
from factdesk.schemas.base import RequestModel


class VerdictCreate(RequestModel):
    claim_id: str = Field(..., min_length=1)
    outcome: VerdictOutcome
    reasoning: str = Field(..., min_length=1)
