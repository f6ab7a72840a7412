import logging

from fastapi import APIRouter, Depends, status

from factdesk.api.deps import get_verdict_ledger
from factdesk.middleware.auth import get_current_user
from factdesk.models.auth import Actor
from factdesk.models.verdict import VerdictCreate
from factdesk.schemas.claim import Claim as ClaimSchema
from factdesk.schemas.verdict import Verdict as VerdictSchema, VerdictRecordedResponse, VerdictResponse
from factdesk.services.verdict_ledger import VerdictLedger

router = APIRouter(prefix="/verdicts", tags=["verdicts"])

logger = logging.getLogger(__name__)


@router.post("", response_model=VerdictRecordedResponse, status_code=status.HTTP_201_CREATED)
def record_verdict(
    body: VerdictCreate,
    ledger: VerdictLedger = Depends(get_verdict_ledger),
    current_user: Actor = Depends(get_current_user),
):
    """
    Record the caller's verdict on a claim assigned to them.

    Returns 409 if the claim is not in human review or not assigned to the
    caller's fact-checker profile.
    """
    logger.info(f"User {current_user.user_id} recording verdict {body.outcome.value} on claim {body.claim_id}")
    verdict, claim = ledger.record_for_user(
        body.claim_id,
        current_user.user_id,
        body.outcome.value,
        body.reasoning,
    )
    return VerdictRecordedResponse(
        verdict=VerdictSchema.model_validate(verdict),
        claim=ClaimSchema.model_validate(claim),
    )


@router.get("/{verdict_id}", response_model=VerdictResponse)
def get_verdict(
    verdict_id: str,
    ledger: VerdictLedger = Depends(get_verdict_ledger),
    current_user: Actor = Depends(get_current_user),
):
    return VerdictResponse(verdict=VerdictSchema.model_validate(ledger.get(verdict_id)))
