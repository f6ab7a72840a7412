from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, Response, status

from factdesk.api.deps import get_claim_store, get_fact_checker_service, get_verdict_ledger
from factdesk.db.models.enums import ClaimStatus
from factdesk.middleware.auth import get_current_user
from factdesk.models.auth import Actor
from factdesk.models.claim import ClaimCreate, ClaimStatusUpdate, ClaimUpdate
from factdesk.schemas.base import Pagination
from factdesk.schemas.claim import Claim as ClaimSchema, ClaimListResponse, ClaimResponse
from factdesk.schemas.verdict import ClaimDetailResponse, Verdict as VerdictSchema
from factdesk.services.claim_store import ClaimStore
from factdesk.services.fact_checkers import FactCheckerService
from factdesk.services.verdict_ledger import VerdictLedger

router = APIRouter(prefix="/claims", tags=["claims"])

logger = logging.getLogger(__name__)


def _claim_response(claim) -> ClaimResponse:
    return ClaimResponse(claim=ClaimSchema.model_validate(claim))


def _list_response(claims, total: int, page: int, limit: int) -> ClaimListResponse:
    return ClaimListResponse(
        claims=[ClaimSchema.model_validate(c) for c in claims],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", response_model=ClaimResponse, status_code=status.HTTP_201_CREATED)
def submit_claim(
    claim_data: ClaimCreate,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    Submit a new claim for fact-checking. The claim starts in ``pending``.
    """
    logger.info(f"User {current_user.user_id} submitting claim in category {claim_data.category}")
    claim = store.submit(
        submitter_id=current_user.user_id,
        title=claim_data.title,
        description=claim_data.description,
        category=claim_data.category,
        video_url=claim_data.video_url,
        source_url=claim_data.source_url,
    )
    return _claim_response(claim)


@router.get("", response_model=ClaimListResponse)
def list_claims(
    status_filter: Optional[ClaimStatus] = Query(None, alias="status"),
    category: Optional[str] = None,
    fact_checker_id: Optional[str] = Query(None, alias="factCheckerId"),
    page: int = 1,
    limit: Optional[int] = None,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    List claims, newest first, with optional status/category/fact-checker filters.
    """
    limit = store.settings.DEFAULT_PAGE_SIZE if limit is None else limit
    claims, total = store.list(
        status=status_filter.value if status_filter else None,
        category=category,
        fact_checker_id=fact_checker_id,
        page=page,
        limit=limit,
    )
    logger.info(f"User {current_user.user_id} listed {len(claims)} of {total} claims")
    return _list_response(claims, total, page, limit)


@router.get("/trending", response_model=ClaimListResponse)
def trending_claims(
    page: int = 1,
    limit: Optional[int] = None,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    limit = store.settings.DEFAULT_PAGE_SIZE if limit is None else limit
    claims, total = store.list(trending=True, page=page, limit=limit)
    return _list_response(claims, total, page, limit)


@router.get("/mine", response_model=ClaimListResponse)
def my_claims(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = 1,
    limit: Optional[int] = None,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    Claims submitted by the caller. ``status=all`` is the same as no filter.
    """
    if status_filter == "all":
        status_filter = None
    limit = store.settings.DEFAULT_PAGE_SIZE if limit is None else limit
    claims, total = store.list(
        status=status_filter,
        submitter_id=current_user.user_id,
        page=page,
        limit=limit,
    )
    return _list_response(claims, total, page, limit)


@router.get("/search", response_model=ClaimListResponse)
def search_claims(
    q: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    Case-insensitive search over claim titles and descriptions.
    """
    limit = store.settings.DEFAULT_PAGE_SIZE if limit is None else limit
    claims, total = store.list(search=q or "", page=page, limit=limit)
    logger.info(f"User {current_user.user_id} searched claims for '{q}': {total} matches")
    return _list_response(claims, total, page, limit)


@router.get("/{claim_id}", response_model=ClaimDetailResponse)
def get_claim(
    claim_id: str,
    store: ClaimStore = Depends(get_claim_store),
    ledger: VerdictLedger = Depends(get_verdict_ledger),
    current_user: Actor = Depends(get_current_user),
):
    claim = store.get(claim_id)
    verdict = ledger.current_for_claim(claim.id)
    return ClaimDetailResponse(
        claim=ClaimSchema.model_validate(claim),
        verdict=VerdictSchema.model_validate(verdict) if verdict else None,
    )


@router.put("/{claim_id}", response_model=ClaimResponse)
def update_claim(
    claim_id: str,
    changes: ClaimUpdate,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    Edit a claim. Authors may edit their own pending claims; moderators may
    edit any claim and flag it as trending.
    """
    logger.info(f"User {current_user.user_id} updating claim {claim_id}")
    claim = store.update(claim_id, changes.model_dump(exclude_unset=True), current_user)
    return _claim_response(claim)


@router.delete("/{claim_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_claim(
    claim_id: str,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    Soft-delete a claim (moderators only). The record is retained for audit.
    """
    logger.info(f"User {current_user.user_id} attempting to delete claim {claim_id}")
    store.delete(claim_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{claim_id}/status", response_model=ClaimResponse)
def update_claim_status(
    claim_id: str,
    body: ClaimStatusUpdate,
    store: ClaimStore = Depends(get_claim_store),
    current_user: Actor = Depends(get_current_user),
):
    """
    Request a status change. Only a moderator re-opening a claim with a
    verdict (terminal -> human_review) is accepted here; assignment and
    verdicts have their own endpoints.
    """
    logger.info(f"User {current_user.user_id} requesting status {body.status.value} for claim {claim_id}")
    claim = store.update_status(claim_id, body.status.value, current_user, note=body.note)
    return _claim_response(claim)


@router.post("/{claim_id}/auto-assign", response_model=ClaimResponse)
def auto_assign_claim(
    claim_id: str,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    """
    Assign the claim to the least loaded eligible fact-checker (moderators only).
    """
    claim = service.auto_assign(claim_id, current_user)
    return _claim_response(claim)
