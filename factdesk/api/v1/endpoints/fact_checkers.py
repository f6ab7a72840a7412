from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status

from factdesk.api.deps import get_fact_checker_service, get_leaderboard, get_verdict_ledger
from factdesk.db.models.enums import ClaimStatus
from factdesk.middleware.auth import get_current_user
from factdesk.models.auth import Actor
from factdesk.models.fact_checker import (
    AssignRequest,
    AvailabilityUpdate,
    FactCheckerApply,
    FactCheckerUpdate,
)
from factdesk.schemas.base import Pagination
from factdesk.schemas.claim import Claim as ClaimSchema, ClaimListResponse, ClaimResponse
from factdesk.schemas.fact_checker import (
    ApplicationResponse,
    AvailabilityResponse,
    FactChecker as FactCheckerSchema,
    FactCheckerListResponse,
    FactCheckerResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    PerformanceResponse,
    Workload,
    WorkloadResponse,
)
from factdesk.schemas.verdict import ActivityStats, VerdictStats
from factdesk.services.fact_checkers import FactCheckerService
from factdesk.services.leaderboard import Leaderboard
from factdesk.services.verdict_ledger import VerdictLedger

router = APIRouter(prefix="/fact-checkers", tags=["fact-checkers"])

logger = logging.getLogger(__name__)


@router.post("/apply", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def apply_to_become_fact_checker(
    application: FactCheckerApply,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    """
    Apply for a fact-checker profile. The application waits for moderator approval.
    """
    fact_checker = service.apply(
        current_user.user_id,
        expertise_areas=application.expertise_areas,
        additional_info=application.additional_info,
    )
    return ApplicationResponse(
        message="Application submitted successfully. Waiting for admin approval.",
        application=FactCheckerSchema.model_validate(fact_checker),
    )


@router.get("", response_model=FactCheckerListResponse)
def list_fact_checkers(
    verification_status: Optional[str] = Query(None, alias="verificationStatus"),
    page: int = 1,
    limit: Optional[int] = None,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    """
    Fact-checker profiles for moderators, e.g. the pending application queue.
    """
    limit = service.settings.DEFAULT_PAGE_SIZE if limit is None else limit
    fact_checkers, total = service.list(
        current_user,
        verification_status=verification_status,
        page=page,
        limit=limit,
    )
    return FactCheckerListResponse(
        fact_checkers=[FactCheckerSchema.model_validate(fc) for fc in fact_checkers],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard_view(
    timeframe: Optional[str] = None,
    limit: int = 10,
    score: Optional[str] = None,
    leaderboard: Leaderboard = Depends(get_leaderboard),
    current_user: Actor = Depends(get_current_user),
):
    timeframe = timeframe or leaderboard.settings.LEADERBOARD_TIMEFRAME
    score = score or leaderboard.settings.LEADERBOARD_SCORE
    entries = leaderboard.compute(timeframe=timeframe, limit=limit, score=score)
    return LeaderboardResponse(
        leaderboard=[LeaderboardEntry(**entry) for entry in entries],
        timeframe=timeframe,
        score=score,
        updated_at=leaderboard.clock(),
    )


@router.get("/me", response_model=FactCheckerResponse)
def get_my_profile(
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    fact_checker = service.get_by_user(current_user.user_id)
    return FactCheckerResponse(fact_checker=FactCheckerSchema.model_validate(fact_checker))


@router.put("/me", response_model=FactCheckerResponse)
def update_my_profile(
    changes: FactCheckerUpdate,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    fact_checker = service.update_profile(
        current_user.user_id,
        expertise_areas=changes.expertise_areas,
        additional_info=changes.additional_info,
    )
    return FactCheckerResponse(fact_checker=FactCheckerSchema.model_validate(fact_checker))


@router.put("/me/availability", response_model=AvailabilityResponse)
def update_my_availability(
    body: AvailabilityUpdate,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    fact_checker = service.set_availability(current_user.user_id, body.is_available)
    return AvailabilityResponse(
        message=f"Availability updated to {'available' if fact_checker.is_active else 'unavailable'}",
        is_available=fact_checker.is_active,
    )


@router.get("/me/claims", response_model=ClaimListResponse)
def get_my_assigned_claims(
    status_filter: Optional[ClaimStatus] = Query(None, alias="status"),
    page: int = 1,
    limit: Optional[int] = None,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    limit = service.settings.DEFAULT_PAGE_SIZE if limit is None else limit
    claims, total = service.assigned_claims(
        current_user.user_id,
        status=status_filter.value if status_filter else None,
        page=page,
        limit=limit,
    )
    return ClaimListResponse(
        claims=[ClaimSchema.model_validate(c) for c in claims],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/me/stats", response_model=PerformanceResponse)
def get_my_performance(
    timeframe: str = "30 days",
    service: FactCheckerService = Depends(get_fact_checker_service),
    ledger: VerdictLedger = Depends(get_verdict_ledger),
    current_user: Actor = Depends(get_current_user),
):
    """
    Verdict and activity counts for the caller's fact-checker profile.
    """
    fact_checker = service.get_by_user(current_user.user_id)
    return PerformanceResponse(
        verdicts=VerdictStats(**ledger.get_stats(fact_checker.id, timeframe)),
        activity=ActivityStats(**ledger.activity_stats(fact_checker.id, timeframe)),
        timeframe=timeframe,
    )


@router.post("/{fact_checker_id}/approve", response_model=FactCheckerResponse)
def approve_fact_checker(
    fact_checker_id: str,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    fact_checker = service.approve(fact_checker_id, current_user)
    return FactCheckerResponse(fact_checker=FactCheckerSchema.model_validate(fact_checker))


@router.post("/{fact_checker_id}/reject", response_model=FactCheckerResponse)
def reject_fact_checker(
    fact_checker_id: str,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    fact_checker = service.reject(fact_checker_id, current_user)
    return FactCheckerResponse(fact_checker=FactCheckerSchema.model_validate(fact_checker))


@router.post("/{fact_checker_id}/assign", response_model=ClaimResponse)
def assign_claim(
    fact_checker_id: str,
    body: AssignRequest,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    """
    Assign a claim to a fact-checker. Moderators can assign anyone; an
    approved fact-checker can pick up a claim for themselves.
    """
    logger.info(f"User {current_user.user_id} assigning claim {body.claim_id} to fact checker {fact_checker_id}")
    claim = service.assign(body.claim_id, fact_checker_id, current_user)
    return ClaimResponse(claim=ClaimSchema.model_validate(claim))


@router.get("/{fact_checker_id}/workload", response_model=WorkloadResponse)
def get_workload(
    fact_checker_id: str,
    service: FactCheckerService = Depends(get_fact_checker_service),
    current_user: Actor = Depends(get_current_user),
):
    return WorkloadResponse(workload=Workload(**service.get_workload(fact_checker_id)))
