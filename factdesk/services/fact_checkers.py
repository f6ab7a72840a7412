from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import uuid

from sqlalchemy import func, select

from factdesk.core.exceptions import (
    ConflictError,
    ForbiddenError,
    IllegalTransitionError,
    IneligibleError,
    NotFoundError,
    ValidationError,
)
from factdesk.core.timeutils import as_utc
from factdesk.db.models import Claim, FactChecker, FactCheckerActivity, ModerationAction, Verdict
from factdesk.db.models.enums import (
    ActivityAction,
    ClaimStatus,
    ModerationActionType,
    VerificationStatus,
)
from factdesk.models.auth import Actor
from factdesk.services.base import BaseService
from factdesk.services.claim_store import ClaimStore, normalize_category
from factdesk.services.state_machine import ClaimEvent

logger = logging.getLogger(__name__)

COMPLETED_WINDOW = timedelta(days=7)


def normalize_expertise(areas: Optional[Iterable[str]]) -> List[str]:
    """Validate expertise tags against the claim categories, keeping order."""
    normalized = []
    for area in areas or []:
        category = normalize_category(area)
        if category not in normalized:
            normalized.append(category)
    return normalized


class FactCheckerService(BaseService):
    """Fact-checker profiles, approval, assignment and workload."""

    def __init__(self, db, settings=None, clock=None, claims: Optional[ClaimStore] = None):
        super().__init__(db, settings, clock)
        self.claims = claims or ClaimStore(db, self.settings, self.clock)

    # Profiles

    def apply(
        self,
        user_id: str,
        expertise_areas: Optional[Iterable[str]] = None,
        additional_info: Optional[str] = None,
    ) -> FactChecker:
        """
        Create a pending fact-checker application for a user.

        Raises:
            ConflictError: if the user already has a profile.
            ValidationError: if an expertise area is not a known category.
        """
        existing = self.db.scalar(select(FactChecker).where(FactChecker.user_id == user_id))
        if existing:
            logger.info(f"Duplicate fact checker application from user {user_id}")
            raise ConflictError("You have already applied or are already a fact checker")

        fact_checker = FactChecker(
            id=str(uuid.uuid4()),
            user_id=user_id,
            expertise_areas=normalize_expertise(expertise_areas),
            additional_info=additional_info or "",
            verification_status=VerificationStatus.PENDING.value,
            is_active=True,
            joined_at=self.clock(),
        )
        self.db.add(fact_checker)
        # Two simultaneous applications race on the unique user_id index
        self._commit(
            f"creating fact checker application for user {user_id}",
            on_conflict=ConflictError("You have already applied or are already a fact checker"),
        )
        logger.info(f"Fact checker application submitted: {user_id}")
        return fact_checker

    def get(self, fact_checker_id: str) -> FactChecker:
        fact_checker = self.db.get(FactChecker, fact_checker_id)
        if fact_checker is None:
            raise NotFoundError(f"Fact checker with id {fact_checker_id} not found")
        return fact_checker

    def get_by_user(self, user_id: str) -> FactChecker:
        fact_checker = self.db.scalar(select(FactChecker).where(FactChecker.user_id == user_id))
        if fact_checker is None:
            raise NotFoundError("Fact checker profile not found")
        return fact_checker

    def list(
        self,
        actor: Actor,
        verification_status: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[FactChecker], int]:
        """
        Page through fact-checker profiles for moderators, oldest application
        first so the review queue is worked in order.
        """
        if not actor.is_moderator:
            raise ForbiddenError("Only moderators can list fact checker applications")
        page, limit = self._page_bounds(page, limit)

        conditions = []
        if verification_status is not None:
            try:
                conditions.append(
                    FactChecker.verification_status == VerificationStatus(verification_status).value
                )
            except ValueError:
                raise ValidationError(f"Invalid verification status '{verification_status}'")

        total = self.db.scalar(select(func.count(FactChecker.id)).where(*conditions))
        rows = self.db.scalars(
            select(FactChecker)
            .where(*conditions)
            .order_by(FactChecker.joined_at.asc(), FactChecker.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()
        return list(rows), total

    def update_profile(
        self,
        user_id: str,
        expertise_areas: Optional[Iterable[str]] = None,
        additional_info: Optional[str] = None,
    ) -> FactChecker:
        if expertise_areas is None and additional_info is None:
            raise ValidationError("No valid fields to update")

        fact_checker = self.get_by_user(user_id)
        if expertise_areas is not None:
            fact_checker.expertise_areas = normalize_expertise(expertise_areas)
        if additional_info is not None:
            fact_checker.additional_info = additional_info

        self._commit(f"updating fact checker profile {fact_checker.id}")
        logger.info(f"Fact checker profile {fact_checker.id} updated")
        return fact_checker

    def set_availability(self, user_id: str, is_available: bool) -> FactChecker:
        fact_checker = self.get_by_user(user_id)
        fact_checker.is_active = is_available
        self._commit(f"updating availability of fact checker {fact_checker.id}")
        logger.info(
            f"Fact checker {fact_checker.id} availability updated to "
            f"{'available' if is_available else 'unavailable'}"
        )
        return fact_checker

    def approve(self, fact_checker_id: str, actor: Actor) -> FactChecker:
        return self._review(fact_checker_id, actor, VerificationStatus.APPROVED, ModerationActionType.APPROVE)

    def reject(self, fact_checker_id: str, actor: Actor) -> FactChecker:
        return self._review(fact_checker_id, actor, VerificationStatus.REJECTED, ModerationActionType.REJECT)

    def _review(
        self,
        fact_checker_id: str,
        actor: Actor,
        outcome: VerificationStatus,
        action: ModerationActionType,
    ) -> FactChecker:
        if not actor.is_moderator:
            raise ForbiddenError("Only moderators can review fact checker applications")

        fact_checker = self.get(fact_checker_id)
        now = self.clock()

        # A rejected checker can no longer record verdicts on claims they hold
        stranded = 0
        if outcome == VerificationStatus.REJECTED:
            stranded = self.pending_count(fact_checker.id)
        note = f"{stranded} claims in human_review need reassignment" if stranded else None

        fact_checker.verification_status = outcome.value
        fact_checker.reviewed_at = now
        self.db.add(ModerationAction(
            actor_id=actor.user_id,
            action=action.value,
            fact_checker_id=fact_checker.id,
            note=note,
            created_at=now,
        ))
        self._commit(f"setting fact checker {fact_checker_id} to {outcome.value}")
        logger.info(f"Fact checker {fact_checker_id} {outcome.value} by {actor.user_id}")
        if stranded:
            logger.warning(
                f"Fact checker {fact_checker_id} was rejected with {stranded} claims in human_review; "
                f"they must be reassigned"
            )
        return fact_checker

    # Assignment

    def assign(self, claim_id: str, fact_checker_id: str, actor: Actor) -> Claim:
        """
        Bind a fact-checker to a claim, moving it into human review.

        A claim already in human review may be handed to a different
        fact-checker; both sides of the hand-over are recorded in the
        activity log.

        Raises:
            ForbiddenError: actor is neither a moderator nor the fact-checker.
            IneligibleError: fact-checker is not approved or not available.
            IllegalTransitionError: claim already has a verdict, or is
                already assigned to this fact-checker.
        """
        fact_checker = self.get(fact_checker_id)
        if not (actor.is_moderator or actor.user_id == fact_checker.user_id):
            raise ForbiddenError("Only moderators can assign claims to other fact checkers")
        self._check_eligible(fact_checker)

        claim = self.claims.get_for_update(claim_id)
        return self._assign(claim, fact_checker)

    def auto_assign(self, claim_id: str, actor: Actor) -> Claim:
        """
        Assign a claim to the least loaded eligible fact-checker, preferring
        those whose expertise covers the claim's category.
        """
        if not actor.is_moderator:
            raise ForbiddenError("Only moderators can trigger automatic assignment")

        claim = self.claims.get_for_update(claim_id)
        if claim.is_terminal:
            raise IllegalTransitionError(
                f"Cannot assign a claim in status {claim.status}; a moderator must re-open it first"
            )

        candidates = [
            fc for fc in self.db.scalars(
                select(FactChecker).where(
                    FactChecker.verification_status == VerificationStatus.APPROVED.value,
                    FactChecker.is_active.is_(True),
                )
            )
            if fc.id != claim.assigned_fact_checker_id
        ]
        if not candidates:
            raise IneligibleError("No approved and available fact checker can take this claim")

        pending = self.pending_counts()
        candidates.sort(key=lambda fc: (
            0 if fc.covers(claim.category) else 1,
            pending.get(fc.id, 0),
            as_utc(fc.joined_at),
            fc.id,
        ))
        chosen = candidates[0]
        logger.info(
            f"Auto-assigning claim {claim_id} ({claim.category}) to fact checker {chosen.id} "
            f"with {pending.get(chosen.id, 0)} pending claims"
        )
        return self._assign(claim, chosen)

    def _check_eligible(self, fact_checker: FactChecker) -> None:
        if not fact_checker.is_approved:
            raise IneligibleError(
                f"Fact checker {fact_checker.id} is not approved "
                f"(verification status: {fact_checker.verification_status})"
            )
        if not fact_checker.is_active:
            raise IneligibleError(f"Fact checker {fact_checker.id} is not currently available")

    def _assign(self, claim: Claim, fact_checker: FactChecker) -> Claim:
        now = self.clock()
        previous_id = claim.assigned_fact_checker_id

        if claim.status == ClaimStatus.HUMAN_REVIEW.value:
            if previous_id == fact_checker.id:
                raise IllegalTransitionError(f"Claim {claim.id} is already assigned to fact checker {fact_checker.id}")
            event = ClaimEvent.REASSIGN
        else:
            event = ClaimEvent.ASSIGN

        self.claims.transition(
            claim,
            event,
            assigned_fact_checker_id=fact_checker.id,
            assigned_at=now,
        )

        if event == ClaimEvent.REASSIGN:
            self.db.add(FactCheckerActivity(
                fact_checker_id=previous_id,
                claim_id=claim.id,
                action=ActivityAction.REASSIGNED_OUT.value,
                timestamp=now,
            ))
            self.db.add(FactCheckerActivity(
                fact_checker_id=fact_checker.id,
                claim_id=claim.id,
                action=ActivityAction.REASSIGNED_IN.value,
                timestamp=now,
            ))
        else:
            self.db.add(FactCheckerActivity(
                fact_checker_id=fact_checker.id,
                claim_id=claim.id,
                action=ActivityAction.ASSIGNED.value,
                timestamp=now,
            ))

        self._commit(
            f"assigning claim {claim.id} to fact checker {fact_checker.id}",
            on_conflict=IllegalTransitionError(f"Claim {claim.id} was modified concurrently; reload and retry"),
        )
        if event == ClaimEvent.REASSIGN:
            logger.info(f"Claim {claim.id} reassigned from fact checker {previous_id} to {fact_checker.id}")
        else:
            logger.info(f"Claim {claim.id} assigned to fact checker {fact_checker.id}")
        return claim

    # Workload

    def pending_counts(self) -> Dict[str, int]:
        rows = self.db.execute(
            select(Claim.assigned_fact_checker_id, func.count(Claim.id))
            .where(
                Claim.status == ClaimStatus.HUMAN_REVIEW.value,
                Claim.deleted_at.is_(None),
                Claim.assigned_fact_checker_id.is_not(None),
            )
            .group_by(Claim.assigned_fact_checker_id)
        ).all()
        return {fact_checker_id: count for fact_checker_id, count in rows}

    def pending_count(self, fact_checker_id: str) -> int:
        return self.db.scalar(
            select(func.count(Claim.id)).where(
                Claim.status == ClaimStatus.HUMAN_REVIEW.value,
                Claim.assigned_fact_checker_id == fact_checker_id,
                Claim.deleted_at.is_(None),
            )
        )

    def get_workload(self, fact_checker_id: str) -> Dict[str, object]:
        """
        Current load and recent throughput of one fact-checker.

        ``completed_last_7_days`` counts every verdict the checker recorded in
        the last seven days, including ones a moderator later superseded;
        ``average_resolution_time`` is the mean assignment-to-verdict time in
        seconds over the same verdicts, or None.
        """
        self.get(fact_checker_id)
        since = self.clock() - COMPLETED_WINDOW

        completed, average = self.db.execute(
            select(func.count(Verdict.id), func.avg(Verdict.resolution_seconds)).where(
                Verdict.fact_checker_id == fact_checker_id,
                Verdict.created_at >= since,
            )
        ).one()

        return {
            "fact_checker_id": fact_checker_id,
            "pending_count": self.pending_count(fact_checker_id),
            "completed_last_7_days": completed,
            "average_resolution_time": float(average) if average is not None else None,
        }

    def assigned_claims(
        self,
        user_id: str,
        status: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[Claim], int]:
        fact_checker = self.get_by_user(user_id)
        return self.claims.list(status=status, fact_checker_id=fact_checker.id, page=page, limit=limit)
