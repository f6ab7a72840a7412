from typing import Dict, Optional, Tuple
import logging
import uuid

from sqlalchemy import func, select

from factdesk.core.exceptions import (
    IllegalTransitionError,
    IneligibleError,
    NotFoundError,
    ValidationError,
)
from factdesk.core.timeutils import as_utc, window_start
from factdesk.db.models import Claim, FactChecker, FactCheckerActivity, Verdict
from factdesk.db.models.enums import ActivityAction, ClaimStatus, VerdictOutcome
from factdesk.services.base import BaseService
from factdesk.services.claim_store import ClaimStore
from factdesk.services.state_machine import ClaimEvent

logger = logging.getLogger(__name__)


class VerdictLedger(BaseService):
    """Records verdicts and answers per-checker verdict statistics."""

    def __init__(self, db, settings=None, clock=None, claims: Optional[ClaimStore] = None):
        super().__init__(db, settings, clock)
        self.claims = claims or ClaimStore(db, self.settings, self.clock)

    def record(
        self,
        claim_id: str,
        fact_checker_id: str,
        outcome: str,
        reasoning: str,
    ) -> Tuple[Verdict, Claim]:
        """
        Record a fact-checker's verdict on a claim.

        The verdict row, the claim's move to its terminal status, its
        ``verdict_at`` timestamp and the activity entry are committed together
        or not at all.

        Raises:
            ValidationError: unknown outcome or empty reasoning.
            NotFoundError: the claim does not exist.
            IllegalTransitionError: the claim is not in human_review, is
                assigned to someone else, or another verdict won the race.
        """
        try:
            outcome = VerdictOutcome(outcome)
        except ValueError:
            allowed = ", ".join(o.value for o in VerdictOutcome)
            raise ValidationError(f"Invalid outcome '{outcome}'. Allowed: {allowed}")
        reasoning = (reasoning or "").strip()
        if not reasoning:
            raise ValidationError("reasoning is required")

        claim = self.claims.get_for_update(claim_id)
        if claim.status != ClaimStatus.HUMAN_REVIEW.value:
            raise IllegalTransitionError(
                f"A verdict can only be recorded for a claim in human_review (current status: {claim.status})"
            )
        if claim.assigned_fact_checker_id != fact_checker_id:
            raise IllegalTransitionError(f"Claim {claim_id} is not assigned to fact checker {fact_checker_id}")

        now = self.clock()
        assigned_at = as_utc(claim.assigned_at)
        resolution = (now - assigned_at).total_seconds() if assigned_at else None

        verdict = Verdict(
            id=str(uuid.uuid4()),
            claim_id=claim.id,
            fact_checker_id=fact_checker_id,
            outcome=outcome.value,
            reasoning=reasoning,
            resolution_seconds=resolution,
            is_current=True,
            created_at=now,
        )
        self.db.add(verdict)
        self.claims.transition(claim, ClaimEvent.VERDICT, outcome, verdict_at=now)
        self.db.add(FactCheckerActivity(
            fact_checker_id=fact_checker_id,
            claim_id=claim.id,
            verdict_id=verdict.id,
            action=ActivityAction.VERDICT_RECORDED.value,
            timestamp=now,
        ))

        self._commit(
            f"recording verdict on claim {claim_id}",
            on_conflict=IllegalTransitionError(f"A verdict was already recorded for claim {claim_id}"),
        )
        logger.info(f"Verdict {verdict.id} recorded on claim {claim_id} by fact checker {fact_checker_id}: {outcome.value}")
        return verdict, claim

    def record_for_user(
        self,
        claim_id: str,
        user_id: str,
        outcome: str,
        reasoning: str,
    ) -> Tuple[Verdict, Claim]:
        """Record a verdict on behalf of the fact-checker profile of ``user_id``."""
        fact_checker = self.db.scalar(select(FactChecker).where(FactChecker.user_id == user_id))
        if fact_checker is None:
            raise IneligibleError("Only fact checkers can record verdicts")
        if not fact_checker.is_approved:
            raise IneligibleError(
                f"Fact checker {fact_checker.id} is not approved "
                f"(verification status: {fact_checker.verification_status})"
            )
        return self.record(claim_id, fact_checker.id, outcome, reasoning)

    def get(self, verdict_id: str) -> Verdict:
        verdict = self.db.get(Verdict, verdict_id)
        if verdict is None:
            raise NotFoundError(f"Verdict with id {verdict_id} not found")
        return verdict

    def current_for_claim(self, claim_id: str) -> Optional[Verdict]:
        return self.db.scalar(
            select(Verdict).where(Verdict.claim_id == claim_id, Verdict.is_current.is_(True))
        )

    def get_stats(self, fact_checker_id: str, timeframe: Optional[str] = None) -> Dict[str, object]:
        """Count a checker's standing verdicts by outcome within the timeframe."""
        since = window_start(timeframe, self.clock())
        conditions = [Verdict.fact_checker_id == fact_checker_id, Verdict.is_current.is_(True)]
        if since is not None:
            conditions.append(Verdict.created_at >= since)

        rows = self.db.execute(
            select(Verdict.outcome, func.count(Verdict.id)).where(*conditions).group_by(Verdict.outcome)
        ).all()
        by_outcome = {o.value: 0 for o in VerdictOutcome}
        by_outcome.update({outcome: count for outcome, count in rows})
        return {"total": sum(by_outcome.values()), "by_outcome": by_outcome}

    def activity_stats(self, fact_checker_id: str, timeframe: Optional[str] = None) -> Dict[str, object]:
        since = window_start(timeframe, self.clock())
        conditions = [FactCheckerActivity.fact_checker_id == fact_checker_id]
        if since is not None:
            conditions.append(FactCheckerActivity.timestamp >= since)

        rows = self.db.execute(
            select(FactCheckerActivity.action, func.count(FactCheckerActivity.id))
            .where(*conditions)
            .group_by(FactCheckerActivity.action)
        ).all()
        by_action = {action: count for action, count in rows}
        return {"total": sum(by_action.values()), "by_action": by_action}
