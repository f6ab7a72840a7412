from typing import Any, Dict, List, Optional, Tuple
import logging
import uuid

from sqlalchemy import func, or_, select, update

from factdesk.core.exceptions import (
    ForbiddenError,
    IllegalTransitionError,
    NotFoundError,
    ValidationError,
)
from factdesk.db.models import Claim, FactCheckerActivity, ModerationAction, Verdict
from factdesk.db.models.enums import (
    ActivityAction,
    ClaimCategory,
    ClaimStatus,
    ModerationActionType,
    VerdictOutcome,
)
from factdesk.models.auth import Actor
from factdesk.services.base import BaseService
from factdesk.services.state_machine import ClaimEvent, event_for_requested_status, next_status

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("title", "description", "category", "video_url", "source_url")


def normalize_category(value: Any) -> str:
    """Match a category case-insensitively against the fixed list."""
    text = str(value or "").strip().lower()
    try:
        return ClaimCategory(text).value
    except ValueError:
        allowed = ", ".join(c.value for c in ClaimCategory)
        raise ValidationError(f"Invalid category '{value}'. Allowed: {allowed}")


def _required_text(name: str, value: Optional[str]) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{name} is required")
    return text


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ClaimStore(BaseService):
    """
    Owns claim records and the claim status field.

    Every status change goes through :meth:`transition`, which checks the
    state machine; callers commit the surrounding unit of work.
    """

    def submit(
        self,
        submitter_id: str,
        title: str,
        description: str,
        category: str,
        video_url: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> Claim:
        claim = Claim(
            id=str(uuid.uuid4()),
            title=_required_text("title", title),
            description=_required_text("description", description),
            category=normalize_category(category),
            submitter_id=submitter_id,
            video_url=video_url or None,
            source_url=source_url or None,
            status=ClaimStatus.PENDING.value,
            is_trending=False,
            submitted_at=self.clock(),
        )
        self.db.add(claim)
        self._commit(f"submitting claim for user {submitter_id}")
        logger.info(f"Claim {claim.id} submitted by user {submitter_id} in category {claim.category}")
        return claim

    def get(self, claim_id: str) -> Claim:
        claim = self.db.get(Claim, claim_id)
        if claim is None or claim.is_deleted:
            raise NotFoundError(f"Claim with id {claim_id} not found")
        return claim

    def get_for_update(self, claim_id: str) -> Claim:
        """
        Load the current row for a write, locking it where the dialect
        supports ``SELECT ... FOR UPDATE``. Always refreshes the identity map
        so checks run against committed state.
        """
        stmt = (
            select(Claim)
            .where(Claim.id == claim_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        claim = self.db.execute(stmt).scalar_one_or_none()
        if claim is None or claim.is_deleted:
            raise NotFoundError(f"Claim with id {claim_id} not found")
        return claim

    def list(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        fact_checker_id: Optional[str] = None,
        trending: Optional[bool] = None,
        submitter_id: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[Claim], int]:
        """
        Return one page of claims, newest submission first, and the total
        number of claims matching the filters.
        """
        page, limit = self._page_bounds(page, limit)

        conditions = [Claim.deleted_at.is_(None)]
        if status is not None:
            try:
                conditions.append(Claim.status == ClaimStatus(status).value)
            except ValueError:
                raise ValidationError(f"Invalid status '{status}'")
        if category is not None:
            conditions.append(Claim.category == normalize_category(category))
        if fact_checker_id is not None:
            conditions.append(Claim.assigned_fact_checker_id == fact_checker_id)
        if trending is not None:
            conditions.append(Claim.is_trending == trending)
        if submitter_id is not None:
            conditions.append(Claim.submitter_id == submitter_id)
        if search is not None:
            pattern = f"%{_escape_like(_required_text('search query', search))}%"
            conditions.append(or_(
                Claim.title.ilike(pattern, escape="\\"),
                Claim.description.ilike(pattern, escape="\\"),
            ))

        total = self.db.scalar(select(func.count(Claim.id)).where(*conditions))
        rows = self.db.scalars(
            select(Claim)
            .where(*conditions)
            .order_by(Claim.submitted_at.desc(), Claim.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()
        return list(rows), total

    def update(self, claim_id: str, changes: Dict[str, Any], actor: Actor) -> Claim:
        """
        Edit a claim's descriptive fields.

        The author may edit while the claim is still pending; moderators may
        edit at any time and are the only ones who can flag trending claims.
        """
        claim = self.get_for_update(claim_id)
        is_author = claim.submitter_id == actor.user_id

        if not (actor.is_moderator or is_author):
            raise ForbiddenError("Only the claim's author or a moderator can edit it")
        if not actor.is_moderator and claim.status != ClaimStatus.PENDING.value:
            raise ForbiddenError("Claims can only be edited by their author while pending")
        if "is_trending" in changes and not actor.is_moderator:
            raise ForbiddenError("Only moderators can flag trending claims")

        # Validate everything before touching the row
        values = {}
        for field in _EDITABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if field in ("title", "description"):
                value = _required_text(field, value)
            elif field == "category":
                value = normalize_category(value)
            else:
                value = value or None
            values[field] = value
        if "is_trending" in changes:
            values["is_trending"] = bool(changes["is_trending"])

        for field, value in values.items():
            setattr(claim, field, value)

        self._commit(
            f"updating claim {claim_id}",
            on_conflict=IllegalTransitionError(f"Claim {claim_id} was modified concurrently; reload and retry"),
        )
        logger.info(f"Claim {claim_id} updated by {actor.user_id}: {sorted(changes)}")
        return claim

    def transition(
        self,
        claim: Claim,
        event: ClaimEvent,
        outcome: Optional[VerdictOutcome] = None,
        **changes: Any,
    ) -> Claim:
        """
        Apply a state machine event to a loaded claim without committing.

        Raises:
            IllegalTransitionError: if the event is not allowed from the
                claim's current status.
        """
        previous = claim.status
        claim.status = next_status(claim.status, event, outcome).value
        for field, value in changes.items():
            setattr(claim, field, value)
        logger.debug(f"Claim {claim.id}: {previous} --{event.value}--> {claim.status}")
        return claim

    def update_status(
        self,
        claim_id: str,
        new_status: str,
        actor: Actor,
        note: Optional[str] = None,
    ) -> Claim:
        claim = self.get_for_update(claim_id)
        try:
            requested = ClaimStatus(new_status)
        except ValueError:
            raise ValidationError(f"Invalid status '{new_status}'")
        event = event_for_requested_status(claim.status, requested)

        if event == ClaimEvent.OVERRIDE:
            if not actor.is_moderator:
                raise ForbiddenError("Only moderators can re-open a claim with a verdict")
            return self._reopen(claim, actor, note)

        # event_for_requested_status only yields OVERRIDE; anything else is a bug
        raise IllegalTransitionError(f"Unsupported status change for claim {claim_id}")

    def _reopen(self, claim: Claim, actor: Actor, note: Optional[str]) -> Claim:
        now = self.clock()
        previous = claim.status

        # The next verdict's resolution time runs from the re-open, not the first assignment
        self.transition(claim, ClaimEvent.OVERRIDE, verdict_at=None, assigned_at=now)
        self.db.execute(
            update(Verdict)
            .where(Verdict.claim_id == claim.id, Verdict.is_current.is_(True))
            .values(is_current=False, superseded_at=now)
            .execution_options(synchronize_session="fetch")
        )
        self.db.add(ModerationAction(
            actor_id=actor.user_id,
            action=ModerationActionType.OVERRIDE.value,
            claim_id=claim.id,
            fact_checker_id=claim.assigned_fact_checker_id,
            note=note,
            created_at=now,
        ))
        self.db.add(FactCheckerActivity(
            fact_checker_id=claim.assigned_fact_checker_id,
            claim_id=claim.id,
            action=ActivityAction.CLAIM_REOPENED.value,
            timestamp=now,
        ))

        self._commit(
            f"overriding claim {claim.id}",
            on_conflict=IllegalTransitionError(f"Claim {claim.id} was modified concurrently; reload and retry"),
        )
        logger.warning(
            f"Moderator {actor.user_id} overrode claim {claim.id}: {previous} -> {claim.status}"
            + (f" ({note})" if note else "")
        )
        return claim

    def delete(self, claim_id: str, actor: Actor) -> Claim:
        """Soft-delete a claim. The row is kept for audit."""
        claim = self.get_for_update(claim_id)
        if not actor.is_moderator:
            raise ForbiddenError("Only moderators can delete claims")

        now = self.clock()
        claim.deleted_at = now
        self.db.add(ModerationAction(
            actor_id=actor.user_id,
            action=ModerationActionType.DELETE.value,
            claim_id=claim.id,
            created_at=now,
        ))
        self._commit(
            f"deleting claim {claim_id}",
            on_conflict=IllegalTransitionError(f"Claim {claim_id} was modified concurrently; reload and retry"),
        )
        logger.info(f"Claim {claim_id} soft-deleted by moderator {actor.user_id}")
        return claim
