"""
Claim status state machine.

    pending --assign--> human_review --verdict--> verified | false | misleading | needs_context
    human_review --reassign--> human_review
    terminal --override--> human_review

A verdict event carries its outcome; the resulting status is the outcome
itself. Nothing else is legal.
"""
import enum
import logging
from typing import Optional

from factdesk.core.exceptions import IllegalTransitionError
from factdesk.db.models.enums import ClaimStatus, VerdictOutcome, TERMINAL_STATUSES

logger = logging.getLogger(__name__)


class ClaimEvent(str, enum.Enum):
    ASSIGN = "assign"
    REASSIGN = "reassign"
    VERDICT = "verdict"
    OVERRIDE = "override"


_TRANSITIONS = {
    (ClaimStatus.PENDING, ClaimEvent.ASSIGN): ClaimStatus.HUMAN_REVIEW,
    (ClaimStatus.HUMAN_REVIEW, ClaimEvent.REASSIGN): ClaimStatus.HUMAN_REVIEW,
}
for _terminal in TERMINAL_STATUSES:
    _TRANSITIONS[(_terminal, ClaimEvent.OVERRIDE)] = ClaimStatus.HUMAN_REVIEW


def next_status(
    current: str,
    event: ClaimEvent,
    outcome: Optional[VerdictOutcome] = None,
) -> ClaimStatus:
    """
    Return the status a claim moves to when ``event`` happens in ``current``.

    Raises:
        IllegalTransitionError: if the event is not permitted from ``current``.
    """
    current = ClaimStatus(current)

    if event == ClaimEvent.VERDICT:
        if current != ClaimStatus.HUMAN_REVIEW:
            raise IllegalTransitionError(
                f"A verdict can only be recorded for a claim in human_review (current status: {current.value})"
            )
        if outcome is None:
            raise IllegalTransitionError("A verdict event requires an outcome")
        return VerdictOutcome(outcome).claim_status

    target = _TRANSITIONS.get((current, event))
    if target is None:
        logger.debug("Rejected transition: %s --%s-->", current.value, event.value)
        raise IllegalTransitionError(
            f"Cannot {event.value} a claim in status {current.value}"
        )
    return target


def event_for_requested_status(current: str, requested: ClaimStatus) -> ClaimEvent:
    """
    Map a direct status change request (``POST /claims/{id}/status``) to the
    event it stands for.

    Only re-opening a terminal claim can be requested directly. Moving into
    human_review from pending needs an assignment and terminal statuses need
    a verdict, so those requests are rejected with a pointer to the right
    operation.
    """
    current = ClaimStatus(current)
    requested = ClaimStatus(requested)

    if requested == ClaimStatus.HUMAN_REVIEW and current in TERMINAL_STATUSES:
        return ClaimEvent.OVERRIDE
    if requested == ClaimStatus.HUMAN_REVIEW and current == ClaimStatus.PENDING:
        raise IllegalTransitionError("Assign a fact-checker to move a pending claim into human_review")
    if requested in TERMINAL_STATUSES and current == ClaimStatus.HUMAN_REVIEW:
        raise IllegalTransitionError("A claim leaves human_review only when its fact-checker records a verdict")
    raise IllegalTransitionError(
        f"Illegal status transition: {current.value} -> {requested.value}"
    )
