import pytest

from factdesk.core.exceptions import IllegalTransitionError
from factdesk.db.models.enums import ClaimStatus, TERMINAL_STATUSES, VerdictOutcome
from factdesk.services.state_machine import ClaimEvent, event_for_requested_status, next_status


class TestNextStatus:
    def test_assign_moves_pending_into_review(self):
        assert next_status("pending", ClaimEvent.ASSIGN) == ClaimStatus.HUMAN_REVIEW

    def test_reassign_keeps_claim_in_review(self):
        assert next_status("human_review", ClaimEvent.REASSIGN) == ClaimStatus.HUMAN_REVIEW

    @pytest.mark.parametrize("outcome", list(VerdictOutcome))
    def test_verdict_status_is_the_outcome(self, outcome):
        assert next_status("human_review", ClaimEvent.VERDICT, outcome).value == outcome.value

    @pytest.mark.parametrize("current", ["pending", "verified", "false", "misleading", "needs_context"])
    def test_verdict_outside_review_is_illegal(self, current):
        with pytest.raises(IllegalTransitionError):
            next_status(current, ClaimEvent.VERDICT, VerdictOutcome.FALSE)

    def test_verdict_without_outcome_is_illegal(self):
        with pytest.raises(IllegalTransitionError):
            next_status("human_review", ClaimEvent.VERDICT)

    @pytest.mark.parametrize("terminal", sorted(s.value for s in TERMINAL_STATUSES))
    def test_override_reopens_terminal_claims(self, terminal):
        assert next_status(terminal, ClaimEvent.OVERRIDE) == ClaimStatus.HUMAN_REVIEW

    def test_assign_after_verdict_is_illegal(self):
        with pytest.raises(IllegalTransitionError, match="Cannot assign"):
            next_status("verified", ClaimEvent.ASSIGN)

    def test_override_of_pending_claim_is_illegal(self):
        with pytest.raises(IllegalTransitionError):
            next_status("pending", ClaimEvent.OVERRIDE)

    def test_reassign_of_pending_claim_is_illegal(self):
        with pytest.raises(IllegalTransitionError):
            next_status("pending", ClaimEvent.REASSIGN)


class TestRequestedStatus:
    def test_reopen_request_maps_to_override(self):
        assert event_for_requested_status("false", ClaimStatus.HUMAN_REVIEW) == ClaimEvent.OVERRIDE

    def test_pending_to_review_points_at_assignment(self):
        with pytest.raises(IllegalTransitionError, match="Assign"):
            event_for_requested_status("pending", ClaimStatus.HUMAN_REVIEW)

    def test_review_to_terminal_points_at_verdicts(self):
        with pytest.raises(IllegalTransitionError, match="verdict"):
            event_for_requested_status("human_review", ClaimStatus.VERIFIED)

    def test_back_to_pending_is_never_allowed(self):
        with pytest.raises(IllegalTransitionError):
            event_for_requested_status("human_review", ClaimStatus.PENDING)

    def test_terminal_to_terminal_is_illegal(self):
        with pytest.raises(IllegalTransitionError):
            event_for_requested_status("false", ClaimStatus.VERIFIED)
