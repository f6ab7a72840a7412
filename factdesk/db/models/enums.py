import enum


class ClaimCategory(str, enum.Enum):
    POLITICS = "politics"
    HEALTH = "health"
    ECONOMY = "economy"
    EDUCATION = "education"
    TECHNOLOGY = "technology"
    ENVIRONMENT = "environment"


class ClaimStatus(str, enum.Enum):
    PENDING = "pending"
    HUMAN_REVIEW = "human_review"
    VERIFIED = "verified"
    FALSE = "false"
    MISLEADING = "misleading"
    NEEDS_CONTEXT = "needs_context"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class VerdictOutcome(str, enum.Enum):
    VERIFIED = "verified"
    FALSE = "false"
    MISLEADING = "misleading"
    NEEDS_CONTEXT = "needs_context"

    @property
    def claim_status(self) -> ClaimStatus:
        return ClaimStatus(self.value)


TERMINAL_STATUSES = frozenset({
    ClaimStatus.VERIFIED,
    ClaimStatus.FALSE,
    ClaimStatus.MISLEADING,
    ClaimStatus.NEEDS_CONTEXT,
})


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ActivityAction(str, enum.Enum):
    ASSIGNED = "assigned"
    REASSIGNED_IN = "reassigned_in"
    REASSIGNED_OUT = "reassigned_out"
    VERDICT_RECORDED = "verdict_recorded"
    CLAIM_REOPENED = "claim_reopened"


class ModerationActionType(str, enum.Enum):
    OVERRIDE = "override"
    DELETE = "delete"
    APPROVE = "approve"
    REJECT = "reject"
