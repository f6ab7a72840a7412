from typing import List, Optional

from pydantic import ConfigDict, Field

from factdesk.db.models.enums import VerificationStatus
from .base import CamelModel, Pagination, UtcDatetime, OptionalUtcDatetime
from .verdict import ActivityStats, VerdictStats


class FactChecker(CamelModel):
    id: str
    user_id: str
    expertise_areas: List[str]
    additional_info: Optional[str] = None
    verification_status: VerificationStatus
    is_active: bool
    joined_at: UtcDatetime
    reviewed_at: OptionalUtcDatetime = None

    model_config = ConfigDict(use_enum_values=True)


class FactCheckerResponse(CamelModel):
    fact_checker: FactChecker


class ApplicationResponse(CamelModel):
    message: str
    application: FactChecker


class AvailabilityResponse(CamelModel):
    message: str
    is_available: bool


class Workload(CamelModel):
    fact_checker_id: str
    pending_count: int
    completed_last_7_days: int = Field(alias="completedLast7Days")
    # Seconds from assignment to verdict, None when nothing was completed
    average_resolution_time: Optional[float] = None


class WorkloadResponse(CamelModel):
    workload: Workload


class PerformanceResponse(CamelModel):
    verdicts: VerdictStats
    activity: ActivityStats
    timeframe: str


class LeaderboardEntry(CamelModel):
    rank: int
    fact_checker_id: str
    user_id: str
    verdict_count: int
    average_resolution_time: Optional[float] = None
    score: float


class LeaderboardResponse(CamelModel):
    leaderboard: List[LeaderboardEntry]
    timeframe: str
    score: str
    updated_at: UtcDatetime


class FactCheckerListResponse(CamelModel):
    fact_checkers: List[FactChecker]
    pagination: Pagination
