from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional
import logging

from sqlalchemy import func, select

from factdesk.core.exceptions import ValidationError
from factdesk.core.timeutils import window_start
from factdesk.db.models import FactChecker, Verdict
from factdesk.db.models.enums import VerificationStatus
from factdesk.services.base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class PerformanceRow:
    fact_checker_id: str
    user_id: str
    verdict_count: int
    average_resolution_time: Optional[float]  # seconds


def verdict_count_score(row: PerformanceRow) -> float:
    return float(row.verdict_count)


def fast_resolution_score(row: PerformanceRow) -> float:
    """
    Verdict count discounted by how long verdicts take on average.

    A checker resolving claims within the hour keeps almost their whole
    count; one averaging a day keeps about 4% of it.
    """
    if row.verdict_count == 0:
        return 0.0
    hours = (row.average_resolution_time or 0.0) / 3600
    return row.verdict_count / (1.0 + hours)


SCORERS: Dict[str, Callable[[PerformanceRow], float]] = {
    "verdict_count": verdict_count_score,
    "fast_resolution": fast_resolution_score,
}


def rank(rows: Iterable[PerformanceRow], scorer: Callable[[PerformanceRow], float]) -> List[dict]:
    """
    Order rows by score descending. Ties go to the faster average resolution
    time; checkers without any timed verdict come after those with one.
    """
    scored = [(scorer(row), row) for row in rows]
    scored.sort(key=lambda item: (
        -item[0],
        item[1].average_resolution_time is None,
        item[1].average_resolution_time or 0.0,
        item[1].fact_checker_id,
    ))
    return [
        {
            "rank": position,
            "fact_checker_id": row.fact_checker_id,
            "user_id": row.user_id,
            "verdict_count": row.verdict_count,
            "average_resolution_time": row.average_resolution_time,
            "score": round(score, 4),
        }
        for position, (score, row) in enumerate(scored, start=1)
    ]


class Leaderboard(BaseService):
    """Ranking of approved fact-checkers, recomputed from the ledger on every call."""

    def compute(
        self,
        timeframe: Optional[str] = None,
        limit: int = 10,
        score: Optional[str] = None,
    ) -> List[dict]:
        timeframe = timeframe or self.settings.LEADERBOARD_TIMEFRAME
        score = score or self.settings.LEADERBOARD_SCORE
        if score not in SCORERS:
            raise ValidationError(f"Unknown score '{score}'. Allowed: {', '.join(sorted(SCORERS))}")
        if limit < 1 or limit > self.settings.MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {self.settings.MAX_PAGE_SIZE}")

        since = window_start(timeframe, self.clock())
        conditions = [Verdict.is_current.is_(True)]
        if since is not None:
            conditions.append(Verdict.created_at >= since)

        aggregates = {
            fact_checker_id: (count, average)
            for fact_checker_id, count, average in self.db.execute(
                select(
                    Verdict.fact_checker_id,
                    func.count(Verdict.id),
                    func.avg(Verdict.resolution_seconds),
                )
                .where(*conditions)
                .group_by(Verdict.fact_checker_id)
            ).all()
        }

        checkers = self.db.scalars(
            select(FactChecker).where(FactChecker.verification_status == VerificationStatus.APPROVED.value)
        ).all()

        rows = []
        for checker in checkers:
            count, average = aggregates.get(checker.id, (0, None))
            rows.append(PerformanceRow(
                fact_checker_id=checker.id,
                user_id=checker.user_id,
                verdict_count=count,
                average_resolution_time=float(average) if average is not None else None,
            ))

        ranked = rank(rows, SCORERS[score])[:limit]
        logger.debug(f"Leaderboard computed: timeframe={timeframe}, score={score}, entries={len(ranked)}")
        return ranked
