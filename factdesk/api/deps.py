from datetime import datetime
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from factdesk.core.config import Settings
from factdesk.db.session import get_db
from factdesk.services.claim_store import ClaimStore
from factdesk.services.fact_checkers import FactCheckerService
from factdesk.services.leaderboard import Leaderboard
from factdesk.services.verdict_ledger import VerdictLedger


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Callable[[], datetime]:
    return request.app.state.clock


def get_claim_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ClaimStore:
    return ClaimStore(db, settings, clock)


def get_fact_checker_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> FactCheckerService:
    return FactCheckerService(db, settings, clock)


def get_verdict_ledger(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> VerdictLedger:
    return VerdictLedger(db, settings, clock)


def get_leaderboard(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> Leaderboard:
    return Leaderboard(db, settings, clock)
