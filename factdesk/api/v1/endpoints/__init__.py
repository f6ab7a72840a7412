from fastapi import APIRouter
from factdesk.api.v1.endpoints import claims, fact_checkers, verdicts

api_router = APIRouter()
api_router.include_router(claims.router)
api_router.include_router(fact_checkers.router)
api_router.include_router(verdicts.router)
