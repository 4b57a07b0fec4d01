"""Router principal da API v1"""
from fastapi import APIRouter
from app.api.v1.endpoints import (
    players,
    matches,
    schedules,
    statistics,
    webhooks,
    monitoring,
    data_integrity,
)

api_router = APIRouter()

api_router.include_router(players.router, prefix="/players", tags=["players"])
api_router.include_router(matches.router, prefix="/matches", tags=["matches"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(statistics.router, prefix="/stats", tags=["statistics"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
api_router.include_router(monitoring.router, prefix="/monitoring", tags=["monitoring"])
api_router.include_router(data_integrity.router, prefix="/data-integrity", tags=["data-integrity"])
