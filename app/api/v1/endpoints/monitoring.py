"""Endpoints de monitoramento do sistema"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import get_db
from app.repositories.match_repository import MatchRepository
from app.repositories.player_repository import PlayerRepository
from app.repositories.statistics_repository import StatisticsRepository
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/status")
async def get_system_status(db: AsyncSession = Depends(get_db)):
    """
    Retorna status do sistema:
    - Contagem de jogadores
    - Partidas por status
    - Registros de estatísticas
    """
    players_count = await PlayerRepository(db).count()
    matches_by_status = await MatchRepository(db).count_by_status()
    statistics_count = await StatisticsRepository(db).count()

    return {
        "status": "ok",
        "database": {
            "status": "populated" if players_count > 0 else "empty",
            "players": players_count,
            "matches": sum(matches_by_status.values()),
            "matches_by_status": matches_by_status,
            "statistics": statistics_count,
        },
        "features": {
            "cache": settings.CACHE_ENABLED,
            "notifications": settings.NOTIFICATIONS_ENABLED,
            "rate_limit": settings.RATE_LIMIT_ENABLED,
        },
    }
