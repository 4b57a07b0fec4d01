"""Endpoints de Estatísticas e relatórios"""
from datetime import date
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.core.security import Principal, get_current_principal, require_staff
from app.schemas.statistics import InjuryLogRequest, StatisticsResponse
from app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/player/{player_id}")
@limiter.limit("200/minute")
async def get_player_stats(
    request: Request,
    player_id: int,
    season: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Relatório do jogador (temporada "2023-2024", intervalo ou temporada atual)"""
    service = StatisticsService(db)
    return await service.player_report(player_id, season, start_date, end_date)


@router.get("/player/{player_id}/aggregate")
async def get_player_aggregate(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Totais e médias de todas as partidas do jogador"""
    service = StatisticsService(db)
    return await service.player_aggregate(player_id)


@router.get("/match/{match_id}")
async def get_match_stats(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    service = StatisticsService(db)
    return await service.match_report(match_id)


@router.get("/team")
@limiter.limit("200/minute")
async def get_team_stats(
    request: Request,
    season: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Visão geral do time no período"""
    service = StatisticsService(db)
    return await service.team_report(season, start_date, end_date)


@router.post("/log-injury", response_model=StatisticsResponse, status_code=status.HTTP_201_CREATED)
async def log_injury(
    injury: InjuryLogRequest,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Registra lesão na estatística do jogador na partida"""
    service = StatisticsService(db)
    return await service.log_injury(injury)
