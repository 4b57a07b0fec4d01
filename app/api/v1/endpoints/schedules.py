"""Endpoints de Agenda (partidas e treinos)"""
from datetime import datetime
from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.core.security import Principal, get_current_principal, require_staff
from app.schemas.match import (
    GeneratedTeamResponse,
    GenerateTeamRequest,
    MatchCreate,
    MatchResponse,
    MatchStatus,
    MatchType,
    MatchUpdate,
)
from app.services.schedule_service import ScheduleService

router = APIRouter()


def _listing(matches) -> dict:
    return {
        "count": len(matches),
        "data": [MatchResponse.model_validate(match) for match in matches],
    }


@router.get("/")
async def list_schedules(
    type: Optional[MatchType] = None,
    status: Optional[MatchStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Agenda em ordem cronológica (padrão: próximos 30 dias)"""
    service = ScheduleService(db)
    return _listing(await service.list_schedules(start_date, end_date, type, status))


@router.post("/", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_schedule(
    request: Request,
    schedule: MatchCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    service = ScheduleService(db)
    return await service.create_schedule(schedule)


@router.post("/{match_id}/generate-team", response_model=GeneratedTeamResponse)
async def generate_team(
    match_id: int,
    body: Optional[GenerateTeamRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Gera a escalação por formação e rodízio de minutos"""
    service = ScheduleService(db)
    return await service.generate_team(match_id, body or GenerateTeamRequest())


@router.get("/player/{player_id}")
async def get_player_schedules(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Próximas partidas em que o jogador está escalado"""
    service = ScheduleService(db)
    return _listing(await service.player_schedules(player_id))


@router.put("/{match_id}", response_model=MatchResponse)
async def update_schedule(
    match_id: int,
    schedule: MatchUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    service = ScheduleService(db)
    return await service.update_schedule(match_id, schedule)


@router.delete("/{match_id}")
async def cancel_schedule(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Cancela partida agendada"""
    service = ScheduleService(db)
    match = await service.cancel_schedule(match_id)
    return {"message": "Agendamento cancelado com sucesso", "id": match.id, "status": match.status}
