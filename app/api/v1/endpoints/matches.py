"""Endpoints de Partidas (ao vivo)"""
from datetime import datetime
from fastapi import APIRouter, Body, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.core.security import Principal, get_current_principal, require_staff
from app.schemas.match import (
    EndMatchRequest,
    MatchCreate,
    MatchListResponse,
    MatchResponse,
    MatchStatus,
    MatchType,
    StartMatchRequest,
    SubstitutionRequest,
)
from app.schemas.player import build_pagination
from app.schemas.statistics import MaterializationResponse, StatisticsResponse
from app.services.match_service import MatchService
from app.services.notifications import Notifier, get_notifier
from app.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/", response_model=MatchListResponse)
async def list_matches(
    type: Optional[MatchType] = None,
    status: Optional[MatchStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Lista partidas e treinos (mais recentes primeiro)"""
    service = MatchService(db)
    matches, total = await service.list_matches(type, status, start_date, end_date, page, limit)
    return {
        "count": len(matches),
        "total": total,
        "pagination": build_pagination(page, limit, total).model_dump(),
        "data": [MatchResponse.model_validate(match) for match in matches],
    }


@router.post("/start", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def start_new_match(
    request: Request,
    match: MatchCreate,
    db: AsyncSession = Depends(get_db),
    notifier: Optional[Notifier] = Depends(get_notifier),
    principal: Principal = Depends(require_staff),
):
    """Cria uma partida já em andamento"""
    service = MatchService(db, notifier)
    return await service.start_new_match(match)


@router.get("/{match_id}", response_model=MatchResponse)
async def get_match(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    service = MatchService(db)
    return await service.get_match(match_id)


@router.put("/{match_id}/start", response_model=MatchResponse)
async def start_existing_match(
    match_id: int,
    body: Optional[StartMatchRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    notifier: Optional[Notifier] = Depends(get_notifier),
    principal: Principal = Depends(require_staff),
):
    """Inicia partida agendada (escalação opcional substitui a atual)"""
    service = MatchService(db, notifier)
    team_sheet = body.team_sheet if body else None
    return await service.start_existing_match(match_id, team_sheet)


@router.post("/{match_id}/substitute", response_model=MatchResponse)
@limiter.limit("60/minute")
async def make_substitution(
    request: Request,
    match_id: int,
    substitution: SubstitutionRequest,
    db: AsyncSession = Depends(get_db),
    notifier: Optional[Notifier] = Depends(get_notifier),
    principal: Principal = Depends(require_staff),
):
    """Substituição em partida em andamento"""
    service = MatchService(db, notifier)
    return await service.substitute(match_id, substitution)


@router.get("/{match_id}/playtime")
async def get_playtime(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Minutos jogados correntes e análise de fair play"""
    service = MatchService(db)
    return await service.playtime_report(match_id)


@router.put("/{match_id}/end", response_model=MatchResponse)
async def end_match(
    match_id: int,
    body: EndMatchRequest,
    db: AsyncSession = Depends(get_db),
    notifier: Optional[Notifier] = Depends(get_notifier),
    principal: Principal = Depends(require_staff),
):
    """Encerra a partida, grava desempenhos e gera estatísticas"""
    service = MatchService(db, notifier)
    return await service.end_match(match_id, body)


@router.post("/{match_id}/statistics/materialize", response_model=MaterializationResponse)
async def materialize_statistics(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Reprocessa estatísticas de uma partida completa (idempotente)"""
    service = StatisticsService(db)
    records = await service.rematerialize(match_id)
    return {
        "match_id": match_id,
        "records": len(records),
        "statistics": [StatisticsResponse.model_validate(r) for r in records],
    }
