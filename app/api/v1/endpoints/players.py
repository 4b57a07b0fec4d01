"""Endpoints de Jogadores"""
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal, Optional
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.core.security import Principal, get_current_principal, require_staff
from app.schemas.player import (
    InjuryStatus,
    InjuryStatusUpdate,
    PlayerCreate,
    PlayerListResponse,
    PlayerResponse,
    PlayerUpdate,
    Position,
    build_pagination,
)
from app.services.player_service import PlayerService

router = APIRouter()


@router.get("/", response_model=PlayerListResponse)
async def list_players(
    availability: Optional[bool] = None,
    position: Optional[Position] = None,
    injury_status: Optional[InjuryStatus] = None,
    sort_by: Literal["jersey_number", "name", "position", "created_at"] = "jersey_number",
    sort_order: Literal["asc", "desc"] = "asc",
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Lista o elenco com filtros, ordenação e paginação"""
    service = PlayerService(db)
    players, total = await service.list_players(
        availability=availability,
        position=position,
        injury_status=injury_status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return {
        "count": len(players),
        "total": total,
        "pagination": build_pagination(page, limit, total),
        "data": [PlayerResponse.model_validate(player) for player in players],
    }


@router.post("/", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_player(
    request: Request,
    player: PlayerCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Cadastra jogador (camisa única)"""
    service = PlayerService(db)
    return await service.create_player(player)


@router.get("/available", response_model=List[PlayerResponse])
async def get_available_players(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Jogadores disponíveis e sem lesão grave"""
    service = PlayerService(db)
    return [PlayerResponse.model_validate(p) for p in await service.available_players()]


@router.get("/position/{position}", response_model=List[PlayerResponse])
async def get_players_by_position(
    position: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Disponíveis que jogam na posição (principal ou preferida)"""
    service = PlayerService(db)
    return [PlayerResponse.model_validate(p) for p in await service.players_by_position(position)]


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    service = PlayerService(db)
    return await service.get_player(player_id)


@router.put("/{player_id}", response_model=PlayerResponse)
async def update_player(
    player_id: int,
    player: PlayerUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    service = PlayerService(db)
    return await service.update_player(player_id, player)


@router.delete("/{player_id}")
async def delete_player(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Remove jogador (partidas e estatísticas antigas permanecem)"""
    service = PlayerService(db)
    await service.delete_player(player_id)
    return {"message": "Jogador removido com sucesso"}


@router.put("/{player_id}/injury", response_model=PlayerResponse)
async def update_injury_status(
    player_id: int,
    injury: InjuryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_staff),
):
    """Atualiza status de lesão (lesão grave torna o jogador indisponível)"""
    service = PlayerService(db)
    return await service.update_injury_status(player_id, injury)
