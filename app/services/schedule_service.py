"""Service de agenda (partidas e treinos futuros) e geração de escalação"""
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from app.core.config import settings
from app.core.exceptions import InvalidStateException, NotFoundException
from app.models.base import as_utc, utc_now
from app.models.match import Match, TERMINAL_STATUSES
from app.repositories.match_repository import MatchRepository
from app.repositories.player_repository import PlayerRepository
from app.schemas.match import GenerateTeamRequest, MatchCreate, MatchUpdate
from app.services.match_service import MatchService
from app.services.team_generator import aggregate_recent_minutes, generate_team, parse_formation

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE_WINDOW_DAYS = 30


class ScheduleService:
    """Service async para agendamentos"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = MatchRepository(db)
        self.player_repository = PlayerRepository(db)
        self.matches = MatchService(db)

    async def list_schedules(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        match_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Match]:
        """Por padrão, de agora até 30 dias à frente"""
        now = utc_now()
        date_from = as_utc(start_date) if start_date else now
        date_to = as_utc(end_date) if end_date else now + timedelta(days=DEFAULT_SCHEDULE_WINDOW_DAYS)
        return await self.repository.find_schedule(date_from, date_to, match_type, status)

    async def create_schedule(self, data: MatchCreate) -> Match:
        await self.matches.validate_team_sheet(data.team_sheet)
        match = await self.repository.create({**data.model_dump(), "status": "scheduled"})
        logger.info(f"Agendado: {match.type} em {match.date} (id={match.id})")
        return match

    async def update_schedule(self, match_id: int, data: MatchUpdate) -> Match:
        match = await self.matches.get_match(match_id)
        if match.status in TERMINAL_STATUSES:
            raise InvalidStateException(f"Não é possível alterar partida com status '{match.status}'")

        changes = data.model_dump(exclude_unset=True)
        if "team_sheet" in changes:
            # a escalação de partida em andamento só muda por substituição
            if match.status != "scheduled":
                raise InvalidStateException(
                    "A escalação só pode ser editada enquanto a partida está agendada"
                )
            await self.matches.validate_team_sheet(changes["team_sheet"] or [])
            changes["team_sheet"] = changes["team_sheet"] or []

        for key, value in changes.items():
            setattr(match, key, value)
        return await self.repository.save(match)

    async def cancel_schedule(self, match_id: int) -> Match:
        match = await self.matches.get_match(match_id)
        if match.status == "ongoing":
            raise InvalidStateException(
                "Não é possível cancelar partida em andamento. Encerre a partida primeiro"
            )
        if match.status != "scheduled":
            raise InvalidStateException(f"Não é possível cancelar partida com status '{match.status}'")
        match.status = "cancelled"
        await self.repository.save(match)
        logger.info(f"Partida {match.id} cancelada")
        return match

    async def generate_team(self, match_id: int, data: GenerateTeamRequest) -> dict:
        match = await self.matches.get_match(match_id)
        if match.status != "scheduled":
            raise InvalidStateException("A escalação só pode ser gerada para partidas agendadas")

        formation = parse_formation(data.formation_preference or settings.DEFAULT_FORMATION)
        players = await self.player_repository.find_selectable()

        # rodízio: minutos das partidas completas dos últimos N dias antes da data alvo
        target = as_utc(match.date)
        recent_matches = await self.repository.find_completed_between(
            target - timedelta(days=settings.ROTATION_WINDOW_DAYS), target
        )
        recent_minutes = aggregate_recent_minutes(recent_matches, [p.id for p in players])

        team = generate_team(players, recent_minutes, formation, data.prioritize_rest)
        match.team_sheet = [player.id for player in team]
        await self.repository.save(match)
        logger.info(f"Partida {match.id}: escalação gerada ({formation}, {len(team)} jogadores)")

        return {
            "match": match,
            "generated_team": team,
            "formation": str(formation),
            "rotation_info": {
                "total_available_players": len(players),
                "players_selected": len(team),
                "rotation_priority": "Rest-based" if data.prioritize_rest else "Balanced",
                "recent_matches_considered": len(recent_matches),
            },
        }

    async def player_schedules(self, player_id: int) -> List[Match]:
        """Próximas partidas em que o jogador está escalado"""
        player = await self.player_repository.get_by_id(player_id)
        if not player:
            raise NotFoundException(f"Jogador {player_id} não encontrado")
        return await self.repository.find_upcoming_with_player(player_id, utc_now())
