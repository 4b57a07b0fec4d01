"""Service de Player (Async)"""
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Tuple
import logging

from app.core.exceptions import ConflictException, NotFoundException, ValidationException
from app.models.player import Player, POSITIONS
from app.repositories.player_repository import PlayerRepository
from app.schemas.player import InjuryStatusUpdate, PlayerCreate, PlayerUpdate

logger = logging.getLogger(__name__)


class PlayerService:
    """Service async para o elenco"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = PlayerRepository(db)

    async def list_players(
        self,
        availability: Optional[bool] = None,
        position: Optional[str] = None,
        injury_status: Optional[str] = None,
        sort_by: str = "jersey_number",
        sort_order: str = "asc",
        page: int = 1,
        limit: int = 25,
    ) -> Tuple[List[Player], int]:
        return await self.repository.find(
            availability=availability,
            position=position,
            injury_status=injury_status,
            sort_by=sort_by,
            descending=sort_order.lower() == "desc",
            skip=(page - 1) * limit,
            limit=limit,
        )

    async def get_player(self, player_id: int) -> Player:
        player = await self.repository.get_by_id(player_id)
        if not player:
            raise NotFoundException(f"Jogador {player_id} não encontrado")
        return player

    async def create_player(self, data: PlayerCreate) -> Player:
        if await self.repository.get_by_jersey_number(data.jersey_number):
            raise ConflictException(f"Camisa {data.jersey_number} já está em uso")
        player = await self.repository.create(data.model_dump())
        logger.info(f"Jogador criado: {player.name} (#{player.jersey_number})")
        return player

    async def update_player(self, player_id: int, data: PlayerUpdate) -> Player:
        player = await self.get_player(player_id)
        changes = data.model_dump(exclude_unset=True)

        jersey_number = changes.get("jersey_number")
        if jersey_number is not None and jersey_number != player.jersey_number:
            other = await self.repository.get_by_jersey_number(jersey_number)
            if other and other.id != player.id:
                raise ConflictException(f"Camisa {jersey_number} já está em uso")

        if "preferred_positions" in changes and not changes["preferred_positions"]:
            changes["preferred_positions"] = [changes.get("position") or player.position]

        return await self.repository.update(player, changes)

    async def delete_player(self, player_id: int) -> None:
        """Remove o jogador; partidas e estatísticas mantêm a referência pelo id"""
        player = await self.get_player(player_id)
        await self.repository.delete(player)
        logger.info(f"Jogador {player_id} removido")

    async def available_players(self) -> List[Player]:
        return await self.repository.find_selectable()

    async def players_by_position(self, position: str) -> List[Player]:
        if position not in POSITIONS:
            raise ValidationException(
                f"Posição inválida: '{position}'. Use uma de: {', '.join(POSITIONS)}"
            )
        return await self.repository.find_available_by_position(position)

    async def update_injury_status(self, player_id: int, data: InjuryStatusUpdate) -> Player:
        player = await self.get_player(player_id)
        changes = {"injury_status": data.injury_status}
        if data.injury_notes is not None:
            changes["injury_notes"] = data.injury_notes
        if data.injury_status == "Major Injury":
            changes["availability"] = False
        logger.info(f"Jogador {player_id}: status de lesão -> {data.injury_status}")
        return await self.repository.update(player, changes)
