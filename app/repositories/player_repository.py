"""Repository de Player (Async)"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete
from typing import Dict, Iterable, List, Optional, Tuple
from app.models.player import Player, SELECTABLE_INJURY_STATUSES

SORTABLE_FIELDS = {
    "jersey_number": Player.jersey_number,
    "name": Player.name,
    "position": Player.position,
    "created_at": Player.created_at,
}


class PlayerRepository:
    """Repository async para operações de banco com Player"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, player_id: int) -> Optional[Player]:
        result = await self.db.execute(
            select(Player).filter(Player.id == player_id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, player_ids: Iterable[int]) -> Dict[int, Player]:
        """Busca vários jogadores de uma vez, indexados por id"""
        ids = list({int(player_id) for player_id in player_ids})
        if not ids:
            return {}
        result = await self.db.execute(select(Player).filter(Player.id.in_(ids)))
        return {player.id: player for player in result.scalars().all()}

    async def get_by_jersey_number(self, jersey_number: int) -> Optional[Player]:
        result = await self.db.execute(
            select(Player).filter(Player.jersey_number == jersey_number)
        )
        return result.scalar_one_or_none()

    async def find(
        self,
        availability: Optional[bool] = None,
        position: Optional[str] = None,
        injury_status: Optional[str] = None,
        sort_by: str = "jersey_number",
        descending: bool = False,
        skip: int = 0,
        limit: int = 25,
    ) -> Tuple[List[Player], int]:
        """Lista jogadores com filtros, ordenação e paginação"""
        query = select(Player)
        if availability is not None:
            query = query.filter(Player.availability == availability)
        if position:
            query = query.filter(Player.position == position)
        if injury_status:
            query = query.filter(Player.injury_status == injury_status)

        total_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = total_result.scalar() or 0

        column = SORTABLE_FIELDS.get(sort_by, Player.jersey_number)
        query = query.order_by(column.desc() if descending else column.asc())
        result = await self.db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all()), total

    async def find_selectable(self) -> List[Player]:
        """Disponíveis e sem lesão grave"""
        result = await self.db.execute(
            select(Player)
            .filter(
                Player.availability == True,  # noqa: E712
                Player.injury_status.in_(SELECTABLE_INJURY_STATUSES),
            )
            .order_by(Player.jersey_number.asc())
        )
        return list(result.scalars().all())

    async def find_available_by_position(self, position: str) -> List[Player]:
        result = await self.db.execute(
            select(Player)
            .filter(Player.availability == True)  # noqa: E712
            .order_by(Player.jersey_number.asc())
        )
        return [player for player in result.scalars().all() if player.plays(position)]

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Player.id)))
        return result.scalar() or 0

    async def create(self, player_data: dict) -> Player:
        player = Player(**player_data)
        self.db.add(player)
        await self.db.commit()
        return player

    async def update(self, player: Player, player_data: dict) -> Player:
        for key, value in player_data.items():
            setattr(player, key, value)
        await self.db.commit()
        return player

    async def delete(self, player: Player) -> bool:
        await self.db.execute(delete(Player).where(Player.id == player.id))
        await self.db.commit()
        return True
